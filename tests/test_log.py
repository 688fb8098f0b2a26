import logging

from urlinfo.log import LogConfig, get_logger, setup_logging


def test_loggers_live_under_package_namespace():
    assert get_logger("urlinfo.fetch").name == "urlinfo.fetch"
    assert get_logger("urlinfo").name == "urlinfo"
    assert get_logger("scripts.check").name == "urlinfo.scripts.check"


def test_setup_is_idempotent_and_leaves_root_alone():
    root_handlers = list(logging.getLogger().handlers)

    setup_logging(LogConfig(level="DEBUG", no_color=True))
    pkg = setup_logging(LogConfig(level="WARNING", no_color=True))

    ours = [h for h in pkg.handlers if getattr(h, "_urlinfo", False)]
    assert len(ours) == 1
    assert pkg.level == logging.WARNING
    assert pkg.propagate is False
    assert logging.getLogger().handlers == root_handlers


def test_http_loggers_follow_debug_and_stay_quiet_otherwise():
    setup_logging(LogConfig(level="DEBUG", no_color=True))
    assert logging.getLogger("httpx").level == logging.DEBUG

    setup_logging(LogConfig(level="INFO", no_color=True))
    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("httpcore").level == logging.WARNING


def test_unknown_level_falls_back_to_info():
    pkg = setup_logging(LogConfig(level="chatty", no_color=True))
    assert pkg.level == logging.INFO

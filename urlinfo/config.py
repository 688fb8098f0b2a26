from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from . import __version__

FIVE_MB = 5 * 1024 * 1024


def _env_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is None or v == "":
        return default
    try:
        return int(v)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    v = os.getenv(name)
    if v is None or v == "":
        return default
    try:
        return float(v)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None or v == "":
        return default
    return v.strip().lower() in ("1", "true", "yes", "y", "on")


def _env_str(name: str, default: str) -> str:
    v = os.getenv(name)
    return default if v is None else v


@dataclass
class Settings:
    # Fetching
    timeout_s: float = 5.0
    deadline_s: float = 30.0  # whole body download; 0 disables
    max_bytes: int = FIVE_MB
    user_agent: str = f"urlinfo/{__version__} (+https://example.invalid)"
    jobs: int = 8  # CLI only: links resolved at once

    # Logging / UX
    log_level: str = "INFO"
    no_color: bool = False

    @staticmethod
    def from_env() -> "Settings":
        s = Settings()
        s.timeout_s = _env_float("URLINFO_TIMEOUT_S", s.timeout_s)
        s.deadline_s = _env_float("URLINFO_DEADLINE_S", s.deadline_s)
        s.max_bytes = _env_int("URLINFO_MAX_BYTES", s.max_bytes)
        s.user_agent = _env_str("URLINFO_UA", s.user_agent)
        s.jobs = _env_int("URLINFO_JOBS", s.jobs)

        s.log_level = _env_str("URLINFO_LOG_LEVEL", s.log_level)
        s.no_color = _env_bool("URLINFO_NO_COLOR", s.no_color)
        return s

    @staticmethod
    def from_file(path: Path) -> "Settings":
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        s = Settings.from_env()
        for k, v in data.items():
            if hasattr(s, k):
                setattr(s, k, v)
        return s


def load_settings(config_path: Optional[str]) -> Settings:
    if config_path:
        return Settings.from_file(Path(config_path))
    return Settings.from_env()

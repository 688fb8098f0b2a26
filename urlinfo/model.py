from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class Reachability(str, Enum):
    OK = "ok"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    CONNECTION_FAILURE = "connection_failure"
    UNRESOLVED_HOST = "unresolved_host"

    @staticmethod
    def from_status(status: int) -> "Reachability":
        if status >= 500:
            return Reachability.SERVER_ERROR
        if status >= 400:
            return Reachability.CLIENT_ERROR
        return Reachability.OK


@dataclass
class ProbeResult:
    reachability: Reachability
    status: Optional[int] = None
    final_url: Optional[str] = None
    mime: Optional[str] = None
    content_length: Optional[int] = None
    error: Optional[str] = None

    @property
    def reached(self) -> bool:
        """True when the server answered with any HTTP response, error statuses included."""
        return self.reachability not in (Reachability.CONNECTION_FAILURE, Reachability.UNRESOLVED_HOST)


@dataclass
class FetchOutcome:
    probe: ProbeResult
    body: Optional[bytes] = None
    too_large: bool = False
    final_url: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)
    error: Optional[str] = None


@dataclass
class PageMeta:
    title: Optional[str] = None
    favicon_url: Optional[str] = None


@dataclass
class StatusDescriptor:
    """Outcome of resolving one link.

    The first six fields are the public result. The rest are diagnostics;
    `error` is a short reason string, never an exception.
    """

    is_web_resource: bool = False
    mime: Optional[str] = None
    parsable: bool = False
    too_large: bool = False
    title: Optional[str] = None
    favicon_url: Optional[str] = None

    url: Optional[str] = None
    final_url: Optional[str] = None
    status_code: Optional[int] = None
    reachability: Optional[Reachability] = None
    error: Optional[str] = None
    fetch_ms: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isWebResource": self.is_web_resource,
            "mime": self.mime,
            "parsable": self.parsable,
            "tooLarge": self.too_large,
            "title": self.title,
            "faviconUrl": self.favicon_url,
            "url": self.url,
            "finalUrl": self.final_url,
            "statusCode": self.status_code,
            "reachability": self.reachability.value if self.reachability else None,
            "error": self.error,
            "fetchMs": self.fetch_ms,
        }

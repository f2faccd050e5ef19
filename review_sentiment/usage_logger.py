"""
Usage logging to a spreadsheet-backed endpoint (Google Apps Script web app).

Logging is best-effort: failures are recorded in the application log and
never reach the user.
"""

import json
import locale
import logging
import platform
import shutil
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any

import requests

from . import __version__
from .inference import SentimentResult
from .renderer import format_confidence

logger = logging.getLogger("review_sentiment")


BODY_FORMATS = ("json", "form")
PREVIEW_LENGTH = 100


@dataclass(frozen=True)
class LogEntry:
    """One usage record as sent to the logging endpoint."""

    ts_iso: str
    review: str
    sentiment: str
    meta: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


def iso_timestamp(now: datetime | None = None) -> str:
    """UTC timestamp with millisecond precision and a trailing 'Z'."""
    now = now or datetime.now(timezone.utc)
    now = now.astimezone(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def get_client_info() -> dict[str, Any]:
    """Describe the machine running the demo (the 'browser' of the log)."""
    language, _ = locale.getlocale()
    columns, rows = shutil.get_terminal_size()

    return {
        "userAgent": f"review-sentiment/{__version__} {requests.utils.default_user_agent()}",
        "language": language or "unknown",
        "platform": platform.platform(),
        "screen_resolution": f"{columns}x{rows}",
        "timezone": datetime.now().astimezone().tzname(),
    }


def review_preview(review: str, length: int = PREVIEW_LENGTH) -> str:
    return review[:length] + ("..." if len(review) > length else "")


def format_sentiment(result: SentimentResult) -> str:
    """Format a result as 'LABEL (97.3%)'."""
    return f"{result.label} ({format_confidence(result.score)})"


def build_log_entry(
    review: str,
    result: SentimentResult,
    page: str = "",
    client_info: dict[str, Any] | None = None,
    now: datetime | None = None,
) -> LogEntry:
    """
    Build the record sent to the logging endpoint.

    Args:
        review: Analyzed review text
        result: Classification result
        page: Where the review came from (dataset path or URL)
        client_info: Client description (defaults to get_client_info())
        now: Timestamp override

    Returns:
        LogEntry with a JSON-encoded metadata blob
    """
    ts_iso = iso_timestamp(now)

    meta = {
        "model": result.model,
        "inference_type": result.inference_type,
        "timestamp": ts_iso,
        "page": page,
        "review_length": len(review),
        "review_preview": review_preview(review),
        "client_info": client_info if client_info is not None else get_client_info(),
    }

    return LogEntry(
        ts_iso=ts_iso,
        review=review,
        sentiment=format_sentiment(result),
        meta=json.dumps(meta),
    )


class UsageLogger:
    """
    Fire-and-forget POST of usage records.

    The endpoint's response is ignored and ``log`` never raises.
    """

    def __init__(
        self,
        url: str | None,
        body_format: str = "json",
        page: str = "",
        timeout: float | None = 10,
        enabled: bool = True,
        session: requests.Session | None = None,
    ):
        """
        Initialize the usage logger.

        Args:
            url: Logging endpoint; None or empty disables logging
            body_format: 'json' or 'form' (URL-encoded)
            page: Value reported as the page in the metadata
            timeout: Request timeout in seconds
            enabled: Master switch
            session: Optional requests session
        """
        if body_format not in BODY_FORMATS:
            raise ValueError(f"body_format must be one of {BODY_FORMATS}, got {body_format!r}")

        self.url = url
        self.body_format = body_format
        self.page = page
        self.timeout = timeout
        self._enabled = enabled
        self.session = session or requests.Session()

    @property
    def enabled(self) -> bool:
        return self._enabled and bool(self.url)

    def log(self, review: str, result: SentimentResult) -> bool:
        """
        Send one usage record.

        Returns:
            True if the request was sent, False if logging is disabled or failed
        """
        if not self.enabled:
            return False

        try:
            entry = build_log_entry(review, result, page=self.page)

            if self.body_format == "json":
                self.session.post(self.url, json=entry.to_dict(), timeout=self.timeout)
            else:
                self.session.post(self.url, data=entry.to_dict(), timeout=self.timeout)

            logger.debug(f"Usage logged: {entry.sentiment}")
            return True
        except Exception as e:
            logger.warning(f"Error logging usage to {self.url}: {e}")
            return False

    @classmethod
    def from_config(cls, config: dict[str, Any], page: str = "") -> "UsageLogger":
        usage_config = config.get("usage_log", {})
        return cls(
            url=usage_config.get("url"),
            body_format=usage_config.get("body_format", "json"),
            page=page,
            timeout=usage_config.get("timeout", 10),
            enabled=usage_config.get("enabled", True),
        )

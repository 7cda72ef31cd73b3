import re
from typing import Optional


class AutomationError(Exception):
    """Base error; `message` is safe to show to the user."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class DraftValidationError(AutomationError):
    """The draft cannot become an automation; raised before any request."""


class BackendError(AutomationError):
    backend = "backend"

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class PlatformError(BackendError):
    backend = "platform"


class HubError(BackendError):
    backend = "hub"


class FallbackUnavailable(AutomationError):
    """No usable hub connection for the direct fallback path."""


_SESSION_PHRASES = ("session expired", "expired session", "unauthorized", "401")
_NETWORK_PHRASES = ("network", "timed out", "timeout", "unreachable", "unable to reach")
_URL_RE = re.compile(r"https?://", re.IGNORECASE)


def friendly_message(err: BaseException) -> str:
    """Short message for UI alerts."""
    raw = (getattr(err, "message", None) or str(err) or "").strip()
    lowered = raw.lower()
    if any(p in lowered for p in _SESSION_PHRASES):
        return "Session expired. Please log in again."
    if any(p in lowered for p in _NETWORK_PHRASES):
        return "We could not reach your home right now. Check Wi-Fi and try again."
    if raw and len(raw) <= 200 and not _URL_RE.search(raw):
        return raw
    return "We could not complete that right now. Please try again."

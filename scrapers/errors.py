"""
scrapers/errors.py
Error taxonomy shared by the fetcher, the walkers and the HTTP API.

Transient fetch errors are safe for the caller to retry; nothing in the
engine retries on its own.
"""

from constants import RATE_LIMIT_STATUS_CODES


class ScraperError(Exception):
    """Base class for everything the engine raises."""


# -------------------------------------------------------
# 🌐 Fetch errors
# -------------------------------------------------------

class FetchError(ScraperError):
    def __init__(self, message: str, url: str = "", context: str | None = None):
        super().__init__(message)
        self.message = message
        self.url = url
        self.context = context

    def __str__(self):
        base = f"{self.message} ({self.url})" if self.url else self.message
        return f"{base} [{self.context}]" if self.context else base


class TransientFetchError(FetchError):
    """Timeouts, 5xx, rate-limit responses and unreachable hosts."""


class PermanentFetchError(FetchError):
    """4xx responses and documents that could not be parsed."""


class FetchTimeout(TransientFetchError):
    pass


class NetworkUnreachable(TransientFetchError):
    pass


class ParseFailure(PermanentFetchError):
    pass


class HttpStatusError(FetchError):
    status_code: int = 0


class TransientHttpStatus(HttpStatusError, TransientFetchError):
    pass


class PermanentHttpStatus(HttpStatusError, PermanentFetchError):
    pass


def http_status_error(status_code: int, url: str) -> HttpStatusError:
    """Build the status error matching the retry class of ``status_code``."""
    transient = status_code >= 500 or status_code in RATE_LIMIT_STATUS_CODES
    cls = TransientHttpStatus if transient else PermanentHttpStatus
    err = cls(f"HTTP {status_code}", url)
    err.status_code = status_code
    return err


# -------------------------------------------------------
# 🧩 Extraction errors
# -------------------------------------------------------

class ExtractionError(ScraperError):
    pass


class MissingRequiredField(ExtractionError):
    def __init__(self, field: str, selector: str = ""):
        detail = f" (selector {selector!r})" if selector else ""
        super().__init__(f"Missing required field '{field}'{detail}")
        self.field = field
        self.selector = selector


class MalformedLink(ExtractionError):
    def __init__(self, href: str, field: str = "link"):
        super().__init__(f"Malformed {field}: {href!r}")
        self.href = href
        self.field = field


# -------------------------------------------------------
# ⚙️ Caller errors
# -------------------------------------------------------

class ConfigurationError(ScraperError):
    pass


class InvalidFilterIndex(ConfigurationError):
    def __init__(self, index: int, size: int):
        super().__init__(f"Filter index {index} out of range (0..{size - 1})")
        self.index = index
        self.size = size


class UnsupportedOperation(ConfigurationError):
    pass


class WalkCancelled(ScraperError):
    pass

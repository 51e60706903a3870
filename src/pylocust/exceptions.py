"""Custom exception hierarchy for pylocust."""

from __future__ import annotations

from pathlib import Path


class LocustError(Exception):
    """Base exception for all pylocust errors."""


class LocustConfigError(LocustError):
    """Invalid configuration value."""


class FetchError(LocustError):
    """Acquiring a location sample failed.

    Covers both network problems and provider payloads that do not
    contain a usable position.  The recorder treats this as a skipped
    cycle, never as fatal.
    """

    def __init__(self, message: str, *, url: str = "") -> None:
        self.url = url
        super().__init__(message)


class LocustTransportError(FetchError):
    """HTTP-level failure (network, timeout, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
    ) -> None:
        self.status_code = status_code
        super().__init__(message, url=url)


class LogWriteError(LocustError):
    """Appending a sample to the log failed."""

    def __init__(self, message: str, *, path: Path | str = "") -> None:
        self.path = Path(path) if path else None
        super().__init__(message)


class RecordParseError(LocustError):
    """A single log line could not be deserialized.

    Never raised out of a log read; readers collect these and carry on
    with the next line.
    """

    def __init__(self, message: str, *, line_number: int, line: str) -> None:
        self.line_number = line_number
        self.line = line
        super().__init__(message)


class RenderError(LocustError):
    """The map document could not be written or opened."""

    def __init__(self, message: str, *, path: Path | str = "") -> None:
        self.path = Path(path) if path else None
        super().__init__(message)

"""Error taxonomy for browser-like requests.

Every failure raised by this package derives from `RequestError` and carries
the original request URL plus a human readable reason.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .gate import ValidationVerdict


class RequestError(Exception):
    """Base class for all request failures."""

    def __init__(self, url: str, reason: str, message: str | None = None) -> None:
        super().__init__(message if message is not None else reason)
        self.url = url
        self.reason = reason


class InvalidURLError(RequestError, ValueError):
    """The target URL cannot be split into scheme, host and port."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(url, reason, f"Invalid URL {url!r}: {reason}")


class RequestAbortedError(RequestError):
    """The response gate rejected the response metadata."""

    def __init__(self, url: str, verdict: ValidationVerdict) -> None:
        super().__init__(
            url,
            verdict.reason or "aborted",
            f"Request for {url} aborted due to abortFunction",
        )
        self.verdict = verdict


class InvalidBodyError(RequestError):
    """The response body cannot be decoded with its declared encoding."""

    def __init__(
        self, url: str, reason: str, status_code: int | None = None
    ) -> None:
        super().__init__(url, reason, f"Invalid body for {url}: {reason}")
        self.status_code = status_code


class TransportError(RequestError):
    """Network level failure reported by the transport."""

    def __init__(self, url: str, cause: BaseException) -> None:
        super().__init__(url, str(cause), f"Request for {url} failed: {cause}")
        self.cause = cause


class RequestTimeoutError(TransportError):
    """The transport gave up waiting for the remote server."""

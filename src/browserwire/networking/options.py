"""Per-request options for browser-like requests."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from .gate import AbortFunction
from .profiles import DEFAULT_COUNTRY_CODE, DEFAULT_LANGUAGE_CODE

REQUEST_AS_BROWSER_DEFAULT_OPTIONS: Mapping[str, Any] = MappingProxyType(
    {
        "method": "GET",
        "use_mobile_version": False,
        "language_code": DEFAULT_LANGUAGE_CODE,
        "country_code": DEFAULT_COUNTRY_CODE,
        "ignore_ssl_errors": False,
        "follow_redirects": True,
    }
)
_DEFAULTS = REQUEST_AS_BROWSER_DEFAULT_OPTIONS

SUPPORTED_METHODS = frozenset(
    {"GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"}
)
BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


def _empty_headers() -> Mapping[str, str]:
    return MappingProxyType({})


@dataclass(frozen=True)
class RequestOptions:
    """Caller input for one browser-like request.

    Transport passthroughs (`timeout_secs`, `proxy_url`, `ignore_ssl_errors`,
    `follow_redirects`) take precedence over the client configuration.
    """

    url: str
    headers: Mapping[str, str] = field(default_factory=_empty_headers)
    use_mobile_version: bool = _DEFAULTS["use_mobile_version"]
    language_code: str = _DEFAULTS["language_code"]
    country_code: str = _DEFAULTS["country_code"]
    abort_function: AbortFunction | None = None
    method: str = _DEFAULTS["method"]
    payload: bytes | str | None = None
    timeout_secs: float | None = None
    proxy_url: str | None = None
    ignore_ssl_errors: bool = _DEFAULTS["ignore_ssl_errors"]
    follow_redirects: bool = _DEFAULTS["follow_redirects"]

    def __post_init__(self) -> None:
        if not isinstance(self.url, str) or not self.url.strip():
            raise ValueError("url must be a non-empty string")
        if not self.language_code:
            raise ValueError("language_code must not be empty")
        if not self.country_code:
            raise ValueError("country_code must not be empty")
        if self.abort_function is not None and not callable(
            self.abort_function
        ):
            raise ValueError("abort_function must be callable")
        if self.timeout_secs is not None and self.timeout_secs <= 0:
            raise ValueError("timeout_secs must be > 0 when provided")

        method = self.method.upper()
        if method not in SUPPORTED_METHODS:
            raise ValueError(f"unsupported method: {self.method}")
        if self.payload is not None and method not in BODY_METHODS:
            raise ValueError(f"payload is not allowed for {method} requests")
        object.__setattr__(self, "method", method)

        # Freeze copied headers to avoid post-init mutation side effects.
        object.__setattr__(
            self,
            "headers",
            MappingProxyType(dict(self.headers or {})),
        )

"""Configuration for the browser client and its transport."""

from __future__ import annotations

from dataclasses import dataclass

Timeout = float | tuple[float, float] | None

_TIMEOUT_FIELDS = (
    "timeout_seconds",
    "connect_timeout_seconds",
    "read_timeout_seconds",
)


@dataclass(frozen=True)
class BrowserClientConfig:
    """Transport-level defaults shared by every request of a client.

    Per-request options (timeout, proxy, TLS verification) take precedence.
    A connect/read pair, when set, is used instead of `timeout_seconds`.
    """

    timeout_seconds: float | None = 30.0
    connect_timeout_seconds: float | None = None
    read_timeout_seconds: float | None = None
    verify_tls: bool = True
    trust_env: bool = False
    proxy_url: str | None = None

    def __post_init__(self) -> None:
        for name in _TIMEOUT_FIELDS:
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise ValueError(f"{name} must be > 0 when provided")
        if (self.connect_timeout_seconds is None) != (
            self.read_timeout_seconds is None
        ):
            raise ValueError(
                "connect_timeout_seconds and read_timeout_seconds "
                "must be set together"
            )
        if self.proxy_url is not None and not self.proxy_url.strip():
            raise ValueError("proxy_url must not be empty when provided")

    @property
    def default_timeout(self) -> Timeout:
        if self.connect_timeout_seconds is not None:
            return (self.connect_timeout_seconds, self.read_timeout_seconds)
        return self.timeout_seconds

    def timeout_for(self, request_timeout: float | None) -> Timeout:
        """Per-request timeout (already validated by RequestOptions) or the default."""
        if request_timeout is not None:
            return request_timeout
        return self.default_timeout

"""Merge request options with a browser header profile."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit

from .errors import InvalidURLError
from .options import RequestOptions
from .profiles import (
    ACCEPT_LANGUAGE_HEADER,
    HOST_HEADER,
    DeviceClass,
    accept_language,
    profile_for,
)

_SCHEMES = frozenset({"http", "https"})


@dataclass(frozen=True)
class OutboundRequest:
    """Fully resolved request, headers in wire order."""

    method: str
    url: str
    headers: tuple[tuple[str, str], ...]
    payload: bytes | str | None = None
    timeout_secs: float | None = None
    proxy_url: str | None = None
    ignore_ssl_errors: bool = False
    follow_redirects: bool = True

    def header_names(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.headers)

    def get_header(self, name: str) -> str | None:
        wanted = name.lower()
        for header_name, value in self.headers:
            if header_name.lower() == wanted:
                return value
        return None


def host_from_url(url: str) -> str:
    """Return the URL authority (host[:port]) used for the Host header."""

    try:
        parts = urlsplit(url)
        # Accessing .port validates it.
        parts.port
    except ValueError as exc:
        raise InvalidURLError(url, str(exc)) from exc

    if parts.scheme.lower() not in _SCHEMES:
        raise InvalidURLError(url, "scheme must be http or https")
    if not parts.hostname:
        raise InvalidURLError(url, "missing host")
    return parts.netloc.rpartition("@")[2]


def build_request(options: RequestOptions) -> OutboundRequest:
    """Build the outbound request for `options`.

    Profile headers keep their position. An override whose name matches a
    profile header (case-insensitively) replaces only the value; other
    overrides are appended in the order given.
    """

    device_class = (
        DeviceClass.MOBILE if options.use_mobile_version else DeviceClass.DESKTOP
    )
    profile = profile_for(device_class)
    computed = {
        HOST_HEADER: host_from_url(options.url),
        ACCEPT_LANGUAGE_HEADER: accept_language(
            options.language_code, options.country_code
        ),
    }

    headers = [
        [name, computed.get(name, value)] for name, value in profile.headers
    ]
    positions = {name.lower(): index for index, (name, _) in enumerate(headers)}
    for name, value in options.headers.items():
        index = positions.get(name.lower())
        if index is None:
            positions[name.lower()] = len(headers)
            headers.append([name, value])
        else:
            headers[index][1] = value

    return OutboundRequest(
        method=options.method,
        url=options.url,
        headers=tuple((name, value) for name, value in headers),
        payload=options.payload,
        timeout_secs=options.timeout_secs,
        proxy_url=options.proxy_url,
        ignore_ssl_errors=options.ignore_ssl_errors,
        follow_redirects=options.follow_redirects,
    )

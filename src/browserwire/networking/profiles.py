"""Browser header profiles.

A profile is the ordered header set a real browser sends on a top-level
navigation. Order and name casing are visible to the remote server, so the
builder reproduces them exactly.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping

FIREFOX_DESKTOP_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:68.0) "
    "Gecko/20100101 Firefox/68.0"
)
FIREFOX_MOBILE_USER_AGENT = (
    "Mozilla/5.0 (Android 9.0; Mobile; rv:68.0) Gecko/68.0 Firefox/68.0"
)

DEFAULT_ACCEPT = (
    "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
)
DEFAULT_ACCEPT_ENCODING = "gzip, deflate, br"
DEFAULT_CONNECTION = "keep-alive"

DEFAULT_LANGUAGE_CODE = "en"
DEFAULT_COUNTRY_CODE = "US"

# Filled in per request by the builder.
HOST_HEADER = "Host"
ACCEPT_LANGUAGE_HEADER = "Accept-Language"


class DeviceClass(Enum):
    DESKTOP = "desktop"
    MOBILE = "mobile"


@dataclass(frozen=True)
class HeaderProfile:
    """Ordered (name, value) pairs for one browser signature."""

    device_class: DeviceClass
    headers: tuple[tuple[str, str], ...]

    def names(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.headers)

    @property
    def user_agent(self) -> str:
        return dict(self.headers)["User-Agent"]


def _firefox_profile(device_class: DeviceClass, user_agent: str) -> HeaderProfile:
    return HeaderProfile(
        device_class=device_class,
        headers=(
            ("User-Agent", user_agent),
            (HOST_HEADER, ""),
            ("Accept", DEFAULT_ACCEPT),
            (ACCEPT_LANGUAGE_HEADER, ""),
            ("Accept-Encoding", DEFAULT_ACCEPT_ENCODING),
            ("Connection", DEFAULT_CONNECTION),
        ),
    )


_PROFILES: Mapping[DeviceClass, HeaderProfile] = MappingProxyType(
    {
        DeviceClass.DESKTOP: _firefox_profile(
            DeviceClass.DESKTOP, FIREFOX_DESKTOP_USER_AGENT
        ),
        DeviceClass.MOBILE: _firefox_profile(
            DeviceClass.MOBILE, FIREFOX_MOBILE_USER_AGENT
        ),
    }
)


def profile_for(device_class: DeviceClass) -> HeaderProfile:
    """Return the header profile for a device class."""

    return _PROFILES[device_class]


def accept_language(
    language_code: str = DEFAULT_LANGUAGE_CODE,
    country_code: str = DEFAULT_COUNTRY_CODE,
) -> str:
    """Build a Firefox style Accept-Language value, e.g. ``en-US,en;q=0.5``."""

    return f"{language_code}-{country_code},{language_code};q=0.5"

"""Browser-impersonation request layer."""

from .builder import OutboundRequest, build_request
from .client import (
    BrowserClient,
    BrowserResponse,
    request_as_browser,
    request_as_browser_async,
)
from .config import BrowserClientConfig
from .errors import (
    InvalidBodyError,
    InvalidURLError,
    RequestAbortedError,
    RequestError,
    RequestTimeoutError,
    TransportError,
)
from .gate import (
    BLOCKED_STATUS_CODES,
    DefaultAbortPolicy,
    ResponseGate,
    ResponseMeta,
    ValidationVerdict,
    default_abort_function,
)
from .options import REQUEST_AS_BROWSER_DEFAULT_OPTIONS, RequestOptions
from .profiles import (
    FIREFOX_DESKTOP_USER_AGENT,
    FIREFOX_MOBILE_USER_AGENT,
    DeviceClass,
    HeaderProfile,
    accept_language,
    profile_for,
)

__all__ = [
    "BLOCKED_STATUS_CODES",
    "FIREFOX_DESKTOP_USER_AGENT",
    "FIREFOX_MOBILE_USER_AGENT",
    "REQUEST_AS_BROWSER_DEFAULT_OPTIONS",
    "BrowserClient",
    "BrowserClientConfig",
    "BrowserResponse",
    "DefaultAbortPolicy",
    "DeviceClass",
    "HeaderProfile",
    "InvalidBodyError",
    "InvalidURLError",
    "OutboundRequest",
    "RequestAbortedError",
    "RequestError",
    "RequestOptions",
    "RequestTimeoutError",
    "ResponseGate",
    "ResponseMeta",
    "TransportError",
    "ValidationVerdict",
    "accept_language",
    "build_request",
    "default_abort_function",
    "profile_for",
    "request_as_browser",
    "request_as_browser_async",
]

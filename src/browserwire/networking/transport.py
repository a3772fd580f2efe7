"""Transport adapter on top of `requests`.

The adapter exposes response metadata before the body so the gate can run
first. Header order and casing are sent exactly as built: the session keeps
no default headers of its own.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, NoReturn, Protocol
from urllib.parse import urlsplit

import requests
from urllib3.response import HTTPResponse

from .builder import OutboundRequest
from .config import BrowserClientConfig
from .errors import (
    InvalidBodyError,
    InvalidURLError,
    RequestTimeoutError,
    TransportError,
)
from .gate import ResponseMeta

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
_IDENTITY = "identity"


def decodable_encodings() -> frozenset[str]:
    """Content codings urllib3 can decode in this environment."""
    return frozenset(HTTPResponse.CONTENT_DECODERS) | {_IDENTITY}


def undecodable_encodings(content_encoding: str | None) -> list[str]:
    if not content_encoding:
        return []
    supported = decodable_encodings()
    codings = [part.strip().lower() for part in content_encoding.split(",")]
    return [coding for coding in codings if coding and coding not in supported]


class ResponseStream(Protocol):
    meta: ResponseMeta

    def peek_is_empty(self) -> bool: ...

    def read_body(self) -> bytes: ...

    def close(self) -> None: ...


class Transport(Protocol):
    def send_request(self, request: OutboundRequest) -> ResponseStream: ...

    def close(self) -> None: ...


def map_request_exception(
    url: str, exc: requests.exceptions.RequestException
) -> Exception:
    """Translate a requests exception into the package error taxonomy."""
    if isinstance(exc, requests.exceptions.ContentDecodingError):
        status = exc.response.status_code if exc.response is not None else None
        return InvalidBodyError(url, str(exc), status_code=status)
    if isinstance(exc, requests.exceptions.Timeout):
        return RequestTimeoutError(url, exc)
    if isinstance(
        exc,
        (
            requests.exceptions.InvalidURL,
            requests.exceptions.MissingSchema,
            requests.exceptions.InvalidSchema,
        ),
    ):
        return InvalidURLError(url, str(exc))
    return TransportError(url, exc)


class _BrowserSession(requests.Session):
    """Session that keeps the Host header in place across redirects."""

    def rebuild_auth(
        self,
        prepared_request: requests.PreparedRequest,
        response: requests.Response,
    ) -> None:
        super().rebuild_auth(prepared_request, response)
        if "Host" in prepared_request.headers and prepared_request.url:
            netloc = urlsplit(prepared_request.url).netloc
            # Assignment to an existing key keeps its position.
            prepared_request.headers["Host"] = netloc.rpartition("@")[2]


class RequestsResponseStream:
    """A streamed `requests.Response` split into metadata and body."""

    def __init__(self, request: OutboundRequest, response: requests.Response):
        self._request = request
        self._response = response
        self._chunks: Iterator[bytes] | None = None
        self._peeked: list[bytes] = []
        self._at_eof = False
        self.meta = ResponseMeta.from_headers(
            url=request.url,
            status_code=response.status_code,
            headers=response.headers,
            final_url=response.url,
            reason=response.reason,
            method=request.method,
        )

    def _iter_chunks(self) -> Iterator[bytes]:
        if self._chunks is None:
            self._chunks = self._response.iter_content(chunk_size=CHUNK_SIZE)
        return self._chunks

    def _raise_mapped(self, exc: requests.exceptions.RequestException) -> NoReturn:
        error = map_request_exception(self._request.url, exc)
        if isinstance(error, InvalidBodyError):
            error.status_code = self.meta.status_code
        raise error from exc

    def peek_is_empty(self) -> bool:
        """Read at most one chunk and report whether the body is empty.

        A body that fails to decode still has bytes, so it is not empty.
        """
        if self._peeked or self._at_eof:
            return self._at_eof
        try:
            for chunk in self._iter_chunks():
                if chunk:
                    self._peeked.append(chunk)
                    return False
        except requests.exceptions.ContentDecodingError:
            return False
        except requests.exceptions.RequestException as exc:
            self._raise_mapped(exc)
        self._at_eof = True
        return True

    def read_body(self) -> bytes:
        if self._at_eof:
            return b""
        unsupported = undecodable_encodings(self.meta.content_encoding)
        if unsupported:
            raise InvalidBodyError(
                self._request.url,
                f"unsupported content encoding: {', '.join(unsupported)}",
                status_code=self.meta.status_code,
            )
        try:
            rest = b"".join(self._iter_chunks())
        except requests.exceptions.RequestException as exc:
            self._raise_mapped(exc)
        return b"".join(self._peeked) + rest

    def close(self) -> None:
        self._response.close()


class RequestsTransport:
    """Send outbound requests with a header-less `requests` session."""

    def __init__(self, config: BrowserClientConfig | None = None) -> None:
        self._config = config or BrowserClientConfig()
        self._session = _BrowserSession()
        self._session.headers.clear()
        self._session.trust_env = self._config.trust_env

    def _request_kwargs(self, request: OutboundRequest) -> dict[str, Any]:
        proxy_url = request.proxy_url or self._config.proxy_url
        payload = request.payload
        if isinstance(payload, str):
            payload = payload.encode("utf-8")
        return {
            "headers": dict(request.headers),
            "data": payload,
            "timeout": self._config.timeout_for(request.timeout_secs),
            "allow_redirects": request.follow_redirects,
            "proxies": (
                {"http": proxy_url, "https": proxy_url} if proxy_url else None
            ),
            "verify": self._config.verify_tls and not request.ignore_ssl_errors,
            "stream": True,
        }

    def send_request(self, request: OutboundRequest) -> RequestsResponseStream:
        kwargs = self._request_kwargs(request)
        logger.debug(
            "sending %s %s headers=%s",
            request.method,
            request.url,
            request.header_names(),
        )
        try:
            response = self._session.request(request.method, request.url, **kwargs)
        except requests.exceptions.RequestException as exc:
            error = map_request_exception(request.url, exc)
            logger.warning("transport failure for %s: %s", request.url, exc)
            raise error from exc
        return RequestsResponseStream(request, response)

    def close(self) -> None:
        self._session.close()

"""Browser-like HTTP client.

This module is the public entry point of the networking layer. A request is
built from a Firefox header profile, sent through the transport, and its
metadata is checked by the response gate before the body is downloaded.
Rejected responses are closed without reading the body.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Mapping

from .builder import OutboundRequest, build_request
from .config import BrowserClientConfig
from .errors import RequestAbortedError, RequestError
from .gate import ResponseGate, ResponseMeta, ValidationVerdict, parse_media_type
from .options import RequestOptions
from .transport import RequestsTransport, Transport
from .types import Err, Ok, Result

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BrowserResponse:
    """Fully read, validated response."""

    url: str
    final_url: str
    status_code: int
    headers: Mapping[str, str]
    body: bytes

    @property
    def charset(self) -> str:
        content_type = self.headers.get("Content-Type") or ""
        if parse_media_type(content_type) is not None:
            for param in content_type.split(";")[1:]:
                key, _, value = param.partition("=")
                if key.strip().lower() == "charset" and value.strip():
                    return value.strip().strip('"')
        return "utf-8"

    @property
    def text(self) -> str:
        try:
            return self.body.decode(self.charset, errors="replace")
        except LookupError:
            return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.text)


class BrowserClient:
    """Dispatcher for browser-like requests.

    Every call is independent: the client holds no per-request state beyond
    the transport's connection pool.
    """

    def __init__(
        self,
        config: BrowserClientConfig | None = None,
        *,
        transport: Transport | None = None,
    ) -> None:
        """Create a new BrowserClient.

        Args:
            config: Transport defaults (timeouts, TLS, proxy).
            transport: Transport to use instead of the `requests` one.
        """
        self._config = config or BrowserClientConfig()
        self._transport = transport or RequestsTransport(self._config)

    def __enter__(self) -> BrowserClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._transport.close()

    def _build_meta(
        self,
        request: OutboundRequest,
        response_meta: ResponseMeta | None,
        started: float,
        verdict: ValidationVerdict | None = None,
        final_error: str | None = None,
    ) -> dict[str, Any]:
        """Construct metadata dictionary for a Result."""
        meta: dict[str, Any] = {}
        meta["method"] = request.method
        meta["url"] = request.url
        meta["headers"] = request.headers
        meta["timeout_s"] = self._config.timeout_for(request.timeout_secs)
        meta["elapsed_s"] = time.monotonic() - started

        if response_meta is not None:
            meta["status_code"] = response_meta.status_code
            meta["final_url"] = response_meta.final_url
            meta["reason"] = response_meta.reason
        if verdict is not None:
            meta["verdict"] = verdict
        if final_error is not None:
            meta["final_error"] = final_error

        return meta

    def send(
        self, options: RequestOptions
    ) -> Result[BrowserResponse, RequestError]:
        """Perform one browser-like request.

        Args:
            options: Target URL, header overrides and transport passthroughs.

        Returns:
            Result containing the validated response on success, or a
            RequestError on failure.
        """
        started = time.monotonic()
        try:
            request = build_request(options)
        except RequestError as exc:
            return Err(
                exc,
                meta={
                    "method": options.method,
                    "url": options.url,
                    "final_error": type(exc).__name__,
                },
            )

        gate = ResponseGate(options.abort_function)
        logger.debug("dispatching %s %s", request.method, request.url)
        try:
            stream = self._transport.send_request(request)
        except RequestError as exc:
            return Err(
                exc,
                meta=self._build_meta(
                    request, None, started, final_error=type(exc).__name__
                ),
            )

        try:
            verdict = gate.evaluate(stream.meta)
            if verdict.aborted and verdict.waived_if_empty:
                try:
                    if stream.peek_is_empty():
                        verdict = ValidationVerdict.accept()
                except RequestError as exc:
                    return Err(
                        exc,
                        meta=self._build_meta(
                            request,
                            stream.meta,
                            started,
                            verdict=verdict,
                            final_error=type(exc).__name__,
                        ),
                    )
            if verdict.aborted:
                logger.info(
                    "request for %s aborted: %s", request.url, verdict.reason
                )
                error = RequestAbortedError(request.url, verdict)
                return Err(
                    error,
                    meta=self._build_meta(
                        request,
                        stream.meta,
                        started,
                        verdict=verdict,
                        final_error=type(error).__name__,
                    ),
                )

            try:
                body = stream.read_body()
            except RequestError as exc:
                logger.warning("failed to read body of %s: %s", request.url, exc)
                return Err(
                    exc,
                    meta=self._build_meta(
                        request,
                        stream.meta,
                        started,
                        verdict=verdict,
                        final_error=type(exc).__name__,
                    ),
                )
        finally:
            stream.close()

        response = BrowserResponse(
            url=request.url,
            final_url=stream.meta.final_url or request.url,
            status_code=stream.meta.status_code,
            headers=stream.meta.headers,
            body=body,
        )
        return Ok(
            response,
            meta=self._build_meta(request, stream.meta, started, verdict=verdict),
        )

    def request(self, options: RequestOptions) -> BrowserResponse:
        """Perform one browser-like request, raising RequestError on failure."""
        return self.send(options).unwrap()


def _coerce_options(
    options: RequestOptions | Mapping[str, Any] | None, overrides: Mapping[str, Any]
) -> RequestOptions:
    if isinstance(options, RequestOptions):
        if overrides:
            raise TypeError("keyword options cannot be combined with RequestOptions")
        return options
    fields = dict(options or {})
    fields.update(overrides)
    return RequestOptions(**fields)


def request_as_browser(
    options: RequestOptions | Mapping[str, Any] | None = None,
    *,
    config: BrowserClientConfig | None = None,
    **kwargs: Any,
) -> BrowserResponse:
    """Send a request that looks like it came from Firefox.

    Options may be given as a RequestOptions, a mapping of its fields, or
    keyword arguments. Raises a RequestError subclass on failure.
    """
    request_options = _coerce_options(options, kwargs)
    with BrowserClient(config) as client:
        return client.request(request_options)


async def request_as_browser_async(
    options: RequestOptions | Mapping[str, Any] | None = None,
    *,
    config: BrowserClientConfig | None = None,
    **kwargs: Any,
) -> BrowserResponse:
    """Coroutine form of `request_as_browser`, run in a worker thread."""
    request_options = _coerce_options(options, kwargs)
    return await asyncio.to_thread(
        request_as_browser, request_options, config=config
    )

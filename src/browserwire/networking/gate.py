"""Response validation on status and headers, before the body is read.

The gate decides whether a response looks like a real page or like an
anti-bot, consent or validation page. Only metadata is inspected so rejected
responses can be dropped without downloading their body.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterable, Mapping, Union

from requests.structures import CaseInsensitiveDict

BLOCKED_STATUS_CODES = frozenset({406})
EMPTY_BODY_STATUS_CODES = frozenset({204, 304})
HTML_MEDIA_TYPE = "text/html"

_TOKEN = r"[!#$%&'*+.^_`|~0-9A-Za-z-]+"
_MEDIA_TYPE_RE = re.compile(rf"^\s*({_TOKEN})/({_TOKEN})\s*(?:;.*)?$", re.DOTALL)


def parse_media_type(content_type: str) -> str | None:
    """Return the lowercased ``type/subtype`` or None when malformed."""

    match = _MEDIA_TYPE_RE.match(content_type)
    if match is None:
        return None
    return f"{match.group(1)}/{match.group(2)}".lower()


@dataclass(frozen=True)
class ResponseMeta:
    """Status line and headers, available before the body."""

    url: str
    status_code: int
    headers: Mapping[str, str]
    final_url: str | None = None
    reason: str | None = None
    method: str = "GET"

    @classmethod
    def from_headers(
        cls,
        *,
        url: str,
        status_code: int,
        headers: Mapping[str, str] | Iterable[tuple[str, str]],
        final_url: str | None = None,
        reason: str | None = None,
        method: str = "GET",
    ) -> ResponseMeta:
        return cls(
            url=url,
            status_code=status_code,
            headers=CaseInsensitiveDict(headers),
            final_url=final_url if final_url is not None else url,
            reason=reason,
            method=method.upper(),
        )

    @property
    def content_type(self) -> str | None:
        return self.headers.get("Content-Type")

    @property
    def content_encoding(self) -> str | None:
        return self.headers.get("Content-Encoding")

    @property
    def content_length(self) -> int | None:
        raw = self.headers.get("Content-Length")
        if raw is None:
            return None
        try:
            return int(raw.strip())
        except ValueError:
            return None

    @property
    def is_empty(self) -> bool:
        """True when the body is known to be empty without reading it."""
        if self.method == "HEAD":
            return True
        if self.status_code in EMPTY_BODY_STATUS_CODES:
            return True
        return self.content_length == 0


@dataclass(frozen=True)
class ValidationVerdict:
    """Accept or abort decision for one response.

    `waived_if_empty` marks an abort that no longer applies once the body
    turns out to be empty; the dispatcher checks this by peeking at the
    first chunk.
    """

    accepted: bool
    reason: str | None = None
    waived_if_empty: bool = False

    @classmethod
    def accept(cls) -> ValidationVerdict:
        return cls(accepted=True)

    @classmethod
    def abort(
        cls, reason: str, *, waived_if_empty: bool = False
    ) -> ValidationVerdict:
        return cls(accepted=False, reason=reason, waived_if_empty=waived_if_empty)

    @property
    def aborted(self) -> bool:
        return not self.accepted


AbortFunction = Callable[[ResponseMeta], Union[bool, ValidationVerdict]]


class DefaultAbortPolicy:
    """Abort blocked status codes and successful pages that are not HTML.

    Content-Type rules only apply to 2xx responses; error statuses are
    judged by the blocked status set alone. An empty body is never rejected
    for its Content-Type. When the length is not known up front the abort
    is marked as waived for an empty body.
    """

    def __init__(
        self, blocked_status_codes: Iterable[int] = BLOCKED_STATUS_CODES
    ) -> None:
        self.blocked_status_codes = frozenset(blocked_status_codes)

    def __call__(self, meta: ResponseMeta) -> ValidationVerdict:
        if meta.status_code in self.blocked_status_codes:
            return ValidationVerdict.abort(
                f"blocked status code {meta.status_code}"
            )

        content_type = meta.content_type
        if content_type is None or meta.is_empty:
            return ValidationVerdict.accept()
        if not 200 <= meta.status_code < 300:
            return ValidationVerdict.accept()

        waived = meta.content_length is None
        media_type = parse_media_type(content_type)
        if media_type is None:
            return ValidationVerdict.abort(
                f"malformed content type {content_type!r}",
                waived_if_empty=waived,
            )
        if media_type != HTML_MEDIA_TYPE:
            return ValidationVerdict.abort(
                f"unexpected content type {media_type}",
                waived_if_empty=waived,
            )
        return ValidationVerdict.accept()


default_abort_function = DefaultAbortPolicy()


class ResponseGate:
    """Evaluate one response's metadata with an abort function.

    A custom abort function replaces the default policy entirely. It may
    return a `ValidationVerdict` or a bool, where True means abort.
    """

    def __init__(self, abort_function: AbortFunction | None = None) -> None:
        self._abort_function = abort_function or default_abort_function

    def evaluate(self, meta: ResponseMeta) -> ValidationVerdict:
        outcome = self._abort_function(meta)
        if isinstance(outcome, ValidationVerdict):
            return outcome
        if outcome:
            return ValidationVerdict.abort("rejected by abort function")
        return ValidationVerdict.accept()

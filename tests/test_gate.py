import pytest

from browserwire.networking.gate import (
    DefaultAbortPolicy,
    ResponseGate,
    ResponseMeta,
    ValidationVerdict,
    default_abort_function,
    parse_media_type,
)


def _meta(status=200, headers=None, method="GET"):
    return ResponseMeta.from_headers(
        url="http://example.com",
        status_code=status,
        headers=headers if headers is not None else {"Content-Type": "text/html"},
        method=method,
    )


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("text/html", "text/html"),
        ("Text/HTML; charset=utf-8", "text/html"),
        ("application/json", "application/json"),
        ("non-existent-content-type", None),
        ("", None),
        ("text/", None),
        ("text/html extra", None),
    ],
)
def test_parse_media_type(value, expected):
    assert parse_media_type(value) == expected


def test_meta_header_lookup_is_case_insensitive():
    meta = _meta(headers={"content-type": "text/html", "content-encoding": "gzip"})

    assert meta.content_type == "text/html"
    assert meta.content_encoding == "gzip"
    assert meta.final_url == meta.url


@pytest.mark.parametrize(
    ("headers", "status", "method", "empty"),
    [
        ({"Content-Length": "0"}, 200, "GET", True),
        ({"Content-Length": "12"}, 200, "GET", False),
        ({}, 200, "GET", False),
        ({}, 204, "GET", True),
        ({}, 304, "GET", True),
        ({"Content-Length": "12"}, 200, "HEAD", True),
        ({"Content-Length": "junk"}, 200, "GET", False),
    ],
)
def test_meta_is_empty(headers, status, method, empty):
    assert _meta(status=status, headers=headers, method=method).is_empty is empty


def test_html_response_is_accepted():
    verdict = default_abort_function(_meta(headers={"Content-Type": "text/html; charset=utf-8"}))

    assert verdict == ValidationVerdict.accept()


def test_missing_content_type_is_accepted():
    assert default_abort_function(_meta(headers={})).accepted


def test_json_response_is_aborted():
    verdict = default_abort_function(
        _meta(headers={"Content-Type": "application/json", "Content-Length": "7"})
    )

    assert verdict.aborted
    assert "application/json" in verdict.reason


def test_malformed_content_type_is_aborted():
    verdict = default_abort_function(
        _meta(headers={"Content-Type": "non-existent-content-type"})
    )

    assert verdict.aborted
    assert "malformed" in verdict.reason


def test_empty_body_is_accepted_regardless_of_content_type():
    for content_type in ("application/json", "non-existent-content-type"):
        meta = _meta(headers={"Content-Type": content_type, "Content-Length": "0"})
        assert default_abort_function(meta).accepted


def test_blocked_status_wins_over_html():
    verdict = default_abort_function(_meta(status=406))

    assert verdict.aborted
    assert verdict.reason == "blocked status code 406"


def test_blocked_status_codes_are_configurable():
    policy = DefaultAbortPolicy(blocked_status_codes={403, 429})

    assert policy(_meta(status=429)).aborted
    assert policy(_meta(status=406)).accepted


def test_gate_uses_default_policy_without_custom_function():
    gate = ResponseGate()

    assert gate.evaluate(_meta(status=406)).aborted
    assert gate.evaluate(_meta()).accepted


def test_custom_bool_function_overrides_default_policy():
    seen = []

    def abort_function(meta):
        seen.append(meta)
        return meta.status_code == 200

    gate = ResponseGate(abort_function)
    meta = _meta(status=406, headers={"Content-Type": "application/json"})

    assert gate.evaluate(meta).accepted
    assert gate.evaluate(_meta()).aborted
    assert seen[0] is meta


def test_custom_function_may_return_verdict():
    gate = ResponseGate(lambda meta: ValidationVerdict.abort("captcha page"))

    verdict = gate.evaluate(_meta())

    assert verdict.aborted
    assert verdict.reason == "captcha page"


def test_custom_function_errors_propagate():
    def abort_function(meta):
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        ResponseGate(abort_function).evaluate(_meta())


@pytest.mark.parametrize("status", [404, 500, 503])
def test_content_type_rules_only_apply_to_success_statuses(status):
    meta = _meta(
        status=status,
        headers={"Content-Type": "application/octet-stream", "Content-Encoding": "deflate"},
    )

    assert default_abort_function(meta).accepted


def test_blocked_status_applies_to_any_content_type():
    meta = _meta(status=406, headers={"Content-Type": "application/json"})

    verdict = default_abort_function(meta)

    assert verdict.aborted
    assert not verdict.waived_if_empty


def test_unknown_length_abort_is_waived_if_empty():
    verdict = default_abort_function(
        _meta(headers={"Content-Type": "application/json", "Transfer-Encoding": "chunked"})
    )

    assert verdict.aborted
    assert verdict.waived_if_empty


def test_known_length_abort_is_not_waived():
    verdict = default_abort_function(
        _meta(headers={"Content-Type": "non-existent-content-type", "Content-Length": "3"})
    )

    assert verdict.aborted
    assert not verdict.waived_if_empty

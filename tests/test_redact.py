from __future__ import annotations

from incidentsync._redact import redact_for_log, redact_url


def test_redact_for_log_redacts_sensitive_keys() -> None:
    payload = {
        "Authorization": "Bearer abc",
        "fields": {
            "email": {"stringValue": "someone@example.com"},
            "title": {"stringValue": "Pothole"},
        },
        "idToken": "tok",
        "password": "pw",
    }

    redacted = redact_for_log(payload)
    assert redacted["Authorization"] == "<redacted>"
    assert redacted["idToken"] == "<redacted>"
    assert redacted["password"] == "<redacted>"
    assert redacted["fields"]["email"] == "<redacted>"
    assert redacted["fields"]["title"] == {"stringValue": "Pothole"}


def test_redact_for_log_truncates_long_strings() -> None:
    long_value = "x" * 600
    redacted = redact_for_log({"value": long_value}, max_string=10)
    assert redacted["value"].startswith("x" * 10)
    assert "<truncated>" in redacted["value"]


def test_redact_for_log_walks_sequences_and_summarises_bytes() -> None:
    redacted = redact_for_log([{"token": "t"}, b"\x00\x01", 3, None])
    assert redacted == [{"token": "<redacted>"}, "<bytes:2b>", 3, None]


def test_redact_url_masks_api_key_only() -> None:
    url = "https://example.test/v1/projects/p/documents/notifications?key=secret&pageSize=300"
    redacted = redact_url(url)
    assert "secret" not in redacted
    assert "key=<redacted>" in redacted
    assert "pageSize=300" in redacted


def test_redact_url_without_query_is_unchanged() -> None:
    url = "https://example.test/v1/projects/p"
    assert redact_url(url) == url

"""Tests for log redaction."""

from app.core.logging import redact_sensitive_data, redact_string


def test_sensitive_keys_are_redacted():
    event = {
        "event": "Login attempt",
        "password": "hunter2",
        "access_token": "abc.def.ghi",
        "Authorization": "Bearer abc",
        "user_id": "u1",
    }
    redacted = redact_sensitive_data(None, "info", event)

    assert redacted["password"] == "***REDACTED***"
    assert redacted["access_token"] == "***REDACTED***"
    assert redacted["Authorization"] == "***REDACTED***"
    assert redacted["user_id"] == "u1"
    # Original event is left untouched
    assert event["password"] == "hunter2"


def test_email_values_are_masked():
    redacted = redact_sensitive_data(None, "warning", {"email": "alice@example.com"})
    assert redacted["email"] == "a***@example.com"


def test_redact_string_leaves_other_text_alone():
    assert redact_string("Vehicle created") == "Vehicle created"
    assert redact_string("not-an-email@") == "not-an-email@"

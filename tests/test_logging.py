"""Tests for structured logging helpers."""

from aspire.graphql.schema import validate_schema
from aspire.logging import (
    REDACTED,
    bind_user_id,
    clear_request_context,
    get_request_context,
    redact_credentials,
    set_request_context,
)


def test_processor_masks_credentials_on_events():
    event = {"event": "Login", "password": "s3cret", "jwt_token": "abc", "username": "alice"}

    assert redact_credentials(None, "info", event) == {
        "event": "Login",
        "password": REDACTED,
        "jwt_token": REDACTED,
        "username": "alice",
    }


def test_request_context_lifecycle():
    request_id = set_request_context()
    bind_user_id("user-1")

    assert get_request_context() == {"request_id": request_id, "user_id": "user-1"}

    bind_user_id(None)
    assert get_request_context() == {"request_id": request_id}

    clear_request_context()
    assert get_request_context() == {}


def test_explicit_request_id_is_kept():
    try:
        assert set_request_context("req-42") == "req-42"
    finally:
        clear_request_context()


def test_schema_validates():
    validate_schema()

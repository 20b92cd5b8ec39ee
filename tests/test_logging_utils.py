"""Tests for logging utilities and sensitive data redaction."""

from __future__ import annotations

import json
import logging

import pytest

from cesta.logging_utils import JsonFormatter, configure_logging, redact


@pytest.mark.parametrize("fmt", ["plain", "json"])
def test_sensitive_data_filter_redacts_tokens(fmt):
    secret = "top-secret-token"
    configure_logging("INFO", fmt, [secret])

    handler = logging.getLogger().handlers[0]
    record = logging.LogRecord(
        name="cesta.test.redaction",
        level=logging.INFO,
        pathname=__file__,
        lineno=0,
        msg="Authorization header Bearer %s",
        args=(secret,),
        exc_info=None,
    )

    for filter_ in handler.filters:
        filter_.filter(record)

    formatted = handler.format(record)
    assert secret not in formatted
    assert "[redacted]" in formatted


def test_redact_masks_query_tokens_and_configured_secrets():
    message = "GET /x?api_token=abc123 with hunter2"

    assert redact(message, ["hunter2"]) == "GET /x?api_token=[redacted] with [redacted]"


def test_json_formatter_includes_group_context():
    record = logging.LogRecord(
        name="cesta.shopping.groups",
        level=logging.INFO,
        pathname=__file__,
        lineno=0,
        msg="Created shopping list %s",
        args=("Feira ::: 1",),
        exc_info=None,
    )
    record.group_key = "Feira ::: 1"
    record.request_id = "req-1"

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "Created shopping list Feira ::: 1"
    assert payload["group_key"] == "Feira ::: 1"
    assert payload["request_id"] == "req-1"
    assert payload["level"] == "INFO"
    assert "user_id" not in payload

"""Unit tests for ConsoleAdapter."""

import json

import pytest

from src.infrastructure.logging.console_adapter import (
    REDACTED,
    ConsoleAdapter,
    redact_secrets,
)


def _records(captured: str) -> list[dict]:
    return [json.loads(line) for line in captured.splitlines() if line.strip()]


@pytest.mark.unit
class TestRedactSecrets:
    def test_masks_sensitive_keys_only(self):
        event = {"event": "login", "password": "P@ssw0rd!", "refresh_token": "x", "user": "a"}

        result = redact_secrets(None, "info", event)

        assert result == {
            "event": "login",
            "password": REDACTED,
            "refresh_token": REDACTED,
            "user": "a",
        }


@pytest.mark.unit
class TestConsoleAdapter:
    def test_json_output_with_bound_context(self, capsys):
        logger = ConsoleAdapter(use_json=True).bind(component="auth_engine")

        logger.info("User registered", user_id="123", password="secret")

        [record] = _records(capsys.readouterr().out)
        assert record["event"] == "User registered"
        assert record["level"] == "info"
        assert record["component"] == "auth_engine"
        assert record["user_id"] == "123"
        assert record["password"] == REDACTED
        assert "timestamp" in record

    def test_error_adds_exception_details(self, capsys):
        logger = ConsoleAdapter(use_json=True)

        logger.error("Failed", error=ValueError("boom"))

        [record] = _records(capsys.readouterr().out)
        assert record["error_type"] == "ValueError"
        assert record["error_message"] == "boom"

    def test_level_filtering(self, capsys):
        logger = ConsoleAdapter(use_json=True, level="WARNING")

        logger.info("hidden")
        logger.warning("shown")

        assert [r["event"] for r in _records(capsys.readouterr().out)] == ["shown"]

"""Tests for the Logfire tracing helpers."""

import sys
from unittest.mock import MagicMock, patch

from builder_history.config import LogfireConfig, Settings
from builder_history.lib import observability


def make_settings(**logfire):
    return Settings(secret_key="test", logfire=LogfireConfig(**logfire))


class TestConfigure:
    def test_disabled_by_default(self):
        """Tracing stays off unless enabled in settings."""
        with patch.object(observability, "_logfire", None):
            assert observability.configure(make_settings()) is False
            assert observability.is_available() is False

    def test_enabled_connects_logfire(self):
        """Test that enabling tracing configures logfire with the service name."""
        fake_logfire = MagicMock()

        with patch.object(observability, "_logfire", None), \
             patch.dict(sys.modules, {"logfire": fake_logfire}):
            assert observability.configure(make_settings(enabled=True, environment="staging")) is True
            assert observability.is_available() is True

        fake_logfire.configure.assert_called_once_with(
            service_name="builder-history",
            send_to_logfire="if-token-present",
            environment="staging",
        )


class TestSpanAndInfo:
    def test_noop_when_unavailable(self):
        """span yields None and info does nothing without logfire."""
        with patch.object(observability, "_logfire", None):
            with observability.span("revisions.restore", document_id="d1") as current:
                assert current is None
            observability.info("Restored builder revision")

    def test_forwarded_when_available(self):
        """Test that span and info reach logfire once configured."""
        fake_logfire = MagicMock()

        with patch.object(observability, "_logfire", fake_logfire):
            with observability.span("revisions.restore", document_id="d1"):
                pass
            observability.info("Restored builder revision", revision_id="r1")

        fake_logfire.span.assert_called_once_with("revisions.restore", document_id="d1")
        fake_logfire.info.assert_called_once_with("Restored builder revision", revision_id="r1")

"""
Tests for the logging module.
"""

import json
import logging

import pytest
import structlog


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configure_development_mode(self):
        from core.logging import configure_logging

        # Should not raise
        configure_logging(json_logs=False, log_level="DEBUG")

    def test_configure_production_mode(self):
        from core.logging import configure_logging

        configure_logging(json_logs=True, log_level="INFO")

    def test_configure_log_level(self):
        from core.logging import configure_logging

        configure_logging(log_level="WARNING")

        assert logging.getLogger().level == logging.WARNING


class TestGetLogger:

    def test_get_named_logger(self):
        from core.logging import get_logger

        logger = get_logger("discover.engine")

        assert logger is not None
        assert hasattr(logger, "info")
        assert hasattr(logger, "exception")

    def test_logger_can_log(self):
        from core.logging import configure_logging, get_logger

        configure_logging(json_logs=False, log_level="DEBUG")
        logger = get_logger("test")

        logger.info("Decision recorded", candidate_id=3, decision="seen")
        logger.debug("Queue below low-water mark", size=8, low_water_mark=10)
        logger.warning("Warning")


class TestContextBinding:

    def test_bind_and_clear_context(self):
        from core.logging import bind_context, clear_context

        clear_context()
        bind_context(request_id="abc", session_id="s1")

        ctx = structlog.contextvars.get_contextvars()
        assert ctx.get("request_id") == "abc"
        assert ctx.get("session_id") == "s1"

        clear_context()
        assert structlog.contextvars.get_contextvars() == {}


class TestLoggerMixin:

    def test_mixin_logger_named_after_class(self):
        from core.logging import LoggerMixin, configure_logging

        configure_logging(json_logs=False)

        class MyDispatcher(LoggerMixin):
            def dispatch(self):
                self.logger.info("Intent received")

        MyDispatcher().dispatch()


class TestJSONOutput:

    def test_json_output_is_valid_json(self, capsys):
        from core.logging import configure_logging, get_logger

        configure_logging(json_logs=True, log_level="INFO")
        logger = get_logger("json_test")

        logger.info("Candidates appended", accepted=5)

        captured = capsys.readouterr()
        if captured.out:
            for line in captured.out.strip().split("\n"):
                if line:
                    data = json.loads(line)
                    assert "event" in data


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

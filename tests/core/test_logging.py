"""Tests for structured logging configuration."""

import io
import json

from urispine.core.logging import (
    LogContext,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)


def configure_to_buffer(**kwargs):
    buffer = io.StringIO()
    configure_logging(stream=buffer, cache_loggers=False, **kwargs)
    return buffer


class TestConfigureLogging:
    def test_json_output_is_ecs_shaped(self):
        buffer = configure_to_buffer(json_format=True)
        get_logger("urispine.test").info("term.created", uri="http://x.org/1")
        record = json.loads(buffer.getvalue().strip().splitlines()[-1])
        assert record["event"] == "term.created"
        assert record["uri"] == "http://x.org/1"
        assert record["log.level"] == "info"
        assert record["service.name"] == "uri-spine"
        assert "@timestamp" in record

    def test_level_filters(self):
        buffer = configure_to_buffer(json_format=True, level="WARNING")
        logger = get_logger("urispine.test")
        logger.info("hidden")
        logger.warning("shown")
        output = buffer.getvalue()
        assert "hidden" not in output
        assert "shown" in output

    def test_service_name_override(self):
        buffer = configure_to_buffer(json_format=True, service="uri-worker")
        get_logger().info("ping")
        assert json.loads(buffer.getvalue().strip())["service.name"] == "uri-worker"
        configure_to_buffer(json_format=True)

    def test_console_format(self):
        buffer = configure_to_buffer(json_format=False, add_timestamp=False)
        get_logger().info("vocabulary.created", string_key="names")
        assert "vocabulary.created" in buffer.getvalue()

    def test_auto_format_for_non_tty(self):
        buffer = configure_to_buffer()
        get_logger().info("auto")
        assert json.loads(buffer.getvalue().strip())["event"] == "auto"


class TestContext:
    def teardown_method(self):
        clear_context()

    def test_bind_context(self):
        buffer = configure_to_buffer(json_format=True)
        bind_context(request_id="abc123")
        get_logger().info("term.created")
        assert json.loads(buffer.getvalue().strip())["request_id"] == "abc123"

    def test_log_context_scoped(self):
        buffer = configure_to_buffer(json_format=True)
        with LogContext(vocabulary_string_key="names"):
            get_logger().info("inside")
        get_logger().info("outside")
        inside, outside = (json.loads(line) for line in buffer.getvalue().strip().splitlines())
        assert inside["vocabulary_string_key"] == "names"
        assert "vocabulary_string_key" not in outside


class TestGetLogger:
    def test_package_imports_with_module_loggers(self):
        import urispine
        import urispine.core.terms as terms

        assert urispine.UriService is not None
        assert terms.logger is not None

    def test_named_logger_renders_name(self):
        buffer = configure_to_buffer(json_format=True)
        get_logger(__name__).info("vocabulary.created", string_key="names")
        record = json.loads(buffer.getvalue().strip())
        assert record["log.logger"] == __name__
        assert record["string_key"] == "names"

    def test_module_logger_follows_later_configuration(self):
        from urispine.core import vocabularies

        buffer = configure_to_buffer(json_format=True)
        vocabularies.logger.info("vocabulary.deleted", string_key="names")
        record = json.loads(buffer.getvalue().strip())
        assert record["event"] == "vocabulary.deleted"
        assert record["log.logger"] == "urispine.core.vocabularies"

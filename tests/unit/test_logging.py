"""Unit tests for component-routed structured logging."""

import json
import logging

import pytest

from sfsearch.utils.logging import (
    SmartLogger,
    StructuredLogger,
    get_multi_file_logger,
    log_execution,
    log_operation,
)


class TestMultiFileLogger:
    """Component routing to log files."""

    def test_search_components_share_file(self, read_log):
        SmartLogger("search").info("from_search")
        SmartLogger("metadata").info("from_metadata")
        SmartLogger("salesforce").info("from_tool")

        messages = [e["message"] for e in read_log("salesforce.log")]
        assert messages == ["from_search", "from_metadata", "from_tool"]

    def test_unknown_component_goes_to_system(self, read_log):
        SmartLogger("elsewhere").info("stray_event", value=1)

        entries = read_log("system.log")
        assert entries[-1]["message"] == "stray_event"
        assert entries[-1]["component"] == "elsewhere"
        assert entries[-1]["value"] == 1

    def test_errors_copied_to_error_log(self, read_log):
        SmartLogger("search").error("search_broke", error="boom")

        assert read_log("errors.log")[-1]["message"] == "search_broke"
        assert read_log("salesforce.log")[-1]["level"] == "ERROR"

    def test_level_threshold(self, monkeypatch, read_log):
        from sfsearch.utils.logging import reset_multi_file_logger

        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        reset_multi_file_logger()

        logger = SmartLogger("search")
        logger.info("quiet")
        logger.warning("loud")

        assert [e["message"] for e in read_log("salesforce.log")] == ["loud"]
        assert not logger.isEnabledFor(logging.INFO)

    def test_entries_have_timestamp(self, read_log):
        get_multi_file_logger().info("raw_event", component="search")

        entry = read_log("salesforce.log")[-1]
        assert entry["timestamp"].endswith("Z")
        assert entry["level"] == "INFO"


class TestFramework:
    """Decorator and context manager."""

    def test_log_operation_adds_correlation(self, read_log):
        with log_operation("search", "batch_search", batch_size=3) as correlation_id:
            SmartLogger("search").info("inside")

        entries = read_log("salesforce.log")
        inside = next(e for e in entries if e["message"] == "inside")
        assert inside["correlation_id"] == correlation_id
        assert inside["operation"] == "batch_search"
        assert inside["batch_size"] == 3
        assert entries[-1]["message"] == "operation_complete_batch_search"

    def test_log_operation_context_cleared(self, read_log):
        with log_operation("search", "scoped"):
            pass
        SmartLogger("search").info("after")

        after = read_log("salesforce.log")[-1]
        assert "correlation_id" not in after
        assert "operation" not in after

    def test_log_execution_records_errors(self, read_log):
        @log_execution(component="metadata")
        def explode():
            raise ValueError("nope")

        with pytest.raises(ValueError):
            explode()

        errors = read_log("errors.log")
        assert errors[-1]["message"] == "function_error_explode"
        assert errors[-1]["error_type"] == "ValueError"


def test_structured_logger_single_file(tmp_path):
    log_file = tmp_path / "single" / "search.log"
    structured = StructuredLogger(log_file=str(log_file), level=logging.WARNING)
    structured.info("ignored")
    structured.critical("org_unreachable", org_id="00D000000000001EAA")
    structured.close()

    entries = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    assert [e["message"] for e in entries] == ["org_unreachable"]
    assert entries[0]["level"] == "CRITICAL"
    assert entries[0]["org_id"] == "00D000000000001EAA"

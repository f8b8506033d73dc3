"""Tests for structured logging."""

import json
from io import StringIO

import pytest
import structlog

from agentmem.observability.logging import (
    PIIRedactor,
    TextTruncator,
    get_logger,
    setup_logging,
)


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_setup_json_format(self) -> None:
        """Should configure JSON format for production."""
        setup_logging(level="INFO", format="json", redact_pii=False)
        logger = get_logger("test")
        # Should not raise
        logger.info("test_message")

    def test_setup_console_format(self) -> None:
        """Should configure console format for development."""
        setup_logging(level="DEBUG", format="console", redact_pii=False)
        logger = get_logger("test")
        # Should not raise
        logger.debug("test_message")

    def test_setup_with_redaction_and_truncation(self) -> None:
        """Should configure both memory-content processors."""
        setup_logging(level="INFO", format="json", redact_pii=True, max_text_length=10)
        logger = get_logger("test")
        # Should not raise
        logger.info("memory_added", content="x" * 50, api_key="m0-secret")

    def test_unknown_level_defaults_to_info(self) -> None:
        """Unknown level names fall back to INFO."""
        setup_logging(level="VERBOSE", format="json")
        assert get_logger("test") is not None


class TestPIIRedactor:
    """Tests for PII redaction."""

    @pytest.fixture
    def redactor(self) -> PIIRedactor:
        """Create a PIIRedactor instance."""
        return PIIRedactor()

    def test_redacts_api_key_by_key(self, redactor: PIIRedactor) -> None:
        """Should redact credential values."""
        event_dict = {"api_key": "m0-abc", "Authorization": "Token m0-abc", "data": "ok"}
        result = redactor(None, None, event_dict)  # type: ignore
        assert result["api_key"] == "[REDACTED]"
        assert result["Authorization"] == "[REDACTED]"
        assert result["data"] == "ok"

    def test_redacts_email_in_memory_content(self, redactor: PIIRedactor) -> None:
        """Should mask emails embedded in free text."""
        event_dict = {"content": "User prefers replies at user@example.com"}
        result = redactor(None, None, event_dict)  # type: ignore
        assert "user@example.com" not in result["content"]
        assert "[EMAIL]" in result["content"]

    def test_redacts_phone_pattern(self, redactor: PIIRedactor) -> None:
        """Should mask phone numbers in string values."""
        event_dict = {"query": "Call me at +1-555-123-4567 please"}
        result = redactor(None, None, event_dict)  # type: ignore
        assert "+1-555-123-4567" not in result["query"]
        assert "[PHONE]" in result["query"]

    def test_handles_nested_structures(self, redactor: PIIRedactor) -> None:
        """Should walk nested dicts and lists."""
        event_dict = {
            "metadata": {"token": "t", "site": "example.com"},
            "tags": ["a@b.io", "work"],
        }
        result = redactor(None, None, event_dict)  # type: ignore
        assert result["metadata"] == {"token": "[REDACTED]", "site": "example.com"}
        assert result["tags"] == ["[EMAIL]", "work"]

    def test_preserves_non_pii_data(self, redactor: PIIRedactor) -> None:
        """Should preserve non-PII data."""
        event_dict = {"event": "memory_searched", "result_count": 3, "tab_id": 42}
        result = redactor(None, None, event_dict)  # type: ignore
        assert result == event_dict


class TestTextTruncator:
    """Tests for free-text truncation."""

    def test_truncates_long_content(self) -> None:
        truncator = TextTruncator(max_length=5)
        result = truncator(None, None, {"content": "abcdefghij"})  # type: ignore
        assert result["content"] == "abcde..."

    def test_leaves_short_and_other_keys(self) -> None:
        truncator = TextTruncator(max_length=5)
        event_dict = {"query": "abc", "message": "abcdefghij", "content": 12345678}
        result = truncator(None, None, event_dict)  # type: ignore
        assert result == {"query": "abc", "message": "abcdefghij", "content": 12345678}


class TestJSONLogging:
    """Tests for JSON log output format."""

    def test_json_output_is_valid_json(self) -> None:
        """Should produce valid JSON with processed fields."""
        output = StringIO()
        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.processors.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                TextTruncator(8),
                PIIRedactor(),
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(0),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(output),
            cache_logger_on_first_use=False,
        )

        logger = structlog.get_logger("test")
        logger.info("memory_added", content="a long memory content", api_key="secret")

        parsed = json.loads(output.getvalue().strip())
        assert parsed["event"] == "memory_added"
        assert parsed["content"] == "a long m..."
        assert parsed["api_key"] == "[REDACTED]"
        assert "timestamp" in parsed
        assert "level" in parsed

"""Unit tests for preference parsing."""

from datetime import datetime

import pytest

from agentmem.memory.errors import MalformedDataError
from agentmem.memory.preferences import format_preference, parse_preference


class TestParsePreference:
    """Tests for parse_preference."""

    def test_json_object(self) -> None:
        parsed = parse_preference('{"theme": "dark", "font": 14}')
        assert parsed.ok
        assert parsed.value == {"theme": "dark", "font": 14}

    def test_key_value_form(self) -> None:
        """Should parse the form written by store_user_preference."""
        parsed = parse_preference('User preference: theme = "dark"')
        assert parsed.ok
        assert parsed.value == {"theme": "dark"}

    def test_key_value_structured_value(self) -> None:
        parsed = parse_preference('User preference: sites = ["a.com", "b.com"]')
        assert parsed.value == {"sites": ["a.com", "b.com"]}

    def test_not_json(self) -> None:
        """Should report free text as malformed without raising."""
        parsed = parse_preference("I like dark mode")
        assert not parsed.ok
        assert isinstance(parsed.error, MalformedDataError)
        assert parsed.value == {}

    @pytest.mark.parametrize("content", ["[1, 2]", '"dark"', "42", "null"])
    def test_non_object_json(self, content: str) -> None:
        parsed = parse_preference(content)
        assert not parsed.ok
        assert "expected object" in parsed.error.message

    def test_key_value_with_bad_value(self) -> None:
        parsed = parse_preference("User preference: theme = dark")
        assert not parsed.ok
        assert "theme" in parsed.error.message


class TestFormatPreference:
    def test_round_trip(self) -> None:
        content = format_preference("lang", "en")
        assert content == 'User preference: lang = "en"'
        assert parse_preference(content).value == {"lang": "en"}

    def test_format_non_json_value(self) -> None:
        content = format_preference("seen", datetime(2024, 5, 1, 9, 30))
        assert parse_preference(content).value == {"seen": "2024-05-01 09:30:00"}

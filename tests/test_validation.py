"""Tests for inbound message sanitizing and validation."""

from __future__ import annotations

import pytest

from travel_agent.utils.validation import MessageValidationError, sanitize_text, validate_chat_message


class TestSanitizeText:

    def test_strips_script_block(self):
        assert sanitize_text("<script>alert(1)</script>Hello") == "Hello"

    def test_strips_script_case_insensitive(self):
        assert sanitize_text("<SCRIPT type='x'>bad()</SCRIPT> ok") == "ok"

    def test_strips_javascript_urls(self):
        assert sanitize_text("click javascript:alert(1)") == "click alert(1)"

    def test_strips_event_handlers(self):
        assert sanitize_text('<img src=x onerror="bad()">') == '<img src=x "bad()">'

    def test_trims_whitespace(self):
        assert sanitize_text("   Paris in May?  \n") == "Paris in May?"

    def test_non_string_becomes_empty(self):
        assert sanitize_text(None) == ""
        assert sanitize_text(42) == ""


class TestValidateChatMessage:

    def test_returns_sanitized_text(self):
        assert validate_chat_message("  hello  ") == "hello"

    def test_whitespace_only_rejected(self):
        with pytest.raises(MessageValidationError):
            validate_chat_message("   \n\t ")

    def test_script_only_rejected(self):
        with pytest.raises(MessageValidationError):
            validate_chat_message("<script>alert(1)</script>")

    def test_too_long_rejected(self):
        with pytest.raises(MessageValidationError):
            validate_chat_message("a" * 4001)

    def test_max_length_accepted(self):
        assert validate_chat_message("a" * 4000) == "a" * 4000

    def test_non_string_rejected(self):
        with pytest.raises(MessageValidationError):
            validate_chat_message(None)

    def test_is_value_error(self):
        assert issubclass(MessageValidationError, ValueError)

"""Inbound chat text sanitizing and validation."""

from __future__ import annotations

import re

_SCRIPT_TAG = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_JS_URL = re.compile(r"javascript:", re.IGNORECASE)
_EVENT_HANDLER = re.compile(r"on\w+\s*=", re.IGNORECASE)


class MessageValidationError(ValueError):
    """The inbound message is empty or too long after sanitizing."""


def sanitize_text(text: object) -> str:
    """Strip script blocks, ``javascript:`` URLs and inline event handlers."""
    if not isinstance(text, str):
        return ""
    text = _SCRIPT_TAG.sub("", text)
    text = _JS_URL.sub("", text)
    text = _EVENT_HANDLER.sub("", text)
    return text.strip()


def validate_chat_message(text: object, max_length: int = 4000) -> str:
    """Sanitize and return the message, or raise MessageValidationError."""
    if not isinstance(text, str):
        raise MessageValidationError("Message must be a string")
    if len(text.strip()) > max_length:
        raise MessageValidationError(f"Message must be at most {max_length} characters")
    cleaned = sanitize_text(text)
    if not cleaned:
        raise MessageValidationError("Message cannot be empty")
    return cleaned

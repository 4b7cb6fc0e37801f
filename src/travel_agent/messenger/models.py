"""Message models for the messenger adapters."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from travel_agent.core.types import Platform


@dataclass(frozen=True, slots=True)
class IncomingMessage:
    platform: Platform
    chat_id: str
    user_id: str
    user_display_name: str
    text: str
    timestamp: datetime


@dataclass(frozen=True, slots=True)
class OutgoingMessage:
    chat_id: str
    text: str

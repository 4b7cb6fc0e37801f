"""Request and response bodies for the HTTP API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    message: str


class ChatResponse(BaseModel):
    response: str
    usage: dict[str, int] = Field(default_factory=dict)


class ClearResponse(BaseModel):
    success: bool
    message: str


class ErrorResponse(BaseModel):
    error: str

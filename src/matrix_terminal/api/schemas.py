"""Pydantic request/response models for the relay API."""

from __future__ import annotations

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str = "ok"


class ChatRequest(BaseModel):
    message: str


class ChatResponse(BaseModel):
    reply: str


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None

"""API routes — chat relay and its health probe."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request

from matrix_terminal.api.relay import ChatRelay, decode_body, parse_message
from matrix_terminal.api.schemas import ChatResponse, ErrorResponse, HealthResponse

router = APIRouter(prefix="/api", tags=["chat"])

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.post("/chat", response_model=ChatResponse, responses=_ERROR_RESPONSES)
async def chat(request: Request) -> ChatResponse:
    relay = ChatRelay(request.app.state.settings, request.app.state.llm)
    relay.ensure_configured()

    message = parse_message(decode_body(await request.body()))

    reply = await relay.reply(message)
    return ChatResponse(reply=reply)


@router.get("/chat", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    return HealthResponse()

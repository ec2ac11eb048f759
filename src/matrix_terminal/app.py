"""FastAPI app factory."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from matrix_terminal.api.errors import RelayError, relay_error_handler
from matrix_terminal.api.relay import CompletionClient
from matrix_terminal.api.routes import router
from matrix_terminal.core.config import Settings, get_settings
from matrix_terminal.llm.openai_client import OpenAIClient
from matrix_terminal.llm.types import LLMConfig

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings
    logger.info("Matrix Terminal relay starting up (model=%s)", settings.openai_model)

    owned: OpenAIClient | None = None
    if app.state.llm is None:
        owned = OpenAIClient(
            LLMConfig(
                model=settings.openai_model,
                api_key=settings.openai_api_key,
                base_url=settings.openai_base_url,
                timeout=settings.openai_timeout,
            )
        )
        app.state.llm = owned

    yield

    if owned is not None:
        await owned.close()
        app.state.llm = None
    logger.info("Matrix Terminal relay shutting down")


def create_app(
    settings: Settings | None = None,
    llm: CompletionClient | None = None,
) -> FastAPI:
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="Matrix Terminal",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.llm = llm
    app.add_exception_handler(RelayError, relay_error_handler)
    app.include_router(router)
    return app

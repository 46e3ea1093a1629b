"""Assistant REST endpoint.

- POST /api/v1/assistant -> classify + dispatch -> {"result", "action"}
- POST /api/server       -> same handler, path kept for older web clients
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter
from pydantic import BaseModel, Field, field_validator

if TYPE_CHECKING:
    from walsis.brain.engine.assistant import AssistantEngine

logger = logging.getLogger(__name__)

MAX_PROMPT_CHARS = 8_000


class HistoryMessage(BaseModel):
    """One caller-side history entry; content may be structured."""

    role: str = "user"
    content: Any = ""


class AssistantRequest(BaseModel):
    prompt: str
    history: list[HistoryMessage] = Field(default_factory=list)

    @field_validator("prompt")
    @classmethod
    def prompt_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            msg = "Prompt cannot be empty"
            raise ValueError(msg)
        if len(v) > MAX_PROMPT_CHARS:
            msg = f"Prompt exceeds {MAX_PROMPT_CHARS} characters"
            raise ValueError(msg)
        return v.strip()


class AssistantResponse(BaseModel):
    result: Any
    action: str


def create_assistant_router(*, engine: AssistantEngine) -> APIRouter:
    """Create the assistant router with an injected engine."""
    router = APIRouter(tags=["assistant"])

    async def _handle(body: AssistantRequest) -> AssistantResponse:
        reply = await engine.handle(
            body.prompt,
            [message.model_dump() for message in body.history],
        )
        return AssistantResponse(**reply.to_envelope())

    router.add_api_route(
        "/api/v1/assistant",
        _handle,
        methods=["POST"],
        response_model=AssistantResponse,
        summary="Route a prompt to the matching capability",
    )
    router.add_api_route(
        "/api/server",
        _handle,
        methods=["POST"],
        response_model=AssistantResponse,
        include_in_schema=False,
    )
    return router

"""Helpers shared by the single-shot text capabilities."""

from __future__ import annotations

from typing import TYPE_CHECKING

from walsis.ports.llm_call_port import ChatMessage

if TYPE_CHECKING:
    from walsis.ports.llm_call_port import LLMCallPort

DEFAULT_TEMPERATURE = 0.5


async def complete_single(
    llm: LLMCallPort,
    instruction: str,
    *,
    structured_output: bool = False,
    temperature: float = DEFAULT_TEMPERATURE,
) -> str:
    """Send ``instruction`` as the only user message and return the text."""
    return await llm.complete(
        [ChatMessage(role="user", content=instruction)],
        structured_output=structured_output,
        temperature=temperature,
    )

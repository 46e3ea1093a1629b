"""ChatCapability - general conversation with a fixed persona."""

from __future__ import annotations

from typing import TYPE_CHECKING

from walsis.ports.llm_call_port import ChatMessage
from walsis.shared.types import Action, TextResult
from walsis.skill.core.protocol import CapabilityProtocol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from walsis.ports.llm_call_port import LLMCallPort
    from walsis.shared.types import ConversationTurn

PERSONA = (
    "You are Walsis AI, a helpful AI tutor and creative assistant. "
    "If the user asks what you can do, say you help with quizzes, study notes, "
    "code, quick fact summaries, images and YouTube video summaries. "
    "Keep answers short and friendly."
)


class ChatCapability(CapabilityProtocol):
    def __init__(self, *, llm: LLMCallPort, persona: str = PERSONA) -> None:
        self._llm = llm
        self._persona = persona

    @property
    def action(self) -> Action:
        return Action.CHAT

    @property
    def uses_history(self) -> bool:
        return True

    def describe(self) -> str:
        return "General conversation with history"

    async def generate(
        self,
        prompt: str,
        history: Sequence[ConversationTurn] = (),
    ) -> TextResult:
        messages = [ChatMessage(role="system", content=self._persona)]
        messages.extend(ChatMessage(role=t.role, content=str(t.content)) for t in history)
        messages.append(ChatMessage(role="user", content=prompt))
        text = await self._llm.complete(messages)
        return TextResult(text=text.strip())

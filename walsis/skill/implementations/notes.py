"""NotesCapability - structured markdown study notes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from walsis.shared.types import Action, TextResult
from walsis.skill.core.prompting import complete_single
from walsis.skill.core.protocol import CapabilityProtocol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from walsis.ports.llm_call_port import LLMCallPort
    from walsis.shared.types import ConversationTurn

_NOTES_INSTRUCTION = """Create clear, structured study notes for: "{prompt}".
Use Markdown with bold headers and bullet points.
Keep them concise and highlight exam keywords."""


class NotesCapability(CapabilityProtocol):
    def __init__(self, *, llm: LLMCallPort) -> None:
        self._llm = llm

    @property
    def action(self) -> Action:
        return Action.NOTES

    def describe(self) -> str:
        return "Write study notes with headings and bullets"

    async def generate(
        self,
        prompt: str,
        history: Sequence[ConversationTurn] = (),
    ) -> TextResult:
        text = await complete_single(self._llm, _NOTES_INSTRUCTION.format(prompt=prompt))
        return TextResult(text=text.strip())

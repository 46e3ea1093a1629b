"""WebSearchCapability - factual summary of a subject.

There is no live search backend: the generation provider answers from
its own knowledge, framed as a factual summary.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from walsis.shared.types import Action, TextResult
from walsis.skill.core.prompting import complete_single
from walsis.skill.core.protocol import CapabilityProtocol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from walsis.ports.llm_call_port import LLMCallPort
    from walsis.shared.types import ConversationTurn

_SEARCH_INSTRUCTION = (
    'Act as a search engine. Provide a factual summary about: "{prompt}". '
    "State key facts first, then brief context."
)


class WebSearchCapability(CapabilityProtocol):
    def __init__(self, *, llm: LLMCallPort) -> None:
        self._llm = llm

    @property
    def action(self) -> Action:
        return Action.WEB_SEARCH

    def describe(self) -> str:
        return "Summarize factual information about a subject"

    async def generate(
        self,
        prompt: str,
        history: Sequence[ConversationTurn] = (),
    ) -> TextResult:
        text = await complete_single(self._llm, _SEARCH_INSTRUCTION.format(prompt=prompt))
        return TextResult(text=text.strip())

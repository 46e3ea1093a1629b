"""CodeCapability - raw source code for a programming request."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from walsis.shared.types import Action, CodeResult
from walsis.skill.core.prompting import complete_single
from walsis.skill.core.protocol import CapabilityProtocol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from walsis.ports.llm_call_port import LLMCallPort
    from walsis.shared.types import ConversationTurn

DEFAULT_LANGUAGE = "javascript"
CODE_TEMPERATURE = 0.1

_CODE_INSTRUCTION = (
    "Write clean, production-ready code for: {prompt}. "
    "Return ONLY the code. No markdown, no code fences, no explanations "
    "before or after the code."
)

# Models sometimes ignore the no-fence instruction; unwrap a single fenced block.
_FENCE_RE = re.compile(r"^```[ \t]*([\w+#.-]*)[ \t]*\n(.*?)\n?```\s*$", re.DOTALL)

_LANGUAGE_ALIASES = {
    "js": "javascript",
    "jsx": "javascript",
    "ts": "typescript",
    "tsx": "typescript",
    "py": "python",
    "sh": "bash",
    "htm": "html",
}


def unwrap_code(text: str) -> tuple[str, str | None]:
    """Strip a wrapping markdown fence, returning (code, fence_language)."""
    stripped = text.strip()
    match = _FENCE_RE.match(stripped)
    if match is None:
        return stripped, None
    language = match.group(1).lower() or None
    if language:
        language = _LANGUAGE_ALIASES.get(language, language)
    return match.group(2).strip(), language


class CodeCapability(CapabilityProtocol):
    def __init__(self, *, llm: LLMCallPort, default_language: str = DEFAULT_LANGUAGE) -> None:
        self._llm = llm
        self._default_language = default_language

    @property
    def action(self) -> Action:
        return Action.CODE

    def describe(self) -> str:
        return "Write source code without documentation wrappers"

    async def generate(
        self,
        prompt: str,
        history: Sequence[ConversationTurn] = (),
    ) -> CodeResult:
        content = await complete_single(
            self._llm,
            _CODE_INSTRUCTION.format(prompt=prompt),
            temperature=CODE_TEMPERATURE,
        )
        code, fence_language = unwrap_code(content)
        return CodeResult(language=fence_language or self._default_language, code=code)

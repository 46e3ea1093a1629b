"""QuizCapability - five multiple-choice questions on a topic.

Degenerate topics (shorter than 5 characters, or literally "quiz") are
replaced with a general-knowledge topic before prompting. Normalization or
provider failure yields an empty quiz rather than an error.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from walsis.shared.types import Action, QuizItem, QuizResult
from walsis.skill.core.prompting import complete_single
from walsis.skill.core.protocol import CapabilityProtocol
from walsis.tool.llm.normalizer import extract_json

if TYPE_CHECKING:
    from collections.abc import Sequence

    from walsis.ports.llm_call_port import LLMCallPort
    from walsis.shared.types import ConversationTurn

logger = logging.getLogger(__name__)

FALLBACK_TOPIC = "General Knowledge"
QUIZ_SIZE = 5
_MIN_TOPIC_LENGTH = 5

_QUIZ_INSTRUCTION = """You are a Quiz Generator API. Topic: "{topic}"
Generate exactly {count} multiple-choice questions in strict JSON format:
{{"quiz": [{{"question": "...", "options1": "...", "options2": "...", "options3": "...", "options4": "...", "currentAnswer": "..."}}]}}
"currentAnswer" must repeat the text of the correct option exactly."""


def effective_topic(topic: str) -> str:
    """Return ``topic``, or the fallback topic when it is degenerate."""
    cleaned = topic.strip()
    if len(cleaned) < _MIN_TOPIC_LENGTH or cleaned.lower() == "quiz":
        return FALLBACK_TOPIC
    return cleaned


def parse_quiz(data: dict[str, Any] | None) -> tuple[QuizItem, ...]:
    """Convert a parsed provider object into quiz items.

    Items are read from the ``options1..options4`` form or an ``options``
    list; items without a question, four options and an answer that names
    one of the options are dropped.
    """
    if not data:
        return ()
    raw_items = data.get("quiz")
    if not isinstance(raw_items, list):
        return ()

    items: list[QuizItem] = []
    for raw in raw_items:
        item = _parse_item(raw)
        if item is not None:
            items.append(item)
        if len(items) == QUIZ_SIZE:
            break
    return tuple(items)


def _parse_item(raw: Any) -> QuizItem | None:
    if not isinstance(raw, dict):
        return None
    question = raw.get("question")
    if isinstance(raw.get("options"), list):
        options = raw["options"]
    else:
        options = [raw.get(f"options{i}") for i in range(1, 5)]
    answer = raw.get("currentAnswer", raw.get("correctAnswer", raw.get("answer")))

    if not isinstance(question, str) or not question.strip():
        return None
    if len(options) != 4 or not all(isinstance(o, str) and o.strip() for o in options):
        return None
    if not isinstance(answer, str) or not answer.strip():
        return None

    cleaned = tuple(o.strip() for o in options)
    # the answer must name one of the options; stored in the option's own casing
    matches = [o for o in cleaned if o.casefold() == answer.strip().casefold()]
    if not matches:
        return None
    return QuizItem(
        question=question.strip(),
        options=(cleaned[0], cleaned[1], cleaned[2], cleaned[3]),
        correct_answer=matches[0],
    )


class QuizCapability(CapabilityProtocol):
    def __init__(self, *, llm: LLMCallPort) -> None:
        self._llm = llm

    @property
    def action(self) -> Action:
        return Action.QUIZ

    def describe(self) -> str:
        return f"Generate {QUIZ_SIZE} multiple-choice questions on a topic"

    async def generate(
        self,
        prompt: str,
        history: Sequence[ConversationTurn] = (),
    ) -> QuizResult:
        topic = effective_topic(prompt)
        instruction = _QUIZ_INSTRUCTION.format(topic=topic, count=QUIZ_SIZE)
        try:
            content = await complete_single(self._llm, instruction, structured_output=True)
        except Exception:
            logger.warning("Quiz generation failed for topic=%r", topic, exc_info=True)
            return QuizResult()

        items = parse_quiz(extract_json(content))
        if not items:
            logger.info("Quiz output for topic=%r had no usable items", topic)
        return QuizResult(items=items)

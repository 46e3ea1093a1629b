"""Intent classification: free text -> (Action, refined prompt).

The classifier asks the generation provider, in JSON mode at low
temperature, to map the current message onto one Action and to rewrite the
message into a prompt suited to that capability. History is supplied only
as disambiguating context.

Failure policy: the classifier never raises. Provider errors, unparseable
output and unknown labels all degrade to Action.CHAT with the raw prompt.
"""

from __future__ import annotations

import logging
from contextlib import nullcontext
from typing import TYPE_CHECKING, Any

from walsis.ports.llm_call_port import ChatMessage
from walsis.shared.types import Action, ClassificationResult
from walsis.tool.llm.normalizer import extract_json

if TYPE_CHECKING:
    from collections.abc import Sequence

    from walsis.brain.metrics.sli import RouterSLI
    from walsis.ports.llm_call_port import LLMCallPort
    from walsis.shared.types import ConversationTurn

logger = logging.getLogger(__name__)

CLASSIFIER_TEMPERATURE = 0.1

FALLBACK_EMPTY_PROMPT = "empty_prompt"
FALLBACK_PROVIDER_ERROR = "provider_error"
FALLBACK_UNPARSEABLE = "unparseable_output"
FALLBACK_UNKNOWN_ACTION = "unknown_action"

ROUTING_INSTRUCTIONS = """You are the intent classifier of Walsis AI, a study and creative assistant.
Map the Current Message to exactly one action.

ACTIONS AND TRIGGERS:
- "quiz": quiz, MCQ, test, practice questions
- "image": image, picture, photo, draw, paint, illustration
- "code": code, function, script, program, React, HTML, CSS, Python
- "notes": notes, study, explain, summary of a topic
- "web_search": search, fact, who is, what happened, latest information
- "video_summary": the message contains a YouTube link (youtube.com or youtu.be)
- "chat": greetings (hello, hi), questions about you, anything else

RULES:
- Classify the Current Message only. Earlier conversation is context for
  resolving references ("make it harder", "another one"); it must never
  outweigh what the Current Message asks for.
- "prompt" is the Current Message rewritten for the chosen action: for quiz
  and notes the bare topic, for image the subject to depict, for code the
  program to write, for video_summary the full message including the link.

Return ONLY a JSON object: {"action": "<one action>", "prompt": "<refined prompt>"}"""


class IntentClassifier:
    """LLM-backed intent classifier with a chat fallback."""

    def __init__(self, *, llm: LLMCallPort, sli: RouterSLI | None = None) -> None:
        self._llm = llm
        self._sli = sli

    async def classify(
        self,
        raw_prompt: str,
        history: Sequence[ConversationTurn] = (),
    ) -> ClassificationResult:
        """Classify ``raw_prompt`` using sanitized ``history`` as context."""
        if not raw_prompt or not raw_prompt.strip():
            return self._fallback(raw_prompt, FALLBACK_EMPTY_PROMPT)

        messages = self.build_messages(raw_prompt, history)
        timer = (
            self._sli.timer(self._sli.classification_duration)
            if self._sli is not None
            else nullcontext()
        )
        try:
            with timer:
                raw_output = await self._llm.complete(
                    messages,
                    structured_output=True,
                    temperature=CLASSIFIER_TEMPERATURE,
                )
        except Exception:
            logger.warning("Intent classification call failed, defaulting to chat", exc_info=True)
            return self._fallback(raw_prompt, FALLBACK_PROVIDER_ERROR)

        data = extract_json(raw_output)
        if data is None:
            logger.info("Classifier output unparseable, defaulting to chat")
            return self._fallback(raw_prompt, FALLBACK_UNPARSEABLE)

        result = self.interpret(data, raw_prompt)
        if result.is_fallback and self._sli is not None:
            self._sli.classification_fallback_total.labels(reason=result.fallback_reason).inc()
        logger.info("Router: %r -> %s", raw_prompt[:80], result.action.value)
        return result

    @staticmethod
    def build_messages(
        raw_prompt: str,
        history: Sequence[ConversationTurn],
    ) -> list[ChatMessage]:
        """System instructions first, then context turns, then the current message."""
        messages = [ChatMessage(role="system", content=ROUTING_INSTRUCTIONS)]
        messages.extend(
            ChatMessage(role=turn.role, content=str(turn.content)) for turn in history
        )
        messages.append(ChatMessage(role="user", content=f'Current Message: "{raw_prompt}"'))
        return messages

    @staticmethod
    def interpret(data: dict[str, Any], raw_prompt: str) -> ClassificationResult:
        """Apply defaults to a parsed classifier object.

        Missing or unknown action -> CHAT; missing or blank prompt -> raw prompt.
        Legacy ``function`` keys are read when ``action`` is absent.
        """
        label = data.get("action", data.get("function"))
        action = Action.parse(label)

        refined = data.get("prompt")
        refined_prompt = refined.strip() if isinstance(refined, str) and refined.strip() else ""

        reason = ""
        if action is Action.CHAT and not _is_explicit_chat(label):
            reason = FALLBACK_UNKNOWN_ACTION
        return ClassificationResult(
            action=action,
            refined_prompt=refined_prompt or raw_prompt,
            fallback_reason=reason,
        )

    def _fallback(self, raw_prompt: str, reason: str) -> ClassificationResult:
        if self._sli is not None:
            self._sli.classification_fallback_total.labels(reason=reason).inc()
        return ClassificationResult(
            action=Action.CHAT,
            refined_prompt=raw_prompt,
            fallback_reason=reason,
        )


def _is_explicit_chat(label: Any) -> bool:
    return isinstance(label, str) and label.strip().lower() in {"chat", "self"}

"""Assistant engine -- the request pipeline behind the single endpoint.

Flow:
1. Sanitize history twice: a narrow window for the classifier, a wider
   one for chat continuity
2. Classify the prompt (never raises; falls back to chat)
3. Route to exactly one capability (never raises; failures -> ErrorResult)

Classification strictly precedes dispatch. All state is request-local.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from walsis.brain.intent.classifier import IntentClassifier
    from walsis.brain.router.dispatch import DispatchRouter
    from walsis.brain.sanitizer.history import HistorySanitizer
    from walsis.shared.types import Action, CapabilityResult, ConversationTurn

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssistantReply:
    """Everything the transport layer needs to render one reply."""

    action: Action
    refined_prompt: str
    result: CapabilityResult
    classification_fallback: str = ""

    def to_envelope(self) -> dict[str, Any]:
        return {"result": self.result.to_payload(), "action": self.action.value}


class AssistantEngine:
    def __init__(
        self,
        *,
        classifier: IntentClassifier,
        router: DispatchRouter,
        classifier_history: HistorySanitizer,
        chat_history: HistorySanitizer,
    ) -> None:
        self._classifier = classifier
        self._router = router
        self._classifier_history = classifier_history
        self._chat_history = chat_history

    async def handle(
        self,
        prompt: str,
        history: Iterable[ConversationTurn | Mapping[str, Any]] | None = None,
    ) -> AssistantReply:
        """Classify ``prompt`` and run the selected capability."""
        turns = list(history or [])
        classification = await self._classifier.classify(
            prompt,
            self._classifier_history.sanitize(turns),
        )
        result = await self._router.route(
            classification.action,
            classification.refined_prompt,
            prompt,
            self._chat_history.sanitize(turns),
        )
        logger.info(
            "Handled prompt action=%s result=%s fallback=%s",
            classification.action.value,
            result.kind,
            classification.fallback_reason or "-",
        )
        return AssistantReply(
            action=classification.action,
            refined_prompt=classification.refined_prompt,
            result=result,
            classification_fallback=classification.fallback_reason,
        )

"""Dispatch router -- route a classified action to its capability.

- One capability call per request; no retries, no re-routing
- Chat receives the original prompt; video summaries fall back to it when
  the refined prompt lost the link; the rest receive the refined prompt
- Only capabilities that declare uses_history receive sanitized history
- Unknown actions behave exactly like Action.CHAT
- Any capability failure becomes an ErrorResult; route() always returns
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from contextlib import nullcontext
from typing import TYPE_CHECKING, Any, assert_never

from walsis.shared.logging.error_handler import log_structured_error
from walsis.shared.types import Action, ErrorResult
from walsis.skill.implementations.video_summary import find_video

if TYPE_CHECKING:
    from walsis.brain.metrics.sli import RouterSLI
    from walsis.shared.types import CapabilityResult, ConversationTurn
    from walsis.skill.core.protocol import CapabilityProtocol

logger = logging.getLogger(__name__)

ERROR_MESSAGE = "Error processing request."


class DispatchRouter:
    """Map each Action to exactly one capability and invoke it safely."""

    def __init__(
        self,
        *,
        capabilities: Mapping[Action, CapabilityProtocol],
        sli: RouterSLI | None = None,
    ) -> None:
        missing = [a.value for a in Action if a not in capabilities]
        if missing:
            msg = f"No capability registered for: {', '.join(missing)}"
            raise ValueError(msg)
        mismatched = [a.value for a, cap in capabilities.items() if cap.action is not a]
        if mismatched:
            msg = f"Capability registered under the wrong action: {', '.join(mismatched)}"
            raise ValueError(msg)
        self._capabilities = dict(capabilities)
        self._sli = sli

    def capability_for(self, action: Action) -> CapabilityProtocol:
        return self._capabilities[action]

    @staticmethod
    def select_prompt(action: Action, refined_prompt: str, original_prompt: str) -> str:
        """Pure transition: which prompt the capability receives.

        A refined video request that lost its link falls back to the
        original message, which is where the link came from.
        """
        match action:
            case Action.CHAT:
                return original_prompt
            case Action.VIDEO_SUMMARY:
                if find_video(refined_prompt) is not None:
                    return refined_prompt
                return original_prompt
            case Action.QUIZ | Action.CODE | Action.NOTES | Action.WEB_SEARCH | Action.IMAGE:
                return refined_prompt or original_prompt
            case _:
                assert_never(action)

    async def route(
        self,
        action: Action | Any,
        refined_prompt: str,
        original_prompt: str,
        history: Sequence[ConversationTurn] = (),
    ) -> CapabilityResult:
        resolved = Action.parse(action)
        capability = self._capabilities[resolved]
        prompt = self.select_prompt(resolved, refined_prompt, original_prompt)
        turns = tuple(history) if capability.uses_history else ()

        if self._sli is not None:
            self._sli.routed_total.labels(action=resolved.value).inc()
            timer = self._sli.timer(self._sli.capability_duration.labels(action=resolved.value))
        else:
            timer = nullcontext()

        try:
            with timer:
                result = await capability.generate(prompt, turns)
        except Exception as exc:
            structured = log_structured_error(
                logger,
                exc,
                context={"action": resolved.value, "prompt_chars": len(prompt)},
            )
            if self._sli is not None:
                self._sli.capability_failures_total.labels(action=resolved.value).inc()
            return ErrorResult(
                message=ERROR_MESSAGE,
                metadata={"action": resolved.value, "error_code": structured.error_code},
            )

        logger.debug("Capability %s returned %s", resolved.value, result.kind)
        return result

"""Bounded, text-only view of caller-owned conversation history.

- Keep only the last ``window`` turns
- Replace non-text content (quiz lists, image dicts...) with a placeholder
- Unknown roles are treated as "user"

Never mutates the input; always returns a new tuple.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from walsis.shared.types import ROLES, ConversationTurn

MEDIA_PLACEHOLDER = "[media content]"


class HistorySanitizer:
    """Produce bounded, text-only history for prompts."""

    def __init__(self, *, window: int, placeholder: str = MEDIA_PLACEHOLDER) -> None:
        if window < 0:
            msg = f"window must be >= 0, got {window}"
            raise ValueError(msg)
        self._window = window
        self._placeholder = placeholder

    @property
    def window(self) -> int:
        return self._window

    def sanitize(
        self,
        history: Iterable[ConversationTurn | Mapping[str, Any]] | None,
    ) -> tuple[ConversationTurn, ...]:
        if not history or self._window == 0:
            return ()
        turns = list(history)[-self._window :]
        return tuple(self._sanitize_turn(turn) for turn in turns)

    def _sanitize_turn(self, turn: ConversationTurn | Mapping[str, Any]) -> ConversationTurn:
        if isinstance(turn, ConversationTurn):
            role, content = turn.role, turn.content
        elif isinstance(turn, Mapping):
            role, content = turn.get("role"), turn.get("content")
        else:
            role, content = "user", turn

        if not isinstance(role, str) or role not in ROLES:
            role = "user"
        if not isinstance(content, str):
            content = self._placeholder
        return ConversationTurn(role=role, content=content)

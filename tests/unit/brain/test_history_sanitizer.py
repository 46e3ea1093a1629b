"""Tests for bounded, text-only history."""

from __future__ import annotations

import pytest

from walsis.brain.sanitizer.history import MEDIA_PLACEHOLDER, HistorySanitizer
from walsis.shared.types import ConversationTurn


def _turns(n: int) -> list[dict[str, str]]:
    return [
        {"role": "user" if i % 2 == 0 else "assistant", "content": f"m{i}"} for i in range(n)
    ]


class TestHistorySanitizer:
    def test_keeps_last_window_turns(self) -> None:
        result = HistorySanitizer(window=6).sanitize(_turns(10))
        assert [t.content for t in result] == ["m4", "m5", "m6", "m7", "m8", "m9"]

    def test_shorter_history_kept_whole(self) -> None:
        assert len(HistorySanitizer(window=6).sanitize(_turns(3))) == 3

    def test_window_one(self) -> None:
        result = HistorySanitizer(window=1).sanitize(_turns(4))
        assert result == (ConversationTurn(role="assistant", content="m3"),)

    @pytest.mark.parametrize("history", [None, []])
    def test_empty_history(self, history: list | None) -> None:
        assert HistorySanitizer(window=6).sanitize(history) == ()

    def test_window_zero(self) -> None:
        assert HistorySanitizer(window=0).sanitize(_turns(3)) == ()

    def test_negative_window_rejected(self) -> None:
        with pytest.raises(ValueError, match="window"):
            HistorySanitizer(window=-1)

    def test_structured_content_replaced(self) -> None:
        history = [
            {"role": "assistant", "content": {"type": "quiz", "quiz": []}},
            {"role": "assistant", "content": ["a", "b"]},
            {"role": "user", "content": None},
        ]
        result = HistorySanitizer(window=6).sanitize(history)
        assert all(t.content == MEDIA_PLACEHOLDER for t in result)

    def test_unknown_role_becomes_user(self) -> None:
        result = HistorySanitizer(window=6).sanitize(
            [{"role": "tool", "content": "x"}, {"content": "y"}]
        )
        assert [t.role for t in result] == ["user", "user"]

    def test_accepts_conversation_turns(self) -> None:
        history = [ConversationTurn("user", "hi"), ConversationTurn("assistant", {"img": 1})]
        result = HistorySanitizer(window=6).sanitize(history)
        assert result == (
            ConversationTurn("user", "hi"),
            ConversationTurn("assistant", MEDIA_PLACEHOLDER),
        )

    def test_input_not_mutated(self) -> None:
        history = [{"role": "assistant", "content": {"imageUrl": "x"}}]
        HistorySanitizer(window=6).sanitize(history)
        assert history == [{"role": "assistant", "content": {"imageUrl": "x"}}]

    def test_custom_placeholder(self) -> None:
        result = HistorySanitizer(window=2, placeholder="<media>").sanitize(
            [{"role": "user", "content": 3}]
        )
        assert result[0].content == "<media>"

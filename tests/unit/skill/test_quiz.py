"""Tests for quiz generation and tolerant quiz parsing."""

from __future__ import annotations

import json

import pytest

from tests.fakes import FakeLLM, provider_down
from walsis.shared.types import Action, QuizResult
from walsis.skill.implementations.quiz import (
    FALLBACK_TOPIC,
    QUIZ_SIZE,
    QuizCapability,
    effective_topic,
    parse_quiz,
)


def _item(n: int) -> dict[str, str]:
    return {
        "question": f"Question {n}?",
        "options1": "A",
        "options2": "B",
        "options3": "C",
        "options4": "D",
        "currentAnswer": "B",
    }


def _quiz_json(count: int) -> str:
    return json.dumps({"quiz": [_item(n) for n in range(count)]})


class TestEffectiveTopic:
    @pytest.mark.parametrize("topic", ["", "   ", "cell", "quiz", "QUIZ", " Quiz "])
    def test_degenerate_topics(self, topic: str) -> None:
        assert effective_topic(topic) == FALLBACK_TOPIC

    def test_real_topic_kept(self) -> None:
        assert effective_topic("  photosynthesis ") == "photosynthesis"

    def test_five_characters_is_enough(self) -> None:
        assert effective_topic("atoms") == "atoms"


class TestParseQuiz:
    def test_options_fields(self) -> None:
        items = parse_quiz(json.loads(_quiz_json(2)))
        assert len(items) == 2
        assert items[0].options == ("A", "B", "C", "D")
        assert items[0].correct_answer == "B"

    def test_options_list_and_correct_answer(self) -> None:
        data = {
            "quiz": [
                {"question": "Q?", "options": ["w", "x", "y", "z"], "correctAnswer": "y"},
            ]
        }
        (item,) = parse_quiz(data)
        assert item.options == ("w", "x", "y", "z")
        assert item.correct_answer == "y"

    def test_malformed_items_dropped(self) -> None:
        data = {
            "quiz": [
                _item(0),
                {"question": "Only three?", "options": ["a", "b", "c"], "currentAnswer": "a"},
                {"options1": "A", "options2": "B", "options3": "C", "options4": "D"},
                "not an item",
                _item(1) | {"currentAnswer": ""},
            ]
        }
        assert len(parse_quiz(data)) == 1

    def test_answer_outside_options_dropped(self) -> None:
        data = {"quiz": [_item(0) | {"currentAnswer": "E"}, _item(1)]}
        (item,) = parse_quiz(data)
        assert item.question == "Question 1?"

    def test_answer_stored_in_option_casing(self) -> None:
        data = {
            "quiz": [
                {
                    "question": "Largest planet?",
                    "options": ["Mars", "Jupiter", "Venus", "Mercury"],
                    "correctAnswer": " jupiter ",
                },
            ]
        }
        (item,) = parse_quiz(data)
        assert item.correct_answer == "Jupiter"
        assert item.correct_answer in item.options

    def test_truncated_to_quiz_size(self) -> None:
        assert len(parse_quiz(json.loads(_quiz_json(8)))) == QUIZ_SIZE

    @pytest.mark.parametrize("data", [None, {}, {"quiz": "nope"}, {"questions": []}])
    def test_unusable_shapes(self, data: dict | None) -> None:
        assert parse_quiz(data) == ()


class TestQuizCapability:
    def test_action(self) -> None:
        assert QuizCapability(llm=FakeLLM()).action is Action.QUIZ

    @pytest.mark.asyncio
    async def test_five_items_with_four_options(self) -> None:
        llm = FakeLLM(_quiz_json(5))
        result = await QuizCapability(llm=llm).generate("photosynthesis")

        assert isinstance(result, QuizResult)
        assert len(result.items) == 5
        assert all(len(item.options) == 4 for item in result.items)
        assert llm.calls[0]["structured_output"] is True
        assert 'Topic: "photosynthesis"' in llm.last_prompt()

    @pytest.mark.asyncio
    async def test_short_topic_uses_fallback(self) -> None:
        llm = FakeLLM(_quiz_json(5))
        await QuizCapability(llm=llm).generate("quiz")
        assert f'Topic: "{FALLBACK_TOPIC}"' in llm.last_prompt()

    @pytest.mark.asyncio
    async def test_prose_wrapped_output(self) -> None:
        llm = FakeLLM(f"Here is your quiz:\n{_quiz_json(5)}\nGood luck!")
        result = await QuizCapability(llm=llm).generate("photosynthesis")
        assert len(result.items) == 5

    @pytest.mark.asyncio
    async def test_unparseable_output_empty_quiz(self) -> None:
        result = await QuizCapability(llm=FakeLLM("sorry, no quiz")).generate("photosynthesis")
        assert result == QuizResult()

    @pytest.mark.asyncio
    async def test_provider_failure_empty_quiz(self) -> None:
        result = await QuizCapability(llm=FakeLLM(provider_down())).generate("photosynthesis")
        assert result.items == ()
        assert result.to_payload() == {"type": "quiz", "quiz": []}

"""Shared domain types used across layers.

These types flow between the classifier, the dispatch router and the
capability providers, and their `to_payload()` forms are the wire format
returned to the presentation layer. Keep them stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar

# -- Actions --


class Action(Enum):
    """Closed set of capabilities the router can dispatch to."""

    QUIZ = "quiz"
    CODE = "code"
    NOTES = "notes"
    WEB_SEARCH = "web_search"
    IMAGE = "image"
    VIDEO_SUMMARY = "video_summary"
    CHAT = "chat"

    @classmethod
    def parse(cls, value: Any) -> Action:
        """Map a classifier label onto an Action.

        Accepts enum values, member names and the function-style labels
        older routing prompts emit (``generateQuiz``, ``self``...).
        Anything unrecognised is CHAT.
        """
        if isinstance(value, Action):
            return value
        if not isinstance(value, str):
            return cls.CHAT
        key = value.strip().lower().replace("-", "_").replace(" ", "_")
        if not key:
            return cls.CHAT
        for member in cls:
            if key == member.value:
                return member
        return _ACTION_ALIASES.get(key.replace("_", ""), cls.CHAT)


_ACTION_ALIASES: dict[str, Action] = {
    "generatequiz": Action.QUIZ,
    "mcq": Action.QUIZ,
    "generatecode": Action.CODE,
    "generatenotes": Action.NOTES,
    "websearch": Action.WEB_SEARCH,
    "search": Action.WEB_SEARCH,
    "generateimage": Action.IMAGE,
    "videosummary": Action.VIDEO_SUMMARY,
    "summarizevideo": Action.VIDEO_SUMMARY,
    "video": Action.VIDEO_SUMMARY,
    "self": Action.CHAT,
}


# -- Conversation --

ROLES = frozenset({"user", "assistant", "system"})


@dataclass(frozen=True)
class ConversationTurn:
    """One message of caller-owned history.

    ``content`` is plain text for ordinary messages, or whatever structured
    payload the assistant produced (quiz list, image URL dict...).
    """

    role: str
    content: Any

    @property
    def is_text(self) -> bool:
        return isinstance(self.content, str)

    def to_message(self) -> dict[str, Any]:
        return {"role": self.role, "content": self.content}


# -- Classification --


@dataclass(frozen=True)
class ClassificationResult:
    """Outcome of intent classification.

    ``fallback_reason`` is empty when the classifier produced a usable
    answer and names the recovery path otherwise.
    """

    action: Action
    refined_prompt: str
    fallback_reason: str = ""

    @property
    def is_fallback(self) -> bool:
        return bool(self.fallback_reason)


# -- Capability results --


@dataclass(frozen=True)
class QuizItem:
    """A single multiple-choice question with exactly four options."""

    question: str
    options: tuple[str, str, str, str]
    correct_answer: str

    def to_payload(self) -> dict[str, Any]:
        return {
            "question": self.question,
            "options": list(self.options),
            "correctAnswer": self.correct_answer,
        }


@dataclass(frozen=True)
class QuizResult:
    kind: ClassVar[str] = "quiz"

    items: tuple[QuizItem, ...] = ()

    def to_payload(self) -> dict[str, Any]:
        return {"type": self.kind, "quiz": [item.to_payload() for item in self.items]}


@dataclass(frozen=True)
class CodeResult:
    kind: ClassVar[str] = "code"

    language: str
    code: str

    def to_payload(self) -> dict[str, Any]:
        return {"type": self.kind, "language": self.language, "code": self.code}


@dataclass(frozen=True)
class TextResult:
    """Plain text: notes, web summaries, chat replies and lookup failures."""

    kind: ClassVar[str] = "text"

    text: str

    def to_payload(self) -> str:
        return self.text


@dataclass(frozen=True)
class ImageResult:
    kind: ClassVar[str] = "image"

    image_url: str
    backend: str = ""

    def to_payload(self) -> dict[str, Any]:
        return {"type": self.kind, "imageUrl": self.image_url}


@dataclass(frozen=True)
class VideoSummaryResult:
    kind: ClassVar[str] = "video_summary"

    summary: str
    video_url: str
    answered_question: str | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "type": self.kind,
            "summary": self.summary,
            "videoUrl": self.video_url,
        }
        if self.answered_question:
            payload["questionAnswer"] = self.answered_question
        return payload


@dataclass(frozen=True)
class ErrorResult:
    """Uniform, user-readable failure. Never carries provider internals."""

    kind: ClassVar[str] = "error"

    message: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        return {"type": self.kind, "message": self.message}


CapabilityResult = (
    QuizResult | CodeResult | TextResult | ImageResult | VideoSummaryResult | ErrorResult
)


__all__ = [
    "ROLES",
    "Action",
    "CapabilityResult",
    "ClassificationResult",
    "CodeResult",
    "ConversationTurn",
    "ErrorResult",
    "ImageResult",
    "QuizItem",
    "QuizResult",
    "TextResult",
    "VideoSummaryResult",
]

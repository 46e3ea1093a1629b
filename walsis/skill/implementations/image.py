"""ImageCapability - subject extraction plus the image backend chain.

Command verbs and media nouns are stripped so the backend receives only
the subject ("generate a picture of a red dragon" -> "a red dragon"). A
random seed busts image-service caches for repeated subjects.
"""

from __future__ import annotations

import random
import re
from collections.abc import Callable
from typing import TYPE_CHECKING

from walsis.shared.types import Action, ImageResult
from walsis.skill.core.protocol import CapabilityProtocol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from walsis.shared.types import ConversationTurn
    from walsis.tool.implementations.image_generate import FallbackImageGenerator

MAX_SEED = 9999

_VERB_RE = re.compile(
    r"\b(?:please\s+)?(?:generate|create|make|draw|paint|render)(?:\s+me)?\b",
    re.IGNORECASE,
)
_MEDIA_RE = re.compile(
    r"\b(?:an?\s+)?(?:image|picture|photo|drawing|illustration|painting)s?(?:\s+of)?\b",
    re.IGNORECASE,
)
_WHITESPACE_RE = re.compile(r"\s+")


def extract_subject(prompt: str) -> str:
    """Remove command words, returning the trimmed subject.

    Falls back to the trimmed prompt when nothing would be left.
    """
    subject = _VERB_RE.sub(" ", prompt)
    subject = _MEDIA_RE.sub(" ", subject)
    subject = _WHITESPACE_RE.sub(" ", subject).strip(" \t\n.,:;!")
    return subject or prompt.strip()


def _random_seed() -> int:
    return random.randint(0, MAX_SEED)  # noqa: S311 -- cache busting, not security


class ImageCapability(CapabilityProtocol):
    def __init__(
        self,
        *,
        generator: FallbackImageGenerator,
        seed_fn: Callable[[], int] = _random_seed,
    ) -> None:
        self._generator = generator
        self._seed_fn = seed_fn

    @property
    def action(self) -> Action:
        return Action.IMAGE

    def describe(self) -> str:
        return "Generate an image of a subject"

    async def generate(
        self,
        prompt: str,
        history: Sequence[ConversationTurn] = (),
    ) -> ImageResult:
        subject = extract_subject(prompt)
        image = await self._generator.generate(subject, seed=self._seed_fn())
        return ImageResult(image_url=image.url, backend=image.backend)

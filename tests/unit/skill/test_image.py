"""Tests for image subject extraction and generation."""

from __future__ import annotations

import pytest

from tests.fakes import FakeImageBackend
from walsis.shared.errors import ImageGenerationError, ProviderError
from walsis.shared.types import ImageResult
from walsis.skill.implementations.image import ImageCapability, extract_subject
from walsis.tool.implementations.image_generate import (
    FallbackImageGenerator,
    PollinationsImageBackend,
)


class TestExtractSubject:
    @pytest.mark.parametrize(
        ("prompt", "subject"),
        [
            ("generate a picture of a red dragon", "a red dragon"),
            ("Draw me a cat wearing a hat", "a cat wearing a hat"),
            ("please create an image of the Eiffel Tower at night.", "the Eiffel Tower at night"),
            ("photo of mountains", "mountains"),
            ("sunset over the ocean", "sunset over the ocean"),
        ],
    )
    def test_command_words_removed(self, prompt: str, subject: str) -> None:
        assert extract_subject(prompt) == subject

    def test_nothing_left_keeps_prompt(self) -> None:
        assert extract_subject("  generate an image ") == "generate an image"


class TestImageCapability:
    @pytest.mark.asyncio
    async def test_pollinations_url(self) -> None:
        capability = ImageCapability(
            generator=FallbackImageGenerator([PollinationsImageBackend()]),
            seed_fn=lambda: 1234,
        )
        result = await capability.generate("generate a picture of a red dragon")

        assert result == ImageResult(
            image_url=(
                "https://image.pollinations.ai/prompt/a%20red%20dragon"
                "?seed=1234&width=1024&height=768&nologo=true"
            ),
            backend="pollinations",
        )

    @pytest.mark.asyncio
    async def test_falls_back_to_second_backend(self) -> None:
        primary = FakeImageBackend("huggingface", error=ProviderError("huggingface"))
        capability = ImageCapability(
            generator=FallbackImageGenerator([primary, PollinationsImageBackend()]),
            seed_fn=lambda: 7,
        )
        result = await capability.generate("draw a fox")

        assert primary.calls == [{"prompt": "a fox", "seed": 7}]
        assert result.backend == "pollinations"
        assert result.image_url.startswith("https://image.pollinations.ai/prompt/a%20fox?seed=7")

    @pytest.mark.asyncio
    async def test_random_seed_in_range(self) -> None:
        backend = FakeImageBackend("only")
        capability = ImageCapability(generator=FallbackImageGenerator([backend]))
        for _ in range(20):
            await capability.generate("a fox")
        assert all(0 <= call["seed"] <= 9999 for call in backend.calls)

    @pytest.mark.asyncio
    async def test_all_backends_fail(self) -> None:
        capability = ImageCapability(
            generator=FallbackImageGenerator(
                [FakeImageBackend("a", error=ProviderError("a"))]
            ),
        )
        with pytest.raises(ImageGenerationError):
            await capability.generate("a fox")

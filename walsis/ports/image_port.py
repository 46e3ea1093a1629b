"""ImageGenerationPort - text-to-image interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class ImageGenerationPort(ABC):
    """Port: turn a subject description into a displayable image URL.

    The URL may be a remote http(s) URL or a ``data:`` URL with inline
    image bytes.
    """

    name: str = "image"

    @abstractmethod
    async def text_to_image(self, prompt: str, *, seed: int) -> str:
        """Return an image URL for ``prompt``.

        Raises:
            WalsisError: The backend could not produce an image.
        """

"""TranscriptPort - video captions and metadata lookup."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class VideoDetails:
    """Title, description and caption lines for one video."""

    video_id: str
    title: str = ""
    description: str = ""
    captions: list[str] = field(default_factory=list)


class TranscriptPort(ABC):
    """Port: fetch captions and metadata for a video id."""

    @abstractmethod
    async def fetch(self, video_id: str) -> VideoDetails:
        """Fetch details for ``video_id``.

        Raises:
            TranscriptUnavailableError: No captions could be retrieved.
        """

"""YouTube captions + metadata adapter for TranscriptPort.

Captions come from youtube-transcript-api (a blocking client, run in a
worker thread). Title and channel come from YouTube's public oEmbed
endpoint; a metadata failure is tolerated, a caption failure is not.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx
from youtube_transcript_api import YouTubeTranscriptApi

from walsis.ports.transcript_port import TranscriptPort, VideoDetails
from walsis.shared.errors import TranscriptUnavailableError
from walsis.tool.resilience.retry import RetryPolicy, retry_with_backoff

logger = logging.getLogger(__name__)

_OEMBED_URL = "https://www.youtube.com/oembed"
_WATCH_URL = "https://www.youtube.com/watch?v={video_id}"


class YouTubeTranscriptAdapter(TranscriptPort):
    def __init__(
        self,
        *,
        language: str = "en",
        transcript_api: Any | None = None,
        timeout_s: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._languages = [language] if language == "en" else [language, "en"]
        self._api = transcript_api or YouTubeTranscriptApi()
        self._timeout_s = timeout_s
        self._transport = transport

    async def fetch(self, video_id: str) -> VideoDetails:
        captions = await self._fetch_captions(video_id)
        metadata = await self._fetch_metadata(video_id)
        author = metadata.get("author_name", "")
        return VideoDetails(
            video_id=video_id,
            title=metadata.get("title", ""),
            description=f"Channel: {author}" if author else "",
            captions=captions,
        )

    async def _fetch_captions(self, video_id: str) -> list[str]:
        try:
            fetched = await asyncio.to_thread(
                self._api.fetch,
                video_id,
                languages=self._languages,
            )
        except Exception as exc:
            logger.warning("Caption fetch failed for video=%s: %s", video_id, exc)
            raise TranscriptUnavailableError(video_id) from exc

        lines = [_snippet_text(snippet).strip() for snippet in fetched]
        lines = [line for line in lines if line]
        if not lines:
            raise TranscriptUnavailableError(video_id, f"Video {video_id} has empty captions")
        return lines

    async def _fetch_metadata(self, video_id: str) -> dict[str, Any]:
        params = {"url": _WATCH_URL.format(video_id=video_id), "format": "json"}

        async def _get() -> httpx.Response:
            async with httpx.AsyncClient(
                timeout=self._timeout_s,
                transport=self._transport,
            ) as client:
                return await client.get(_OEMBED_URL, params=params)

        try:
            response = await retry_with_backoff(
                _get,
                operation=f"youtube oembed ({video_id})",
                policy=RetryPolicy(max_retries=1),
            )
            response.raise_for_status()
            data = response.json()
        except Exception:
            logger.warning("oEmbed metadata unavailable for video=%s", video_id, exc_info=True)
            return {}
        return data if isinstance(data, dict) else {}


def _snippet_text(snippet: Any) -> str:
    if isinstance(snippet, dict):
        return str(snippet.get("text", ""))
    return str(getattr(snippet, "text", ""))

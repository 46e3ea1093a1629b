"""VideoSummaryCapability - summarize a YouTube video from its captions.

Flow:
1. Find a YouTube URL in the prompt and extract its 11-character id
2. Fetch captions + metadata through TranscriptPort
3. Embed the details, truncated to a fixed budget, in a JSON-mode prompt
4. Text left over once the URL is removed is treated as the user's question

Lookup failures (no link, no transcript) are ordinary text results, and no
generation call is made for them.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from walsis.shared.errors import TranscriptUnavailableError
from walsis.shared.types import Action, TextResult, VideoSummaryResult
from walsis.skill.core.prompting import complete_single
from walsis.skill.core.protocol import CapabilityProtocol
from walsis.tool.llm.normalizer import extract_json

if TYPE_CHECKING:
    from collections.abc import Sequence

    from walsis.ports.llm_call_port import LLMCallPort
    from walsis.ports.transcript_port import TranscriptPort, VideoDetails
    from walsis.shared.types import ConversationTurn

logger = logging.getLogger(__name__)

INVALID_LINK_MESSAGE = "Invalid YouTube link."
TRANSCRIPT_FAILURE_MESSAGE = "Could not retrieve the video transcript."
MAX_DETAILS_CHARS = 12_000

_URL_RE = re.compile(
    r"(?:https?://)?(?:www\.|m\.|music\.)?(?:youtube\.com|youtube-nocookie\.com|youtu\.be)/\S+",
    re.IGNORECASE,
)
_ID_RE = re.compile(
    r"(?:youtu\.be/|v/|u/\w/|embed/|shorts/|live/|watch\?v=|&v=)([^#&?/\s]*)",
    re.IGNORECASE,
)
_VIDEO_ID_RE = re.compile(r"^[A-Za-z0-9_-]{11}$")

_SUMMARY_INSTRUCTION = """You summarize YouTube videos from their captions.

{details}

User request: "{request}"

Return ONLY a JSON object:
{{"summary": "<structured summary in Markdown: overview, key points, takeaways>",
  "questionAnswer": "<answer to the user's specific question, or null if they only asked for a summary>"}}"""


def find_video(prompt: str) -> tuple[str, str] | None:
    """Return (video_url, video_id) for the first YouTube link in ``prompt``."""
    for url_match in _URL_RE.finditer(prompt):
        url = url_match.group(0).rstrip(").,;!\"'")
        for id_match in _ID_RE.finditer(url):
            video_id = id_match.group(1)
            if _VIDEO_ID_RE.match(video_id):
                return url, video_id
    return None


def format_details(details: VideoDetails, *, budget: int = MAX_DETAILS_CHARS) -> str:
    """Render video details as markdown, cut to ``budget`` characters."""
    text = (
        "# Video Details\n"
        f"### Title\n{details.title or 'Unknown'}\n"
        f"### Description\n{details.description or 'None'}\n"
        f"### Subtitles\n{' '.join(details.captions)}"
    )
    return text[:budget]


class VideoSummaryCapability(CapabilityProtocol):
    def __init__(
        self,
        *,
        llm: LLMCallPort,
        transcripts: TranscriptPort,
        max_details_chars: int = MAX_DETAILS_CHARS,
    ) -> None:
        self._llm = llm
        self._transcripts = transcripts
        self._max_details_chars = max_details_chars

    @property
    def action(self) -> Action:
        return Action.VIDEO_SUMMARY

    def describe(self) -> str:
        return "Summarize a YouTube video and answer questions about it"

    async def generate(
        self,
        prompt: str,
        history: Sequence[ConversationTurn] = (),
    ) -> VideoSummaryResult | TextResult:
        found = find_video(prompt)
        if found is None:
            return TextResult(text=INVALID_LINK_MESSAGE)
        video_url, video_id = found

        try:
            details = await self._transcripts.fetch(video_id)
        except TranscriptUnavailableError:
            logger.info("No transcript for video=%s", video_id)
            return TextResult(text=TRANSCRIPT_FAILURE_MESSAGE)

        request = prompt.replace(video_url, " ").strip() or "Summarize this video."
        instruction = _SUMMARY_INSTRUCTION.format(
            details=format_details(details, budget=self._max_details_chars),
            request=request,
        )
        content = await complete_single(self._llm, instruction, structured_output=True)

        data = extract_json(content) or {}
        summary = data.get("summary")
        if not isinstance(summary, str) or not summary.strip():
            summary = content.strip()
        answer = data.get("questionAnswer")
        return VideoSummaryResult(
            summary=summary.strip(),
            video_url=video_url,
            answered_question=answer.strip() if isinstance(answer, str) and answer.strip() else None,
        )

"""Tests for YouTube video summaries."""

from __future__ import annotations

import json

import pytest

from tests.fakes import FakeLLM, FakeTranscripts, provider_down
from walsis.ports.transcript_port import VideoDetails
from walsis.shared.errors import ProviderError
from walsis.shared.types import TextResult, VideoSummaryResult
from walsis.skill.implementations.video_summary import (
    INVALID_LINK_MESSAGE,
    TRANSCRIPT_FAILURE_MESSAGE,
    VideoSummaryCapability,
    find_video,
    format_details,
)

_ID = "dQw4w9WgXcQ"


class TestFindVideo:
    @pytest.mark.parametrize(
        "url",
        [
            f"https://www.youtube.com/watch?v={_ID}",
            f"https://youtube.com/watch?feature=share&v={_ID}",
            f"https://youtu.be/{_ID}",
            f"https://youtu.be/{_ID}?t=42",
            f"https://www.youtube.com/embed/{_ID}",
            f"https://www.youtube.com/v/{_ID}",
            f"https://www.youtube.com/shorts/{_ID}",
            f"https://m.youtube.com/watch?v={_ID}&list=PL123",
            f"youtube.com/watch?v={_ID}",
            f"https://YOUTU.BE/{_ID}",
            f"Youtu.be/{_ID}",
            f"https://www.YouTube.com/Watch?V={_ID}",
        ],
    )
    def test_supported_forms(self, url: str) -> None:
        found = find_video(f"summarize {url} please")
        assert found is not None
        assert found[1] == _ID

    def test_url_returned_without_trailing_punctuation(self) -> None:
        found = find_video(f"what is (https://youtu.be/{_ID}).")
        assert found == (f"https://youtu.be/{_ID}", _ID)

    @pytest.mark.parametrize(
        "prompt",
        [
            "summarize this video",
            "https://vimeo.com/123456",
            "https://youtu.be/short",
            "https://www.youtube.com/channel/UC123",
        ],
    )
    def test_no_video(self, prompt: str) -> None:
        assert find_video(prompt) is None


class TestFormatDetails:
    def test_sections(self) -> None:
        text = format_details(
            VideoDetails(video_id=_ID, title="T", description="D", captions=["a", "b"])
        )
        assert text == "# Video Details\n### Title\nT\n### Description\nD\n### Subtitles\na b"

    def test_truncated_to_budget(self) -> None:
        details = VideoDetails(video_id=_ID, captions=["word"] * 10_000)
        assert len(format_details(details, budget=12_000)) == 12_000


class TestVideoSummaryCapability:
    @pytest.mark.asyncio
    async def test_invalid_link_no_calls(self) -> None:
        llm = FakeLLM("unused")
        transcripts = FakeTranscripts()
        capability = VideoSummaryCapability(llm=llm, transcripts=transcripts)

        result = await capability.generate("summarize https://example.com/video")

        assert result == TextResult(text=INVALID_LINK_MESSAGE)
        assert llm.call_count == 0
        assert transcripts.calls == []

    @pytest.mark.asyncio
    async def test_transcript_unavailable(self) -> None:
        llm = FakeLLM("unused")
        capability = VideoSummaryCapability(
            llm=llm, transcripts=FakeTranscripts(unavailable=True)
        )
        result = await capability.generate(f"https://youtu.be/{_ID}")

        assert result == TextResult(text=TRANSCRIPT_FAILURE_MESSAGE)
        assert llm.call_count == 0

    @pytest.mark.asyncio
    async def test_summary_with_question(self) -> None:
        llm = FakeLLM(
            json.dumps({"summary": "Plants make energy.", "questionAnswer": "Chlorophyll."})
        )
        transcripts = FakeTranscripts()
        capability = VideoSummaryCapability(llm=llm, transcripts=transcripts)
        url = f"https://www.youtube.com/watch?v={_ID}"

        result = await capability.generate(f"{url} what pigment absorbs light?")

        assert result == VideoSummaryResult(
            summary="Plants make energy.",
            video_url=url,
            answered_question="Chlorophyll.",
        )
        assert transcripts.calls == [_ID]
        prompt = llm.last_prompt()
        assert "Photosynthesis explained" in prompt
        assert "plants convert light into chemical energy" in prompt
        assert 'User request: "what pigment absorbs light?"' in prompt
        assert llm.calls[0]["structured_output"] is True

    @pytest.mark.asyncio
    async def test_bare_link_requests_summary(self) -> None:
        llm = FakeLLM(json.dumps({"summary": "S", "questionAnswer": None}))
        capability = VideoSummaryCapability(llm=llm, transcripts=FakeTranscripts())
        result = await capability.generate(f"https://youtu.be/{_ID}")

        assert isinstance(result, VideoSummaryResult)
        assert result.answered_question is None
        assert 'User request: "Summarize this video."' in llm.last_prompt()

    @pytest.mark.asyncio
    async def test_unparseable_output_used_as_summary(self) -> None:
        llm = FakeLLM("  The video explains photosynthesis.  ")
        capability = VideoSummaryCapability(llm=llm, transcripts=FakeTranscripts())
        result = await capability.generate(f"https://youtu.be/{_ID}")
        assert result.summary == "The video explains photosynthesis."

    @pytest.mark.asyncio
    async def test_details_budget(self) -> None:
        llm = FakeLLM(json.dumps({"summary": "S"}))
        details = VideoDetails(video_id=_ID, title="Long", captions=["x" * 50] * 1000)
        capability = VideoSummaryCapability(
            llm=llm, transcripts=FakeTranscripts(details), max_details_chars=500
        )
        await capability.generate(f"https://youtu.be/{_ID}")
        assert llm.last_prompt().count("x") < 600

    @pytest.mark.asyncio
    async def test_provider_failure_propagates(self) -> None:
        capability = VideoSummaryCapability(
            llm=FakeLLM(provider_down()), transcripts=FakeTranscripts()
        )
        with pytest.raises(ProviderError):
            await capability.generate(f"https://youtu.be/{_ID}")

"""Built-in capability catalog: one provider per Action."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from walsis.shared.types import Action
from walsis.skill.implementations.chat import ChatCapability
from walsis.skill.implementations.code import CodeCapability
from walsis.skill.implementations.image import ImageCapability
from walsis.skill.implementations.notes import NotesCapability
from walsis.skill.implementations.quiz import QuizCapability
from walsis.skill.implementations.video_summary import VideoSummaryCapability
from walsis.skill.implementations.web_search import WebSearchCapability

if TYPE_CHECKING:
    from walsis.ports.llm_call_port import LLMCallPort
    from walsis.ports.transcript_port import TranscriptPort
    from walsis.skill.core.protocol import CapabilityProtocol
    from walsis.tool.implementations.image_generate import FallbackImageGenerator

logger = logging.getLogger(__name__)


def build_capabilities(
    *,
    llm: LLMCallPort,
    image_generator: FallbackImageGenerator,
    transcripts: TranscriptPort,
) -> dict[Action, CapabilityProtocol]:
    """Instantiate every built-in capability, keyed by its action."""
    capabilities: list[CapabilityProtocol] = [
        QuizCapability(llm=llm),
        CodeCapability(llm=llm),
        NotesCapability(llm=llm),
        WebSearchCapability(llm=llm),
        ImageCapability(generator=image_generator),
        VideoSummaryCapability(llm=llm, transcripts=transcripts),
        ChatCapability(llm=llm),
    ]
    catalog = {capability.action: capability for capability in capabilities}
    for action, capability in catalog.items():
        logger.info("Capability %s: %s", action.value, capability.describe())
    return catalog

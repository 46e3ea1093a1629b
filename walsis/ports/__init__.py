"""Port interfaces - contracts for the external collaborators.

    LLMCallPort          - text generation (classification + capabilities)
    ImageGenerationPort  - text-to-image
    TranscriptPort       - video captions and metadata
"""

from walsis.ports.image_port import ImageGenerationPort
from walsis.ports.llm_call_port import ChatMessage, LLMCallPort
from walsis.ports.transcript_port import TranscriptPort, VideoDetails

__all__ = [
    "ChatMessage",
    "ImageGenerationPort",
    "LLMCallPort",
    "TranscriptPort",
    "VideoDetails",
]

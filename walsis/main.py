"""Application composition root.

- Reads Settings from the environment
- Builds the single LLM client, image backend chain and transcript adapter
- Wires classifier -> router -> engine and mounts the HTTP surface

Entry point: uvicorn walsis.main:app --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from walsis.brain.engine.assistant import AssistantEngine
from walsis.brain.intent.classifier import IntentClassifier
from walsis.brain.metrics.sli import RouterSLI
from walsis.brain.router.dispatch import DispatchRouter
from walsis.brain.sanitizer.history import HistorySanitizer
from walsis.gateway.api.assistant import create_assistant_router
from walsis.gateway.app import create_app
from walsis.shared.config import Settings
from walsis.skill.registry.catalog import build_capabilities
from walsis.tool.implementations.image_generate import (
    FallbackImageGenerator,
    HuggingFaceImageBackend,
    PollinationsImageBackend,
)
from walsis.tool.implementations.video_transcript import YouTubeTranscriptAdapter
from walsis.tool.llm.gateway_adapter import LiteLLMGatewayAdapter

if TYPE_CHECKING:
    from fastapi import FastAPI

    from walsis.ports.image_port import ImageGenerationPort
    from walsis.ports.llm_call_port import LLMCallPort
    from walsis.ports.transcript_port import TranscriptPort

logger = logging.getLogger(__name__)


def build_image_generator(settings: Settings) -> FallbackImageGenerator:
    """Hugging Face first when a token is configured, Pollinations always last."""
    backends: list[ImageGenerationPort] = []
    if settings.hf_token:
        backends.append(
            HuggingFaceImageBackend(token=settings.hf_token, model=settings.hf_image_model)
        )
    backends.append(PollinationsImageBackend())
    return FallbackImageGenerator(backends)


def build_engine(
    settings: Settings,
    *,
    llm: LLMCallPort,
    image_generator: FallbackImageGenerator,
    transcripts: TranscriptPort,
    sli: RouterSLI | None = None,
) -> AssistantEngine:
    """Wire the request pipeline from already-built collaborators."""
    router = DispatchRouter(
        capabilities=build_capabilities(
            llm=llm,
            image_generator=image_generator,
            transcripts=transcripts,
        ),
        sli=sli,
    )
    return AssistantEngine(
        classifier=IntentClassifier(llm=llm, sli=sli),
        router=router,
        classifier_history=HistorySanitizer(window=settings.classifier_history_window),
        chat_history=HistorySanitizer(window=settings.chat_history_window),
    )


def build_app(settings: Settings | None = None) -> FastAPI:
    """Build the application. All dependency wiring happens here."""
    settings = settings or Settings.from_env()

    llm = LiteLLMGatewayAdapter(
        default_model=settings.llm_model,
        timeout_s=settings.llm_timeout_s,
        api_key=settings.llm_api_key,
        base_url=settings.llm_base_url,
    )
    image_generator = build_image_generator(settings)
    transcripts = YouTubeTranscriptAdapter(language=settings.transcript_language)

    engine = build_engine(
        settings,
        llm=llm,
        image_generator=image_generator,
        transcripts=transcripts,
        sli=RouterSLI(),
    )

    application = create_app(cors_origins=settings.cors_origins)
    application.include_router(create_assistant_router(engine=engine))
    application.state.settings = settings
    application.state.engine = engine

    logger.info(
        "Walsis app assembled: model=%s image_backends=%s routes=%d",
        settings.llm_model,
        ",".join(image_generator.backend_names),
        len(application.routes),
    )
    return application


app = build_app()

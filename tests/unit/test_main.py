"""Tests for the composition root."""

from __future__ import annotations

from tests.fakes import FakeLLM, FakeTranscripts
from walsis.brain.engine.assistant import AssistantEngine
from walsis.main import app, build_engine, build_image_generator
from walsis.shared.config import Settings


class TestBuildImageGenerator:
    def test_pollinations_only_without_token(self) -> None:
        generator = build_image_generator(Settings.from_env({}))
        assert generator.backend_names == ["pollinations"]

    def test_huggingface_first_with_token(self) -> None:
        generator = build_image_generator(Settings.from_env({"HF_TOKEN": "hf_test"}))
        assert generator.backend_names == ["huggingface", "pollinations"]


class TestBuildEngine:
    def test_wires_engine(self) -> None:
        settings = Settings.from_env({})
        engine = build_engine(
            settings,
            llm=FakeLLM(),
            image_generator=build_image_generator(settings),
            transcripts=FakeTranscripts(),
        )
        assert isinstance(engine, AssistantEngine)


class TestModuleApp:
    def test_routes_mounted(self) -> None:
        paths = {route.path for route in app.routes}
        assert {"/api/v1/assistant", "/api/server", "/healthz", "/metrics"} <= paths

    def test_state(self) -> None:
        assert isinstance(app.state.settings, Settings)
        assert isinstance(app.state.engine, AssistantEngine)

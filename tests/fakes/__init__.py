"""Shared fake adapters for testing without unittest.mock."""

from tests.fakes.providers import (
    FakeImageBackend,
    FakeLLM,
    FakeTranscripts,
    RecordingCapability,
    provider_down,
)

__all__ = [
    "FakeImageBackend",
    "FakeLLM",
    "FakeTranscripts",
    "RecordingCapability",
    "provider_down",
]

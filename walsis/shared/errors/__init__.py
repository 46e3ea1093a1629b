"""Unified error hierarchy for the Walsis assistant.

All domain errors inherit from WalsisError. Adapters raise these types;
the dispatch router converts them into user-readable error results and the
gateway renders any that escape as {error, message} JSON.
"""

from __future__ import annotations


class WalsisError(Exception):
    """Base error for all Walsis exceptions."""

    def __init__(self, message: str, code: str = "WALSIS_ERROR") -> None:
        self.code = code
        super().__init__(message)


# -- Provider errors (raised by Port implementations) --


class ProviderError(WalsisError):
    """A generation provider call failed or returned an unusable response."""

    def __init__(self, provider: str, message: str = "") -> None:
        self.provider = provider
        super().__init__(
            message or f"Provider {provider} failed",
            code="PROVIDER_ERROR",
        )


class ProviderUnavailableError(WalsisError):
    """A provider is not configured or temporarily unreachable."""

    def __init__(self, provider: str, message: str = "") -> None:
        self.provider = provider
        super().__init__(
            message or f"Provider {provider} is unavailable",
            code="PROVIDER_UNAVAILABLE",
        )


class ImageGenerationError(WalsisError):
    """Every image backend in the fallback chain failed."""

    def __init__(self, attempted: list[str], message: str = "") -> None:
        self.attempted = attempted
        super().__init__(
            message or f"All image backends failed: {', '.join(attempted) or 'none configured'}",
            code="IMAGE_GENERATION_FAILED",
        )


class TranscriptUnavailableError(WalsisError):
    """Captions or metadata could not be retrieved for a video."""

    def __init__(self, video_id: str, message: str = "") -> None:
        self.video_id = video_id
        super().__init__(
            message or f"Transcript unavailable for video {video_id}",
            code="TRANSCRIPT_UNAVAILABLE",
        )


# -- Input errors --


class ValidationError(WalsisError):
    """Input or configuration validation failed."""

    def __init__(self, message: str, field: str = "") -> None:
        self.field = field
        super().__init__(message, code="VALIDATION")


__all__ = [
    "ImageGenerationError",
    "ProviderError",
    "ProviderUnavailableError",
    "TranscriptUnavailableError",
    "ValidationError",
    "WalsisError",
]

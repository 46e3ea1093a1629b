"""Runtime configuration read from environment variables.

The composition root calls Settings.from_env() once; everything downstream
receives plain values through constructors.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from walsis.shared.errors import ValidationError

DEFAULT_LLM_MODEL = "groq/llama-3.3-70b-versatile"
DEFAULT_HF_IMAGE_MODEL = "black-forest-labs/FLUX.1-dev"


def _int_env(env: Mapping[str, str], name: str, default: int, *, minimum: int = 0) -> int:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        msg = f"{name} must be an integer, got {raw!r}"
        raise ValidationError(msg, field=name) from None
    if value < minimum:
        msg = f"{name} must be >= {minimum}, got {value}"
        raise ValidationError(msg, field=name)
    return value


@dataclass(frozen=True)
class Settings:
    """Deployment settings."""

    llm_model: str = DEFAULT_LLM_MODEL
    llm_api_key: str | None = None
    llm_base_url: str | None = None
    llm_timeout_s: int = 30
    hf_token: str | None = None
    hf_image_model: str = DEFAULT_HF_IMAGE_MODEL
    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:3000"])
    classifier_history_window: int = 1
    chat_history_window: int = 6
    transcript_language: str = "en"

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> Settings:
        """Build settings from the process environment (or a supplied mapping)."""
        source = os.environ if env is None else env
        cors_raw = source.get("CORS_ORIGINS", "http://localhost:3000")
        return cls(
            llm_model=source.get("LLM_MODEL", "") or DEFAULT_LLM_MODEL,
            llm_api_key=source.get("LLM_API_KEY", "") or None,
            llm_base_url=source.get("LLM_BASE_URL", "") or None,
            llm_timeout_s=_int_env(source, "LLM_TIMEOUT_S", 30, minimum=1),
            hf_token=source.get("HF_TOKEN", "") or None,
            hf_image_model=source.get("HF_IMAGE_MODEL", "") or DEFAULT_HF_IMAGE_MODEL,
            cors_origins=[o.strip() for o in cors_raw.split(",") if o.strip()],
            classifier_history_window=_int_env(source, "CLASSIFIER_HISTORY_WINDOW", 1),
            chat_history_window=_int_env(source, "CHAT_HISTORY_WINDOW", 6),
            transcript_language=source.get("TRANSCRIPT_LANGUAGE", "") or "en",
        )

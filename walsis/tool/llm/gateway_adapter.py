"""LLMCallPort implementation via LiteLLM.

- One client per process, built by the composition root and injected
- Any LiteLLM-supported provider (Groq, OpenAI, Anthropic...) by model name
- JSON mode via response_format when structured output is requested
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

import litellm

from walsis.ports.llm_call_port import ChatMessage, LLMCallPort
from walsis.shared.config import DEFAULT_LLM_MODEL
from walsis.shared.errors import ProviderError

logger = logging.getLogger(__name__)

ACompletionFn = Callable[..., Awaitable[Any]]


class LiteLLMGatewayAdapter(LLMCallPort):
    """LiteLLM-backed implementation of LLMCallPort.

    ``acompletion_fn`` defaults to ``litellm.acompletion``; tests pass a
    fake with the same keyword signature.
    """

    def __init__(
        self,
        *,
        default_model: str = DEFAULT_LLM_MODEL,
        timeout_s: int = 30,
        max_retries: int = 2,
        api_key: str | None = None,
        base_url: str | None = None,
        acompletion_fn: ACompletionFn | None = None,
    ) -> None:
        self._default_model = default_model
        self._timeout_s = timeout_s
        self._max_retries = max_retries
        self._api_key = api_key
        self._base_url = base_url
        self._acompletion = acompletion_fn or litellm.acompletion

        litellm.drop_params = True

    @property
    def model(self) -> str:
        return self._default_model

    async def complete(
        self,
        messages: list[ChatMessage],
        *,
        structured_output: bool = False,
        temperature: float = 0.5,
    ) -> str:
        optional_params: dict[str, Any] = {}
        if self._api_key:
            optional_params["api_key"] = self._api_key
        if self._base_url:
            optional_params["api_base"] = self._base_url
        if structured_output:
            optional_params["response_format"] = {"type": "json_object"}

        try:
            response = await self._acompletion(
                model=self._default_model,
                messages=[m.to_dict() for m in messages],
                timeout=self._timeout_s,
                num_retries=self._max_retries,
                temperature=temperature,
                **optional_params,
            )
        except Exception as exc:
            logger.exception("LLM call failed for model=%s", self._default_model)
            raise ProviderError(self._default_model, f"LLM call failed: {exc}") from exc

        try:
            choice = response.choices[0]
        except (AttributeError, IndexError, TypeError) as exc:
            msg = "LLM response contained no choices"
            raise ProviderError(self._default_model, msg) from exc

        text = choice.message.content or ""
        logger.debug(
            "LLM completion model=%s structured=%s finish=%s chars=%d",
            getattr(response, "model", None) or self._default_model,
            structured_output,
            getattr(choice, "finish_reason", None) or "stop",
            len(text),
        )
        return text

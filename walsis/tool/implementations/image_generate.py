"""Text-to-image backends and the ordered fallback chain.

Backends:
- HuggingFaceImageBackend: hosted inference, returns a base64 data URL
- PollinationsImageBackend: deterministic URL construction, no network I/O

FallbackImageGenerator tries backends in list order and returns the first
success; when every backend fails it raises ImageGenerationError.
"""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote, urlencode

import httpx

from walsis.ports.image_port import ImageGenerationPort
from walsis.shared.errors import (
    ImageGenerationError,
    ProviderError,
    ProviderUnavailableError,
)
from walsis.tool.resilience.retry import RetryPolicy, retry_with_backoff

logger = logging.getLogger(__name__)

IMAGE_WIDTH = 1024
IMAGE_HEIGHT = 768

_HF_INFERENCE_BASE = "https://router.huggingface.co/hf-inference/models"
_POLLINATIONS_BASE = "https://image.pollinations.ai"


class HuggingFaceImageBackend(ImageGenerationPort):
    """Hugging Face text-to-image inference.

    Raw image bytes in the response are inlined as a data URL so the
    caller gets a displayable URL either way.
    """

    name = "huggingface"

    def __init__(
        self,
        *,
        token: str | None,
        model: str,
        base_url: str = _HF_INFERENCE_BASE,
        timeout_s: float = 60.0,
        retry_policy: RetryPolicy | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._token = token
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._timeout_s = timeout_s
        self._retry_policy = retry_policy or RetryPolicy(max_retries=1)
        self._transport = transport

    async def text_to_image(self, prompt: str, *, seed: int) -> str:
        if not self._token:
            raise ProviderUnavailableError(self.name, "HF_TOKEN is not configured")

        body: dict[str, Any] = {
            "inputs": prompt,
            "parameters": {"width": IMAGE_WIDTH, "height": IMAGE_HEIGHT, "seed": seed},
        }

        async def _post() -> httpx.Response:
            async with httpx.AsyncClient(
                timeout=self._timeout_s,
                transport=self._transport,
            ) as client:
                return await client.post(
                    f"{self._base_url}/{self._model}",
                    headers={
                        "Authorization": f"Bearer {self._token}",
                        "Accept": "image/png",
                    },
                    json=body,
                )

        response = await retry_with_backoff(
            _post,
            operation=f"{self.name} text-to-image ({self._model})",
            policy=self._retry_policy,
        )
        if response.status_code >= 400:
            msg = f"Hugging Face returned HTTP {response.status_code}"
            raise ProviderError(self.name, msg)

        content_type = response.headers.get("content-type", "").split(";")[0].strip()
        if not content_type.startswith("image/"):
            msg = f"Hugging Face returned non-image content ({content_type or 'unknown'})"
            raise ProviderError(self.name, msg)

        encoded = base64.b64encode(response.content).decode("ascii")
        logger.debug("Hugging Face image: %d bytes (%s)", len(response.content), content_type)
        return f"data:{content_type};base64,{encoded}"


class PollinationsImageBackend(ImageGenerationPort):
    """Deterministic image-service URL; the image renders when fetched."""

    name = "pollinations"

    def __init__(self, *, base_url: str = _POLLINATIONS_BASE, model: str | None = None) -> None:
        self._base_url = base_url.rstrip("/")
        self._model = model

    def build_url(self, prompt: str, *, seed: int) -> str:
        params: dict[str, Any] = {"seed": seed}
        if self._model:
            params["model"] = self._model
        params.update(width=IMAGE_WIDTH, height=IMAGE_HEIGHT, nologo="true")
        return f"{self._base_url}/prompt/{quote(prompt, safe='')}?{urlencode(params)}"

    async def text_to_image(self, prompt: str, *, seed: int) -> str:
        if not prompt.strip():
            raise ProviderError(self.name, "Image prompt is empty")
        return self.build_url(prompt.strip(), seed=seed)


@dataclass(frozen=True)
class GeneratedImage:
    url: str
    backend: str


class FallbackImageGenerator(ImageGenerationPort):
    """Ordered chain of image backends."""

    name = "fallback_chain"

    def __init__(self, backends: list[ImageGenerationPort]) -> None:
        self._backends = list(backends)

    @property
    def backend_names(self) -> list[str]:
        return [backend.name for backend in self._backends]

    async def generate(self, prompt: str, *, seed: int) -> GeneratedImage:
        attempted: list[str] = []
        for backend in self._backends:
            attempted.append(backend.name)
            try:
                url = await backend.text_to_image(prompt, seed=seed)
            except Exception as exc:
                logger.warning(
                    "Image backend %s failed (%s), trying next",
                    backend.name,
                    str(exc)[:200],
                )
                continue
            return GeneratedImage(url=url, backend=backend.name)

        raise ImageGenerationError(attempted)

    async def text_to_image(self, prompt: str, *, seed: int) -> str:
        return (await self.generate(prompt, seed=seed)).url

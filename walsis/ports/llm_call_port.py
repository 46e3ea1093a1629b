"""LLMCallPort - text generation interface.

One port serves both intent classification and every text capability.
Real implementation: LiteLLM gateway adapter. Tests inject fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ChatMessage:
    """A single role-tagged message sent to the provider."""

    role: str  # "system" | "user" | "assistant"
    content: str

    def to_dict(self) -> dict[str, Any]:
        return {"role": self.role, "content": self.content}


class LLMCallPort(ABC):
    """Port: text generation."""

    @abstractmethod
    async def complete(
        self,
        messages: list[ChatMessage],
        *,
        structured_output: bool = False,
        temperature: float = 0.5,
    ) -> str:
        """Generate a completion for an ordered message list.

        Args:
            messages: Conversation to complete, oldest first.
            structured_output: Ask the provider to emit one top-level JSON
                object as text.
            temperature: Sampling temperature.

        Returns:
            The generated text (may be empty).

        Raises:
            ProviderError: The provider rejected or failed the call.
        """

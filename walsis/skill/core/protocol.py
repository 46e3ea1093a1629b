"""CapabilityProtocol - unified contract for every capability provider.

A capability receives the prompt chosen by the dispatch router (refined
for most actions, original for chat) plus sanitized history, and returns
exactly one typed result. Capabilities may raise; the router owns failure
conversion.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from walsis.shared.types import Action, CapabilityResult, ConversationTurn


class CapabilityProtocol(ABC):
    """Base class for capability providers."""

    @property
    @abstractmethod
    def action(self) -> Action:
        """The action this capability serves."""

    @abstractmethod
    def describe(self) -> str:
        """Return a one-line description of the capability."""

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        history: Sequence[ConversationTurn] = (),
    ) -> CapabilityResult:
        """Produce the capability's result for ``prompt``.

        Raises:
            Exception: Provider failures propagate to the dispatch router.
        """

    @property
    def uses_history(self) -> bool:
        """Whether ``generate`` reads history. Override in subclass."""
        return False

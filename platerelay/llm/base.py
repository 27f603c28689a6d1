"""LLM provider abstraction."""

from __future__ import annotations

import abc
from dataclasses import dataclass, field


@dataclass
class LLMResponse:
    choices: list[str]
    model: str
    provider: str
    tokens_used: int = 0
    latency_ms: int = 0
    raw: dict | None = field(default=None, repr=False)

    @property
    def text(self) -> str:
        """Content of the final candidate; providers may return several."""
        return self.choices[-1] if self.choices else ""


class LLMProvider(abc.ABC):
    """Base class for language-model integrations."""

    @abc.abstractmethod
    async def complete(
        self,
        messages: list[dict],
        max_tokens: int = 1024,
        temperature: float = 0.0,
        json_mode: bool = False,
    ) -> LLMResponse:
        """Send a chat completion request with the messages exactly as given."""

    @abc.abstractmethod
    def name(self) -> str:
        """Provider identifier."""

    @abc.abstractmethod
    def is_available(self) -> bool:
        """True if credentials are configured."""

    async def close(self) -> None:
        """Release transport resources (optional override)."""

"""OCR / label-detection provider abstraction."""

from __future__ import annotations

import abc
from dataclasses import dataclass, field


@dataclass
class Label:
    description: str
    score: float = 0.0


@dataclass
class VisionResponse:
    """What the provider saw. ``text`` is None when no text was detected."""

    text: str | None
    labels: list[Label] = field(default_factory=list)
    provider: str = ""


class VisionProvider(abc.ABC):
    """Base class for OCR / label-detection integrations."""

    @abc.abstractmethod
    async def detect(self, image: bytes) -> VisionResponse:
        """Run text detection and label detection on one image in a single call."""

    @abc.abstractmethod
    def name(self) -> str:
        """Provider identifier."""

    async def close(self) -> None:
        """Release transport resources (optional override)."""

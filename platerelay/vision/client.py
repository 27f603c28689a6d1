"""AnnotationClient — one OCR + label pass over an uploaded image."""

from __future__ import annotations

import logging

from platerelay.errors import InputError, NoTextFoundError, RelayError, UpstreamError
from platerelay.models import AnnotationResult
from platerelay.vision.base import VisionProvider

logger = logging.getLogger(__name__)


class AnnotationClient:
    """Turns raw image bytes into OCR text and lower-cased labels.

    Raises:
        InputError: the image buffer is empty; the provider is not called.
        NoTextFoundError: the provider answered but detected no text.
        UpstreamError: the provider failed. Not retried here.
    """

    def __init__(self, provider: VisionProvider) -> None:
        self._provider = provider

    @property
    def provider(self) -> VisionProvider:
        return self._provider

    async def annotate(self, data: bytes) -> AnnotationResult:
        if not data:
            raise InputError("No image buffer provided")

        logger.info("Annotating image of size %d via %s", len(data), self._provider.name())
        try:
            response = await self._provider.detect(data)
        except RelayError:
            raise
        except Exception as e:
            raise UpstreamError(str(e) or type(e).__name__, provider=self._provider.name()) from e

        if not response.text:
            raise NoTextFoundError("No text found in image")

        labels = [label.description.lower() for label in response.labels]
        logger.debug("Annotation: %d chars of text, labels=%s", len(response.text), labels)
        return AnnotationResult(text=response.text, labels=labels)

    async def close(self) -> None:
        await self._provider.close()

"""Relay pipeline — annotate, validate, format, stopping at the first failure.

    ImageUpload
        │
        ▼
    [ANNOTATE]  ─── OCR text + labels (timeout → UpstreamError)
        │
        ▼
    [VALIDATE]  ─── label gate; reject before any language-model call
        │
        ▼
    [FORMAT]    ─── language model → FormattedRecord (timeout → UpstreamError)

Holds no per-request state; one Relay serves every concurrent request.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Iterable
from typing import TypeVar

from platerelay.errors import ContentRejected, RelayError, UpstreamError
from platerelay.formatter import StructuredFormatter
from platerelay.models import FormattedRecord, ImageUpload
from platerelay.types import Stage
from platerelay.validation import EQUIPMENT_EVIDENCE, is_valid_content
from platerelay.vision.client import AnnotationClient

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Relay:
    def __init__(
        self,
        annotator: AnnotationClient,
        formatter: StructuredFormatter,
        evidence_labels: Iterable[str] = EQUIPMENT_EVIDENCE,
        annotate_timeout: float | None = 10.0,
        format_timeout: float | None = 20.0,
    ) -> None:
        self.annotator = annotator
        self.formatter = formatter
        self.evidence_labels = frozenset(evidence_labels)
        self.annotate_timeout = annotate_timeout
        self.format_timeout = format_timeout

    async def process(self, upload: ImageUpload) -> FormattedRecord:
        """Run one upload through the pipeline.

        Raises a RelayError subclass on the first failing stage;
        ContentRejected when the labels carry no equipment evidence.
        """
        annotation = await self._run_stage(
            Stage.ANNOTATE, self.annotator.annotate(upload.data), self.annotate_timeout,
        )

        if not is_valid_content(annotation.labels, self.evidence_labels):
            logger.info(
                "Stage %s rejected %s: labels=%s",
                Stage.VALIDATE.value, upload.filename or "<upload>", annotation.labels,
            )
            raise ContentRejected("Invalid image content")

        return await self._run_stage(
            Stage.FORMAT, self.formatter.format(annotation.text), self.format_timeout,
        )

    async def _run_stage(self, stage: Stage, work: Awaitable[T], timeout: float | None) -> T:
        try:
            if timeout:
                return await asyncio.wait_for(work, timeout)
            return await work
        except asyncio.TimeoutError as e:
            logger.warning("Stage %s timed out after %gs", stage.value, timeout)
            raise UpstreamError(f"{stage.value} timed out after {timeout:g}s") from e
        except RelayError as e:
            logger.warning("Stage %s failed: %s: %s", stage.value, type(e).__name__, e)
            raise

    async def close(self) -> None:
        await self.annotator.close()
        await self.formatter.provider.close()

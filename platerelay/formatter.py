"""StructuredFormatter — OCR text to an equipment record via a language model."""

from __future__ import annotations

import logging

from platerelay.errors import InputError, RelayError, UpstreamError
from platerelay.llm.base import LLMProvider
from platerelay.llm.prompts import format_directive
from platerelay.models import FormattedRecord
from platerelay.records import Parsed, parse_record
from platerelay.types import RecordFormat

logger = logging.getLogger(__name__)


class StructuredFormatter:
    def __init__(
        self,
        provider: LLMProvider,
        record_format: RecordFormat = RecordFormat.JSON,
        max_tokens: int = 1024,
    ) -> None:
        self._provider = provider
        self._record_format = record_format
        self._max_tokens = max_tokens

    @property
    def provider(self) -> LLMProvider:
        return self._provider

    def build_messages(self, text: str) -> list[dict]:
        """Schema directive, then the OCR text unaltered; both as system messages."""
        return [
            {"role": "system", "content": format_directive(self._record_format)},
            {"role": "system", "content": text},
        ]

    async def format(self, text: str) -> FormattedRecord:
        """Make exactly one completion call and return the last candidate verbatim.

        The raw text is returned even when it does not match the record
        schema; ``FormattedRecord.record`` is only set when it does.
        """
        if not text:
            raise InputError("No text provided for formatting")

        try:
            response = await self._provider.complete(
                self.build_messages(text),
                max_tokens=self._max_tokens,
                json_mode=self._record_format == RecordFormat.JSON,
            )
        except RelayError:
            raise
        except Exception as e:
            raise UpstreamError(str(e) or type(e).__name__, provider=self._provider.name()) from e

        if not response.choices:
            raise UpstreamError("Language model returned no choices", provider=response.provider)

        raw = response.text
        logger.info(
            "Formatted %d chars of OCR text: provider=%s model=%s tokens=%d",
            len(text), response.provider, response.model, response.tokens_used,
        )

        result = parse_record(raw)
        if isinstance(result, Parsed):
            return FormattedRecord(raw=raw, record=result.record)
        logger.warning("Formatter output does not match the record schema: %s", result.reason)
        return FormattedRecord(raw=raw)

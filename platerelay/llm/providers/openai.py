"""OpenAI provider — chat completions, also used for OpenAI-compatible endpoints."""

from __future__ import annotations

import openai
from openai import AsyncOpenAI

from platerelay.errors import UpstreamError
from platerelay.llm.base import LLMProvider, LLMResponse


class OpenAIProvider(LLMProvider):
    def __init__(self, api_key: str, model: str = "gpt-4o-mini", base_url: str = "") -> None:
        self._api_key = api_key
        self._model = model
        self._base_url = base_url
        self._client: AsyncOpenAI | None = None

    def _get_client(self) -> AsyncOpenAI:
        if not self._client:
            self._client = AsyncOpenAI(
                api_key=self._api_key or None,
                base_url=self._base_url or None,
            )
        return self._client

    async def complete(
        self,
        messages: list[dict],
        max_tokens: int = 1024,
        temperature: float = 0.0,
        json_mode: bool = False,
    ) -> LLMResponse:
        kwargs: dict = {
            "model": self._model,
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            resp = await self._get_client().chat.completions.create(**kwargs)
        except openai.OpenAIError as e:
            raise UpstreamError(getattr(e, "message", "") or str(e), provider="openai") from e

        return LLMResponse(
            choices=[choice.message.content or "" for choice in resp.choices],
            model=resp.model or self._model,
            provider="openai",
            tokens_used=(resp.usage.total_tokens if resp.usage else 0),
            raw=resp.model_dump() if hasattr(resp, "model_dump") else None,
        )

    async def close(self) -> None:
        if self._client:
            await self._client.close()
            self._client = None

    def name(self) -> str:
        return "openai"

    def is_available(self) -> bool:
        return bool(self._api_key)

"""Chat-completion client used to synthesize build commands."""

from __future__ import annotations

import logging
from typing import Protocol

from openai import AsyncOpenAI, OpenAIError

from mc_builder.errors import UpstreamModelError

DEFAULT_MODEL = "gpt-3.5-turbo"


class ChatModel(Protocol):
    """Turns an ordered chat message list into the model's reply text."""

    async def complete(self, messages: list[dict[str, str]]) -> str:
        """Return the content of the first choice."""

    async def close(self) -> None:
        """Release any network resources held by the client."""


class OpenAIChatClient:
    """Thin wrapper over the OpenAI chat completions API.

    Works against any OpenAI-compatible server when ``base_url`` is set.
    Requests are never retried.
    """

    def __init__(
        self,
        api_key: str | None,
        *,
        model: str = DEFAULT_MODEL,
        base_url: str | None = None,
        timeout_seconds: float = 60.0,
        client: AsyncOpenAI | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.model = model
        self._client = client or AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
            max_retries=0,
        )
        self._logger = logger or logging.getLogger("mc_builder.llm_client")

    async def complete(self, messages: list[dict[str, str]]) -> str:
        try:
            response = await self._client.chat.completions.create(model=self.model, messages=messages)
        except OpenAIError as exc:
            self._logger.warning("model_request_failed", extra={"model": self.model, "error": str(exc)})
            raise UpstreamModelError(f"Chat completion failed: {type(exc).__name__}: {exc}") from exc

        if not response.choices:
            raise UpstreamModelError("Chat completion returned no choices")

        content = response.choices[0].message.content
        if not content:
            raise UpstreamModelError("Chat completion returned an empty message")

        self._logger.info("model_replied", extra={"model": self.model, "reply_chars": len(content)})
        return content

    async def close(self) -> None:
        await self._client.close()

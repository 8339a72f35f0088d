from __future__ import annotations

import asyncio
from types import SimpleNamespace

import pytest
from openai import OpenAIError

from mc_builder.errors import UpstreamModelError
from mc_builder.llm_client import OpenAIChatClient


class _FakeCompletions:
    def __init__(self, response=None, exc: Exception | None = None) -> None:
        self.response = response
        self.exc = exc
        self.kwargs: dict | None = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        if self.exc:
            raise self.exc
        return self.response


def _client(completions: _FakeCompletions) -> OpenAIChatClient:
    fake = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return OpenAIChatClient("sk-test", model="gpt-test", client=fake)


def _response(*contents: str | None):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content)) for content in contents]
    )


def test_complete_returns_first_choice_content() -> None:
    completions = _FakeCompletions(_response("```\n/say hi\n```\nGreets.", "ignored"))
    messages = [{"role": "user", "content": "hi"}]

    reply = asyncio.run(_client(completions).complete(messages))

    assert reply == "```\n/say hi\n```\nGreets."
    assert completions.kwargs == {"model": "gpt-test", "messages": messages}


def test_no_choices_is_upstream_error() -> None:
    with pytest.raises(UpstreamModelError, match="no choices"):
        asyncio.run(_client(_FakeCompletions(_response())).complete([]))


def test_empty_content_is_upstream_error() -> None:
    with pytest.raises(UpstreamModelError, match="empty"):
        asyncio.run(_client(_FakeCompletions(_response(None))).complete([]))


def test_transport_error_is_upstream_error() -> None:
    with pytest.raises(UpstreamModelError, match="OpenAIError"):
        asyncio.run(_client(_FakeCompletions(exc=OpenAIError("connection reset"))).complete([]))

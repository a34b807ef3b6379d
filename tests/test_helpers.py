"""Fakes shared by the test modules."""

from __future__ import annotations

import asyncio
from typing import AsyncIterator, Iterable, Optional, Sequence

from promptboost.ai.types import ChatMessage, ModelDescriptor, ModelEndpoint
from promptboost.settings import BoostSettings, InMemoryConfigSource
from promptboost.ui.chooser import ChoiceItem


class FakeProvider:
    """ChatProvider double that replays fixed fragments."""

    def __init__(
        self,
        fragments: Iterable[str] = (),
        *,
        vendor: str = "openai",
        submit_error: Optional[BaseException] = None,
        stream_error: Optional[BaseException] = None,
        fragment_delay: float = 0.0,
        models: Sequence[ModelDescriptor] = (),
    ) -> None:
        self.vendor = vendor
        self.fragments = list(fragments)
        self.submit_error = submit_error
        self.stream_error = stream_error
        self.fragment_delay = fragment_delay
        self.models = list(models)
        self.requests: list[tuple[list[ChatMessage], str, dict]] = []
        self.closed = False

    async def list_models(self) -> list[ModelDescriptor]:
        return list(self.models)

    async def open_stream(self, messages, model, **options) -> AsyncIterator[str]:
        self.requests.append((list(messages), model, dict(options)))
        if self.submit_error is not None:
            raise self.submit_error
        return self._iter()

    async def _iter(self) -> AsyncIterator[str]:
        try:
            for fragment in self.fragments:
                if self.fragment_delay:
                    await asyncio.sleep(self.fragment_delay)
                yield fragment
            if self.stream_error is not None:
                raise self.stream_error
        finally:
            self.closed = True


def make_endpoint(
    name: str = "GPT Test",
    provider: Optional[FakeProvider] = None,
    *,
    model_id: Optional[str] = None,
    family: str = "gpt-test",
) -> ModelEndpoint:
    provider = provider if provider is not None else FakeProvider()
    descriptor = ModelDescriptor(
        id=model_id or name.lower().replace(" ", "-"),
        name=name,
        family=family,
        vendor=provider.vendor,
    )
    return ModelEndpoint(descriptor, provider)


class FakeDiscovery:
    """ModelDiscovery double returning a fixed list or raising."""

    def __init__(self, endpoints: Sequence[ModelEndpoint] = (), error: Optional[Exception] = None):
        self.endpoints = list(endpoints)
        self.error = error
        self.calls: list[str] = []

    async def select_chat_models(self, vendor: str) -> list[ModelEndpoint]:
        self.calls.append(vendor)
        if self.error is not None:
            raise self.error
        return list(self.endpoints)


class FakeInteraction:
    """UserInteractionPort double recording everything shown to the user."""

    def __init__(self, choice: Optional[int] = None, confirm: bool = True) -> None:
        self.choice = choice
        self.confirm_answer = confirm
        self.choose_calls: list[list[ChoiceItem]] = []
        self.confirm_calls: list[tuple[str, str]] = []
        self.notices: list[str] = []
        self.warnings: list[str] = []
        self.errors: list[str] = []

    async def choose(self, items, *, title, placeholder) -> Optional[int]:
        self.choose_calls.append(list(items))
        return self.choice

    async def confirm(self, message: str, action: str) -> bool:
        self.confirm_calls.append((message, action))
        return self.confirm_answer

    async def notify(self, message: str) -> None:
        self.notices.append(message)

    async def warn(self, message: str) -> None:
        self.warnings.append(message)

    async def error(self, message: str) -> None:
        self.errors.append(message)


def make_settings(**values) -> BoostSettings:
    return BoostSettings(InMemoryConfigSource(values))

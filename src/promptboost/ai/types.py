"""Shared typed contracts for endpoints, messages and streamed responses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, AsyncIterator, Mapping, Optional, Protocol

if TYPE_CHECKING:
    from ..cancellation import CancellationToken


@dataclass(frozen=True, slots=True)
class ChatMessage:
    """One chat message sent to a model."""

    role: str
    content: str

    @classmethod
    def user(cls, content: str) -> ChatMessage:
        return cls(role="user", content=content)


@dataclass(frozen=True, slots=True)
class ModelDescriptor:
    """Model metadata as reported by a vendor's model listing."""

    id: str
    name: str
    family: str
    vendor: str


class ChatProvider(Protocol):
    """Structural interface every vendor client implements."""

    vendor: str

    async def list_models(self) -> list[ModelDescriptor]:
        """List the vendor's chat models."""

    async def open_stream(
        self,
        messages: list[ChatMessage],
        model: str,
        max_output_tokens: int | None = None,
    ) -> AsyncIterator[str]:
        """Submit one request; return its text fragments once accepted."""


class ChatResponse:
    """Streamed text of one accepted request."""

    def __init__(self, fragments: AsyncIterator[str]) -> None:
        self._fragments = fragments

    @property
    def text(self) -> AsyncIterator[str]:
        return self._fragments

    async def aclose(self) -> None:
        """Release the underlying stream (no-op when already drained)."""
        close = getattr(self._fragments, "aclose", None)
        if close is not None:
            await close()


@dataclass(frozen=True, slots=True)
class ModelEndpoint:
    """A selectable chat model bound to the client that serves it."""

    descriptor: ModelDescriptor
    provider: ChatProvider

    @property
    def id(self) -> str:
        return self.descriptor.id

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def family(self) -> str:
        return self.descriptor.family

    @property
    def vendor(self) -> str:
        return self.descriptor.vendor

    async def send_request(
        self,
        messages: list[ChatMessage],
        options: Optional[Mapping[str, Any]] = None,
        cancel: Optional[CancellationToken] = None,
    ) -> ChatResponse:
        """Submit ``messages`` and return the streamed response.

        Raises whatever the vendor client raises when the request is
        rejected; transport errors after acceptance surface while iterating
        :attr:`ChatResponse.text`.
        """
        if cancel is not None:
            cancel.raise_if_cancelled()
        fragments = await self.provider.open_stream(
            messages,
            self.id,
            **dict(options or {}),
        )
        return ChatResponse(fragments)

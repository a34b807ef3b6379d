"""Async user interaction adapters for command flows."""

from __future__ import annotations

import asyncio
import sys
from typing import Optional, Protocol, Sequence

from .chooser import ChoiceItem, prompt_choice, prompt_confirm


class UserInteractionPort(Protocol):
    """Minimal async interaction contract used by the registry and commands."""

    async def choose(
        self,
        items: Sequence[ChoiceItem],
        *,
        title: str,
        placeholder: str,
    ) -> Optional[int]:
        """Let the user pick one item; None when dismissed."""

    async def confirm(self, message: str, action: str) -> bool:
        """Ask the user to confirm ``action``."""

    async def notify(self, message: str) -> None:
        """Display one-way informational output."""

    async def warn(self, message: str) -> None:
        """Display a warning."""

    async def error(self, message: str) -> None:
        """Display an error."""


class ThreadedConsoleInteraction:
    """Console adapter that runs blocking prompts in worker threads.

    Messages go to stderr so stdout stays clean for boosted text.
    """

    async def choose(
        self,
        items: Sequence[ChoiceItem],
        *,
        title: str,
        placeholder: str,
    ) -> Optional[int]:
        return await asyncio.to_thread(prompt_choice, items, title, placeholder)

    async def confirm(self, message: str, action: str) -> bool:
        return await asyncio.to_thread(prompt_confirm, message, action)

    async def notify(self, message: str) -> None:
        print(message, file=sys.stderr)

    async def warn(self, message: str) -> None:
        print(f"Warning: {message}", file=sys.stderr)

    async def error(self, message: str) -> None:
        print(f"Error: {message}", file=sys.stderr)

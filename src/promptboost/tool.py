"""Programmatic boost tool for agents and scripts."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional

from .boost import boost_prompt
from .cancellation import CancellationToken
from .errors import PromptBoostError
from .registry import ModelRegistry
from .settings import BoostSettings
from .ui.interaction import UserInteractionPort

TOOL_NAME = "boostPrompt"
INVOCATION_MESSAGE = "Boosting your prompt..."
NO_MODEL_MESSAGE = "No model selected, boost cancelled."


class BoostPromptTool:
    """Boosts ``{"promptText": ...}`` and answers ``{"text": ...}``.

    Failures still answer with the original prompt text; only a missing
    model yields no answer at all.
    """

    name = TOOL_NAME

    def __init__(
        self,
        registry: ModelRegistry,
        settings: BoostSettings,
        storage_dir: str | Path,
        interaction: UserInteractionPort,
    ) -> None:
        self.registry = registry
        self.settings = settings
        self.storage_dir = storage_dir
        self.interaction = interaction

    def prepare_invocation(self, params: Optional[Mapping[str, Any]] = None) -> dict[str, str]:
        return {"invocationMessage": INVOCATION_MESSAGE}

    async def invoke(
        self,
        params: Mapping[str, Any],
        cancel: Optional[CancellationToken] = None,
    ) -> Optional[dict[str, str]]:
        prompt_text = params.get("promptText")
        if not isinstance(prompt_text, str):
            raise PromptBoostError("Tool input must contain a string 'promptText'")

        endpoint = await self.registry.resolve_preferred_or_prompt()
        if endpoint is None:
            await self.interaction.warn(NO_MODEL_MESSAGE)
            return None

        result = await boost_prompt(
            prompt_text,
            endpoint,
            self.storage_dir,
            cancel=cancel,
            max_response_chars=self.settings.max_response_chars(),
            timeout_sec=self.settings.response_timeout(),
        )
        return {"text": result.text}

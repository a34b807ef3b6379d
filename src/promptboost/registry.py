"""Model registry: discovered endpoints, lookup and interactive selection."""

from __future__ import annotations

import logging
from typing import Optional

from .ai.catalog import vendor_label
from .ai.runtime import ModelDiscovery
from .ai.types import ModelEndpoint
from .constants import AUTO_MODEL_ID
from .logging import http_error_fields, log_event, sanitize_error_message
from .preferences import PreferenceStore
from .ui.chooser import ChoiceItem
from .ui.interaction import UserInteractionPort

NO_MODELS_MESSAGE = (
    "No language models available. Check the configured vendor and its API key."
)
SELECT_MODEL_ACTION = "Select Model"


class ModelRegistry:
    """Owns the cached endpoint list for one vendor.

    The cache starts empty; :meth:`discover` fills it and a failed discovery
    keeps whatever was cached before.
    """

    def __init__(
        self,
        discovery: ModelDiscovery,
        preferences: PreferenceStore,
        interaction: UserInteractionPort,
        vendor: str,
    ) -> None:
        self.discovery = discovery
        self.preferences = preferences
        self.interaction = interaction
        self.vendor = vendor
        self._endpoints: list[ModelEndpoint] = []

    async def discover(self) -> None:
        """Query the vendor and replace the cache. Never raises."""
        try:
            found = await self.discovery.select_chat_models(self.vendor)
        except Exception as e:
            log_event(
                "model_discovery_error",
                level=logging.ERROR,
                vendor=self.vendor,
                error_type=type(e).__name__,
                error=sanitize_error_message(str(e)),
                **http_error_fields(e),
            )
            return

        endpoints = [endpoint for endpoint in found if endpoint.id != AUTO_MODEL_ID]
        if not endpoints:
            log_event(
                "model_discovery",
                level=logging.WARNING,
                vendor=self.vendor,
                model_count=0,
                message="No available models found",
            )
            return

        self._endpoints = endpoints
        log_event(
            "model_discovery",
            level=logging.INFO,
            vendor=self.vendor,
            model_count=len(endpoints),
            models=[endpoint.name for endpoint in endpoints],
            excluded=len(found) - len(endpoints),
        )

    async def refresh(self) -> None:
        await self.discover()

    def list_cached(self) -> list[ModelEndpoint]:
        return list(self._endpoints)

    def find_by_name(self, name: str) -> Optional[ModelEndpoint]:
        for endpoint in self._endpoints:
            if endpoint.name == name:
                return endpoint
        return None

    async def select_model(self) -> Optional[ModelEndpoint]:
        """Show the chooser and persist the pick as the preferred model."""
        if not self._endpoints:
            await self.interaction.error(NO_MODELS_MESSAGE)
            return None

        items = [
            ChoiceItem(
                label=endpoint.name,
                description=endpoint.family or vendor_label(endpoint.vendor),
            )
            for endpoint in self._endpoints
        ]
        index = await self.interaction.choose(
            items,
            title="Select a Language Model",
            placeholder="Choose a model to boost your prompt",
        )

        if index is None:
            log_event(
                "model_selection",
                level=logging.INFO,
                source="chooser",
                result="cancelled",
                message="Model selection cancelled",
            )
            return None

        selected = self._endpoints[index]
        await self.interaction.notify(f"Selected: {selected.name}")
        self.preferences.set(selected.name)
        log_event(
            "model_selection",
            level=logging.INFO,
            source="chooser",
            model=selected.name,
            result="selected",
        )
        return selected

    async def resolve_preferred_or_prompt(self) -> Optional[ModelEndpoint]:
        """Resolve the endpoint for a boost.

        Order: preferred model if cached, else (after confirmation when a
        stale preference exists) the interactive chooser.
        """
        if not self._endpoints:
            await self.interaction.error(NO_MODELS_MESSAGE)
            log_event(
                "model_selection",
                level=logging.WARNING,
                source="registry",
                result="no_models",
            )
            return None

        preferred_name = self.preferences.get()
        if preferred_name:
            preferred = self.find_by_name(preferred_name)
            if preferred is not None:
                log_event(
                    "model_selection",
                    level=logging.INFO,
                    source="preference",
                    model=preferred.name,
                    result="selected",
                )
                return preferred

            confirmed = await self.interaction.confirm(
                f'Preferred model "{preferred_name}" not found. Select new?',
                SELECT_MODEL_ACTION,
            )
            if not confirmed:
                log_event(
                    "model_selection",
                    level=logging.INFO,
                    source="preference",
                    preferred_model=preferred_name,
                    result="declined",
                )
                return None

        return await self.select_model()

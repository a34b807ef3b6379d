"""Provider construction and model discovery for the configured vendor."""

from __future__ import annotations

import logging
from typing import Protocol

from ..errors import ApiKeyError, UnsupportedVendorError
from ..keys.loader import default_key_config, load_api_key, validate_api_key
from ..logging import log_event
from ..settings import BoostSettings
from .catalog import (
    OPENAI_COMPATIBLE_BASE_URLS,
    get_all_vendors,
    is_supported_vendor,
    resolve_vendor,
)
from .claude_provider import ClaudeProvider
from .gemini_provider import GeminiProvider
from .openai_provider import OpenAIProvider
from .types import ChatProvider, ModelEndpoint


class ModelDiscovery(Protocol):
    """Source of selectable chat endpoints for one vendor."""

    async def select_chat_models(self, vendor: str) -> list[ModelEndpoint]:
        """Return every chat endpoint the vendor exposes."""


def create_provider(vendor: str, api_key: str, timeout: int | float) -> ChatProvider:
    """Build the client for ``vendor``."""
    if vendor in OPENAI_COMPATIBLE_BASE_URLS:
        return OpenAIProvider(
            api_key,
            timeout=timeout,
            vendor=vendor,
            base_url=OPENAI_COMPATIBLE_BASE_URLS[vendor],
        )
    if vendor == "claude":
        return ClaudeProvider(api_key, timeout=timeout)
    if vendor == "gemini":
        return GeminiProvider(api_key, timeout=timeout)
    raise UnsupportedVendorError(
        f"Unsupported vendor: {vendor} (supported: {', '.join(get_all_vendors())})"
    )


class ProviderDiscovery:
    """Discovers endpoints by asking the vendor API which models it serves.

    Clients are created lazily and cached per vendor for the life of the
    process.
    """

    def __init__(self, settings: BoostSettings) -> None:
        self.settings = settings
        self._providers: dict[str, ChatProvider] = {}

    def get_provider(self, vendor: str) -> ChatProvider:
        vendor = resolve_vendor(vendor)
        cached = self._providers.get(vendor)
        if cached is not None:
            return cached
        if not is_supported_vendor(vendor):
            raise UnsupportedVendorError(
                f"Unsupported vendor: {vendor} (supported: {', '.join(get_all_vendors())})"
            )

        key_config = self.settings.api_key_config(vendor) or default_key_config(vendor)
        if key_config is None:
            raise ApiKeyError(f"No API key configured for {vendor}")

        api_key = load_api_key(vendor, key_config)
        if not validate_api_key(api_key, vendor):
            log_event(
                "provider_log",
                level=logging.ERROR,
                provider=vendor,
                message=f"Invalid API key for {vendor}",
            )
            raise ApiKeyError(f"Invalid API key for {vendor}")

        provider = create_provider(vendor, api_key, self.settings.http_timeout())
        self._providers[vendor] = provider
        return provider

    async def select_chat_models(self, vendor: str) -> list[ModelEndpoint]:
        provider = self.get_provider(vendor)
        descriptors = await provider.list_models()
        return [ModelEndpoint(descriptor, provider) for descriptor in descriptors]


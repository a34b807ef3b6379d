"""Vendor registry and model-listing filters."""

from __future__ import annotations

from typing import Optional


# Vendor short codes accepted on the command line and in settings
VENDOR_SHORTCUTS = {
    "gpt": "openai",
    "cla": "claude",
    "anthropic": "claude",
    "gem": "gemini",
    "google": "gemini",
    "xai": "grok",
    "deep": "deepseek",
    "mist": "mistral",
}

# Display labels used when a model listing carries no family/owner
VENDOR_LABELS = {
    "openai": "OpenAI",
    "claude": "Anthropic Claude",
    "gemini": "Google Gemini",
    "grok": "xAI Grok",
    "deepseek": "DeepSeek",
    "mistral": "Mistral",
}

# Vendors served through the OpenAI-compatible client, with their API roots.
# Official documentation:
# - xAI: https://docs.x.ai/docs/api-reference
# - DeepSeek: https://api-docs.deepseek.com/
# - Mistral: https://docs.mistral.ai/api/
OPENAI_COMPATIBLE_BASE_URLS: dict[str, Optional[str]] = {
    "openai": None,
    "grok": "https://api.x.ai/v1",
    "deepseek": "https://api.deepseek.com",
    "mistral": "https://api.mistral.ai/v1",
}

# Model-id fragments that mark non-chat models in vendor listings
NON_CHAT_MODEL_MARKERS = (
    "embed",
    "tts",
    "whisper",
    "transcribe",
    "dall-e",
    "image",
    "moderation",
    "realtime",
    "audio",
    "davinci",
    "babbage",
    "imagen",
    "veo",
    "aqa",
    "ocr",
)

# Claude requires an explicit output cap
CLAUDE_DEFAULT_MAX_OUTPUT_TOKENS = 8192


def resolve_vendor(value: str) -> str:
    """Normalize a vendor name or shortcut to its registry key."""
    key = value.strip().lower()
    return VENDOR_SHORTCUTS.get(key, key)


def get_all_vendors() -> list[str]:
    """Get list of all supported vendors."""
    return list(VENDOR_LABELS.keys())


def is_supported_vendor(vendor: str) -> bool:
    return vendor in VENDOR_LABELS


def vendor_label(vendor: str) -> str:
    return VENDOR_LABELS.get(vendor, vendor)


def is_chat_model(model_id: str) -> bool:
    """Return True unless the id names an embedding, audio, image or similar model."""
    lowered = model_id.lower()
    return not any(marker in lowered for marker in NON_CHAT_MODEL_MARKERS)


def claude_family(model_id: str) -> str:
    """Derive the Claude tier (``opus``, ``sonnet``, ``haiku``) from a model id."""
    for tier in ("opus", "sonnet", "haiku"):
        if tier in model_id:
            return tier
    return "claude"

"""Unified API key loading interface for promptboost."""

from typing import Optional, Required, TypedDict, cast

from ..errors import ApiKeyError


class KeyConfig(TypedDict, total=False):
    """Typed configuration for API key loading.

    Discriminated by ``type`` field. Additional fields depend on the type:
      env                      → key
      keyring / keychain       → service, account
      json                     → path, key
      direct                   → value (testing only)
    """

    type: Required[str]
    key: str
    value: str
    service: str
    account: str
    path: str


# Conventional environment variables per vendor
DEFAULT_KEY_ENV_VARS = {
    "openai": "OPENAI_API_KEY",
    "claude": "ANTHROPIC_API_KEY",
    "gemini": "GEMINI_API_KEY",
    "grok": "XAI_API_KEY",
    "deepseek": "DEEPSEEK_API_KEY",
    "mistral": "MISTRAL_API_KEY",
}


def default_key_config(vendor: str) -> Optional[KeyConfig]:
    """Key config used when settings have no ``apiKeys`` entry for ``vendor``."""
    env_var = DEFAULT_KEY_ENV_VARS.get(vendor)
    if env_var is None:
        return None
    return {"type": "env", "key": env_var}


def load_api_key(vendor: str, config: KeyConfig) -> str:
    """Load API key based on configuration.

    Args:
        vendor: Vendor name (openai, claude, etc.)
        config: Key configuration from settings

    Returns:
        API key string

    Raises:
        ApiKeyError: If key cannot be loaded

    Example configs:
        {"type": "env", "key": "OPENAI_API_KEY"}
        {"type": "keyring", "service": "promptboost", "account": "claude"}
        {"type": "json", "path": "~/.secrets/keys.json", "key": "gemini"}
        {"type": "direct", "value": "sk-..."} (testing only)
    """
    key_type = config.get("type")

    try:
        if key_type == "direct":
            return cast(str, config["value"])

        elif key_type == "env":
            from .backends import load_from_env

            return load_from_env(cast(str, config["key"]))

        elif key_type in ("keyring", "keychain", "credential"):
            from .backends import load_from_keyring

            return load_from_keyring(
                cast(str, config["service"]),
                cast(str, config["account"]),
            )

        elif key_type == "json":
            from .backends import load_from_json

            return load_from_json(cast(str, config["path"]), cast(str, config["key"]))

    except KeyError as e:
        raise ApiKeyError(
            f"API key config for '{vendor}' is missing field {e} (type '{key_type}')"
        )

    raise ApiKeyError(f"Unknown key type '{key_type}' for vendor '{vendor}'")


def validate_api_key(key: str, vendor: str) -> bool:
    """Basic validation of API key.

    Note: This is basic validation (non-empty, reasonable length).
    Actual validation happens when making API calls.
    """
    if not key or not key.strip():
        return False

    # Most API keys are at least 20 characters
    if len(key.strip()) < 20:
        return False

    return True

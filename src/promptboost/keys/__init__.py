"""API key loading for vendor clients."""

from .loader import KeyConfig, default_key_config, load_api_key, validate_api_key

__all__ = ["KeyConfig", "default_key_config", "load_api_key", "validate_api_key"]

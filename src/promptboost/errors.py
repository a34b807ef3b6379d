"""Typed exceptions for promptboost."""


class PromptBoostError(Exception):
    """Base exception for promptboost failures."""


class ConfigError(PromptBoostError):
    """Raised when the settings file cannot be read or holds invalid values."""


class ApiKeyError(PromptBoostError):
    """Raised when a vendor API key cannot be loaded."""


class UnsupportedVendorError(PromptBoostError):
    """Raised for a vendor name promptboost has no provider for."""


class DocumentError(PromptBoostError):
    """Raised when the text to boost cannot be read from or written to a file."""

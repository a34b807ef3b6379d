"""Credential backend loaders for environment, JSON, and system credential store."""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Any

import keyring

from ..errors import ApiKeyError
from ..path_utils import map_path


def _credential_store_name() -> str:
    """Return a human-readable name for the platform's credential store."""
    if sys.platform == "darwin":
        return "macOS Keychain"
    elif sys.platform == "win32":
        return "Windows Credential Manager"
    else:
        return "system credential store"


def load_from_env(var_name: str) -> str:
    """Load API key from environment variable."""
    value = os.environ.get(var_name)

    if not value:
        raise ApiKeyError(
            f"Environment variable '{var_name}' not set.\n"
            f"Set it with:\n"
            f"  Unix/macOS:  export {var_name}=your-api-key\n"
            f"  Windows CMD: set {var_name}=your-api-key\n"
            f"  PowerShell:  $env:{var_name} = 'your-api-key'"
        )

    return value.strip()


def load_from_json(file_path: str, key_name: str) -> str:
    """Load API key from JSON file, supporting dotted key paths."""
    path = Path(map_path(file_path))

    if not path.exists():
        raise ApiKeyError(f"API key file not found: {file_path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ApiKeyError(f"Invalid JSON in {file_path}: {e}")

    value: Any = data
    for part in key_name.split("."):
        if isinstance(value, dict) and part in value:
            value = value[part]
        else:
            raise ApiKeyError(f"Key '{key_name}' not found in {file_path}")

    if not isinstance(value, str):
        raise ApiKeyError(f"Key '{key_name}' in {file_path} is not a string")

    return value.strip()


def load_from_keyring(service: str, account: str) -> str:
    """Load API key from the system credential store via keyring."""
    store_name = _credential_store_name()
    try:
        key = keyring.get_password(service, account)
    except Exception as e:
        raise ApiKeyError(
            f"Failed to access {store_name}: {e}\n"
            f"Service: {service}, Account: {account}"
        )

    if not isinstance(key, str) or not key:
        raise ApiKeyError(
            f"API key not found in {store_name}.\n"
            f"Service: {service}, Account: {account}"
        )

    return key

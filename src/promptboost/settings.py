"""Settings access for promptboost.

All keys live in a single ``boostPrompt`` section of a JSON settings file.
Callers go through :class:`BoostSettings` so tests can substitute an
in-memory source for the file.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Mapping, Optional, Protocol

from .constants import (
    CONFIG_SECTION,
    DEFAULT_FILE_PATTERNS,
    DEFAULT_LOGS_DIR,
    DEFAULT_MAX_RESPONSE_CHARS,
    DEFAULT_RESPONSE_TIMEOUT_SEC,
    DEFAULT_VENDOR,
)
from .errors import ConfigError
from .keys.loader import KeyConfig
from .timeouts import DEFAULT_HTTP_TIMEOUT_SEC, normalize_timeout


class ConfigSource(Protocol):
    """Key/value access to the ``boostPrompt`` settings section."""

    @property
    def location(self) -> Optional[str]:
        """Where the values are persisted, for logs (``None`` if in memory)."""

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under ``key`` or ``default``."""

    def update(self, key: str, value: Any) -> None:
        """Persist ``value`` under ``key``."""


def _atomic_write_json(path: Path, payload: Any) -> None:
    """Write JSON via a temp file and atomically replace the destination."""
    path.parent.mkdir(parents=True, exist_ok=True)

    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as temp_file:
            json.dump(payload, temp_file, indent=2, ensure_ascii=False)
            temp_file.write("\n")
            temp_file.flush()
            os.fsync(temp_file.fileno())
            temp_path = Path(temp_file.name)

        os.replace(temp_path, path)
    except Exception:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)
        raise


class JsonFileConfigSource:
    """Settings file backed source, re-read on every access.

    A missing file reads as empty; the first write creates it.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    @property
    def location(self) -> Optional[str]:
        return str(self.path)

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in settings file {self.path}: {e}")
        except OSError as e:
            raise ConfigError(f"Cannot read settings file {self.path}: {e}")

        if not isinstance(data, dict):
            raise ConfigError(f"Settings file must contain a JSON object: {self.path}")
        return data

    def _section(self, data: Mapping[str, Any]) -> dict[str, Any]:
        section = data.get(CONFIG_SECTION, {})
        if not isinstance(section, dict):
            raise ConfigError(f"'{CONFIG_SECTION}' must be an object in {self.path}")
        return section

    def get(self, key: str, default: Any = None) -> Any:
        return self._section(self._load()).get(key, default)

    def update(self, key: str, value: Any) -> None:
        data = self._load()
        section = dict(self._section(data))
        section[key] = value
        data[CONFIG_SECTION] = section
        try:
            _atomic_write_json(self.path, data)
        except OSError as e:
            raise ConfigError(f"Cannot write settings file {self.path}: {e}")


class InMemoryConfigSource:
    """Dictionary backed source for tests and one-off runs."""

    def __init__(self, values: Optional[Mapping[str, Any]] = None) -> None:
        self.values: dict[str, Any] = dict(values or {})

    @property
    def location(self) -> Optional[str]:
        return None

    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)

    def update(self, key: str, value: Any) -> None:
        self.values[key] = value


class BoostSettings:
    """Typed accessors over a :class:`ConfigSource`."""

    def __init__(self, source: ConfigSource) -> None:
        self.source = source

    @property
    def location(self) -> Optional[str]:
        return self.source.location

    def file_patterns(self) -> list[str]:
        """Glob patterns gating the boost command.

        ``null`` or an unusable value reads as an empty list, which enables
        every file.
        """
        raw = self.source.get("filePatterns", list(DEFAULT_FILE_PATTERNS))
        if isinstance(raw, str):
            return [raw]
        if isinstance(raw, list):
            return [str(pattern) for pattern in raw if pattern is not None]
        return []

    def preferred_model(self) -> str:
        raw = self.source.get("preferredModel", "")
        return raw if isinstance(raw, str) else ""

    def set_preferred_model(self, name: str) -> None:
        self.source.update("preferredModel", name)

    def vendor(self) -> str:
        raw = self.source.get("vendor", DEFAULT_VENDOR)
        if not isinstance(raw, str) or not raw.strip():
            return DEFAULT_VENDOR
        return raw.strip().lower()

    def api_key_config(self, vendor: str) -> Optional[KeyConfig]:
        """Return the configured key source for ``vendor``, if any."""
        api_keys = self.source.get("apiKeys", {})
        if not isinstance(api_keys, dict):
            raise ConfigError("'apiKeys' must be an object")
        config = api_keys.get(vendor)
        if config is None:
            return None
        if not isinstance(config, dict) or "type" not in config:
            raise ConfigError(f"API key config for '{vendor}' must be an object with a 'type'")
        return KeyConfig(**config)  # type: ignore[typeddict-item]

    def http_timeout(self) -> int | float:
        return normalize_timeout(
            self.source.get("timeout", DEFAULT_HTTP_TIMEOUT_SEC),
            DEFAULT_HTTP_TIMEOUT_SEC,
        )

    def response_timeout(self) -> int | float:
        return normalize_timeout(
            self.source.get("responseTimeout", DEFAULT_RESPONSE_TIMEOUT_SEC),
            DEFAULT_RESPONSE_TIMEOUT_SEC,
        )

    def max_response_chars(self) -> int:
        raw = self.source.get("maxResponseChars", DEFAULT_MAX_RESPONSE_CHARS)
        if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
            return DEFAULT_MAX_RESPONSE_CHARS
        return raw

    def logs_dir(self) -> str:
        raw = self.source.get("logsDir", DEFAULT_LOGS_DIR)
        return raw if isinstance(raw, str) and raw.strip() else DEFAULT_LOGS_DIR

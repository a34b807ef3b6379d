"""Plaintext rendering of run-log events."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from ..time_utils import utc_now_iso
from .schema import DEFAULT_EVENT_KEY_ORDER, EVENT_KEY_ORDER

_HTTPX_REQUEST_FORMAT = 'HTTP Request: %s %s "%s %d %s"'


def _parse_event(message: str) -> Optional[dict[str, Any]]:
    if not (message.startswith("{") and message.endswith("}")):
        return None
    try:
        parsed = json.loads(message)
    except ValueError:
        return None
    return parsed if isinstance(parsed, dict) else None


def _parse_httpx_request(record: logging.LogRecord) -> Optional[dict[str, Any]]:
    """Decode httpx's per-request INFO line into ``httpx_request`` fields."""
    if record.name != "httpx" or str(record.msg) != _HTTPX_REQUEST_FORMAT:
        return None
    if not isinstance(record.args, tuple) or len(record.args) != 5:
        return None
    method, url, version, status, reason = record.args
    return {
        "event": "httpx_request",
        "http_method": str(method),
        "http_url": str(url),
        "http_version": str(version),
        "http_status": status if isinstance(status, int) else str(status),
        "http_reason": str(reason),
    }


class StructuredTextFormatter(logging.Formatter):
    """Render each record as an ``=== event ===`` block of ``key: value`` lines.

    Keys follow the event's entry in ``EVENT_KEY_ORDER``; keys the schema
    does not list come after, sorted. ``None`` values are omitted.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._first_entry = True

    @staticmethod
    def _format_value(key: str, value: Any) -> str:
        if isinstance(value, bool):
            return "yes" if value else "no"
        if isinstance(value, list):
            return ", ".join(str(item) for item in value) or "(none)"
        if key.endswith("_ms") and isinstance(value, (int, float)):
            return f"{value:,.1f} ms"
        if key.endswith("_chars") and isinstance(value, int):
            return f"{value:,}"
        return str(value).replace("\n", "\\n")

    @staticmethod
    def _ordered_keys(event_name: str, data: dict[str, Any]) -> list[str]:
        preferred = EVENT_KEY_ORDER.get(event_name, DEFAULT_EVENT_KEY_ORDER)
        present = [key for key in data if data[key] is not None]
        return [key for key in preferred if key in present] + sorted(
            key for key in present if key not in preferred
        )

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        fields = _parse_event(message) or _parse_httpx_request(record)
        if fields is None:
            fields = {"event": record.name, "message": message}
        # The event's own local timestamp is replaced by one UTC stamp.
        fields.pop("ts", None)

        data: dict[str, Any] = {
            "ts_utc": utc_now_iso(),
            "level": record.levelname,
            "logger": record.name,
            **fields,
        }
        event_name = str(data.pop("event", record.name))

        lines = [f"=== {event_name} ==="]
        lines.extend(
            f"{key}: {self._format_value(key, data[key])}"
            for key in self._ordered_keys(event_name, data)
        )
        if record.exc_info:
            lines.append("traceback:")
            lines.append(self.formatException(record.exc_info))

        body = "\n".join(lines)
        if self._first_entry:
            self._first_entry = False
            return body
        return "\n" + body

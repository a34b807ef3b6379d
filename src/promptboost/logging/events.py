"""Run-log events for promptboost.

Each event is one JSON object passed to the root logger. The run log's
handler turns it back into a readable block with
:class:`~promptboost.logging.formatter.StructuredTextFormatter`; when no run
log is configured, logging is disabled and events cost one ``json.dumps``.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Optional

from tenacity import RetryCallState

from ..constants import APP_NAME, DATETIME_FORMAT_FILENAME, LOG_FILE_EXTENSION
from .formatter import StructuredTextFormatter
from .sanitization import sanitize_error_message


def _to_log_safe(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, Enum):
        # BoostStatus / ErrorKind are str enums; log the wire value, not the repr.
        return _to_log_safe(value.value)
    if isinstance(value, str):
        return value
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, Mapping):
        return {str(k): _to_log_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_to_log_safe(v) for v in value]
    return str(value)


def http_error_fields(error: BaseException) -> dict[str, Any]:
    """Return the HTTP status, URL and request id of a vendor SDK error.

    openai and anthropic errors expose ``status_code``, ``request_id`` and
    the httpx ``request``; google-genai errors expose ``code``. Anything
    missing is left out.
    """
    fields: dict[str, Any] = {}

    status = getattr(error, "status_code", None)
    if status is None:
        status = getattr(error, "code", None)
    if isinstance(status, int) and not isinstance(status, bool):
        fields["http_status"] = status

    url = getattr(getattr(error, "request", None), "url", None)
    if url:
        fields["http_url"] = str(url)

    request_id = getattr(error, "request_id", None)
    if request_id:
        fields["request_id"] = str(request_id)

    return fields


def estimate_message_chars(messages: Iterable[Any]) -> int:
    """Total content length of ``ChatMessage`` objects or role/content dicts."""
    total = 0
    for msg in messages:
        content = msg.get("content") if isinstance(msg, Mapping) else getattr(msg, "content", None)
        total += len(str(content or ""))
    return total


def log_event(event: str, level: int = logging.INFO, **fields: Any) -> None:
    """Emit one structured event to the run log."""
    payload: dict[str, Any] = {
        "ts": datetime.now().astimezone().isoformat(),
        "event": event,
    }
    payload.update((key, _to_log_safe(value)) for key, value in fields.items())
    logging.log(level, json.dumps(payload, ensure_ascii=False, separators=(",", ":")))


def submission_retry_logger(
    vendor: str, level: int = logging.WARNING
) -> Callable[[RetryCallState], None]:
    """Build a tenacity ``before_sleep`` hook logging each retried submission."""

    def _log(retry_state: RetryCallState) -> None:
        outcome = retry_state.outcome
        error = outcome.exception() if outcome is not None and outcome.failed else None
        next_action = retry_state.next_action
        log_event(
            "submission_retry",
            level=level,
            vendor=vendor,
            attempt=retry_state.attempt_number,
            sleep_sec=round(next_action.sleep, 2) if next_action is not None else None,
            error_type=type(error).__name__ if error is not None else None,
            error=sanitize_error_message(str(error)) if error is not None else None,
        )

    return _log


def build_run_log_path(logs_dir: str | Path, command: Optional[str] = None) -> str:
    """Return a fresh ``promptboost_<timestamp>[_<command>].log`` path in ``logs_dir``."""
    directory = Path(logs_dir)
    directory.mkdir(parents=True, exist_ok=True)

    stem = f"{APP_NAME}_{datetime.now().strftime(DATETIME_FORMAT_FILENAME)}"
    if command:
        stem = f"{stem}_{command}"

    candidate = directory / f"{stem}{LOG_FILE_EXTENSION}"
    suffix = 1
    while candidate.exists():
        candidate = directory / f"{stem}_{suffix}{LOG_FILE_EXTENSION}"
        suffix += 1
    return str(candidate)


def setup_logging(log_file: Optional[str] = None) -> None:
    """Route all records to ``log_file``, or silence logging when it is unset."""
    if not log_file:
        logging.disable(logging.CRITICAL)
        return

    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.setFormatter(StructuredTextFormatter())
    logging.basicConfig(level=logging.INFO, handlers=[handler], force=True)
    # httpx logs one INFO line per request; the formatter decodes it.
    logging.getLogger("httpx").setLevel(logging.INFO)

"""Structured run-log events for promptboost."""

from .events import (
    build_run_log_path,
    estimate_message_chars,
    http_error_fields,
    log_event,
    setup_logging,
    submission_retry_logger,
)
from .formatter import StructuredTextFormatter
from .sanitization import sanitize_error_message
from .schema import DEFAULT_EVENT_KEY_ORDER, EVENT_KEY_ORDER

__all__ = [
    "DEFAULT_EVENT_KEY_ORDER",
    "EVENT_KEY_ORDER",
    "StructuredTextFormatter",
    "build_run_log_path",
    "estimate_message_chars",
    "http_error_fields",
    "log_event",
    "sanitize_error_message",
    "setup_logging",
    "submission_retry_logger",
]

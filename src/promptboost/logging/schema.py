"""Per-event key order used by the structured log formatter."""

from __future__ import annotations

DEFAULT_EVENT_KEY_ORDER = ["ts_utc", "level", "logger"]

EVENT_KEY_ORDER: dict[str, list[str]] = {
    # Application lifecycle events
    "app_start": [
        "ts_utc",
        "level",
        "command",
        "vendor",
        "preferred_model",
        "settings_file",
        "storage_dir",
        "log_file",
        "file_patterns",
    ],
    "app_stop": [
        "ts_utc",
        "level",
        "reason",
        "uptime_ms",
        "error_type",
        "error",
    ],
    "app_activate": [
        "ts_utc",
        "level",
        "vendor",
        "storage_dir",
        "settings_file",
    ],
    # Model registry events
    "model_discovery": [
        "ts_utc",
        "level",
        "vendor",
        "model_count",
        "models",
        "excluded",
    ],
    "model_discovery_error": [
        "ts_utc",
        "level",
        "vendor",
        "http_status",
        "http_url",
        "request_id",
        "error_type",
        "error",
    ],
    "model_selection": [
        "ts_utc",
        "level",
        "source",
        "model",
        "preferred_model",
        "result",
    ],
    "preference_updated": [
        "ts_utc",
        "level",
        "key",
        "value",
        "settings_file",
    ],
    # File eligibility events
    "eligibility_check": [
        "ts_utc",
        "level",
        "file",
        "base_name",
        "patterns",
        "matched_pattern",
        "enabled",
        "reason",
    ],
    "file_patterns": [
        "ts_utc",
        "level",
        "patterns",
    ],
    # Instruction file events
    "instruction_file_created": [
        "ts_utc",
        "level",
        "instruction_file",
        "chars",
    ],
    "instruction_file_error": [
        "ts_utc",
        "level",
        "operation",
        "instruction_file",
        "error_type",
        "error",
    ],
    # Boost workflow events
    "boost_request": [
        "ts_utc",
        "level",
        "vendor",
        "model",
        "input_chars",
        "instruction_chars",
        "message_chars",
    ],
    "boost_response": [
        "ts_utc",
        "level",
        "vendor",
        "model",
        "status",
        "latency_ms",
        "ttft_ms",
        "fragments",
        "input_chars",
        "output_chars",
    ],
    "boost_error": [
        "ts_utc",
        "level",
        "vendor",
        "model",
        "stage",
        "error_kind",
        "latency_ms",
        "http_status",
        "http_url",
        "request_id",
        "error_type",
        "error",
    ],
    "boost_cancelled": [
        "ts_utc",
        "level",
        "vendor",
        "model",
        "stage",
        "latency_ms",
        "fragments",
    ],
    "boost_outcome": [
        "ts_utc",
        "level",
        "model",
        "status",
        "error_kind",
        "elapsed",
    ],
    "document_update": [
        "ts_utc",
        "level",
        "document_file",
        "line_range",
        "input_chars",
        "output_chars",
    ],
    # Provider events
    "provider_log": [
        "ts_utc",
        "level",
        "provider",
        "message",
    ],
    "submission_retry": [
        "ts_utc",
        "level",
        "vendor",
        "attempt",
        "sleep_sec",
        "error_type",
        "error",
    ],
    "httpx_request": [
        "ts_utc",
        "level",
        "logger",
        "http_method",
        "http_url",
        "http_version",
        "http_status",
        "http_reason",
    ],
}

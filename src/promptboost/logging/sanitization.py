"""Secret redaction for logged and displayed error text."""

from __future__ import annotations

import re

# Checked in order: the Anthropic form before the generic ``sk-`` form.
_SECRET_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"sk-ant-[A-Za-z0-9_-]{10,}"), "[REDACTED_API_KEY]"),
    # OpenAI (incl. sk-proj-) and DeepSeek
    (re.compile(r"sk-[A-Za-z0-9_-]{10,}"), "[REDACTED_API_KEY]"),
    (re.compile(r"xai-[A-Za-z0-9]{10,}"), "[REDACTED_API_KEY]"),
    (re.compile(r"AIza[A-Za-z0-9_-]{20,}"), "[REDACTED_API_KEY]"),
    # Mistral keys have no prefix; they only show up in headers or query strings.
    (
        re.compile(r"(?i)\b(x-api-key|x-goog-api-key|api[_-]?key|key)([\"']?\s*[:=]\s*[\"']?)[A-Za-z0-9_\-]{16,}"),
        r"\1\2[REDACTED_API_KEY]",
    ),
    (re.compile(r"Bearer\s+[A-Za-z0-9_\-.]{20,}"), "Bearer [REDACTED_TOKEN]"),
    (re.compile(r"eyJ[A-Za-z0-9_-]+\.eyJ[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+"), "[REDACTED_JWT]"),
]


def sanitize_error_message(error_msg: str) -> str:
    """Replace API keys, bearer tokens and JWTs in ``error_msg``."""
    for pattern, replacement in _SECRET_PATTERNS:
        error_msg = pattern.sub(replacement, error_msg)
    return error_msg

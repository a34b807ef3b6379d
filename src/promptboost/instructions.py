"""Instruction template stored in the user's storage directory."""

from __future__ import annotations

import logging
from pathlib import Path

from .constants import INSTRUCTION_FILE_NAME
from .logging import log_event, sanitize_error_message

DEFAULT_BOOST_INSTRUCTIONS = """You are a professional prompt engineer specializing in crafting precise, effective prompts.
Your task is to enhance prompts by making them more specific, actionable, and effective.

**Formatting Requirements:**
- Use Markdown formatting in your response.
- Present requirements, constraints, and steps as bulleted or numbered lists.
- Separate context, instructions, and examples into clear paragraphs.
- Use headings if appropriate.
- Ensure the prompt is easy to read and visually organized.

**Instructions:**
- Improve the user prompt wrapped in `<original_prompt>` tags.
- Make instructions explicit and unambiguous.
- Add relevant context and constraints.
- Remove redundant information.
- Maintain the core intent.
- Ensure the prompt is self-contained.
- Use professional language.
- Add references to documentation or examples if applicable.

**For invalid or unclear prompts:**
- Respond with clear, professional guidance.
- Keep responses concise and actionable.
- Maintain a helpful, constructive tone.
- Focus on what the user should provide.
- Use a standard template for consistency.

**IMPORTANT:**
Your response must ONLY contain the enhanced prompt text, formatted as described.
Do not include any explanations, metadata, or wrapper tags."""


def instruction_file_path(storage_dir: str | Path) -> Path:
    return Path(storage_dir) / INSTRUCTION_FILE_NAME


def ensure_instruction_file(storage_dir: str | Path) -> Path:
    """Create the storage directory and default template if missing.

    Never raises; failures are logged and the next read falls back to the
    built-in template.
    """
    path = instruction_file_path(storage_dir)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        if not path.exists():
            path.write_text(DEFAULT_BOOST_INSTRUCTIONS, encoding="utf-8")
            log_event(
                "instruction_file_created",
                level=logging.INFO,
                instruction_file=str(path),
            )
    except OSError as e:
        log_event(
            "instruction_file_error",
            level=logging.ERROR,
            operation="ensure",
            instruction_file=str(path),
            error_type=type(e).__name__,
            error=sanitize_error_message(str(e)),
        )
    return path


def read_instruction_file(storage_dir: str | Path) -> str:
    """Return the user's template, or the built-in one when missing, blank or unreadable."""
    path = instruction_file_path(storage_dir)
    try:
        if path.is_file():
            content = path.read_text(encoding="utf-8")
            if content.strip():
                return content
            log_event(
                "instruction_file_error",
                level=logging.WARNING,
                operation="read",
                instruction_file=str(path),
                error="Instruction file is empty; using the built-in template",
            )
    except (OSError, UnicodeDecodeError) as e:
        log_event(
            "instruction_file_error",
            level=logging.ERROR,
            operation="read",
            instruction_file=str(path),
            error_type=type(e).__name__,
            error=sanitize_error_message(str(e)),
        )
    return DEFAULT_BOOST_INSTRUCTIONS

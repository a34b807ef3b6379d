"""File eligibility: which files the boost command applies to."""

from __future__ import annotations

import logging
import re
from fnmatch import fnmatch
from pathlib import Path
from typing import Optional, Sequence, TypedDict

from .logging import log_event
from .path_utils import base_name
from .settings import BoostSettings

MATCH_ALL_PATTERN = "*"


class EligibilityContext(TypedDict, total=False):
    """Whether boosting is enabled for the current target, and why."""

    enabled: bool
    source: str
    name: str


def _matches(name: str, pattern: str) -> bool:
    try:
        return fnmatch(name, pattern)
    except (re.error, TypeError):
        return False


def matching_pattern(file_name: str, patterns: Optional[Sequence[str]]) -> Optional[str]:
    """Return the first pattern matching the file's base name, if any."""
    name = base_name(file_name)
    for pattern in patterns or ():
        if _matches(name, pattern):
            return pattern
    return None


def is_eligible(file_name: str, patterns: Optional[Sequence[str]]) -> bool:
    """Decide whether ``file_name`` is covered by ``patterns``.

    Only the final path segment is matched, with shell-glob semantics and
    the platform's case rules. No patterns, or a bare ``*``, enables every
    file. A pattern that cannot be compiled simply does not match.
    """
    if not patterns or MATCH_ALL_PATTERN in patterns:
        return True
    return matching_pattern(file_name, patterns) is not None


def is_boost_enabled_for_file(file_name: str, settings: BoostSettings) -> bool:
    """Check ``file_name`` against the configured patterns and log the decision."""
    patterns = settings.file_patterns()
    enabled = is_eligible(file_name, patterns)

    if not patterns:
        reason = "no_patterns"
        matched = None
    elif MATCH_ALL_PATTERN in patterns:
        reason = "wildcard"
        matched = MATCH_ALL_PATTERN
    else:
        matched = matching_pattern(file_name, patterns)
        reason = "pattern_match" if matched is not None else "no_match"

    log_event(
        "eligibility_check",
        level=logging.INFO,
        file=file_name,
        base_name=base_name(file_name),
        patterns=patterns,
        matched_pattern=matched,
        enabled=enabled,
        reason=reason,
    )
    return enabled


def describe_patterns(patterns: Sequence[str]) -> str:
    """User-facing summary of the configured patterns."""
    return ", ".join(patterns) if patterns else "(empty - enables for all files)"


def log_patterns(settings: BoostSettings) -> None:
    log_event("file_patterns", level=logging.INFO, patterns=settings.file_patterns())


def determine_boost_enabled(
    path: Optional[str | Path],
    settings: BoostSettings,
) -> EligibilityContext:
    """Eligibility of the active target: a file path, or nothing (stdin)."""
    if path is None:
        return {"enabled": False, "source": "none"}
    name = str(path)
    return {
        "enabled": is_boost_enabled_for_file(name, settings),
        "source": "file",
        "name": name,
    }

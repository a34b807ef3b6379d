"""Reading and replacing the text a boost targets.

A target is a whole file, an inclusive 1-based line range of a file
(``START:END``), or stdin. Replacement swaps exactly the targeted text and
leaves the rest of the file byte-for-byte unchanged.
"""

from __future__ import annotations

import logging
import os
import re
import shlex
import shutil
import subprocess
import sys
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, TextIO

from .errors import DocumentError, PromptBoostError
from .logging import log_event


@dataclass(frozen=True, slots=True)
class LineRange:
    start: int
    end: int

    def __str__(self) -> str:
        return f"{self.start}:{self.end}"


@dataclass(frozen=True, slots=True)
class BoostTarget:
    """The text to boost and where it came from."""

    text: str
    path: Optional[Path] = None
    line_range: Optional[LineRange] = None

    @property
    def is_stdin(self) -> bool:
        return self.path is None


def parse_line_range(value: str) -> LineRange:
    """Parse ``START:END`` (or a single line ``N``) into a :class:`LineRange`."""
    text = value.strip()
    start_text, sep, end_text = text.partition(":")
    try:
        start = int(start_text)
        end = int(end_text) if sep else start
    except ValueError:
        raise DocumentError(f"Invalid line range '{value}' (expected START:END)")
    if start < 1 or end < start:
        raise DocumentError(f"Invalid line range '{value}' (lines are 1-based, START <= END)")
    return LineRange(start, end)


def _read_file(path: Path) -> str:
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            return f.read()
    except FileNotFoundError:
        raise DocumentError(f"File not found: {path}")
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentError(f"Cannot read {path}: {e}")


_LINE_BREAK = re.compile(r"\r\n|\n|\r")


def _split_lines(content: str) -> list[str]:
    """Split after CRLF, LF or CR only, keeping each terminator.

    Form feeds and Unicode separators stay inside their line, so line
    numbers match what an editor shows.
    """
    lines: list[str] = []
    start = 0
    for match in _LINE_BREAK.finditer(content):
        lines.append(content[start : match.end()])
        start = match.end()
    if start < len(content):
        lines.append(content[start:])
    return lines


def _split_range(content: str, line_range: LineRange) -> tuple[str, str, str, str]:
    """Split ``content`` into (before, selected, line ending, after)."""
    lines = _split_lines(content)
    if line_range.end > len(lines):
        raise DocumentError(
            f"Line range {line_range} is outside the file ({len(lines)} lines)"
        )
    before = "".join(lines[: line_range.start - 1])
    selected = "".join(lines[line_range.start - 1 : line_range.end])
    after = "".join(lines[line_range.end :])

    ending = ""
    for terminator in ("\r\n", "\n", "\r"):
        if selected.endswith(terminator):
            ending = terminator
            selected = selected[: -len(terminator)]
            break
    return before, selected, ending, after


def read_target(
    path: Optional[str | Path],
    line_range: Optional[LineRange] = None,
    stdin: Optional[TextIO] = None,
) -> BoostTarget:
    """Load the boost target from a file (optionally a line range) or stdin."""
    if path is None:
        if line_range is not None:
            raise DocumentError("A line range needs a file")
        source = stdin if stdin is not None else sys.stdin
        return BoostTarget(text=source.read())

    file_path = Path(path)
    content = _read_file(file_path)
    if line_range is None:
        return BoostTarget(text=content, path=file_path)

    _before, selected, _ending, _after = _split_range(content, line_range)
    return BoostTarget(text=selected, path=file_path, line_range=line_range)


def _atomic_write_text(path: Path, text: str) -> None:
    """Write text via a temp file and atomically replace the destination."""
    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            newline="",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as temp_file:
            temp_file.write(text)
            temp_file.flush()
            os.fsync(temp_file.fileno())
            temp_path = Path(temp_file.name)

        if path.exists():
            shutil.copymode(path, temp_path)
        os.replace(temp_path, path)
    except Exception:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)
        raise


def replace_target(target: BoostTarget, new_text: str) -> None:
    """Replace exactly the targeted text in its file.

    Fails if the targeted text changed on disk since it was read.
    """
    if target.path is None:
        raise DocumentError("Cannot write back a stdin target")

    content = _read_file(target.path)
    if target.line_range is None:
        if content != target.text:
            raise DocumentError(f"{target.path} changed on disk while boosting")
        updated = new_text
    else:
        before, selected, ending, after = _split_range(content, target.line_range)
        if selected != target.text:
            raise DocumentError(f"{target.path} changed on disk while boosting")
        updated = f"{before}{new_text}{ending}{after}"

    try:
        _atomic_write_text(target.path, updated)
    except OSError as e:
        raise DocumentError(f"Cannot write {target.path}: {e}")

    log_event(
        "document_update",
        level=logging.INFO,
        document_file=str(target.path),
        line_range=str(target.line_range) if target.line_range else None,
        input_chars=len(target.text),
        output_chars=len(new_text),
    )


def resolve_editor_command() -> list[str]:
    """Editor command from ``$VISUAL``/``$EDITOR``, else a platform default."""
    for var in ("VISUAL", "EDITOR"):
        value = os.environ.get(var, "").strip()
        if value:
            return shlex.split(value, posix=os.name != "nt")

    if sys.platform == "win32":
        return ["notepad"]
    if sys.platform == "darwin":
        return ["open", "-t", "-W"]
    for candidate in ("sensible-editor", "nano", "vi"):
        found = shutil.which(candidate)
        if found:
            return [found]
    raise PromptBoostError("No editor found; set $VISUAL or $EDITOR")


def open_in_editor(path: str | Path) -> int:
    """Open ``path`` in the user's editor and wait for it to exit."""
    command = [*resolve_editor_command(), str(path)]
    try:
        completed = subprocess.run(command, check=False)
    except OSError as e:
        raise PromptBoostError(f"Cannot start editor '{command[0]}': {e}")
    return completed.returncode

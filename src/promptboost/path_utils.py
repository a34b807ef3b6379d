"""Path mapping utilities for command-line and settings paths.

Supported forms:
- ~ or ~/... → User home directory
- Native absolute paths → Used as-is
- Windows absolute paths (C:\\..., C:/..., UNC) → Supported on Windows,
  rejected on non-Windows hosts
- Relative paths → Resolved against the current working directory
"""

from pathlib import Path, PureWindowsPath
import unicodedata


def has_home_path_prefix(path: str) -> bool:
    """Return True when path uses the supported home prefix forms."""
    return path == "~" or path.startswith("~/") or path.startswith("~\\")


def is_windows_absolute_path(path: str) -> bool:
    """Return True when path is an absolute Windows path (drive or UNC)."""
    return PureWindowsPath(path).is_absolute()


def _normalize_path_input(path: str) -> str:
    """Normalize input text to NFC and reject NUL characters."""
    if "\x00" in path:
        raise ValueError("Path contains NUL character")
    return unicodedata.normalize("NFC", path)


def map_path(path: str) -> str:
    """Map a user-supplied path to an absolute path string.

    Args:
        path: Path to map (can start with ~, be absolute, or be relative)

    Returns:
        Absolute path string

    Raises:
        ValueError: If path is empty, contains NUL, escapes the home directory,
            or uses a Windows absolute path on non-Windows

    Examples:
        >>> map_path("~/.promptboost/settings.json")  # Unix
        '/Users/username/.promptboost/settings.json'

        >>> map_path("notes.prompt.md")  # cwd = /work
        '/work/notes.prompt.md'
    """
    path = _normalize_path_input(path)
    if not path.strip():
        raise ValueError("Path is empty")

    # Support both ~/ and ~\ for Windows compatibility
    if has_home_path_prefix(path):
        home_dir = Path.home().resolve()
        if path == "~":
            return str(home_dir)

        resolved = (home_dir / path[2:]).resolve()
        try:
            resolved.relative_to(home_dir)
        except ValueError:
            raise ValueError(f"Path escapes home directory: {path}")
        return str(resolved)

    if is_windows_absolute_path(path) and not Path(path).is_absolute():
        raise ValueError(
            f"Windows absolute paths are not supported on this platform: {path}"
        )

    return str(Path(path).resolve())


def base_name(file_name: str) -> str:
    """Return the final path segment, splitting on both ``/`` and ``\\``."""
    segment = file_name.replace("\\", "/").rsplit("/", 1)[-1]
    return segment or file_name

"""Numbered-list chooser and yes/no confirmation for the console."""

import sys
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from prompt_toolkit import prompt as pt_prompt

BORDERLINE = "━" * 60


@dataclass(frozen=True, slots=True)
class ChoiceItem:
    """One line of the chooser: a label with an optional dimmer description."""

    label: str
    description: str = ""


def format_choice(item: ChoiceItem, index: int) -> str:
    if item.description:
        return f"  [{index}] {item.label}  ({item.description})"
    return f"  [{index}] {item.label}"


def prompt_choice(
    items: Sequence[ChoiceItem],
    title: str,
    placeholder: str,
    read_line: Callable[[str], str] = pt_prompt,
) -> Optional[int]:
    """Interactively prompt the user to pick one item by number.

    Args:
        items: Items to list, in display order
        title: Heading printed above the list
        placeholder: Question shown at the input prompt
        read_line: Line reader (prompt_toolkit by default)

    Returns:
        Zero-based index of the chosen item, or None when the user presses
        Enter on an empty line or hits Ctrl-C/Ctrl-D
    """
    if not items:
        return None

    print(file=sys.stderr)
    print(title, file=sys.stderr)
    print(BORDERLINE, file=sys.stderr)
    for i, item in enumerate(items, 1):
        print(format_choice(item, i), file=sys.stderr)
    print(BORDERLINE, file=sys.stderr)
    print(file=sys.stderr)

    prompt = f"{placeholder} [1-{len(items)}, Enter to cancel]: "
    while True:
        try:
            selection = read_line(prompt).strip()
        except (EOFError, KeyboardInterrupt):
            return None

        if not selection:
            return None

        try:
            index = int(selection)
        except ValueError:
            print(
                f"Please enter a number (1-{len(items)}) or press Enter to cancel",
                file=sys.stderr,
            )
            continue

        if 1 <= index <= len(items):
            return index - 1
        print(f"Invalid number. Choose 1-{len(items)}", file=sys.stderr)


def prompt_confirm(
    message: str,
    action: str,
    read_line: Callable[[str], str] = pt_prompt,
) -> bool:
    """Ask a yes/no question; only an explicit yes confirms."""
    try:
        answer = read_line(f"{message} [{action}: y/N]: ").strip().lower()
    except (EOFError, KeyboardInterrupt):
        return False
    return answer in ("y", "yes")

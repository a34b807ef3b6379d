"""CLI bootstrap entry point for promptboost."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
import time
from typing import Optional, Sequence, cast

from . import __version__
from .app import PromptBoostApp
from .boost import BoostStatus
from .constants import APP_NAME, DEFAULT_SETTINGS_PATH, USER_DATA_DIR
from .editor import parse_line_range
from .eligibility import describe_patterns
from .errors import PromptBoostError
from .logging import (
    build_run_log_path,
    log_event,
    sanitize_error_message,
    setup_logging,
)
from .path_utils import map_path
from .settings import BoostSettings, JsonFileConfigSource

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CANCELLED = 130

# Commands that never talk to a vendor
OFFLINE_COMMANDS = {"check", "edit-instructions"}


def _map_cli_arg(path: str | None, arg_name: str) -> str | None:
    """Map a CLI path argument, naming the argument in errors."""
    if path is None:
        return None
    try:
        return cast(str, map_path(path))
    except ValueError as e:
        raise ValueError(f"Invalid {arg_name} path: {e}")


def _line_range_arg(value: str):
    try:
        return parse_line_range(value)
    except PromptBoostError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="promptboost - rewrite prompts with a language model",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-s",
        "--settings",
        default=DEFAULT_SETTINGS_PATH,
        help=f"Path to settings file (default: {DEFAULT_SETTINGS_PATH})",
    )
    parser.add_argument(
        "--storage-dir",
        default=USER_DATA_DIR,
        help=f"Directory holding the instruction file (default: {USER_DATA_DIR})",
    )
    parser.add_argument(
        "-l", "--log", help="Path to log file (default: a new file in the logs dir)"
    )

    commands = parser.add_subparsers(dest="command", required=True, metavar="command")

    boost = commands.add_parser("boost", help="Boost a prompt file, a line range, or stdin")
    boost.add_argument("file", nargs="?", help="Prompt file (reads stdin when omitted)")
    boost.add_argument(
        "--lines",
        type=_line_range_arg,
        metavar="START:END",
        help="Boost only these lines (1-based, inclusive)",
    )
    boost.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Boost even if the file does not match the configured patterns",
    )

    commands.add_parser("select-model", help="Choose the preferred model")
    commands.add_parser("edit-instructions", help="Open the instruction file in an editor")
    commands.add_parser("models", help="List available models")

    check = commands.add_parser("check", help="Show whether boosting is enabled for a file")
    check.add_argument("file", help="File name or path")

    tool = commands.add_parser(
        "tool", help='Tool mode: read {"promptText": ...} JSON, write {"text": ...} JSON'
    )
    tool.add_argument("-i", "--input", help="JSON input file (default: stdin)")

    return parser


def _print_models(app: PromptBoostApp) -> int:
    endpoints = app.list_models()
    if not endpoints:
        print("No models available.", file=sys.stderr)
        return EXIT_FAILED
    preferred = app.preferences.get()
    for endpoint in endpoints:
        marker = "*" if endpoint.name == preferred else " "
        family = f"  ({endpoint.family})" if endpoint.family else ""
        print(f"{marker} {endpoint.name}{family}")
    return EXIT_OK


def _print_check(app: PromptBoostApp, file_name: str) -> int:
    context = app.check(file_name)
    patterns = describe_patterns(app.settings.file_patterns())
    state = "enabled" if context["enabled"] else "disabled"
    print(f"{context.get('name', file_name)}: {state} (patterns: {patterns})")
    return EXIT_OK if context["enabled"] else EXIT_FAILED


async def _run_tool(app: PromptBoostApp, input_path: Optional[str]) -> int:
    if input_path:
        with open(input_path, "r", encoding="utf-8") as f:
            raw = f.read()
    else:
        raw = sys.stdin.read()
    try:
        params = json.loads(raw)
    except json.JSONDecodeError as e:
        raise PromptBoostError(f"Invalid tool input JSON: {e}")
    if not isinstance(params, dict):
        raise PromptBoostError("Tool input must be a JSON object")

    print(app.tool.prepare_invocation(params)["invocationMessage"], file=sys.stderr)
    answer = await app.tool.invoke(params)
    if answer is None:
        return EXIT_FAILED
    print(json.dumps(answer, ensure_ascii=False))
    return EXIT_OK


async def run_command(app: PromptBoostApp, args: argparse.Namespace) -> int:
    """Activate ``app`` and dispatch the parsed command."""
    await app.activate(discover=args.command not in OFFLINE_COMMANDS)

    if args.command == "boost":
        result = await app.boost(
            _map_cli_arg(args.file, "file"),
            args.lines,
            force=args.force,
        )
        if result is None:
            return EXIT_FAILED
        if result.status is BoostStatus.TERMINATED:
            return EXIT_CANCELLED
        return EXIT_OK if result.ok else EXIT_FAILED

    if args.command == "select-model":
        return EXIT_OK if await app.select_model() is not None else EXIT_FAILED

    if args.command == "edit-instructions":
        print(f"Instruction file: {app.instruction_file()}", file=sys.stderr)
        return EXIT_OK if await app.edit_instructions() == 0 else EXIT_FAILED

    if args.command == "models":
        return _print_models(app)

    if args.command == "check":
        return _print_check(app, args.file)

    if args.command == "tool":
        return await _run_tool(app, _map_cli_arg(args.input, "input"))

    raise PromptBoostError(f"Unknown command: {args.command}")


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point for the promptboost CLI."""
    args = build_parser().parse_args(argv)
    app_started = time.perf_counter()
    effective_log_path: Optional[str] = None

    try:
        settings_path = _map_cli_arg(args.settings, "settings")
        storage_dir = _map_cli_arg(args.storage_dir, "storage")
        mapped_log_path = _map_cli_arg(args.log, "log")
        if settings_path is None or storage_dir is None:
            raise ValueError("Settings and storage paths are required")

        settings = BoostSettings(JsonFileConfigSource(settings_path))
        effective_log_path = mapped_log_path or build_run_log_path(
            cast(str, map_path(settings.logs_dir())), args.command
        )
        setup_logging(effective_log_path)

        log_event(
            "app_start",
            level=logging.INFO,
            command=args.command,
            vendor=settings.vendor(),
            preferred_model=settings.preferred_model() or None,
            settings_file=settings_path,
            storage_dir=storage_dir,
            log_file=effective_log_path,
            file_patterns=settings.file_patterns(),
        )

        app = PromptBoostApp(settings, storage_dir, log_file=effective_log_path)
        exit_code = asyncio.run(run_command(app, args))
        log_event(
            "app_stop",
            level=logging.INFO,
            reason="normal",
            exit_code=exit_code,
            uptime_ms=round((time.perf_counter() - app_started) * 1000, 1),
        )
        sys.exit(exit_code)

    except KeyboardInterrupt:
        log_event(
            "app_stop",
            level=logging.INFO,
            reason="keyboard_interrupt",
            uptime_ms=round((time.perf_counter() - app_started) * 1000, 1),
        )
        print("\nInterrupted", file=sys.stderr)
        sys.exit(EXIT_CANCELLED)
    except Exception as e:
        error = sanitize_error_message(str(e))
        print(f"Error: {error}", file=sys.stderr)
        if effective_log_path:
            print(f"See log: {effective_log_path}", file=sys.stderr)
        log_event(
            "app_stop",
            level=logging.ERROR,
            reason="fatal_error",
            error_type=type(e).__name__,
            error=error,
            uptime_ms=round((time.perf_counter() - app_started) * 1000, 1),
        )
        logging.error("Fatal error: %s", error, exc_info=True)
        sys.exit(EXIT_FAILED)


if __name__ == "__main__":
    main()

"""Console progress for a running boost, with Ctrl-C wired to cancellation."""

from __future__ import annotations

import asyncio
import logging
import signal
import sys
import time
from pathlib import Path
from typing import Optional, TextIO

from .ai.types import ModelEndpoint
from .boost import BoostResult, BoostStatus, boost_prompt
from .cancellation import CancellationToken
from .constants import DEFAULT_MAX_RESPONSE_CHARS, DEFAULT_RESPONSE_TIMEOUT_SEC
from .logging import log_event
from .time_utils import format_elapsed
from .ui.interaction import UserInteractionPort

PROGRESS_INTERVAL_SEC = 1.0


class ConsoleProgressReporter:
    """Renders the elapsed-time line in place on the terminal."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream if stream is not None else sys.stderr
        self._line_open = False

    def report_elapsed(self, message: str, elapsed_sec: float) -> None:
        line = f"{message} {format_elapsed(elapsed_sec)}"
        print(f"\r{line}", end="", file=self.stream, flush=True)
        self._line_open = True

    def close_open_line(self) -> None:
        if self._line_open:
            print(file=self.stream)
            self._line_open = False


def _install_sigint(loop: asyncio.AbstractEventLoop, cancel: CancellationToken) -> bool:
    try:
        loop.add_signal_handler(signal.SIGINT, cancel.cancel)
    except (NotImplementedError, RuntimeError, ValueError):
        # Windows loops and non-main threads; Ctrl-C then raises KeyboardInterrupt.
        return False
    return True


async def boost_with_progress(
    prompt_text: str,
    endpoint: ModelEndpoint,
    storage_dir: str | Path,
    *,
    interaction: UserInteractionPort,
    cancel: Optional[CancellationToken] = None,
    reporter: Optional[ConsoleProgressReporter] = None,
    max_response_chars: int = DEFAULT_MAX_RESPONSE_CHARS,
    timeout_sec: int | float = DEFAULT_RESPONSE_TIMEOUT_SEC,
    log_file: Optional[str] = None,
    interval_sec: float = PROGRESS_INTERVAL_SEC,
) -> BoostResult:
    """Run :func:`boost_prompt` behind a progress line and report the outcome.

    Ctrl-C cancels ``cancel`` (created when not given), which the workflow
    turns into a ``terminated`` result.
    """
    cancel = cancel if cancel is not None else CancellationToken()
    reporter = reporter if reporter is not None else ConsoleProgressReporter()
    message = f"Boosting prompt with {endpoint.name}..."

    loop = asyncio.get_running_loop()
    sigint_installed = _install_sigint(loop, cancel)
    started = time.perf_counter()
    task = asyncio.ensure_future(
        boost_prompt(
            prompt_text,
            endpoint,
            storage_dir,
            cancel=cancel,
            max_response_chars=max_response_chars,
            timeout_sec=timeout_sec,
        )
    )

    try:
        while True:
            reporter.report_elapsed(message, time.perf_counter() - started)
            done, _pending = await asyncio.wait({task}, timeout=interval_sec)
            if done:
                break
        result = task.result()
    except asyncio.CancelledError:
        task.cancel()
        raise
    finally:
        reporter.close_open_line()
        if sigint_installed:
            loop.remove_signal_handler(signal.SIGINT)

    if result.status is BoostStatus.SUCCESS:
        await interaction.notify("Prompt boosted")
    elif result.status is BoostStatus.TERMINATED:
        await interaction.warn("Boost cancelled")
    else:
        kind = result.error.value if result.error is not None else "unknown"
        await interaction.error(f"Failed to boost prompt ({kind})")
        if log_file:
            await interaction.notify(f"See log: {log_file}")

    log_event(
        "boost_outcome",
        level=logging.INFO,
        model=endpoint.name,
        status=result.status.value,
        error_kind=result.error.value if result.error is not None else None,
        elapsed=format_elapsed(time.perf_counter() - started),
    )
    return result

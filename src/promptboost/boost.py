"""Boost workflow: rewrite one prompt through one model endpoint.

:func:`boost_prompt` never raises for request, stream or content problems.
Every outcome comes back as a :class:`BoostResult` whose ``text`` is the
rewritten prompt on success and the unmodified input otherwise.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from .ai.types import ChatMessage, ChatResponse, ModelEndpoint
from .cancellation import CancellationToken, OperationCancelledError, run_cancellable
from .constants import DEFAULT_MAX_RESPONSE_CHARS, DEFAULT_RESPONSE_TIMEOUT_SEC
from .instructions import read_instruction_file
from .logging import (
    estimate_message_chars,
    http_error_fields,
    log_event,
    sanitize_error_message,
)


class BoostStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"
    TERMINATED = "terminated"


class ErrorKind(str, Enum):
    """Why a boost did not succeed."""

    NO_MODELS = "no_models"
    NO_SELECTION = "no_selection"
    SUBMISSION = "submission"
    NO_RESPONSE = "no_response"
    STREAM = "stream"
    EMPTY_RESPONSE = "empty_response"
    RESPONSE_TOO_LONG = "response_too_long"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True, slots=True)
class BoostResult:
    text: str
    status: BoostStatus
    error: Optional[ErrorKind] = None
    model: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is BoostStatus.SUCCESS


class ResponseTooLongError(Exception):
    """Accumulated response text exceeded the configured cap."""

    def __init__(self, chars: int, limit: int) -> None:
        super().__init__(f"Response exceeded {limit:,} characters ({chars:,} received)")
        self.chars = chars
        self.limit = limit


@dataclass(slots=True)
class _StreamStats:
    started: float
    first_fragment_at: Optional[float] = None
    fragments: int = 0
    chars: int = 0

    def latency_ms(self) -> float:
        return round((time.perf_counter() - self.started) * 1000, 1)

    def ttft_ms(self) -> Optional[float]:
        if self.first_fragment_at is None:
            return None
        return round((self.first_fragment_at - self.started) * 1000, 1)


def build_boost_message(instructions: str, prompt_text: str) -> str:
    """Compose the single user message sent to the model."""
    return f"{instructions}\n\n<original_prompt>\n{prompt_text}\n</original_prompt>"


async def _drain(response: ChatResponse, max_chars: int, stats: _StreamStats) -> str:
    """Concatenate fragments in arrival order, enforcing ``max_chars`` (0 = off)."""
    parts: list[str] = []
    try:
        async for fragment in response.text:
            if stats.first_fragment_at is None:
                stats.first_fragment_at = time.perf_counter()
            stats.fragments += 1
            stats.chars += len(fragment)
            parts.append(fragment)
            if max_chars and stats.chars > max_chars:
                raise ResponseTooLongError(stats.chars, max_chars)
    finally:
        await response.aclose()
    return "".join(parts)


def _failed(
    prompt_text: str,
    endpoint: ModelEndpoint,
    kind: ErrorKind,
    *,
    stage: str,
    stats: _StreamStats,
    error: Optional[BaseException] = None,
    message: Optional[str] = None,
) -> BoostResult:
    fields = {}
    if error is not None:
        fields = {
            "error_type": type(error).__name__,
            "error": sanitize_error_message(str(error) or type(error).__name__),
            **http_error_fields(error),
        }
    elif message:
        fields = {"error": message}

    log_event(
        "boost_error",
        level=logging.ERROR,
        vendor=endpoint.vendor,
        model=endpoint.name,
        stage=stage,
        error_kind=kind.value,
        latency_ms=stats.latency_ms(),
        **fields,
    )
    return BoostResult(prompt_text, BoostStatus.FAILED, kind, endpoint.name)


async def boost_prompt(
    prompt_text: str,
    endpoint: ModelEndpoint,
    storage_dir: str | Path,
    *,
    cancel: Optional[CancellationToken] = None,
    max_response_chars: int = DEFAULT_MAX_RESPONSE_CHARS,
    timeout_sec: int | float = DEFAULT_RESPONSE_TIMEOUT_SEC,
) -> BoostResult:
    """Ask ``endpoint`` to rewrite ``prompt_text`` using the stored instructions.

    The request gets its own cancellation token linked to ``cancel``, so
    cancelling the caller's token aborts the in-flight request or stream.
    ``timeout_sec`` bounds the whole exchange and ``max_response_chars`` the
    accumulated text; 0 disables either.

    Cancelling the surrounding task (rather than the token) is logged and
    re-raises :class:`asyncio.CancelledError`.
    """
    stats = _StreamStats(started=time.perf_counter())
    stage = "prepare"
    request_cancel = CancellationToken(parent=cancel)

    try:
        instructions = read_instruction_file(storage_dir)
        messages = [ChatMessage.user(build_boost_message(instructions, prompt_text))]
        log_event(
            "boost_request",
            level=logging.INFO,
            vendor=endpoint.vendor,
            model=endpoint.name,
            input_chars=len(prompt_text),
            instruction_chars=len(instructions),
            message_chars=estimate_message_chars(messages),
        )

        async with asyncio.timeout(timeout_sec or None):
            stage = "submit"
            try:
                response = await run_cancellable(
                    endpoint.send_request(messages, {}, request_cancel),
                    request_cancel,
                )
            except OperationCancelledError:
                raise
            except Exception as e:
                return _failed(
                    prompt_text, endpoint, ErrorKind.SUBMISSION,
                    stage=stage, stats=stats, error=e,
                )

            if response is None:
                return _failed(
                    prompt_text, endpoint, ErrorKind.NO_RESPONSE,
                    stage=stage, stats=stats, message="No response from model",
                )

            stage = "stream"
            try:
                enhanced = await run_cancellable(
                    _drain(response, max_response_chars, stats),
                    request_cancel,
                )
            except (OperationCancelledError, ResponseTooLongError):
                raise
            except Exception as e:
                return _failed(
                    prompt_text, endpoint, ErrorKind.STREAM,
                    stage=stage, stats=stats, error=e,
                )
            finally:
                # The drain may never start if the token fires right after submission.
                await response.aclose()

        if not enhanced.strip():
            return _failed(
                prompt_text, endpoint, ErrorKind.EMPTY_RESPONSE,
                stage=stage, stats=stats, message="Empty response",
            )

        log_event(
            "boost_response",
            level=logging.INFO,
            vendor=endpoint.vendor,
            model=endpoint.name,
            status=BoostStatus.SUCCESS.value,
            latency_ms=stats.latency_ms(),
            ttft_ms=stats.ttft_ms(),
            fragments=stats.fragments,
            input_chars=len(prompt_text),
            output_chars=len(enhanced),
        )
        return BoostResult(enhanced, BoostStatus.SUCCESS, None, endpoint.name)

    except OperationCancelledError:
        log_event(
            "boost_cancelled",
            level=logging.INFO,
            vendor=endpoint.vendor,
            model=endpoint.name,
            stage=stage,
            latency_ms=stats.latency_ms(),
            fragments=stats.fragments,
        )
        return BoostResult(
            prompt_text, BoostStatus.TERMINATED, ErrorKind.CANCELLED, endpoint.name
        )
    except ResponseTooLongError as e:
        return _failed(
            prompt_text, endpoint, ErrorKind.RESPONSE_TOO_LONG,
            stage=stage, stats=stats, error=e,
        )
    except TimeoutError:
        return _failed(
            prompt_text, endpoint, ErrorKind.TIMEOUT,
            stage=stage, stats=stats,
            message=f"No complete response within {timeout_sec}s",
        )
    except asyncio.CancelledError:
        log_event(
            "boost_cancelled",
            level=logging.WARNING,
            vendor=endpoint.vendor,
            model=endpoint.name,
            stage=stage,
            latency_ms=stats.latency_ms(),
            fragments=stats.fragments,
            reason="task_cancelled",
        )
        raise
    except Exception as e:
        return _failed(
            prompt_text, endpoint, ErrorKind.UNEXPECTED,
            stage=stage, stats=stats, error=e,
        )

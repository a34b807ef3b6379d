"""Tests for the boost workflow."""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from promptboost.ai.gemini_provider import GeminiProvider
from promptboost.boost import (
    BoostStatus,
    ErrorKind,
    boost_prompt,
    build_boost_message,
)
from promptboost.cancellation import CancellationToken
from promptboost.instructions import instruction_file_path
from test_helpers import FakeProvider, make_endpoint


@pytest.mark.asyncio
async def test_fragments_are_concatenated_in_order(tmp_path):
    provider = FakeProvider(["Please ", "describe ", "the bug."])
    result = await boost_prompt("fix my bug", make_endpoint(provider=provider), tmp_path)

    assert result.status is BoostStatus.SUCCESS
    assert result.text == "Please describe the bug."
    assert result.error is None
    assert result.model == "GPT Test"
    assert provider.closed is True


@pytest.mark.asyncio
async def test_request_is_one_user_message_with_wrapped_prompt(tmp_path):
    instruction_file_path(tmp_path).write_text("RULES", encoding="utf-8")
    provider = FakeProvider(["ok"])

    await boost_prompt("fix my bug", make_endpoint(provider=provider), tmp_path)

    messages, _model, options = provider.requests[0]
    assert len(messages) == 1
    assert messages[0].role == "user"
    assert messages[0].content == "RULES\n\n<original_prompt>\nfix my bug\n</original_prompt>"
    assert options == {}


def test_build_boost_message():
    assert build_boost_message("I", "P") == "I\n\n<original_prompt>\nP\n</original_prompt>"


@pytest.mark.asyncio
@pytest.mark.parametrize("fragments", [[], ["   ", "\n\t"]])
async def test_blank_response_fails_with_original_text(tmp_path, fragments):
    provider = FakeProvider(fragments)
    result = await boost_prompt("keep me", make_endpoint(provider=provider), tmp_path)

    assert result.status is BoostStatus.FAILED
    assert result.error is ErrorKind.EMPTY_RESPONSE
    assert result.text == "keep me"


@pytest.mark.asyncio
async def test_submission_error_is_contained(tmp_path):
    provider = FakeProvider(submit_error=RuntimeError("401 sk-abcdefghijklmnopqrstuvwxyz"))
    with patch("promptboost.boost.log_event") as mock_log_event:
        result = await boost_prompt("keep me", make_endpoint(provider=provider), tmp_path)

    assert result.status is BoostStatus.FAILED
    assert result.error is ErrorKind.SUBMISSION
    assert result.text == "keep me"
    error_call = mock_log_event.call_args
    assert error_call.args[0] == "boost_error"
    assert error_call.kwargs["stage"] == "submit"
    assert "sk-abcdefghijklmnopqrstuvwxyz" not in error_call.kwargs["error"]


@pytest.mark.asyncio
async def test_stream_error_discards_partial_text(tmp_path):
    provider = FakeProvider(["partial "], stream_error=ConnectionError("reset"))
    result = await boost_prompt("keep me", make_endpoint(provider=provider), tmp_path)

    assert result.status is BoostStatus.FAILED
    assert result.error is ErrorKind.STREAM
    assert result.text == "keep me"


@pytest.mark.asyncio
async def test_gemini_blocked_stream_keeps_original_text(tmp_path):
    async def _chunks():
        yield SimpleNamespace(candidates=[SimpleNamespace(finish_reason=None)], text="Half a ")
        yield SimpleNamespace(candidates=[SimpleNamespace(finish_reason="RECITATION")], text=None)

    provider = GeminiProvider("g" * 40, timeout=30)
    provider.client = MagicMock()
    provider.client.aio.models.generate_content_stream = AsyncMock(return_value=_chunks())
    endpoint = make_endpoint("Gemini Test", provider, model_id="gemini-2.5-pro")

    result = await boost_prompt("keep me", endpoint, tmp_path)

    assert result.status is BoostStatus.FAILED
    assert result.error is ErrorKind.STREAM
    assert result.text == "keep me"


@pytest.mark.asyncio
async def test_missing_response_fails(tmp_path):
    endpoint = make_endpoint()

    async def _no_response(*_args, **_kwargs):
        return None

    with patch.object(type(endpoint), "send_request", _no_response):
        result = await boost_prompt("keep me", endpoint, tmp_path)

    assert result.status is BoostStatus.FAILED
    assert result.error is ErrorKind.NO_RESPONSE


@pytest.mark.asyncio
async def test_response_over_cap_fails_and_closes_stream(tmp_path):
    provider = FakeProvider(["x" * 6, "x" * 6, "never read"])
    result = await boost_prompt(
        "keep me", make_endpoint(provider=provider), tmp_path, max_response_chars=10
    )

    assert result.status is BoostStatus.FAILED
    assert result.error is ErrorKind.RESPONSE_TOO_LONG
    assert result.text == "keep me"
    assert provider.closed is True


@pytest.mark.asyncio
async def test_zero_cap_disables_length_check(tmp_path):
    provider = FakeProvider(["x" * 50])
    result = await boost_prompt(
        "p", make_endpoint(provider=provider), tmp_path, max_response_chars=0
    )
    assert result.ok


@pytest.mark.asyncio
async def test_slow_stream_times_out(tmp_path):
    provider = FakeProvider(["a", "b"], fragment_delay=1.0)
    result = await boost_prompt(
        "keep me", make_endpoint(provider=provider), tmp_path, timeout_sec=0.05
    )

    assert result.status is BoostStatus.FAILED
    assert result.error is ErrorKind.TIMEOUT
    assert result.text == "keep me"


@pytest.mark.asyncio
async def test_pre_cancelled_token_terminates_without_request(tmp_path):
    provider = FakeProvider(["never"])
    cancel = CancellationToken()
    cancel.cancel()

    result = await boost_prompt("keep me", make_endpoint(provider=provider), tmp_path, cancel=cancel)

    assert result.status is BoostStatus.TERMINATED
    assert result.error is ErrorKind.CANCELLED
    assert result.text == "keep me"
    assert provider.requests == []


@pytest.mark.asyncio
async def test_cancel_during_stream_aborts_request(tmp_path):
    provider = FakeProvider(["a", "b", "c"], fragment_delay=0.2)
    cancel = CancellationToken()
    loop = asyncio.get_running_loop()
    loop.call_later(0.05, cancel.cancel)

    result = await boost_prompt("keep me", make_endpoint(provider=provider), tmp_path, cancel=cancel)

    assert result.status is BoostStatus.TERMINATED
    assert result.text == "keep me"
    assert provider.closed is True


@pytest.mark.asyncio
async def test_task_cancellation_propagates(tmp_path):
    provider = FakeProvider(["a"], fragment_delay=5.0)
    task = asyncio.ensure_future(
        boost_prompt("p", make_endpoint(provider=provider), tmp_path, timeout_sec=0)
    )
    await asyncio.sleep(0.05)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task


@pytest.mark.asyncio
async def test_unexpected_error_is_contained(tmp_path):
    endpoint = make_endpoint(provider=FakeProvider(["ok"]))
    with patch("promptboost.boost.read_instruction_file", side_effect=RuntimeError("boom")):
        result = await boost_prompt("keep me", endpoint, tmp_path)

    assert result.status is BoostStatus.FAILED
    assert result.error is ErrorKind.UNEXPECTED
    assert result.text == "keep me"


class _TrackedFragments:
    """Fragment iterator that records whether it was closed."""

    def __init__(self, fragments):
        self._fragments = iter(fragments)
        self.closed = False

    def __aiter__(self):
        return self

    async def __anext__(self):
        try:
            return next(self._fragments)
        except StopIteration:
            raise StopAsyncIteration from None

    async def aclose(self):
        self.closed = True


@pytest.mark.asyncio
async def test_cancel_right_after_submission_closes_stream(tmp_path):
    cancel = CancellationToken()
    stream = _TrackedFragments(["never read"])

    class _CancelOnSubmit(FakeProvider):
        async def open_stream(self, messages, model, **options):
            self.requests.append((list(messages), model, dict(options)))
            cancel.cancel()
            return stream

    provider = _CancelOnSubmit()
    result = await boost_prompt("keep me", make_endpoint(provider=provider), tmp_path, cancel=cancel)

    assert result.status is BoostStatus.TERMINATED
    assert result.error is ErrorKind.CANCELLED
    assert len(provider.requests) == 1
    assert stream.closed is True

"""Claude (Anthropic) provider implementation for promptboost."""

from __future__ import annotations

from typing import Any, AsyncIterator

from anthropic import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AsyncAnthropic,
    AuthenticationError,
    BadRequestError,
    InternalServerError,
    PermissionDeniedError,
    RateLimitError,
)
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from ..logging import submission_retry_logger
from ..timeouts import (
    DEFAULT_HTTP_TIMEOUT_SEC,
    RETRY_BACKOFF_INITIAL_SEC,
    RETRY_BACKOFF_MAX_SEC,
    STANDARD_RETRY_ATTEMPTS,
    build_ai_httpx_timeout,
)
from .catalog import CLAUDE_DEFAULT_MAX_OUTPUT_TOKENS, claude_family
from .provider_logging import (
    api_error_after_retries_message,
    api_status_message,
    authentication_failed_message,
    bad_request_message,
    log_provider_error,
    log_provider_warning,
    stream_error_message,
    unexpected_error_message,
)
from .types import ChatMessage, ModelDescriptor


class ClaudeProvider:
    """Claude (Anthropic) provider implementation."""

    vendor = "claude"

    def __init__(self, api_key: str, timeout: float = DEFAULT_HTTP_TIMEOUT_SEC):
        """Initialize Claude provider.

        Args:
            api_key: Anthropic API key
            timeout: Read timeout in seconds (0 = no timeout)
        """
        # SDK retries are disabled; submission retries are handled by tenacity.
        self.client: Any = AsyncAnthropic(
            api_key=api_key,
            timeout=build_ai_httpx_timeout(timeout),
            max_retries=0,
        )
        self.timeout = timeout

    def format_messages(self, messages: list[ChatMessage]) -> list[dict[str, str]]:
        return [{"role": msg.role, "content": msg.content} for msg in messages]

    async def list_models(self) -> list[ModelDescriptor]:
        """List Claude models, newest first as returned by the API."""
        descriptors: list[ModelDescriptor] = []
        async for model in self.client.models.list():
            descriptors.append(
                ModelDescriptor(
                    id=model.id,
                    name=getattr(model, "display_name", None) or model.id,
                    family=claude_family(model.id),
                    vendor=self.vendor,
                )
            )
        return descriptors

    @retry(
        retry=retry_if_exception_type(
            (APIConnectionError, RateLimitError, APITimeoutError, InternalServerError)
        ),
        wait=wait_exponential_jitter(
            initial=RETRY_BACKOFF_INITIAL_SEC,
            max=RETRY_BACKOFF_MAX_SEC,
        ),
        stop=stop_after_attempt(STANDARD_RETRY_ATTEMPTS),
        before_sleep=submission_retry_logger("claude"),
        reraise=True,
    )
    async def _create_message_stream(self, **kwargs):
        """Create a streaming message request with retry logic."""
        return await self.client.messages.create(stream=True, **kwargs)

    async def open_stream(
        self,
        messages: list[ChatMessage],
        model: str,
        max_output_tokens: int | None = None,
    ) -> AsyncIterator[str]:
        """Submit the request and return its text fragments.

        Raises:
            anthropic.APIError: When the request is rejected (after retries)
        """
        try:
            stream = await self._create_message_stream(
                model=model,
                messages=self.format_messages(messages),
                max_tokens=max_output_tokens or CLAUDE_DEFAULT_MAX_OUTPUT_TOKENS,
            )
        except AuthenticationError as e:
            log_provider_error(self.vendor, authentication_failed_message(e))
            raise
        except PermissionDeniedError as e:
            log_provider_error(self.vendor, f"Permission denied: {e}")
            raise
        except BadRequestError as e:
            log_provider_error(self.vendor, bad_request_message(e, detail=model))
            raise
        except (APIConnectionError, APITimeoutError, RateLimitError, InternalServerError) as e:
            log_provider_error(self.vendor, api_error_after_retries_message(e))
            raise
        except APIStatusError as e:
            if e.status_code == 529:
                log_provider_error(
                    self.vendor,
                    f"Anthropic system overloaded (529): {e}",
                )
            else:
                log_provider_error(self.vendor, api_status_message(e, e.status_code))
            raise
        except Exception as e:
            log_provider_error(self.vendor, unexpected_error_message(e))
            raise

        return self._iter_text(stream)

    async def _iter_text(self, stream: Any) -> AsyncIterator[str]:
        try:
            async for event in stream:
                if event.type == "content_block_delta":
                    if getattr(event.delta, "type", None) == "text_delta" and event.delta.text:
                        yield event.delta.text
                elif event.type == "message_delta":
                    if getattr(event.delta, "stop_reason", None) == "max_tokens":
                        log_provider_warning(
                            self.vendor, "Response truncated due to max_tokens limit"
                        )
                elif event.type == "error":
                    raise RuntimeError(f"Stream error event: {getattr(event, 'error', event)}")
        except Exception as e:
            log_provider_error(self.vendor, stream_error_message(e))
            raise
        finally:
            await stream.close()

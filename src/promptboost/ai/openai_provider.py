"""OpenAI-compatible provider (OpenAI, xAI Grok, DeepSeek, Mistral).

All four vendors expose ``/models`` and streaming ``/chat/completions`` with
the OpenAI wire format, so one client class serves them with a different
base URL.
"""

from __future__ import annotations

from typing import Any, AsyncIterator, Optional

from openai import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AsyncOpenAI,
    AuthenticationError,
    BadRequestError,
    InternalServerError,
    RateLimitError,
)
from tenacity import (
    AsyncRetrying,
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
from .catalog import is_chat_model, vendor_label
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


class OpenAIProvider:
    """Chat Completions client for OpenAI and OpenAI-compatible vendors."""

    def __init__(
        self,
        api_key: str,
        timeout: float = DEFAULT_HTTP_TIMEOUT_SEC,
        *,
        vendor: str = "openai",
        base_url: Optional[str] = None,
    ):
        """Initialize the client.

        Args:
            api_key: Vendor API key
            timeout: Read timeout in seconds (0 = no timeout)
            vendor: Vendor key used in logs and model descriptors
            base_url: API root for non-OpenAI vendors
        """
        # SDK retries are disabled; submission retries are handled by tenacity.
        self.client: Any = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=build_ai_httpx_timeout(timeout),
            max_retries=0,
        )
        self.vendor = vendor
        self.timeout = timeout

    def format_messages(self, messages: list[ChatMessage]) -> list[dict[str, str]]:
        return [{"role": msg.role, "content": msg.content} for msg in messages]

    async def list_models(self) -> list[ModelDescriptor]:
        """List chat models visible to this API key."""
        descriptors: list[ModelDescriptor] = []
        async for model in self.client.models.list():
            if not is_chat_model(model.id):
                continue
            owner = getattr(model, "owned_by", None)
            descriptors.append(
                ModelDescriptor(
                    id=model.id,
                    name=model.id,
                    family=owner or vendor_label(self.vendor),
                    vendor=self.vendor,
                )
            )
        descriptors.sort(key=lambda descriptor: descriptor.name)
        return descriptors

    def _retrying(self) -> AsyncRetrying:
        """Retry policy for submissions; retry logs name this instance's vendor."""
        return AsyncRetrying(
            retry=retry_if_exception_type(
                (APIConnectionError, RateLimitError, APITimeoutError, InternalServerError)
            ),
            wait=wait_exponential_jitter(
                initial=RETRY_BACKOFF_INITIAL_SEC,
                max=RETRY_BACKOFF_MAX_SEC,
            ),
            stop=stop_after_attempt(STANDARD_RETRY_ATTEMPTS),
            before_sleep=submission_retry_logger(self.vendor),
            reraise=True,
        )

    async def _create_chat_completion(
        self,
        model: str,
        messages: list[dict[str, str]],
        max_output_tokens: int | None = None,
    ):
        """Create a streaming chat completion with retry logic."""
        kwargs: dict[str, object] = {
            "model": model,
            "messages": messages,
            "stream": True,
        }
        if max_output_tokens is not None:
            kwargs["max_tokens"] = max_output_tokens
        return await self._retrying()(self.client.chat.completions.create, **kwargs)

    async def open_stream(
        self,
        messages: list[ChatMessage],
        model: str,
        max_output_tokens: int | None = None,
    ) -> AsyncIterator[str]:
        """Submit the request and return its text fragments.

        Raises:
            openai.APIError: When the request is rejected (after retries)
        """
        try:
            stream = await self._create_chat_completion(
                model=model,
                messages=self.format_messages(messages),
                max_output_tokens=max_output_tokens,
            )
        except AuthenticationError as e:
            log_provider_error(self.vendor, authentication_failed_message(e))
            raise
        except BadRequestError as e:
            log_provider_error(self.vendor, bad_request_message(e, detail=model))
            raise
        except (APIConnectionError, APITimeoutError, RateLimitError, InternalServerError) as e:
            log_provider_error(self.vendor, api_error_after_retries_message(e))
            raise
        except APIStatusError as e:
            log_provider_error(self.vendor, api_status_message(e, e.status_code))
            raise
        except Exception as e:
            log_provider_error(self.vendor, unexpected_error_message(e))
            raise

        return self._iter_text(stream)

    async def _iter_text(self, stream: Any) -> AsyncIterator[str]:
        try:
            async for chunk in stream:
                if not chunk.choices:
                    continue
                choice = chunk.choices[0]
                delta = choice.delta
                if delta is not None and delta.content:
                    yield delta.content
                if choice.finish_reason == "length":
                    log_provider_warning(
                        self.vendor, "Response truncated due to max_tokens limit"
                    )
                elif choice.finish_reason == "content_filter":
                    log_provider_warning(self.vendor, "Response blocked by content filter")
        except Exception as e:
            log_provider_error(self.vendor, stream_error_message(e))
            raise
        finally:
            await stream.close()

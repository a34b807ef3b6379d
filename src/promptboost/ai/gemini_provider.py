"""Gemini (Google) provider implementation for promptboost."""

from __future__ import annotations

from typing import Any, AsyncIterator

from google import genai
from google.genai import types
from google.genai.errors import ClientError, ServerError

from ..constants import DISPLAY_UNKNOWN
from ..timeouts import (
    DEFAULT_HTTP_TIMEOUT_SEC,
    RETRY_BACKOFF_EXP_BASE,
    RETRY_BACKOFF_INITIAL_SEC,
    RETRY_BACKOFF_JITTER,
    RETRY_BACKOFF_MAX_SEC,
    STANDARD_RETRY_ATTEMPTS,
)
from .catalog import is_chat_model
from .provider_logging import (
    log_provider_error,
    log_provider_warning,
    stream_error_message,
    unexpected_error_message,
)
from .types import ChatMessage, ModelDescriptor

_MODEL_NAME_PREFIX = "models/"


class GeminiProvider:
    """Gemini (Google) provider implementation."""

    vendor = "gemini"

    def __init__(self, api_key: str, timeout: float = DEFAULT_HTTP_TIMEOUT_SEC):
        """Initialize Gemini provider.

        Args:
            api_key: Google API key
            timeout: Request timeout in seconds (0 = no timeout)
        """
        # Gemini SDK takes milliseconds; 0 means no timeout.
        timeout_ms = int(timeout * 1000) if timeout > 0 else None

        # The SDK retries transient status codes itself.
        retry_policy = types.HttpRetryOptions(
            attempts=STANDARD_RETRY_ATTEMPTS,
            initial_delay=RETRY_BACKOFF_INITIAL_SEC,
            exp_base=RETRY_BACKOFF_EXP_BASE,
            jitter=RETRY_BACKOFF_JITTER,
            max_delay=RETRY_BACKOFF_MAX_SEC,
            http_status_codes=[429, 503, 504],
        )
        self.client: Any = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=timeout_ms, retry_options=retry_policy),
        )
        self.timeout = timeout

    def format_messages(self, messages: list[ChatMessage]) -> list[types.Content]:
        """Convert messages to Gemini contents (``assistant`` becomes ``model``)."""
        return [
            types.Content(
                role="model" if msg.role == "assistant" else "user",
                parts=[types.Part(text=msg.content)],
            )
            for msg in messages
        ]

    async def list_models(self) -> list[ModelDescriptor]:
        """List models that support ``generateContent``."""
        descriptors: list[ModelDescriptor] = []
        pager = await self.client.aio.models.list()
        async for model in pager:
            actions = getattr(model, "supported_actions", None) or []
            if actions and "generateContent" not in actions:
                continue
            model_id = str(model.name).removeprefix(_MODEL_NAME_PREFIX)
            if not is_chat_model(model_id):
                continue
            descriptors.append(
                ModelDescriptor(
                    id=model_id,
                    name=getattr(model, "display_name", None) or model_id,
                    family=model_id.split("-")[0] if "-" in model_id else "gemini",
                    vendor=self.vendor,
                )
            )
        return descriptors

    async def open_stream(
        self,
        messages: list[ChatMessage],
        model: str,
        max_output_tokens: int | None = None,
    ) -> AsyncIterator[str]:
        """Submit the request and return its text fragments.

        Raises:
            google.genai.errors.APIError: When the request is rejected
        """
        config_kwargs: dict[str, object] = {}
        if max_output_tokens is not None:
            config_kwargs["max_output_tokens"] = max_output_tokens

        try:
            stream = await self.client.aio.models.generate_content_stream(
                model=model,
                contents=self.format_messages(messages),
                config=types.GenerateContentConfig(**config_kwargs),
            )
        except ClientError as e:
            status_code = getattr(e, "code", DISPLAY_UNKNOWN)
            log_provider_error(self.vendor, f"Client error ({status_code}): {e}")
            raise
        except ServerError as e:
            status_code = getattr(e, "code", DISPLAY_UNKNOWN)
            log_provider_error(self.vendor, f"Server error ({status_code}) after retries: {e}")
            raise
        except Exception as e:
            log_provider_error(self.vendor, unexpected_error_message(e))
            raise

        return self._iter_text(stream)

    async def _iter_text(self, stream: Any) -> AsyncIterator[str]:
        try:
            async for chunk in stream:
                if chunk.candidates:
                    finish_reason = getattr(chunk.candidates[0], "finish_reason", None)
                    if finish_reason in ("SAFETY", "RECITATION"):
                        # Fragments before a block are not a usable rewrite.
                        raise RuntimeError(f"Response blocked (finish_reason={finish_reason})")
                    if finish_reason == "MAX_TOKENS":
                        log_provider_warning(self.vendor, "Response truncated due to max tokens")
                if chunk.text:
                    yield chunk.text
        except Exception as e:
            log_provider_error(self.vendor, stream_error_message(e))
            raise

from __future__ import annotations

import logging
import threading
from typing import Any, Sequence

import openai
from openai import OpenAI

from .chat_request import prepare_messages, to_api_payload
from .config import AppConfig
from .models import AIModel, ChatMessage
from .prompts import DEFAULT_SYSTEM_PROMPT, FALLBACK_RESPONSE

logger = logging.getLogger(__name__)


class ChatServiceError(RuntimeError):
    """Raised when the chat-completion request cannot be completed."""


class OpenAIService:
    """Forward chat messages to the OpenAI Chat Completions API."""

    def __init__(
        self,
        api_key: str | None,
        base_url: str | None = None,
        temperature: float = 0.7,
        timeout: float = 60.0,
        client: Any | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url
        self._temperature = temperature
        self._timeout = timeout
        self._client = client
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: AppConfig) -> "OpenAIService":
        return cls(
            api_key=config.api_key,
            base_url=config.base_url,
            temperature=config.temperature,
            timeout=config.timeout_sec,
        )

    def availability_error(self) -> str | None:
        if self._client is None and not self._api_key:
            return (
                "OpenAI API key is not configured. Set OPENAI_API_KEY or "
                "openai.api_key in freewrite_settings.json."
            )
        return None

    def generate_response_with_messages(self, messages: Sequence[ChatMessage], model: AIModel) -> str:
        return self._complete(prepare_messages(messages), model, self._temperature)

    def generate_response(
        self,
        prompt: str,
        model: AIModel,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
    ) -> str:
        """Send a single prompt at the endpoint's default temperature."""

        messages = [
            ChatMessage(role="system", content=system_prompt),
            ChatMessage(role="user", content=prompt),
        ]
        return self._complete(messages, model, None)

    def _complete(self, messages: Sequence[ChatMessage], model: AIModel, temperature: float | None) -> str:
        logger.info("Sending chat request with %d messages to %s", len(messages), model.value)
        request: dict[str, Any] = {
            "model": model.value,
            "messages": to_api_payload(messages),
        }
        if temperature is not None and not model.is_reasoning:
            request["temperature"] = temperature

        client = self._ensure_client()
        try:
            result = client.chat.completions.create(**request)
        except openai.OpenAIError as exc:
            logger.error("Chat API error: %s", exc)
            raise ChatServiceError(str(exc)) from exc
        return _first_choice_content(result)

    def _ensure_client(self) -> Any:
        if self._client is not None:
            return self._client

        error = self.availability_error()
        if error:
            raise ChatServiceError(error)

        with self._lock:
            if self._client is None:
                self._client = OpenAI(
                    api_key=self._api_key,
                    base_url=self._base_url,
                    timeout=self._timeout,
                )
        return self._client


def _first_choice_content(result: Any) -> str:
    choices = getattr(result, "choices", None) or []
    if choices:
        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None)
        if isinstance(content, str) and content:
            return content
    logger.warning("No content in response choices")
    return FALLBACK_RESPONSE

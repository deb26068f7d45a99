from __future__ import annotations

import logging
from typing import Iterable, Sequence

from .models import ChatMessage
from .prompts import CHAT_SYSTEM_PROMPT, DEFAULT_SYSTEM_PROMPT, GREETING_MESSAGE, WRITING_COACH_PROMPT

logger = logging.getLogger(__name__)


def normalize_user_input(text: str | None) -> str | None:
    if text is None:
        return None
    stripped = text.strip()
    return stripped or None


def prepare_messages(
    messages: Sequence[ChatMessage],
    system_prompt: str = DEFAULT_SYSTEM_PROMPT,
) -> list[ChatMessage]:
    """Return a copy of ``messages`` whose first entry is a system instruction.

    An empty sequence becomes the system prompt plus a greeting. A sequence
    whose system message is not leading has every system message replaced by
    a single ``system_prompt`` at the front.
    """

    if not messages:
        logger.warning("Empty message list, sending default system prompt and greeting")
        return [
            ChatMessage(role="system", content=system_prompt),
            ChatMessage(role="user", content=GREETING_MESSAGE),
        ]

    processed = list(messages)
    has_system = any(message.role == "system" for message in processed)
    if not has_system:
        logger.info("No system message found, adding one at the beginning")
        processed.insert(0, ChatMessage(role="system", content=system_prompt))
    elif processed[0].role != "system":
        logger.info("System message not at index 0, rearranging")
        processed = [message for message in processed if message.role != "system"]
        processed.insert(0, ChatMessage(role="system", content=system_prompt))
    return processed


def build_chat_messages(
    history: Iterable[ChatMessage],
    system_prompt: str = CHAT_SYSTEM_PROMPT,
) -> list[ChatMessage]:
    messages = [ChatMessage(role="system", content=system_prompt)]
    # 画面上の履歴はユーザ/アシスタントのやり取りのみを送信する
    messages.extend(message for message in history if message.role in ("user", "assistant"))
    if logger.isEnabledFor(logging.DEBUG):
        for index, message in enumerate(messages):
            logger.debug("[%d] %s: %s...", index, message.role, message.content[:30])
    return messages


def build_feedback_messages(text: str) -> list[ChatMessage]:
    content = normalize_user_input(text)
    if content is None:
        raise ValueError("There is no writing to review.")
    return [
        ChatMessage(role="system", content=WRITING_COACH_PROMPT),
        ChatMessage(role="user", content=content),
    ]


def to_api_payload(messages: Iterable[ChatMessage]) -> list[dict[str, str]]:
    return [{"role": message.role, "content": message.content} for message in messages]

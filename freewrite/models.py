from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Iterable, Literal, get_args

DEFAULT_TITLE = "New chat"


def utc_now_iso() -> str:
    return datetime.now(tz=timezone.utc).replace(microsecond=0).isoformat()


ChatRole = Literal["system", "user", "assistant"]
CHAT_ROLES: tuple[str, ...] = get_args(ChatRole)


def _timestamp(payload: dict, key: str) -> str:
    value = payload.get(key)
    if value is None:
        return utc_now_iso()
    if not isinstance(value, str):
        # 並び替えで比較できるよう時刻は文字列のみ受け付ける
        raise TypeError(f"{key} must be an ISO-8601 string.")
    return value


class AIModel(str, Enum):
    GPT4O = "gpt-4o"
    GPT4O_MINI = "gpt-4o-mini"
    O4_MINI = "o4-mini"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def is_reasoning(self) -> bool:
        # o 系列は temperature を受け付けない
        return self.value.startswith("o")

    @classmethod
    def from_value(cls, value: object, default: "AIModel") -> "AIModel":
        for model in cls:
            if model.value == value:
                return model
        return default


_DISPLAY_NAMES = {
    AIModel.GPT4O: "GPT-4O",
    AIModel.GPT4O_MINI: "GPT-4O Mini",
    AIModel.O4_MINI: "O4 Mini",
}


@dataclass
class ChatMessage:
    role: ChatRole
    content: str
    created_at: str = field(default_factory=utc_now_iso)
    message_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def __str__(self) -> str:
        return f"ChatMessage(role: {self.role}, content: {self.content[:20]}..., timestamp: {self.created_at})"

    def to_dict(self) -> dict:
        return {
            "message_id": self.message_id,
            "role": self.role,
            "content": self.content,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, payload: dict) -> "ChatMessage":
        role = payload["role"]
        content = payload["content"]
        if role not in CHAT_ROLES:
            raise TypeError(f"Unknown chat role: {role!r}")
        if not isinstance(content, str):
            raise TypeError("Message content must be a string.")
        return cls(
            role=role,
            content=content,
            created_at=_timestamp(payload, "created_at"),
            message_id=payload.get("message_id") or uuid.uuid4().hex,
        )


@dataclass
class Conversation:
    conversation_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    title: str = DEFAULT_TITLE
    created_at: str = field(default_factory=utc_now_iso)
    updated_at: str = field(default_factory=utc_now_iso)
    messages: list[ChatMessage] = field(default_factory=list)

    def append_message(self, message: ChatMessage) -> None:
        self.messages.append(message)
        self.updated_at = utc_now_iso()
        if self.title == DEFAULT_TITLE and self._should_update_title(message):
            self.title = self._derive_title_from_message(message)

    def extend_messages(self, messages: Iterable[ChatMessage]) -> None:
        for message in messages:
            self.append_message(message)

    def clear_messages(self) -> None:
        self.messages.clear()
        self.title = DEFAULT_TITLE
        self.updated_at = utc_now_iso()

    def dialogue(self) -> list[ChatMessage]:
        return [message for message in self.messages if message.role != "system"]

    @property
    def is_empty(self) -> bool:
        return not self.messages

    def to_dict(self) -> dict:
        return {
            "conversation_id": self.conversation_id,
            "title": self.title,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "messages": [message.to_dict() for message in self.messages],
        }

    @classmethod
    def from_dict(cls, payload: dict) -> "Conversation":
        messages = [ChatMessage.from_dict(m) for m in payload.get("messages", [])]
        title = payload.get("title")
        if not isinstance(title, str) or not title.strip():
            title = DEFAULT_TITLE
        return cls(
            conversation_id=payload["conversation_id"],
            title=title,
            created_at=_timestamp(payload, "created_at"),
            updated_at=_timestamp(payload, "updated_at"),
            messages=messages,
        )

    @staticmethod
    def _should_update_title(message: ChatMessage) -> bool:
        return message.role == "user" and bool(message.content.strip())

    @staticmethod
    def _derive_title_from_message(message: ChatMessage) -> str:
        clean = " ".join(message.content.strip().split())
        return clean[:32] if clean else DEFAULT_TITLE

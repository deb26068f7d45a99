from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable

from .models import Conversation

logger = logging.getLogger(__name__)


class ConversationStore:
    """JSON file holding the saved chat conversations, newest first."""

    def __init__(self, path: Path, max_conversations: int = 60) -> None:
        self._path = path
        self._max_conversations = max(1, max_conversations)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[Conversation]:
        if not self._path.exists():
            return []
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Failed to read conversation history %s: %s", self._path, exc)
            return []

        raw_items = payload.get("conversations") if isinstance(payload, dict) else None
        if not isinstance(raw_items, list):
            return []

        conversations: list[Conversation] = []
        for raw in raw_items:
            if not isinstance(raw, dict):
                continue
            try:
                conversations.append(Conversation.from_dict(raw))
            except (KeyError, TypeError) as exc:
                logger.warning("Skipping malformed conversation entry: %s", exc)
        return _sorted(conversations)

    def save(self, conversations: Iterable[Conversation]) -> list[Conversation]:
        kept = _sorted(conversations)[: self._max_conversations]
        payload = {"conversations": [conversation.to_dict() for conversation in kept]}
        self._path.parent.mkdir(parents=True, exist_ok=True)
        # 途中で落ちても既存ファイルを壊さないよう一時ファイル経由で置き換える
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        return kept

    def upsert(self, conversation: Conversation) -> list[Conversation]:
        others = [c for c in self.load() if c.conversation_id != conversation.conversation_id]
        return self.save([conversation, *others])

    def delete(self, conversation_id: str) -> list[Conversation]:
        remaining = [c for c in self.load() if c.conversation_id != conversation_id]
        return self.save(remaining)


def _sorted(conversations: Iterable[Conversation]) -> list[Conversation]:
    return sorted(conversations, key=lambda c: c.updated_at, reverse=True)

from __future__ import annotations

from typing import Iterable

from PySide6.QtCore import QObject, Signal, Slot

from ..models import AIModel, ChatMessage
from ..openai_service import OpenAIService


class ChatWorker(QObject):
    finished = Signal(str)
    failed = Signal(str)

    def __init__(self, service: OpenAIService, messages: Iterable[ChatMessage], model: AIModel) -> None:
        super().__init__()
        self._service = service
        self._messages = list(messages)
        self._model = model

    @Slot()
    def run(self) -> None:
        try:
            # GUI スレッドを塞がないよう別スレッドで API を呼び出す
            response = self._service.generate_response_with_messages(self._messages, self._model)
        except Exception as exc:  # pragma: no cover - runtime safety
            self.failed.emit(str(exc))
            return
        self.finished.emit(response)

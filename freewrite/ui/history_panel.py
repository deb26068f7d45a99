from __future__ import annotations

from datetime import datetime
from typing import Iterable

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QLabel,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from ..models import Conversation


class HistoryPanel(QWidget):
    conversation_selected = Signal(str)
    new_conversation_requested = Signal()
    delete_requested = Signal(str)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._conversations: list[Conversation] = []

        self._title_label = QLabel("Chats", self)
        self._title_label.setStyleSheet("font-weight: 600; font-size: 14px;")

        self._list = QListWidget(self)
        self._list.itemSelectionChanged.connect(self._on_selection_changed)

        self._new_button = QPushButton("New chat", self)
        self._new_button.clicked.connect(self.new_conversation_requested.emit)

        self._delete_button = QPushButton("Delete chat", self)
        self._delete_button.clicked.connect(self._on_delete_clicked)
        self._delete_button.setEnabled(False)

        layout = QVBoxLayout()
        layout.addWidget(self._title_label)
        layout.addWidget(self._new_button)
        layout.addWidget(self._delete_button)
        layout.addWidget(self._list, stretch=1)
        layout.setContentsMargins(4, 4, 4, 4)
        layout.setSpacing(8)
        self.setLayout(layout)

    def set_conversations(self, conversations: Iterable[Conversation], selected_id: str | None = None) -> None:
        selected_id = selected_id or self.current_conversation_id
        self._conversations = list(conversations)
        # 再構築中は選択シグナルを止めて会話の再読み込みループを防ぐ
        self._list.blockSignals(True)
        self._list.clear()
        for conversation in self._conversations:
            item = QListWidgetItem(format_conversation_title(conversation))
            item.setData(Qt.UserRole, conversation.conversation_id)
            self._list.addItem(item)
            if conversation.conversation_id == selected_id:
                self._list.setCurrentItem(item)
        self._list.blockSignals(False)
        self._update_button_states()

    @property
    def current_conversation_id(self) -> str | None:
        item = self._list.currentItem()
        if not item:
            return None
        return item.data(Qt.UserRole)

    def _on_selection_changed(self) -> None:
        conversation_id = self.current_conversation_id
        self._update_button_states()
        if conversation_id:
            self.conversation_selected.emit(conversation_id)

    def _on_delete_clicked(self) -> None:
        conversation_id = self.current_conversation_id
        if conversation_id:
            self.delete_requested.emit(conversation_id)

    def _update_button_states(self) -> None:
        self._delete_button.setEnabled(self.current_conversation_id is not None)


def format_conversation_title(conversation: Conversation) -> str:
    try:
        dt = datetime.fromisoformat(conversation.updated_at)
        timestamp = dt.astimezone().strftime("%Y-%m-%d %H:%M")
    except ValueError:
        timestamp = conversation.updated_at
    return f"{conversation.title}  ({timestamp})"

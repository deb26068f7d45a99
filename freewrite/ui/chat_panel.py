from __future__ import annotations

from typing import Iterable

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QFont, QKeySequence, QShortcut, QTextCursor
from PySide6.QtWidgets import (
    QComboBox,
    QHBoxLayout,
    QLabel,
    QPlainTextEdit,
    QProgressBar,
    QPushButton,
    QSizePolicy,
    QTextEdit,
    QVBoxLayout,
    QWidget,
)

from ..chat_request import normalize_user_input
from ..models import AIModel, ChatMessage, Conversation
from ..prompts import EMPTY_CHAT_HINT
from ..rendering import render_message_html


class ChatPanel(QWidget):
    message_submitted = Signal(str)
    load_editor_requested = Signal()
    feedback_requested = Signal()
    clear_requested = Signal()
    model_changed = Signal(object)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._current_conversation: Conversation | None = None
        self._assistant_label = "AI"
        self._is_busy = False

        self._model_combo = QComboBox(self)
        for model in AIModel:
            self._model_combo.addItem(model.display_name, model)
        self._model_combo.setCurrentIndex(self._model_combo.findData(AIModel.GPT4O_MINI))
        self._model_combo.setFixedWidth(140)
        self._model_combo.currentIndexChanged.connect(self._handle_model_selection)

        self._load_editor_button = QPushButton("Load editor", self)
        self._load_editor_button.setToolTip("Load editor content")
        self._load_editor_button.clicked.connect(self.load_editor_requested.emit)

        self._feedback_button = QPushButton("Feedback", self)
        self._feedback_button.setToolTip("Ask for feedback on the editor content")
        self._feedback_button.clicked.connect(self.feedback_requested.emit)

        self._clear_button = QPushButton("Clear", self)
        self._clear_button.setToolTip("Clear chat history")
        self._clear_button.clicked.connect(self.clear_requested.emit)

        header = QHBoxLayout()
        header.addWidget(self._model_combo)
        header.addStretch()
        header.addWidget(self._load_editor_button)
        header.addWidget(self._feedback_button)
        header.addWidget(self._clear_button)
        header.setContentsMargins(8, 0, 8, 0)

        self._transcript = QTextEdit(self)
        self._transcript.setReadOnly(True)
        self._transcript.setMinimumHeight(300)
        font = QFont()
        font.setPointSize(14)
        self._transcript.setFont(font)

        self._progress = QProgressBar(self)
        # 範囲 0-0 で不定（ビジー）表示になる
        self._progress.setRange(0, 0)
        self._progress.setTextVisible(False)
        self._progress.setFixedHeight(4)
        self._progress.setVisible(False)

        self._error_label = QLabel("", self)
        self._error_label.setObjectName("ChatErrorLabel")
        self._error_label.setStyleSheet("color: #d0342c;")
        self._error_label.setWordWrap(True)
        self._error_label.setVisible(False)

        self._input = QPlainTextEdit(self)
        self._input.setPlaceholderText("Type your message here...")
        self._input.setFixedHeight(96)
        self._input.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)
        self._input.textChanged.connect(self._refresh_controls)

        self._send_button = QPushButton("Send", self)
        self._send_button.clicked.connect(self._handle_submit)

        submit_shortcut = QShortcut(QKeySequence("Ctrl+Return"), self._input)
        submit_shortcut.activated.connect(self._handle_submit)

        input_row = QHBoxLayout()
        input_row.addWidget(self._input, stretch=1)
        input_row.addWidget(self._send_button, alignment=Qt.AlignBottom)
        input_row.setSpacing(8)

        layout = QVBoxLayout()
        layout.addLayout(header)
        layout.addWidget(self._transcript, stretch=1)
        layout.addWidget(self._progress)
        layout.addWidget(self._error_label)
        layout.addLayout(input_row)
        layout.setContentsMargins(8, 8, 8, 8)
        layout.setSpacing(10)
        self.setLayout(layout)
        self._render_messages([])
        self._refresh_controls()

    # Public API ---------------------------------------------------------
    @property
    def selected_model(self) -> AIModel:
        model = self._model_combo.currentData()
        return model if isinstance(model, AIModel) else AIModel.GPT4O_MINI

    @property
    def is_busy(self) -> bool:
        return self._is_busy

    def set_selected_model(self, model: AIModel) -> None:
        index = self._model_combo.findData(model)
        if index < 0:
            return
        self._model_combo.blockSignals(True)
        self._model_combo.setCurrentIndex(index)
        self._model_combo.blockSignals(False)

    def display_conversation(self, conversation: Conversation) -> None:
        self._current_conversation = conversation
        self._render_messages(conversation.dialogue())
        self.clear_error()

    def append_message(self, message: ChatMessage) -> None:
        if self._current_conversation and len(self._current_conversation.dialogue()) == 1:
            # 空状態のヒントを消してから最初のメッセージを描画する
            self._render_messages(self._current_conversation.dialogue())
            return
        self._transcript.moveCursor(QTextCursor.End)
        self._transcript.insertHtml(render_message_html(message, self._assistant_label))
        self._transcript.insertPlainText("\n")
        self._transcript.moveCursor(QTextCursor.End)

    def set_busy(self, is_busy: bool) -> None:
        self._is_busy = is_busy
        self._progress.setVisible(is_busy)
        self._refresh_controls()

    def set_assistant_label(self, label: str) -> None:
        normalized = (label or "AI").strip() or "AI"
        if normalized == self._assistant_label:
            return
        self._assistant_label = normalized
        if self._current_conversation:
            self._render_messages(self._current_conversation.dialogue())

    def show_error(self, text: str) -> None:
        self._error_label.setText(text)
        self._error_label.setVisible(bool(text))

    def error_text(self) -> str:
        return self._error_label.text()

    def clear_error(self) -> None:
        self.show_error("")

    def set_input_text(self, text: str) -> None:
        self._input.setPlainText(text)
        self._input.moveCursor(QTextCursor.End)
        self._input.setFocus()

    def input_text(self) -> str:
        return self._input.toPlainText()

    # Internal helpers ---------------------------------------------------
    def _handle_submit(self) -> None:
        if self._is_busy:
            return
        text = normalize_user_input(self._input.toPlainText())
        if text is None:
            return
        self._input.clear()
        self.message_submitted.emit(text)

    def _handle_model_selection(self) -> None:
        self.model_changed.emit(self.selected_model)

    def _render_messages(self, messages: Iterable[ChatMessage]) -> None:
        self._transcript.clear()
        messages = list(messages)
        if not messages:
            self._transcript.setHtml(
                f'<p align="center" style="color:#9a9a9a; margin-top:80px;">{EMPTY_CHAT_HINT}</p>'
            )
            return
        for message in messages:
            self._transcript.insertHtml(render_message_html(message, self._assistant_label))
            self._transcript.insertPlainText("\n")
        self._transcript.moveCursor(QTextCursor.End)

    def _refresh_controls(self) -> None:
        has_text = normalize_user_input(self._input.toPlainText()) is not None
        self._send_button.setDisabled(self._is_busy or not has_text)
        self._feedback_button.setDisabled(self._is_busy)
        self._clear_button.setDisabled(self._is_busy)
        self._input.setReadOnly(self._is_busy)

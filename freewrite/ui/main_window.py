from __future__ import annotations

import logging

from PySide6.QtCore import QThread, Qt
from PySide6.QtGui import QCloseEvent, QFont
from PySide6.QtWidgets import QMainWindow, QPlainTextEdit, QSplitter

from ..chat_request import build_chat_messages, build_feedback_messages, normalize_user_input
from ..config import AppConfig
from ..history import ConversationStore
from ..models import AIModel, ChatMessage, Conversation
from ..openai_service import OpenAIService
from .chat_panel import ChatPanel
from .history_panel import HistoryPanel
from .workers import ChatWorker

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, config: AppConfig, service: OpenAIService | None = None) -> None:
        super().__init__()
        self._config = config
        self._config.paths.ensure()
        self._service = service or OpenAIService.from_config(config)
        self._store = ConversationStore(config.paths.history_file, config.max_conversations)
        self._conversations = self._store.load()
        self._current = Conversation()
        self._model = config.default_model
        self._thread: QThread | None = None
        self._worker: ChatWorker | None = None
        self._pending_conversation: Conversation | None = None

        self.setWindowTitle("Freewrite")
        self.resize(1280, 800)

        self._editor = QPlainTextEdit(self)
        self._editor.setPlaceholderText("Begin writing...")
        editor_font = QFont()
        editor_font.setPointSize(config.editor_font_size)
        self._editor.setFont(editor_font)

        self._chat_panel = ChatPanel(self)
        self._chat_panel.set_assistant_label(config.assistant_label)
        self._chat_panel.set_selected_model(self._model)
        self._chat_panel.message_submitted.connect(self._handle_message_submitted)
        self._chat_panel.feedback_requested.connect(self._handle_feedback_requested)
        self._chat_panel.load_editor_requested.connect(self._handle_load_editor)
        self._chat_panel.clear_requested.connect(self._handle_clear_chat)
        self._chat_panel.model_changed.connect(self._handle_model_changed)

        self._history_panel = HistoryPanel(self)
        self._history_panel.conversation_selected.connect(self._handle_conversation_selected)
        self._history_panel.new_conversation_requested.connect(self._handle_new_conversation)
        self._history_panel.delete_requested.connect(self._handle_delete_conversation)

        splitter = QSplitter(Qt.Horizontal, self)
        splitter.addWidget(self._history_panel)
        splitter.addWidget(self._editor)
        splitter.addWidget(self._chat_panel)
        splitter.setStretchFactor(0, 0)
        splitter.setStretchFactor(1, 3)
        splitter.setStretchFactor(2, 2)
        splitter.setSizes([200, 680, 400])
        self.setCentralWidget(splitter)

        self._load_draft()
        self._history_panel.set_conversations(self._conversations)
        self._chat_panel.display_conversation(self._current)

        error = self._service.availability_error()
        if error:
            self._chat_panel.show_error(error)

    # Chat ---------------------------------------------------------------
    def _handle_message_submitted(self, text: str) -> None:
        if self._thread is not None:
            return
        message = ChatMessage(role="user", content=text)
        self._current.append_message(message)
        self._chat_panel.append_message(message)
        self._chat_panel.clear_error()
        self._start_request(build_chat_messages(self._current.dialogue()))

    def _handle_feedback_requested(self) -> None:
        if self._thread is not None:
            return
        text = normalize_user_input(self._editor.toPlainText())
        if text is None:
            self._chat_panel.show_error("Write something in the editor first.")
            return
        message = ChatMessage(role="user", content=text)
        self._current.append_message(message)
        self._chat_panel.append_message(message)
        self._chat_panel.clear_error()
        self._start_request(build_feedback_messages(text))

    def _start_request(self, messages: list[ChatMessage]) -> None:
        self._pending_conversation = self._current
        self._chat_panel.set_busy(True)

        thread = QThread(self)
        worker = ChatWorker(self._service, messages, self._model)
        worker.moveToThread(thread)
        thread.started.connect(worker.run)
        worker.finished.connect(self._handle_reply)
        worker.failed.connect(self._handle_failure)
        worker.finished.connect(thread.quit)
        worker.failed.connect(thread.quit)
        thread.finished.connect(worker.deleteLater)
        thread.finished.connect(thread.deleteLater)
        thread.finished.connect(self._clear_request)
        self._thread = thread
        self._worker = worker
        thread.start()

    def _handle_reply(self, text: str) -> None:
        conversation = self._pending_conversation or self._current
        message = ChatMessage(role="assistant", content=text)
        conversation.append_message(message)
        if conversation is self._current:
            self._chat_panel.append_message(message)
        self._persist(conversation)

    def _handle_failure(self, error: str) -> None:
        logger.error("Chat API error: %s", error)
        self._chat_panel.show_error(f"Error: {error}")
        if self._pending_conversation is not None:
            self._persist(self._pending_conversation)

    def _clear_request(self) -> None:
        self._thread = None
        self._worker = None
        self._pending_conversation = None
        self._chat_panel.set_busy(False)

    def _handle_load_editor(self) -> None:
        self._chat_panel.set_input_text(self._editor.toPlainText())

    def _handle_clear_chat(self) -> None:
        if self._thread is not None:
            return
        self._current.clear_messages()
        self._chat_panel.display_conversation(self._current)
        self._persist(self._current)

    def _handle_model_changed(self, model: AIModel) -> None:
        self._model = model

    # History ------------------------------------------------------------
    def _handle_conversation_selected(self, conversation_id: str) -> None:
        if conversation_id == self._current.conversation_id:
            return
        for conversation in self._conversations:
            if conversation.conversation_id == conversation_id:
                self._current = conversation
                self._chat_panel.display_conversation(conversation)
                return

    def _handle_new_conversation(self) -> None:
        self._current = Conversation()
        self._chat_panel.display_conversation(self._current)
        self._history_panel.set_conversations(self._conversations, self._current.conversation_id)

    def _handle_delete_conversation(self, conversation_id: str) -> None:
        if self._pending_conversation and self._pending_conversation.conversation_id == conversation_id:
            return
        self._conversations = self._store.delete(conversation_id)
        if conversation_id == self._current.conversation_id:
            self._current = Conversation()
            self._chat_panel.display_conversation(self._current)
        self._history_panel.set_conversations(self._conversations, self._current.conversation_id)

    def _persist(self, conversation: Conversation) -> None:
        try:
            if conversation.is_empty:
                self._conversations = self._store.delete(conversation.conversation_id)
            else:
                self._conversations = self._store.upsert(conversation)
        except OSError as exc:
            logger.warning("Failed to save conversation history: %s", exc)
            return
        self._history_panel.set_conversations(self._conversations, self._current.conversation_id)

    # Draft --------------------------------------------------------------
    def _load_draft(self) -> None:
        path = self._config.paths.draft_file
        if not path.exists():
            return
        try:
            self._editor.setPlainText(path.read_text(encoding="utf-8"))
        except OSError as exc:
            logger.warning("Failed to load draft %s: %s", path, exc)

    def _save_draft(self) -> None:
        path = self._config.paths.draft_file
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(self._editor.toPlainText(), encoding="utf-8")
        except OSError as exc:
            logger.warning("Failed to save draft %s: %s", path, exc)

    def closeEvent(self, event: QCloseEvent) -> None:  # noqa: N802 - Qt API
        self._save_draft()
        if self._thread is not None:
            self._thread.quit()
            self._thread.wait(2000)
        super().closeEvent(event)

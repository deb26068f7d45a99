"""Tests for freewrite.ui.workers.ChatWorker, run synchronously on the test thread."""

import pytest

from freewrite.models import AIModel
from freewrite.openai_service import ChatServiceError, OpenAIService

from .conftest import make_mock_client

pytest.importorskip("PySide6.QtCore")

from freewrite.ui.workers import ChatWorker  # noqa: E402


def _run(worker):
    finished, failed = [], []
    worker.finished.connect(lambda text: finished.append(text))
    worker.failed.connect(lambda error: failed.append(error))
    worker.run()
    return finished, failed


class TestChatWorker:
    def test_emits_finished_with_reply(self, qapp, dialogue):
        service = OpenAIService(api_key="sk-test", client=make_mock_client("Nice line."))
        finished, failed = _run(ChatWorker(service, dialogue, AIModel.GPT4O_MINI))
        assert finished == ["Nice line."]
        assert failed == []

    def test_emits_failed_on_service_error(self, qapp, dialogue):
        service = OpenAIService(api_key="sk-test", client=make_mock_client(side_effect=ChatServiceError("down")))
        finished, failed = _run(ChatWorker(service, dialogue, AIModel.GPT4O_MINI))
        assert finished == []
        assert failed == ["down"]

    def test_missing_key_reports_failure(self, qapp, dialogue):
        finished, failed = _run(ChatWorker(OpenAIService(api_key=None), dialogue, AIModel.GPT4O))
        assert finished == []
        assert "API key" in failed[0]

"""
Shared fixtures and factories for the Freewrite test suite.

The OpenAI client is never constructed for real: every service under test
receives a MagicMock client whose ``chat.completions.create`` returns a
SimpleNamespace shaped like a ChatCompletion.
"""

import os
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from freewrite.models import ChatMessage


def make_completion(content="Hi there"):
    """Build an object shaped like openai's ChatCompletion response."""
    if content is None:
        choices = []
    else:
        choices = [SimpleNamespace(message=SimpleNamespace(role="assistant", content=content))]
    return SimpleNamespace(choices=choices)


def make_mock_client(content="Hi there", side_effect=None):
    client = MagicMock()
    if side_effect is not None:
        client.chat.completions.create.side_effect = side_effect
    else:
        client.chat.completions.create.return_value = make_completion(content)
    return client


@pytest.fixture
def mock_client():
    return make_mock_client()


@pytest.fixture
def dialogue():
    return [
        ChatMessage(role="user", content="Can you review my opening line?"),
        ChatMessage(role="assistant", content="Sure, paste it here."),
        ChatMessage(role="user", content="It was a dark and stormy night."),
    ]


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch, tmp_path):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("FREEWRITE_OPENAI_API_KEY", raising=False)
    monkeypatch.setenv("FREEWRITE_HOME", str(tmp_path / "home"))


@pytest.fixture(scope="session")
def qapp():
    """A QApplication on the offscreen platform, shared by the Qt tests."""
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    QtWidgets = pytest.importorskip("PySide6.QtWidgets")
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    yield app

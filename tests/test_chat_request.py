"""Tests for freewrite.chat_request: input trimming and system-prompt placement."""

import logging

import pytest

from freewrite.chat_request import (
    build_chat_messages,
    build_feedback_messages,
    normalize_user_input,
    prepare_messages,
    to_api_payload,
)
from freewrite.models import ChatMessage
from freewrite.prompts import (
    CHAT_SYSTEM_PROMPT,
    DEFAULT_SYSTEM_PROMPT,
    GREETING_MESSAGE,
    WRITING_COACH_PROMPT,
)


class TestNormalizeUserInput:
    @pytest.mark.parametrize("raw", ["", "   ", "\n\t ", None])
    def test_blank_input_is_rejected(self, raw):
        assert normalize_user_input(raw) is None

    def test_surrounding_whitespace_is_stripped(self):
        assert normalize_user_input("  hello\nworld \n") == "hello\nworld"


class TestPrepareMessages:
    def test_empty_list_gets_system_prompt_and_greeting(self, caplog):
        with caplog.at_level(logging.WARNING):
            result = prepare_messages([])
        assert [(m.role, m.content) for m in result] == [
            ("system", DEFAULT_SYSTEM_PROMPT),
            ("user", GREETING_MESSAGE),
        ]
        assert "Empty message list" in caplog.text

    def test_missing_system_message_is_inserted_first(self, dialogue):
        result = prepare_messages(dialogue)
        assert result[0].role == "system"
        assert result[0].content == DEFAULT_SYSTEM_PROMPT
        assert result[1:] == dialogue

    def test_misplaced_system_messages_are_replaced(self, dialogue):
        messages = [
            dialogue[0],
            ChatMessage(role="system", content="stale rules"),
            dialogue[1],
            ChatMessage(role="system", content="more rules"),
            dialogue[2],
        ]
        result = prepare_messages(messages)
        assert [m.role for m in result].count("system") == 1
        assert result[0].content == DEFAULT_SYSTEM_PROMPT
        assert result[1:] == dialogue

    def test_leading_system_message_is_kept(self, dialogue):
        messages = [ChatMessage(role="system", content="custom"), *dialogue]
        result = prepare_messages(messages)
        assert result == messages

    def test_input_is_not_mutated(self, dialogue):
        original = list(dialogue)
        prepare_messages(dialogue)
        assert dialogue == original

    def test_custom_system_prompt(self, dialogue):
        result = prepare_messages(dialogue, system_prompt="Be terse.")
        assert result[0].content == "Be terse."


class TestBuildChatMessages:
    def test_system_prompt_precedes_history(self, dialogue):
        result = build_chat_messages(dialogue)
        assert result[0].role == "system"
        assert result[0].content == CHAT_SYSTEM_PROMPT
        assert result[1:] == dialogue

    def test_history_system_messages_are_dropped(self, dialogue):
        history = [ChatMessage(role="system", content="old"), *dialogue]
        result = build_chat_messages(history)
        assert [m.role for m in result].count("system") == 1


class TestBuildFeedbackMessages:
    def test_uses_writing_coach_prompt(self):
        result = build_feedback_messages("  My draft.  ")
        assert result[0].role == "system"
        assert result[0].content == WRITING_COACH_PROMPT
        assert (result[1].role, result[1].content) == ("user", "My draft.")

    def test_blank_text_raises(self):
        with pytest.raises(ValueError):
            build_feedback_messages("   ")


def test_to_api_payload_only_carries_role_and_content(dialogue):
    payload = to_api_payload(dialogue[:1])
    assert payload == [{"role": "user", "content": "Can you review my opening line?"}]

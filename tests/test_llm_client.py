from unittest.mock import MagicMock, patch

import pytest

import anthropic_client
import llm_client


def _openai_client(content: str | None) -> MagicMock:
    mock_choice = MagicMock()
    mock_choice.message.content = content
    mock_response = MagicMock()
    mock_response.choices = [mock_choice]

    mock_client = MagicMock()
    mock_client.chat.completions.create.return_value = mock_response
    return mock_client


def test_openai_judge_returns_raw_text() -> None:
    mock_client = _openai_client('Here you go: [{"score": 2, "skip": true}]')

    with patch("llm_client.OpenAI", return_value=mock_client), \
         patch.dict("os.environ", {"OPENAI_API_KEY": "test-key"}):
        reply = llm_client.judge("Score these articles")

    assert reply == 'Here you go: [{"score": 2, "skip": true}]'
    kwargs = mock_client.chat.completions.create.call_args.kwargs
    assert kwargs["messages"] == [{"role": "user", "content": "Score these articles"}]
    assert "response_format" not in kwargs


def test_openai_judge_raises_on_empty_reply() -> None:
    with patch("llm_client.OpenAI", return_value=_openai_client("")), \
         patch.dict("os.environ", {"OPENAI_API_KEY": "test-key"}):
        with pytest.raises(RuntimeError, match="empty"):
            llm_client.judge("prompt")


def test_openai_judge_raises_without_api_key() -> None:
    with patch.dict("os.environ", {}, clear=True):
        with pytest.raises(RuntimeError, match="OPENAI_API_KEY"):
            llm_client.judge("prompt")


def test_claude_judge_sends_single_user_turn() -> None:
    text_block = MagicMock(type="text", text='[{"score": 9}]')
    mock_client = MagicMock()
    mock_client.messages.create.return_value = MagicMock(content=[text_block])

    with patch("anthropic_client.anthropic.Anthropic", return_value=mock_client), \
         patch.dict("os.environ", {"ANTHROPIC_API_KEY": "test-key"}, clear=True):
        reply = anthropic_client.judge("Score these articles")

    assert reply == '[{"score": 9}]'
    kwargs = mock_client.messages.create.call_args.kwargs
    assert kwargs["model"] == anthropic_client.DEFAULT_CLAUDE_MODEL
    assert kwargs["max_tokens"] == anthropic_client.JUDGE_MAX_TOKENS
    assert kwargs["messages"] == [{"role": "user", "content": "Score these articles"}]
    assert "system" not in kwargs


def test_claude_chat_moves_system_message_to_system_param() -> None:
    mock_client = MagicMock()
    mock_client.messages.create.return_value = MagicMock(content=[MagicMock(type="text", text="ok")])

    with patch("anthropic_client.anthropic.Anthropic", return_value=mock_client), \
         patch.dict("os.environ", {"ANTHROPIC_API_KEY": "test-key"}):
        anthropic_client.claude_chat(
            [{"role": "system", "content": "Be terse."}, {"role": "user", "content": "Hi"}]
        )

    kwargs = mock_client.messages.create.call_args.kwargs
    assert kwargs["system"] == "Be terse."
    assert kwargs["messages"] == [{"role": "user", "content": "Hi"}]


def test_claude_judge_raises_without_api_key() -> None:
    with patch.dict("os.environ", {}, clear=True):
        with pytest.raises(RuntimeError, match="ANTHROPIC_API_KEY"):
            anthropic_client.judge("prompt")

from types import SimpleNamespace
from unittest.mock import patch

import pytest

from vid2blog.config import Settings
from vid2blog.services.claude_service import calculate_cost, call_claude, extract_json


def _fake_message(*texts):
    return SimpleNamespace(
        content=[SimpleNamespace(type="text", text=t) for t in texts],
        usage=SimpleNamespace(input_tokens=1000, output_tokens=200),
    )


class TestCallClaude:
    def test_requires_api_key(self):
        with pytest.raises(ValueError, match="ANTHROPIC_API_KEY"):
            call_claude("sys", "hi", Settings(_env_file=None, anthropic_api_key=""))

    @patch("anthropic.Anthropic")
    def test_joins_text_blocks(self, mock_client_cls, settings):
        client = mock_client_cls.return_value
        client.messages.create.return_value = _fake_message("Hello ", "world")

        response = call_claude("sys", "hi", settings, max_tokens=50)

        assert response.text == "Hello world"
        assert response.input_tokens == 1000
        assert response.cost_usd == calculate_cost(1000, 200)
        kwargs = client.messages.create.call_args.kwargs
        assert kwargs["max_tokens"] == 50
        assert kwargs["temperature"] == settings.claude_temperature
        assert kwargs["system"] == "sys"
        assert kwargs["messages"] == [{"role": "user", "content": "hi"}]
        mock_client_cls.assert_called_once_with(api_key="sk-ant-test", max_retries=3)

    @patch("anthropic.Anthropic")
    def test_zero_temperature_override(self, mock_client_cls, settings):
        mock_client_cls.return_value.messages.create.return_value = _fake_message("ok")
        call_claude("sys", "hi", settings, temperature=0.0)
        assert mock_client_cls.return_value.messages.create.call_args.kwargs["temperature"] == 0.0

    @patch("anthropic.Anthropic")
    def test_warns_when_truncated(self, mock_client_cls, settings, caplog):
        message = _fake_message('{"title": "cut')
        message.stop_reason = "max_tokens"
        mock_client_cls.return_value.messages.create.return_value = message

        response = call_claude("sys", "hi", settings, max_tokens=10)

        assert response.stop_reason == "max_tokens"
        assert "token limit" in caplog.text


class TestCalculateCost:
    def test_sonnet_pricing(self):
        assert calculate_cost(1_000_000, 0) == 3.0
        assert calculate_cost(0, 1_000_000) == 15.0

    def test_priced_by_model_family(self):
        assert calculate_cost(1_000_000, 0, "claude-3-5-haiku-latest") == 0.8
        assert calculate_cost(0, 1_000_000, "claude-opus-4-1") == 75.0
        assert calculate_cost(1_000_000, 0, "unknown-model") == 3.0


class TestExtractJson:
    def test_plain(self):
        assert extract_json('{"a": 1}') == {"a": 1}

    def test_fenced_with_prose(self):
        assert extract_json('Sure!\n```json\n{"a": {"b": 2}}\n```\nDone.') == {"a": {"b": 2}}

    def test_no_json(self):
        with pytest.raises(ValueError, match="No JSON found"):
            extract_json("nothing here")

    def test_invalid_json(self):
        with pytest.raises(ValueError, match="Invalid JSON"):
            extract_json("{not: valid}")

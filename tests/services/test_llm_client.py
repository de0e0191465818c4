"""
LLM 클라이언트 테스트
SDK 호출은 모킹
"""
from types import SimpleNamespace
from unittest.mock import Mock, patch

import httpx
import openai
import pytest

from mcqgen.core.exceptions import LLMAPIError
from mcqgen.services import llm_client
from mcqgen.services.llm_client import call_llm_text, chat_completion


def _response(content, reasoning_content=None, model="o4-mini"):
    message = SimpleNamespace(content=content, reasoning_content=reasoning_content)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)], model=model)


@pytest.fixture
def sdk_client():
    """get_client() 가 돌려주는 OpenAI 클라이언트 모킹"""
    client = Mock()
    client.with_options.return_value = client
    with patch.object(llm_client, "get_client", return_value=client):
        yield client


@pytest.fixture
def no_sleep():
    with patch("mcqgen.services.llm_client.time.sleep") as sleep:
        yield sleep


def _request():
    return httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


class TestChatCompletion:
    """chat_completion"""

    def test_returns_text_and_reasoning(self, sdk_client):
        sdk_client.chat.completions.create.return_value = _response("  answer  ", "because")

        result = chat_completion(
            [{"role": "developer", "content": "hi"}],
            model="o4-mini",
            reasoning_effort="low",
            trace_id="abc",
            timeout_s=30,
        )

        assert result.text == "answer"
        assert result.reasoning == "because"
        sdk_client.with_options.assert_called_once_with(
            max_retries=0, timeout=30, default_headers={"X-Request-Id": "abc"}
        )
        sdk_client.chat.completions.create.assert_called_once_with(
            model="o4-mini",
            messages=[{"role": "developer", "content": "hi"}],
            reasoning_effort="low",
        )

    def test_no_choices(self, sdk_client):
        sdk_client.chat.completions.create.return_value = SimpleNamespace(choices=[], model="o4-mini")

        assert chat_completion([], model="o4-mini").text == ""

    def test_none_content(self, sdk_client):
        sdk_client.chat.completions.create.return_value = _response(None)

        result = chat_completion([], model="o4-mini")

        assert result.text == ""
        assert result.reasoning is None


class TestCallLlmText:
    """call_llm_text 재시도"""

    def test_single_developer_message(self, sdk_client):
        sdk_client.chat.completions.create.return_value = _response("ok")

        call_llm_text(prompt="make a question", model="o4-mini", reasoning_effort="medium")

        kwargs = sdk_client.chat.completions.create.call_args.kwargs
        assert kwargs["messages"] == [{"role": "developer", "content": "make a question"}]

    def test_retries_transient_error(self, sdk_client, no_sleep):
        sdk_client.chat.completions.create.side_effect = [
            openai.APIConnectionError(request=_request()),
            _response("ok"),
        ]

        result = call_llm_text(prompt="p", model="o4-mini", retries=2)

        assert result.text == "ok"
        assert sdk_client.chat.completions.create.call_count == 2
        no_sleep.assert_called_once()

    def test_gives_up_after_retries(self, sdk_client, no_sleep):
        sdk_client.chat.completions.create.side_effect = openai.APIConnectionError(request=_request())

        with pytest.raises(LLMAPIError):
            call_llm_text(prompt="p", model="o4-mini", retries=1)

        assert sdk_client.chat.completions.create.call_count == 2

    def test_client_error_not_retried(self, sdk_client, no_sleep):
        request = _request()
        sdk_client.chat.completions.create.side_effect = openai.BadRequestError(
            "bad request",
            response=httpx.Response(400, request=request),
            body=None,
        )

        with pytest.raises(LLMAPIError) as exc_info:
            call_llm_text(prompt="p", model="o4-mini", retries=3)

        assert exc_info.value.status_code == 502
        assert sdk_client.chat.completions.create.call_count == 1
        no_sleep.assert_not_called()

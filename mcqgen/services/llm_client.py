# mcqgen/services/llm_client.py
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, Optional, TypeVar

import openai
from openai import AzureOpenAI, OpenAI

from mcqgen.core.exceptions import LLMAPIError
from mcqgen.core.settings import settings

log = logging.getLogger("core.openai")

T = TypeVar("T")


def _norm(s: Optional[str]) -> str:
    return (s or "").strip()


@dataclass
class ChatResult:
    text: str
    reasoning: Optional[str] = None
    model: Optional[str] = None


# 통일된 시그니처:
# chat_completion(messages, *, model, reasoning_effort=None, trace_id=None, timeout_s=None) -> ChatResult
# - Azure/OpenAI 모두 OpenAI Python SDK v1 클라이언트를 사용
# - trace_id는 X-Request-Id 헤더로 전달
@lru_cache(maxsize=1)
def get_client() -> OpenAI:
    if settings.OPENAI_API_TYPE == "azure":
        return AzureOpenAI(
            api_key=_norm(settings.AZURE_OPENAI_KEY),
            api_version=_norm(settings.AZURE_OPENAI_API_VERSION),
            azure_endpoint=_norm(settings.AZURE_OPENAI_ENDPOINT),
        )
    return OpenAI(api_key=_norm(settings.OPENAI_API_KEY))


def _reasoning_of(message) -> Optional[str]:
    # 일부 호환 API는 reasoning 트레이스를 메시지에 실어 보낸다
    for attr in ("reasoning_content", "reasoning"):
        value = getattr(message, attr, None)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def chat_completion(
    messages: list[dict],
    *,
    model: str,
    reasoning_effort: Optional[str] = None,
    trace_id: Optional[str] = None,
    timeout_s: Optional[float] = None,
) -> ChatResult:
    opts = {"max_retries": 0}
    if timeout_s is not None:
        opts["timeout"] = timeout_s
    if trace_id:
        opts["default_headers"] = {"X-Request-Id": trace_id}

    client = get_client().with_options(**opts)

    kwargs = dict(model=model, messages=messages)
    if reasoning_effort:
        kwargs["reasoning_effort"] = reasoning_effort

    resp = client.chat.completions.create(**kwargs)
    if not resp.choices:
        return ChatResult(text="", model=getattr(resp, "model", model))
    message = resp.choices[0].message
    return ChatResult(
        text=(message.content or "").strip(),
        reasoning=_reasoning_of(message),
        model=getattr(resp, "model", model),
    )


def _retry(fn: Callable[[], T], retries: int, backoff: float) -> T:
    last: Optional[Exception] = None
    for i in range(retries + 1):
        try:
            return fn()
        except (openai.APIConnectionError, openai.APITimeoutError, openai.RateLimitError,
                openai.InternalServerError) as e:
            last = e
            log.warning(
                "llm_call_retry",
                extra={"attempt": i + 1, "max_attempts": retries + 1, "error": str(e)},
            )
            if i < retries:
                time.sleep(backoff * (i + 1))
        except openai.OpenAIError as e:
            # 4xx 등 재시도해도 소용없는 오류
            raise LLMAPIError(settings.OPENAI_API_TYPE, message=str(e), original_error=e) from e
    log.error("llm_call_giving_up", extra={"attempts": retries + 1})
    raise LLMAPIError(settings.OPENAI_API_TYPE, original_error=last)


def call_llm_text(
    *,
    prompt: str,
    model: str,
    role: str = "developer",
    reasoning_effort: Optional[str] = None,
    trace_id: Optional[str] = None,
    timeout_s: Optional[float] = None,
    retries: Optional[int] = None,
) -> ChatResult:
    """
    Send a single-message prompt and return the completion text.

    Transient transport errors are retried with linear backoff; anything
    still failing surfaces as LLMAPIError.
    """
    messages = [{"role": role, "content": prompt}]

    def _once() -> ChatResult:
        return chat_completion(
            messages,
            model=model,
            reasoning_effort=reasoning_effort,
            trace_id=trace_id,
            timeout_s=timeout_s if timeout_s is not None else settings.REQUEST_TIMEOUT_MS / 1000,
        )

    return _retry(
        _once,
        retries=settings.LLM_MAX_RETRIES if retries is None else retries,
        backoff=settings.RETRY_BACKOFF_MS / 1000,
    )

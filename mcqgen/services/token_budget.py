# mcqgen/services/token_budget.py
"""
Prompt token estimate shown next to the generate form.

The count uses the generation model's own tokenizer (tiktoken), so it is a
close approximation of what the API will bill for the prompt. The limit is
advisory only; nothing rejects an over-budget request.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

import tiktoken

from mcqgen.prompts.mcq_prompt import build_prompt

log = logging.getLogger(__name__)

FALLBACK_ENCODING = "o200k_base"


@lru_cache(maxsize=8)
def get_encoding(model: str) -> "tiktoken.Encoding":
    try:
        return tiktoken.encoding_for_model(model)
    except KeyError:
        log.debug("unknown_tokenizer_model", extra={"model": model, "fallback": FALLBACK_ENCODING})
        return tiktoken.get_encoding(FALLBACK_ENCODING)


def estimate_prompt_tokens(
    topic: str,
    reference_text: Optional[str] = None,
    *,
    template: str,
    model: str,
) -> int:
    prompt = build_prompt(template, topic, reference_text)
    # 사용자 텍스트에 특수 토큰 문자열이 있어도 일반 텍스트로 센다
    return len(get_encoding(model).encode(prompt, disallowed_special=()))


def remaining_budget(tokens: int, limit: int) -> int:
    """Tokens left under `limit`; negative when the prompt is over budget."""
    return limit - tokens

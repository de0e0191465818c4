# mcqgen/services/mcq_generator.py
"""
Generation pipeline:
  1) build the prompt from the current template
  2) call the model
  3) parse the labeled completion
  4) on a parse failure, ask again (GENERATE_MAX_RETRIES times)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from mcqgen.core.constants import ReasoningEfforts
from mcqgen.core.exceptions import McqGenerationError
from mcqgen.core.settings import settings
from mcqgen.prompts.mcq_prompt import REWRITE_SCENARIO_PROMPT, PromptStore, build_prompt
from mcqgen.schemas.mcq import ParsedContent
from mcqgen.services import mcq_parser
from mcqgen.services.llm_client import call_llm_text

log = logging.getLogger("mcq_generator")


@dataclass
class GenerationResult:
    raw: str
    parsed: Optional[ParsedContent]
    model: str
    reasoning_effort: str
    reasoning: Optional[str] = None
    attempts: int = 1

    @property
    def needs_review(self) -> bool:
        return self.parsed is None


def generate_mcq(
    store: PromptStore,
    *,
    topic: str,
    reference_text: Optional[str] = None,
    reasoning_effort: str = ReasoningEfforts.DEFAULT,
    trace_id: Optional[str] = None,
    max_retries: Optional[int] = None,
) -> GenerationResult:
    prompt = build_prompt(store.prompt, topic, reference_text)
    model = store.model
    max_retries = settings.GENERATE_MAX_RETRIES if max_retries is None else max_retries

    result: Optional[GenerationResult] = None
    for attempt in range(max_retries + 1):
        log.info(
            f"[GenTry {attempt + 1}/{max_retries + 1}] topic={topic!r} model={model} effort={reasoning_effort}",
            extra={"trace_id": trace_id},
        )
        chat = call_llm_text(
            prompt=prompt,
            model=model,
            reasoning_effort=reasoning_effort,
            trace_id=trace_id,
        )
        if not chat.text:
            raise McqGenerationError("No content generated")

        parsed = mcq_parser.parse(chat.text)
        result = GenerationResult(
            raw=chat.text,
            parsed=parsed,
            model=model,
            reasoning_effort=reasoning_effort,
            reasoning=chat.reasoning,
            attempts=attempt + 1,
        )
        if parsed is not None:
            log.info(
                "mcq_generated",
                extra={"trace_id": trace_id, "model": model, "attempts": attempt + 1},
            )
            return result

        log.warning(
            "mcq_parse_failed",
            extra={
                "trace_id": trace_id,
                "attempt": attempt + 1,
                "missing": mcq_parser.missing_fields(chat.text),
            },
        )

    # 끝내 파싱되지 않으면 원문을 돌려주고 사용자가 검토/수정하게 한다
    return result


def rewrite_scenario(
    store: PromptStore,
    text: str,
    *,
    trace_id: Optional[str] = None,
) -> str:
    chat = call_llm_text(
        prompt=REWRITE_SCENARIO_PROMPT.format(text=text),
        model=store.model,
        role="user",
        trace_id=trace_id,
    )
    if not chat.text:
        raise McqGenerationError("No content generated")
    return chat.text

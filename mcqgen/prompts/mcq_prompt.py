# mcqgen/prompts/mcq_prompt.py
from __future__ import annotations

import logging
from typing import Optional

from mcqgen.core.settings import settings

log = logging.getLogger("prompt_store")

TOPIC_PLACEHOLDER = "{topic}"
REFERENCE_PREFIX = "\n\nReference Material:\n"

DEFAULT_PROMPT = """You are an expert medical educator tasked with creating an extremely challenging multiple-choice question for medical specialists. Your goal is to test second-order thinking, emphasizing the application, analysis, and evaluation of knowledge based on Bloom's taxonomy about {topic}

Please follow these steps to create the question:

1. Clinical Scenario:
   - Write a 120-word clinical scenario in the present tense.
   - Include relevant details such as presenting complaint, history, past medical history, drug history, social history, sexual history, physical examination findings, bedside parameters, and necessary investigations.
   - Use ONLY standard international units with reference ranges for any test results.
   - STRICTLY do not hint at, mention or reveal the diagnosis, and do not include investigations that give away the answer.

2. Question:
   - Ensure the question tests at least second-order thinking skills. For a question that tests the ability to reach a diagnosis, require the candidate to reach the diagnosis first and then choose the right investigation or management plan.
   - Keep the question stem concise and short. DO NOT summarize the clinical scenario in the stem.
   - STRICTLY do not hint at or mention any diagnosis.

3. Multiple Choice Options:
   - Provide 5 options labeled A) to E), STRICTLY sorted in ascending alphabetical order of their first word:
     > One best and correct answer, with an equal chance of being option A, B, C, D or E
     > One correct answer that is not the best option
     > Three plausible options that might be correct but are not the best answer
   - Keep the length of all options consistent.
   - Avoid misleading or ambiguously worded distractors.

4. Correct Answer and Explanation:
   - Identify the correct answer and explain why it is the best option.
   - Provide option-specific explanations for why each option is correct or incorrect.

Return your response as plain text in exactly this layout, with a blank line between sections and no other text:

CLINICAL SCENARIO:
<clinical scenario text>

QUESTION:
<question text>

OPTIONS:
A) <option A text>
B) <option B text>
C) <option C text>
D) <option D text>
E) <option E text>

CORRECT ANSWER:
<single letter A-E>

EXPLANATION:
<combined explanation for the correct and incorrect answers>"""

REWRITE_SCENARIO_PROMPT = (
    "Please rewrite the following clinical scenario to be clear, concise, and grammatically "
    "correct while maintaining all medical details and information:\n\n{text}"
)


def build_prompt(template: str, topic: str, reference_text: Optional[str] = None) -> str:
    """Substitute the first topic placeholder and append the reference material, if any."""
    content = template.replace(TOPIC_PLACEHOLDER, topic, 1)
    if reference_text:
        content += REFERENCE_PREFIX + reference_text
    return content


class PromptStore:
    """
    Runtime-editable generation settings (prompt template and model).
    Lives in process memory; a restart brings back the defaults.
    """

    def __init__(self, prompt: str = DEFAULT_PROMPT, model: Optional[str] = None):
        self._prompt = prompt
        self._model = model or settings.OPENAI_MODEL_NAME

    @property
    def prompt(self) -> str:
        return self._prompt

    @property
    def model(self) -> str:
        return self._model

    def set_prompt(self, prompt: str) -> None:
        self._prompt = prompt.strip()
        log.info("prompt_updated", extra={"prompt_chars": len(self._prompt)})

    def set_model(self, model: str) -> bool:
        """Switch models; returns False when the model is not allowed."""
        if model not in settings.allowed_models_list:
            return False
        self._model = model
        log.info("model_updated", extra={"model": model})
        return True

    def reset(self) -> None:
        self._prompt = DEFAULT_PROMPT
        self._model = settings.OPENAI_MODEL_NAME


# ===========================================
# 싱글톤 인스턴스
# ===========================================

_prompt_store: Optional[PromptStore] = None


def get_prompt_store() -> PromptStore:
    global _prompt_store
    if _prompt_store is None:
        _prompt_store = PromptStore()
    return _prompt_store

# mcqgen/schemas/mcq.py
from __future__ import annotations

from datetime import datetime
from typing import Iterator, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from mcqgen.core.constants import OptionLetters, ReasoningEfforts

ReasoningEffort = Literal["low", "medium", "high"]


class OptionSet(BaseModel):
    """Five fixed answer slots. Unfilled slots stay empty."""
    A: str = ""
    B: str = ""
    C: str = ""
    D: str = ""
    E: str = ""

    def items(self) -> Iterator[Tuple[str, str]]:
        for letter in OptionLetters.ALL:
            yield letter, getattr(self, letter)

    def filled(self) -> List[str]:
        return [letter for letter, text in self.items() if text.strip()]


class ParsedContent(BaseModel):
    """
    Structured form of a generated question.

    Construction fails unless clinical_scenario, question, correct_answer and
    explanation are non-blank and at least one option is filled.
    """
    clinical_scenario: str
    question: str
    options: OptionSet = Field(default_factory=OptionSet)
    correct_answer: str
    explanation: str

    @staticmethod
    def missing(
        clinical_scenario: str,
        question: str,
        options: OptionSet,
        correct_answer: str,
        explanation: str,
    ) -> List[str]:
        out = []
        if not clinical_scenario.strip():
            out.append("clinical_scenario")
        if not question.strip():
            out.append("question")
        if not options.filled():
            out.append("options")
        if not correct_answer.strip():
            out.append("correct_answer")
        if not explanation.strip():
            out.append("explanation")
        return out

    @model_validator(mode="after")
    def _require_fields(self) -> "ParsedContent":
        missing = self.missing(
            self.clinical_scenario,
            self.question,
            self.options,
            self.correct_answer,
            self.explanation,
        )
        if missing:
            raise ValueError(f"missing required fields: {', '.join(missing)}")
        return self


# ── 요청 스키마 ──────────────────────────────────────────────────

class GenerateRequest(BaseModel):
    topic: str = Field(min_length=1)
    reference_text: Optional[str] = None
    reasoning_effort: ReasoningEffort = ReasoningEfforts.DEFAULT

    @field_validator("topic")
    @classmethod
    def _topic_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Topic is required")
        return v.strip()


class TokenEstimateRequest(BaseModel):
    topic: str = ""
    reference_text: Optional[str] = None


class ParseRequest(BaseModel):
    text: str


class RewriteRequest(BaseModel):
    text: str = Field(min_length=1)


class SaveRequest(BaseModel):
    name: str
    topic: str
    raw_content: str
    parsed_content: ParsedContent
    model: Optional[str] = None
    reasoning: Optional[str] = None
    reasoning_effort: Optional[ReasoningEffort] = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("MCQ name is required")
        return v.strip()

    @field_validator("topic")
    @classmethod
    def _strip_topic(cls, v: str) -> str:
        return v.strip()


class UpdateRequest(BaseModel):
    name: Optional[str] = None
    parsed_content: Optional[ParsedContent] = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("MCQ name cannot be blank")
        return v.strip() if v is not None else v


class RateRequest(BaseModel):
    rating: int = Field(ge=0, le=5)


class ModelSelectRequest(BaseModel):
    model: str


class PromptUpdateRequest(BaseModel):
    prompt: str

    @field_validator("prompt")
    @classmethod
    def _prompt_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Prompt is required")
        return v.strip()


# ── 응답 스키마 ──────────────────────────────────────────────────

class GenerateResponse(BaseModel):
    raw: str
    parsed: Optional[ParsedContent] = None
    needs_review: bool = False
    model: str
    reasoning_effort: ReasoningEffort
    reasoning: Optional[str] = None


class ParseResponse(BaseModel):
    ok: bool
    parsed: Optional[ParsedContent] = None
    missing: List[str] = Field(default_factory=list)


class TokenEstimateResponse(BaseModel):
    tokens: int
    limit: int
    remaining: int
    over_limit: bool


class McqRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True, protected_namespaces=())

    id: int
    name: str
    topic: str
    raw_content: str
    parsed_content: ParsedContent
    created_at: datetime
    rating: int = 0
    model: str
    reasoning: Optional[str] = None
    reasoning_effort: ReasoningEffort = ReasoningEfforts.DEFAULT

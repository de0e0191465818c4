# mcqgen/services/mcq_parser.py
"""
Free-text MCQ parser.

The model is asked to answer with five labeled blocks separated by blank
lines::

    CLINICAL SCENARIO:
    ...

    QUESTION:
    ...

    OPTIONS:
    A) ...
    B) ...

    CORRECT ANSWER:
    B

    EXPLANATION:
    ...

`parse()` turns such a text into a `ParsedContent`, or returns None when a
required part is missing. It never raises and has no side effects, so the
same raw text can be re-parsed after the user edits it.
"""
from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

from mcqgen.core.constants import OptionLetters, SectionLabels
from mcqgen.schemas.mcq import OptionSet, ParsedContent

# 빈 줄(공백만 있는 줄 포함)이 블록 구분자
_BLANK_LINE_RE = re.compile(r"\n\s*\n")

# "B) Troponin" → ("B", "Troponin")
_OPTION_LINE_RE = re.compile(r"^([A-E])\)\s*(.+)$")

_SCALAR_LABELS: Tuple[Tuple[str, str], ...] = (
    (SectionLabels.CLINICAL_SCENARIO, "clinical_scenario"),
    (SectionLabels.QUESTION, "question"),
    (SectionLabels.CORRECT_ANSWER, "correct_answer"),
    (SectionLabels.EXPLANATION, "explanation"),
    (SectionLabels.FEEDBACK, "explanation"),
)


def _normalize(text: str) -> str:
    # 마크다운 굵게 표시(**)는 라벨 매칭을 방해하므로 제거
    return (text or "").replace("\r\n", "\n").replace("**", "").strip()


def split_sections(text: str) -> List[str]:
    """Split on blank lines; every segment is stripped."""
    normalized = _normalize(text)
    if not normalized:
        return []
    return [seg.strip() for seg in _BLANK_LINE_RE.split(normalized)]


def _match_scalar_label(segment: str) -> Optional[Tuple[str, str]]:
    for label, field in _SCALAR_LABELS:
        if segment.startswith(label):
            return label, field
    return None


def _scan_option_lines(block: str, slots: Dict[str, str]) -> None:
    for line in block.splitlines():
        m = _OPTION_LINE_RE.match(line.strip())
        if m:
            # 같은 글자가 다시 나오면 뒤의 값이 덮어쓴다
            slots[m.group(1)] = m.group(2).strip()


def _collect(text: str) -> Tuple[Dict[str, str], OptionSet]:
    fields = {field: "" for _, field in _SCALAR_LABELS}
    slots = {letter: "" for letter in OptionLetters.ALL}
    in_options = False

    for segment in split_sections(text):
        if segment.startswith(SectionLabels.OPTIONS):
            in_options = True
            _scan_option_lines(segment[len(SectionLabels.OPTIONS):], slots)
            continue

        matched = _match_scalar_label(segment)
        if matched:
            label, field = matched
            in_options = False
            fields[field] = segment[len(label):].strip()
            continue

        if in_options:
            _scan_option_lines(segment, slots)
        # 그 외 라벨 없는 텍스트는 버린다

    return fields, OptionSet(**slots)


def missing_fields(text: str) -> List[str]:
    """Names of the required parts `text` fails to provide (empty when parseable)."""
    fields, options = _collect(text)
    return ParsedContent.missing(options=options, **fields)


def parse(text: str) -> Optional[ParsedContent]:
    """
    Parse a labeled MCQ completion.

    Args:
        text: raw model output (or a user-edited version of it)

    Returns:
        ParsedContent, or None if the text does not carry a complete question
    """
    fields, options = _collect(text)
    if ParsedContent.missing(options=options, **fields):
        return None
    return ParsedContent(options=options, **fields)

"""
MCQ 파서 테스트
라벨 블록 분할, 옵션 스캔, 필수 필드 검증
"""
import pytest

from mcqgen.services import mcq_parser
from mcqgen.services.mcq_parser import missing_fields, parse, split_sections


CHEST_PAIN = """CLINICAL SCENARIO:
A 54-year-old presents with chest pain.

QUESTION:
What is the next best step?

OPTIONS:
A) ECG
B) Troponin
C) CT chest
D) Discharge
E) Exercise test

CORRECT ANSWER:
B

EXPLANATION:
Troponin confirms ischemia."""


def _blocks(text: str):
    return text.split("\n\n")


class TestConcreteScenarios:
    """대표 입력"""

    def test_well_formed_input(self):
        """다섯 라벨이 모두 있는 입력"""
        parsed = parse(CHEST_PAIN)

        assert parsed is not None
        assert parsed.correct_answer == "B"
        assert parsed.options.B == "Troponin"
        assert parsed.clinical_scenario == "A 54-year-old presents with chest pain."
        assert parsed.question == "What is the next best step?"
        assert parsed.explanation == "Troponin confirms ischemia."
        assert parsed.options.filled() == ["A", "B", "C", "D", "E"]

    def test_only_question_and_options(self):
        """시나리오/정답/해설이 없으면 None"""
        text = "QUESTION:\nWhat is the next best step?\n\nOPTIONS:\nA) ECG\nB) Troponin"

        assert parse(text) is None
        assert missing_fields(text) == ["clinical_scenario", "correct_answer", "explanation"]

    def test_fixture_text(self, sample_mcq_text, sample_parsed):
        """conftest 샘플과 기대 결과 일치"""
        assert parse(sample_mcq_text).model_dump() == sample_parsed


class TestProperties:
    """파서 성질"""

    def test_idempotent(self):
        """같은 입력은 같은 결과"""
        assert parse(CHEST_PAIN) == parse(CHEST_PAIN)

    def test_label_order_independent(self):
        """섹션 순서를 바꿔도 결과 동일"""
        scenario, question, options, answer, explanation = _blocks(CHEST_PAIN)
        shuffled = "\n\n".join([explanation, options, answer, scenario, question])

        assert parse(shuffled) == parse(CHEST_PAIN)

    def test_unlabeled_noise_prefix(self):
        """라벨 앞의 잡담은 무시"""
        noisy = "Sure! Here is a question for you.\n\n" + CHEST_PAIN

        assert parse(noisy) == parse(CHEST_PAIN)

    def test_unlabeled_trailing_text(self):
        """마지막 라벨 뒤 빈 줄 이후 텍스트도 무시"""
        noisy = CHEST_PAIN + "\n\nLet me know if you need another one."

        assert parse(noisy) == parse(CHEST_PAIN)

    @pytest.mark.parametrize("label", [
        "CLINICAL SCENARIO:",
        "QUESTION:",
        "CORRECT ANSWER:",
        "EXPLANATION:",
    ])
    def test_missing_required_label(self, label):
        """필수 라벨 하나라도 빠지면 None"""
        text = "\n\n".join(b for b in _blocks(CHEST_PAIN) if not b.startswith(label))

        assert parse(text) is None

    def test_no_option_lines(self):
        """옵션 줄이 하나도 없으면 None"""
        text = CHEST_PAIN.replace(
            "A) ECG\nB) Troponin\nC) CT chest\nD) Discharge\nE) Exercise test",
            "ECG, troponin or CT",
        )

        assert parse(text) is None
        assert missing_fields(text) == ["options"]

    def test_label_without_body(self):
        """본문 없는 라벨은 빈 값 → 실패"""
        text = CHEST_PAIN.replace("CORRECT ANSWER:\nB", "CORRECT ANSWER:")

        assert parse(text) is None
        assert missing_fields(text) == ["correct_answer"]

    def test_empty_input(self):
        assert parse("") is None
        assert parse("   \n\n  ") is None


class TestOptions:
    """OPTIONS 블록 스캔"""

    def test_duplicate_letter_last_wins(self):
        """같은 글자가 두 번 나오면 뒤의 값 (현재 동작 그대로 유지)"""
        text = CHEST_PAIN.replace("B) Troponin\n", "B) Troponin\nB) Serial troponin\n")

        assert parse(text).options.B == "Serial troponin"

    def test_partial_options(self):
        """일부 글자만 있어도 통과, 나머지는 빈 문자열"""
        text = CHEST_PAIN.replace("C) CT chest\nD) Discharge\nE) Exercise test", "C) CT chest")
        parsed = parse(text)

        assert parsed.options.filled() == ["A", "B", "C"]
        assert parsed.options.D == ""
        assert parsed.options.E == ""

    def test_non_matching_lines_skipped(self):
        """패턴에 맞지 않는 줄과 F) 이후 글자는 무시"""
        text = CHEST_PAIN.replace(
            "E) Exercise test",
            "E) Exercise test\nF) Coronary angiography\n(a) lowercase\n- bullet",
        )
        parsed = parse(text)

        assert parsed.options.E == "Exercise test"
        assert "Coronary angiography" not in parsed.options.model_dump().values()

    def test_options_after_blank_line(self):
        """OPTIONS: 다음 빈 줄 뒤의 옵션 블록도 옵션으로 읽음"""
        text = CHEST_PAIN.replace("OPTIONS:\nA) ECG", "OPTIONS:\n\nA) ECG")

        assert parse(text) == parse(CHEST_PAIN)

    def test_options_split_by_blank_lines(self):
        """옵션 사이에 빈 줄이 있어도 다음 라벨 전까지 계속 스캔"""
        text = CHEST_PAIN.replace("B) Troponin\n", "B) Troponin\n\n")

        assert parse(text) == parse(CHEST_PAIN)

    def test_option_lines_outside_options_ignored(self):
        """다른 라벨 뒤의 옵션 형태 줄은 옵션이 아님"""
        text = CHEST_PAIN.replace(
            "EXPLANATION:\nTroponin confirms ischemia.",
            "EXPLANATION:\nTroponin confirms ischemia.\n\nA) Not an option",
        )

        assert parse(text).options.A == "ECG"


class TestNormalization:
    """입력 정규화"""

    def test_markdown_bold_labels(self):
        """**CLINICAL SCENARIO:** 형태도 인식"""
        bold = CHEST_PAIN
        for label in ("CLINICAL SCENARIO:", "QUESTION:", "OPTIONS:", "CORRECT ANSWER:", "EXPLANATION:"):
            bold = bold.replace(label, f"**{label}**")

        assert parse(bold) == parse(CHEST_PAIN)

    def test_crlf_line_endings(self):
        assert parse(CHEST_PAIN.replace("\n", "\r\n")) == parse(CHEST_PAIN)

    def test_whitespace_only_separator_line(self):
        """공백만 있는 줄도 블록 구분자"""
        text = CHEST_PAIN.replace("chest pain.\n\nQUESTION:", "chest pain.\n   \nQUESTION:")

        assert parse(text) == parse(CHEST_PAIN)

    def test_feedback_alias(self):
        """CORRECT ANSWER AND FEEDBACK: 는 해설로 취급"""
        text = CHEST_PAIN.replace(
            "EXPLANATION:\nTroponin confirms ischemia.",
            "CORRECT ANSWER AND FEEDBACK:\nTroponin confirms ischemia.",
        )
        parsed = parse(text)

        assert parsed.explanation == "Troponin confirms ischemia."
        assert parsed.correct_answer == "B"

    def test_labels_are_case_sensitive(self):
        """소문자 라벨은 라벨이 아님"""
        text = CHEST_PAIN.replace("QUESTION:", "Question:")

        assert parse(text) is None

    def test_label_must_start_segment(self):
        """문장 중간의 라벨 문자열은 무시"""
        text = CHEST_PAIN.replace(
            "QUESTION:\nWhat is the next best step?",
            "See the QUESTION: below",
        )

        assert parse(text) is None


class TestSplitSections:
    """블록 분할"""

    def test_segments_stripped(self):
        assert split_sections("  one\n\n two  \n \n three ") == ["one", "two", "three"]

    def test_empty(self):
        assert split_sections("") == []

    def test_bold_removed(self):
        assert split_sections("**QUESTION:** x") == ["QUESTION: x"]


def test_module_exposes_parse():
    """서비스 패키지에서 바로 import 가능"""
    from mcqgen.services import parse as exported

    assert exported is mcq_parser.parse

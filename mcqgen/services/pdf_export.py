# mcqgen/services/pdf_export.py
from __future__ import annotations

import os
from tempfile import NamedTemporaryFile
from typing import List, Sequence, Tuple
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import PageBreak, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from mcqgen.schemas.mcq import McqRecord

EXPORT_FILENAME = "mcq-export.pdf"
PRACTICE_FILENAME = "mcq-practice.pdf"
ANSWER_SHEET_COLUMNS = 4
MARGIN = 50  # pt


# ── 유틸 ───────────────────────────────────────────────────────────
def _para_text(s: str) -> str:
    """Escape for reportlab's mini-markup and keep line breaks."""
    text = escape(s or "")
    return text.replace("\r\n", "\n").replace("\n", "<br/>")


def _styles():
    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle(
        name="DocTitle", parent=styles["Title"], fontName="Helvetica-Bold",
        fontSize=24, leading=30, alignment=TA_CENTER, spaceAfter=24,
    ))
    styles.add(ParagraphStyle(
        name="McqName", parent=styles["Heading1"], fontName="Helvetica-Bold",
        fontSize=16, leading=20, spaceAfter=4,
    ))
    styles.add(ParagraphStyle(
        name="Meta", parent=styles["Normal"], fontName="Helvetica",
        fontSize=12, textColor=colors.grey, spaceAfter=12,
    ))
    styles.add(ParagraphStyle(
        name="SectionHead", parent=styles["Heading2"], fontName="Helvetica-Bold",
        fontSize=14, leading=18, spaceBefore=6, spaceAfter=4,
    ))
    styles.add(ParagraphStyle(
        name="Body", parent=styles["Normal"], fontName="Helvetica",
        fontSize=12, leading=15, alignment=TA_JUSTIFY, spaceAfter=8,
    ))
    styles.add(ParagraphStyle(
        name="OptionLine", parent=styles["Normal"], fontName="Helvetica",
        fontSize=12, leading=15, leftIndent=20,
    ))
    styles.add(ParagraphStyle(
        name="Rating", parent=styles["Normal"], fontName="Helvetica",
        fontSize=10, textColor=colors.grey, spaceBefore=6,
    ))
    return styles


def _section(story: list, styles, title: str, body: str) -> None:
    story.append(Paragraph(f"<u>{escape(title)}</u>", styles["SectionHead"]))
    story.append(Paragraph(_para_text(body), styles["Body"]))


def _options(story: list, styles, rec: McqRecord) -> None:
    story.append(Paragraph("<u>Options:</u>", styles["SectionHead"]))
    for letter, text in rec.parsed_content.options.items():
        story.append(Paragraph(f"{letter}) {_para_text(text)}", styles["OptionLine"]))
    story.append(Spacer(1, 8))


def _record_header(story: list, styles, index: int, rec: McqRecord, with_model: bool) -> None:
    story.append(Paragraph(f"<u>{index}. {_para_text(rec.name)}</u>", styles["McqName"]))
    meta = f"Topic: {_para_text(rec.topic)}"
    if with_model:
        meta += f" • Model: {_para_text(rec.model)}"
    story.append(Paragraph(meta, styles["Meta"]))


# ── 본문 빌더 ─────────────────────────────────────────────────────
def build_full_story(records: Sequence[McqRecord]) -> list:
    styles = _styles()
    story: list = [Paragraph("MCQ Export", styles["DocTitle"])]

    for i, rec in enumerate(records):
        pc = rec.parsed_content
        _record_header(story, styles, i + 1, rec, with_model=True)
        _section(story, styles, "Clinical Scenario:", pc.clinical_scenario)
        _section(story, styles, "Question:", pc.question)
        _options(story, styles, rec)
        _section(story, styles, "Correct Answer:", f"Option {pc.correct_answer}")
        _section(story, styles, "Explanation:", pc.explanation)
        story.append(Paragraph(f"Rating: {rec.rating or 0} stars", styles["Rating"]))
        if i < len(records) - 1:
            story.append(PageBreak())
    return story


def answer_sheet_rows(records: Sequence[McqRecord], columns: int = ANSWER_SHEET_COLUMNS) -> List[List[str]]:
    cells = [f"{n}. {rec.parsed_content.correct_answer}" for n, rec in enumerate(records, start=1)]
    rows = [cells[i:i + columns] for i in range(0, len(cells), columns)]
    if rows:
        rows[-1] += [""] * (columns - len(rows[-1]))
    return rows


def build_practice_story(records: Sequence[McqRecord]) -> list:
    """Questions without answers, then one answer sheet at the end."""
    styles = _styles()
    story: list = [Paragraph("MCQ Practice Set", styles["DocTitle"])]

    for i, rec in enumerate(records):
        pc = rec.parsed_content
        _record_header(story, styles, i + 1, rec, with_model=False)
        _section(story, styles, "Clinical Scenario:", pc.clinical_scenario)
        _section(story, styles, "Question:", pc.question)
        _options(story, styles, rec)
        story.append(Paragraph("Your Answer: _____", styles["SectionHead"]))
        if i < len(records) - 1:
            story.append(PageBreak())

    story.append(PageBreak())
    story.append(Paragraph("Answer Sheet", styles["DocTitle"]))
    rows = answer_sheet_rows(records)
    if rows:
        table = Table(rows, hAlign="LEFT")
        table.setStyle(TableStyle([
            ("FONT", (0, 0), (-1, -1), "Helvetica"),
            ("FONTSIZE", (0, 0), (-1, -1), 12),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
            ("RIGHTPADDING", (0, 0), (-1, -1), 24),
        ]))
        story.append(table)
    return story


def _write_pdf(story: list, title: str, subject: str) -> str:
    with NamedTemporaryFile(delete=False, suffix=".pdf") as tmp:
        tmp_path = tmp.name
    doc = SimpleDocTemplate(
        tmp_path,
        pagesize=A4,
        leftMargin=MARGIN,
        rightMargin=MARGIN,
        topMargin=MARGIN,
        bottomMargin=MARGIN,
        title=title,
        author="MCQ Generator",
        subject=subject,
        keywords="mcq, medical, questions",
    )
    doc.build(story)
    return os.path.abspath(tmp_path)


def generate_pdf(records: Sequence[McqRecord]) -> Tuple[str, str]:
    path = _write_pdf(build_full_story(records), "MCQ Export", "Medical MCQ Questions")
    return path, EXPORT_FILENAME


def generate_practice_pdf(records: Sequence[McqRecord]) -> Tuple[str, str]:
    path = _write_pdf(build_practice_story(records), "MCQ Practice Set", "Medical MCQ Practice Questions")
    return path, PRACTICE_FILENAME

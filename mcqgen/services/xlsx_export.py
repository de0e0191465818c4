# mcqgen/services/xlsx_export.py
from __future__ import annotations

import os
import re
from tempfile import NamedTemporaryFile
from typing import Iterable, List, Tuple

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Alignment, Font
from openpyxl.utils import get_column_letter

from mcqgen.schemas.mcq import McqRecord

SHEET_TITLE = "MCQs"
EXPORT_FILENAME = "mcq-export.xlsx"

# (헤더, 열 너비)
COLUMNS: List[Tuple[str, int]] = [
    ("Name", 20),
    ("Topic", 15),
    ("Model", 15),
    ("Clinical Scenario", 40),
    ("Question", 30),
    ("Option A", 25),
    ("Option B", 25),
    ("Option C", 25),
    ("Option D", 25),
    ("Option E", 25),
    ("Correct Answer", 15),
    ("Explanation", 40),
    ("Rating", 10),
    ("Created At", 20),
]


def _clean(s: str) -> str:
    # openpyxl은 제어문자가 섞인 셀 값을 거부한다
    return ILLEGAL_CHARACTERS_RE.sub("", re.sub(r"[\u200B-\u200D\uFEFF]", "", s or ""))


def record_row(rec: McqRecord) -> list:
    pc = rec.parsed_content
    opts = pc.options
    return [
        _clean(rec.name),
        _clean(rec.topic),
        _clean(rec.model),
        _clean(pc.clinical_scenario),
        _clean(pc.question),
        _clean(opts.A),
        _clean(opts.B),
        _clean(opts.C),
        _clean(opts.D),
        _clean(opts.E),
        _clean(pc.correct_answer),
        _clean(pc.explanation),
        rec.rating or 0,
        rec.created_at.strftime("%Y-%m-%d %H:%M:%S"),
    ]


def build_workbook(records: Iterable[McqRecord]) -> Workbook:
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    ws.append([header for header, _ in COLUMNS])
    for cell in ws[1]:
        cell.font = Font(bold=True)

    for rec in records:
        ws.append(record_row(rec))

    for idx, (_, width) in enumerate(COLUMNS, start=1):
        ws.column_dimensions[get_column_letter(idx)].width = width
    for row in ws.iter_rows(min_row=2):
        for cell in row:
            cell.alignment = Alignment(wrap_text=True, vertical="top")
    ws.freeze_panes = "A2"
    return wb


def generate_xlsx(records: Iterable[McqRecord]) -> Tuple[str, str]:
    """Write the workbook to a temp file; returns (absolute path, download filename)."""
    wb = build_workbook(records)
    with NamedTemporaryFile(delete=False, suffix=".xlsx") as tmp:
        tmp_path = tmp.name
    wb.save(tmp_path)
    return os.path.abspath(tmp_path), EXPORT_FILENAME

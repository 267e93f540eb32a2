"""Parsing of pasted class lists and roster CSV files into candidate rows.

Both entry points produce CandidateRow objects with grade, subclass and day
already converted to their closed types; raw tokens never leave this module.
"""
import io
import re
import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import pandas as pd

from afterschool.errors import MalformedInputError
from afterschool.logging import get_logger
from afterschool.models.types import (
    Grade,
    SubClass,
    Weekday,
    normalize_grade,
    normalize_sub_class,
)

log = get_logger(__name__)

IMPORT_TEMPLATE_COLUMNS = ["Last Name", "First Name", "Grade", "Subclass"]
IMPORT_TEMPLATE_SAMPLE = ["Doe", "John", "1", "A"]

ACTIVITIES_TEMPLATE_COLUMNS = ["Activity Name", "When", "Day", "Color"]
ACTIVITIES_TEMPLATE_SAMPLES = [
    ["Chess Club", "afterschool", "Monday", "#6366F1"],
    ["Soccer Club", "afterschool", "Wednesday", "#10B981"],
    ["Reading Buddies", "in-class", "", "#F59E0B"],
]

# Positions used when a CSV has no header (or lacks one of the columns)
DEFAULT_COLUMNS = {"last": 0, "first": 1, "grade": 2, "sub": 3}

_TOKEN_SPLIT = re.compile(r"\r?\n|,|;|\t")
_LINE_SPLIT = re.compile(r"\r?\n")
_SURROUNDING_QUOTES = re.compile(r'^"|"$')


@dataclass
class CandidateRow:
    """A staged import row, editable until the import is committed."""
    row_id: str
    first: str
    last: str
    grade: Optional[Grade] = None
    sub_class: Optional[SubClass] = None
    activity: str = ""
    day: Optional[Weekday] = None


def _now_ms() -> int:
    return int(time.time() * 1000)


def parse_name(raw: str) -> Optional[Tuple[str, str]]:
    """Split one name token into (first, last).

    "Doe, Jane" -> ("Jane", "Doe"); "Mary Ann Lee" -> ("Mary Ann", "Lee");
    "Prince" -> ("Prince", ""). Blank input gives None.
    """
    text = " ".join(raw.split())
    if not text:
        return None
    if "," in text:
        last, _, first = text.partition(",")
        first, last = first.strip(), last.strip()
        if first and last:
            return first, last
    parts = text.split(" ")
    if len(parts) == 1:
        return parts[0], ""
    return " ".join(parts[:-1]), parts[-1]


def split_name_tokens(text: str) -> List[str]:
    """Split pasted text on newlines, commas, semicolons and tabs."""
    return [t.strip() for t in _TOKEN_SPLIT.split(text) if t.strip()]


def parse_free_text(text: str) -> List[CandidateRow]:
    """Turn a pasted class list into candidate rows without grade or subclass.

    Raises:
        MalformedInputError: if the text is blank or holds no names
    """
    raw = (text or "").strip()
    if not raw:
        raise MalformedInputError("Paste the class list (one per line or comma-separated)")
    tokens = split_name_tokens(raw)
    if not tokens:
        raise MalformedInputError("No names detected")

    stamp = _now_ms()
    rows = []
    for i, token in enumerate(tokens):
        first, last = parse_name(token) or (token, "")
        rows.append(CandidateRow(row_id=f"TMP-{stamp}-{i + 1}", first=first, last=last))
    log.debug("free_text_parsed", rows=len(rows))
    return rows


def _clean_cell(cell: str) -> str:
    return _SURROUNDING_QUOTES.sub("", cell.strip())


def detect_columns(header_line: str) -> Optional[Dict[str, int]]:
    """Find column positions from a header line.

    Returns:
        Mapping of last/first/grade/sub to an index (-1 when that column is
        not named), or None when the line does not look like a header at all
    """
    header = [_clean_cell(h).lower() for h in header_line.split(",")]

    def find(predicate) -> int:
        return next((i for i, h in enumerate(header) if predicate(h)), -1)

    columns = {
        "last": find(lambda h: "last" in h),
        "first": find(lambda h: "first" in h),
        "grade": find(lambda h: h.startswith("grade") or h == "class"),
        "sub": find(lambda h: "sub" in h),
    }
    if all(index < 0 for index in columns.values()):
        return None
    return columns


def parse_csv(text: str) -> List[CandidateRow]:
    """Parse roster CSV text (Last Name, First Name, Grade, Subclass).

    The header row is optional. Invalid grade or subclass tokens are left
    unset so the import default applies; rows with neither a first nor a last
    name are dropped.

    Raises:
        MalformedInputError: if the CSV is empty or has no valid rows
    """
    lines = [line.strip() for line in _LINE_SPLIT.split(text or "")]
    lines = [line for line in lines if line]
    if not lines:
        raise MalformedInputError("Empty CSV")

    detected = detect_columns(lines[0])
    data_lines = lines[1:] if detected else lines
    columns = {
        key: (detected[key] if detected and detected[key] >= 0 else default)
        for key, default in DEFAULT_COLUMNS.items()
    }

    stamp = _now_ms()
    rows = []
    for i, line in enumerate(data_lines):
        cells = [_clean_cell(c) for c in line.split(",")]

        def cell(key: str) -> str:
            index = columns[key]
            return cells[index] if index < len(cells) else ""

        first, last = cell("first"), cell("last")
        if not first and not last:
            continue
        rows.append(CandidateRow(
            row_id=f"CSV-{stamp}-{i + 1}",
            first=first,
            last=last,
            grade=normalize_grade(cell("grade")),
            sub_class=normalize_sub_class(cell("sub")),
        ))

    if not rows:
        raise MalformedInputError("No valid rows found in CSV")
    log.info("csv_parsed", rows=len(rows), header=detected is not None, skipped=len(data_lines) - len(rows))
    return rows


def _template_csv(columns: List[str], rows: List[List[str]]) -> str:
    buffer = io.StringIO()
    pd.DataFrame(rows, columns=columns).to_csv(buffer, index=False, lineterminator="\n")
    return buffer.getvalue()


def import_template_csv() -> str:
    """Roster CSV template: header row plus one sample row."""
    return _template_csv(IMPORT_TEMPLATE_COLUMNS, [IMPORT_TEMPLATE_SAMPLE])


def activities_template_csv() -> str:
    """Reference template for activity lists; not read back by the importer."""
    return _template_csv(ACTIVITIES_TEMPLATE_COLUMNS, ACTIVITIES_TEMPLATE_SAMPLES)

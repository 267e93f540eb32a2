"""Import merge engine: staged rows reconciled into the roster.

Rows are matched to existing students by the composite key
grade|subclass|first|last (names lowercased). A match is updated in place,
anything else becomes a new student. Rows that cannot resolve a grade and a
subclass, from the row or from the import defaults, are skipped.
"""
import time
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional, Set

from afterschool.errors import MissingSelectionError
from afterschool.logging import get_logger
from afterschool.models.activity import afterschool
from afterschool.models.student import Student, merge_key
from afterschool.models.types import (
    Grade,
    SubClass,
    normalize_grade,
    normalize_sub_class,
    parse_weekday,
)
from afterschool.utils.catalog import sorted_unique
from afterschool.utils.loaders import CandidateRow, parse_csv, parse_free_text
from afterschool.utils.state import RosterStore

log = get_logger(__name__)


@dataclass
class ImportSummary:
    """
    Outcome of one committed import.

    Attributes:
        created: Students added to the roster
        updated: Rows that matched an existing student
        skipped: Rows without a resolvable grade or subclass
        activities_added: Activity names that were new to the explicit list
    """
    created: int = 0
    updated: int = 0
    skipped: int = 0
    activities_added: List[str] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return self.created + self.updated

    def to_dict(self) -> Dict[str, Any]:
        return {
            "created": self.created,
            "updated": self.updated,
            "skipped": self.skipped,
            "activities_added": list(self.activities_added),
        }


def _fresh_id(base: str, taken: Set[str]) -> str:
    candidate = base
    suffix = 1
    while candidate in taken:
        suffix += 1
        candidate = f"{base}-{suffix}"
    return candidate


def commit_import(
    store: RosterStore,
    rows: List[CandidateRow],
    default_grade: Optional[Grade] = None,
    default_sub_class: Optional[SubClass] = None,
    id_factory: Optional[Callable[[int], str]] = None,
) -> ImportSummary:
    """Merge staged rows into the store.

    Args:
        store: Roster to merge into
        rows: Staged candidate rows, in order
        default_grade: Grade for rows that carry none
        default_sub_class: Subclass for rows that carry none
        id_factory: Builds a base id for the n-th row (0-based); the result is
            made unique against the roster

    Returns:
        ImportSummary with created/updated/skipped counts

    Raises:
        MissingSelectionError: if there are no staged rows
    """
    if not rows:
        raise MissingSelectionError("Nothing to import. Use Preview Class or upload CSV first.")

    if id_factory is None:
        stamp = int(time.time() * 1000)
        id_factory = lambda index: f"IMP-{stamp}-{index + 1}"

    students = store.students
    by_key = {s.merge_key: i for i, s in enumerate(students)}
    taken = {s.id for s in students}
    summary = ImportSummary()

    for index, row in enumerate(rows):
        grade = row.grade if row.grade is not None else default_grade
        sub_class = row.sub_class if row.sub_class is not None else default_sub_class
        if grade is None or sub_class is None:
            summary.skipped += 1
            continue

        key = merge_key(grade, sub_class, row.first, row.last)
        name = row.activity.strip()
        activity = afterschool(name, row.day) if name else None

        if key in by_key:
            position = by_key[key]
            student = students[position]
            activities = student.activities
            # day must match exactly here, unlike live assignment
            if activity and not any(a.matches(activity.name, activity.day) for a in activities):
                activities = activities + [activity]
            students[position] = replace(student, grade=grade, sub_class=sub_class, activities=list(activities))
            summary.updated += 1
        else:
            student_id = _fresh_id(id_factory(index), taken)
            taken.add(student_id)
            students.append(Student(
                id=student_id,
                first=row.first,
                last=row.last,
                grade=grade,
                sub_class=sub_class,
                activities=[activity] if activity else [],
            ))
            by_key[key] = len(students) - 1
            summary.created += 1

    activities = store.activities
    names = {r.activity.strip() for r in rows if r.activity.strip()}
    summary.activities_added = sorted_unique(names - set(activities))
    if names:
        activities = sorted_unique(activities + list(names))

    store.replace_state(students, activities)
    log.info("import_committed", **summary.to_dict())
    return summary


class ImportStage:
    """Rows waiting to be committed, plus the defaults chosen for them."""

    def __init__(self):
        self.rows: List[CandidateRow] = []
        self.default_grade: Optional[Grade] = None
        self.default_sub_class: Optional[SubClass] = None

    def preview_class(self, text: str, grade: Optional[Grade], sub_class: Optional[SubClass]) -> List[CandidateRow]:
        """Stage a pasted class list for one grade and subclass.

        Raises:
            MissingSelectionError: if grade or subclass is not chosen
            MalformedInputError: if the text holds no names
        """
        if grade is None:
            raise MissingSelectionError("Choose a grade (e.g., K, 1…)")
        if sub_class is None:
            raise MissingSelectionError("Choose a subclass (A/B/C/D)")
        self.rows = parse_free_text(text)
        self.default_grade = grade
        self.default_sub_class = sub_class
        return self.rows

    def load_csv(self, text: str) -> List[CandidateRow]:
        """Stage rows from CSV text; on error the current stage is kept."""
        self.rows = parse_csv(text)
        return self.rows

    def set_defaults(self, grade: Optional[Grade], sub_class: Optional[SubClass]) -> None:
        self.default_grade = grade
        self.default_sub_class = sub_class

    def update_row(self, row_id: str, **changes) -> Optional[CandidateRow]:
        """Edit a staged row; grade, sub_class and day accept raw tokens."""
        if "grade" in changes:
            changes["grade"] = normalize_grade(changes["grade"])
        if "sub_class" in changes:
            changes["sub_class"] = normalize_sub_class(changes["sub_class"])
        if "day" in changes:
            changes["day"] = parse_weekday(changes["day"])
        for index, row in enumerate(self.rows):
            if row.row_id == row_id:
                self.rows[index] = replace(row, **changes)
                return self.rows[index]
        return None

    def delete_row(self, row_id: str) -> None:
        self.rows = [r for r in self.rows if r.row_id != row_id]

    def clear(self) -> None:
        self.rows = []

    def commit(self, store: RosterStore) -> ImportSummary:
        summary = commit_import(store, self.rows, self.default_grade, self.default_sub_class)
        self.clear()
        return summary

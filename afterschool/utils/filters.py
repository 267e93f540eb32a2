"""Filter/query engine over the roster.

All functions here are pure: same roster, same criteria, same result.
"""
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional

import pandas as pd

from afterschool.models.activity import Activity
from afterschool.models.student import Student
from afterschool.models.types import (
    GRADES,
    SUB_CLASSES,
    Grade,
    SortKey,
    SubClass,
    Weekday,
    collation_key,
)

EXPORT_COLUMNS = ["Student", "ID", "Grade", "Subclass", "Activity", "Day"]


@dataclass(frozen=True)
class FilterCriteria:
    query: str = ""
    grades: FrozenSet[Grade] = frozenset(GRADES)
    sub_classes: FrozenSet[SubClass] = frozenset(SUB_CLASSES)
    activity_name: Optional[str] = None
    day: Optional[Weekday] = None
    sort_by: SortKey = SortKey.NAME


@dataclass(frozen=True)
class FilterResult:
    student: Student
    activities: List[Activity] = field(default_factory=list)


@dataclass(frozen=True)
class ResultRow:
    """One printable (student, activity) line."""
    student_id: str
    student: str
    grade: str
    sub_class: str
    activity: str
    day: str
    color: str = ""


def matches_query(student: Student, query: str) -> bool:
    """Case-insensitive substring match on full name or id; blank matches all."""
    q = query.strip().lower()
    if not q:
        return True
    return q in f"{student.first} {student.last}".lower() or q in student.id.lower()


def _name_key(student: Student):
    return collation_key(student.full_name)


def _sort_key(sort_by: SortKey):
    if sort_by is SortKey.GRADE:
        return lambda s: (s.grade.rank, s.sub_class.value, _name_key(s))
    if sort_by is SortKey.SUB_CLASS:
        return lambda s: (s.sub_class.value, _name_key(s))
    return _name_key


def sort_results(results: Iterable[FilterResult], sort_by: SortKey = SortKey.NAME) -> List[FilterResult]:
    key = _sort_key(sort_by)
    return sorted(results, key=lambda r: key(r.student))


def filter_roster(students: Iterable[Student], criteria: FilterCriteria) -> List[FilterResult]:
    """Students with their afterschool activities that pass every criterion.

    Non-afterschool activities are ignored. Students left without a
    matching activity are dropped. Activities keep their insertion order.
    """
    results = []
    for student in students:
        if student.grade not in criteria.grades or student.sub_class not in criteria.sub_classes:
            continue
        if not matches_query(student, criteria.query):
            continue
        activities = [
            a for a in student.afterschool_activities
            if (not criteria.activity_name or a.name == criteria.activity_name)
            and (criteria.day is None or a.day == criteria.day)
        ]
        if activities:
            results.append(FilterResult(student=student, activities=activities))
    return sort_results(results, criteria.sort_by)


def filter_for_management(
    students: Iterable[Student],
    query: str = "",
    grade: Optional[Grade] = None,
    sub_class: Optional[SubClass] = None,
) -> List[Student]:
    """Students for the management table, including those with no activities,
    ordered by grade, subclass and name."""
    selected = [
        s for s in students
        if (grade is None or s.grade == grade)
        and (sub_class is None or s.sub_class == sub_class)
        and matches_query(s, query)
    ]
    return sorted(selected, key=_sort_key(SortKey.GRADE))


def flatten_rows(
    results: Iterable[FilterResult],
    colors: Optional[Dict[str, str]] = None,
    fallback_color: str = "",
) -> List[ResultRow]:
    colors = colors or {}
    rows = []
    for result in results:
        student = result.student
        for activity in result.activities:
            rows.append(ResultRow(
                student_id=student.id,
                student=student.full_name,
                grade=student.grade.label,
                sub_class=student.sub_class.value,
                activity=activity.name,
                day=activity.day.value if activity.day else "",
                color=colors.get(activity.name) or fallback_color,
            ))
    return rows


def rows_to_dataframe(rows: Iterable[ResultRow]) -> pd.DataFrame:
    """Printable table of result rows, in the given order."""
    return pd.DataFrame(
        [[r.student, r.student_id, r.grade, r.sub_class, r.activity, r.day] for r in rows],
        columns=EXPORT_COLUMNS,
    )


def activity_cell_styles(rows: Iterable[ResultRow]) -> List[str]:
    """CSS for each row's Activity cell: its activity color as background."""
    return [f"background-color: {r.color}" if r.color else "" for r in rows]


def style_activity_colors(df: pd.DataFrame, rows: List[ResultRow]):
    """Styler for the results table with the Activity column color-coded."""
    styles = activity_cell_styles(rows)
    return df.style.apply(lambda column: styles, subset=["Activity"], axis=0)

"""Derived activity catalog."""
from typing import Iterable, List

from afterschool.models.student import Student
from afterschool.models.types import collation_key


def catalog(activities: Iterable[str], students: Iterable[Student]) -> List[str]:
    """Every known activity name: the explicit list plus any afterschool
    activity a student holds, unique and in locale order.

    Always computed from its inputs; never store the result.
    """
    names = set(activities)
    for student in students:
        names.update(a.name for a in student.afterschool_activities)
    return sorted(names, key=collation_key)


def sorted_unique(names: Iterable[str]) -> List[str]:
    return sorted(set(names), key=collation_key)

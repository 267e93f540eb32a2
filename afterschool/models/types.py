"""Closed value sets for the roster: grades, subclasses, weekdays and activity slots.

Raw strings coming from CSV files, pasted text or snapshot documents are
converted here and nowhere else. Anything outside a value set maps to None
rather than being coerced into the nearest valid value.
"""
import re
import unicodedata
from enum import Enum
from typing import Any, Dict, Optional, Tuple

_LEADING_INT = re.compile(r"^[+-]?\d+")


class Grade(Enum):
    K = "K"
    G1 = 1
    G2 = 2
    G3 = 3
    G4 = 4
    G5 = 5

    @property
    def rank(self) -> int:
        """Position in K < 1 < 2 < 3 < 4 < 5"""
        return 0 if self is Grade.K else self.value

    @property
    def label(self) -> str:
        return str(self.value)


class SubClass(Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"


class Weekday(Enum):
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"


class When(Enum):
    AFTERSCHOOL = "afterschool"
    IN_CLASS = "in-class"
    LUNCH = "lunch"
    BEFORE_SCHOOL = "before-school"


class SortKey(Enum):
    NAME = "name"
    GRADE = "grade"
    SUB_CLASS = "subClass"


GRADES = tuple(Grade)
SUB_CLASSES = tuple(SubClass)
WEEKDAYS = tuple(Weekday)


def normalize_grade(raw: Any) -> Optional[Grade]:
    """Convert a raw grade token to a Grade.

    "K" (any case) is kindergarten. Anything else is read as a leading
    integer, so "3" and "3rd" both give grade 3, and only 1-5 are kept.

    Returns:
        The Grade, or None when the token is not a valid grade
    """
    if isinstance(raw, Grade):
        return raw
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        number = raw
    else:
        token = str(raw).strip().upper()
        if token == "K":
            return Grade.K
        match = _LEADING_INT.match(token)
        if not match:
            return None
        number = int(match.group(0))
    if 1 <= number <= 5:
        return Grade(number)
    return None


def normalize_sub_class(raw: Any) -> Optional[SubClass]:
    """Convert a raw subclass token (any case) to a SubClass, or None."""
    if isinstance(raw, SubClass):
        return raw
    if raw is None:
        return None
    token = str(raw).strip().upper()
    try:
        return SubClass(token)
    except ValueError:
        return None


def parse_weekday(raw: Any) -> Optional[Weekday]:
    """Convert a weekday name (any case) to a Weekday; blank or unknown gives None."""
    if isinstance(raw, Weekday):
        return raw
    if raw is None:
        return None
    token = str(raw).strip().capitalize()
    try:
        return Weekday(token)
    except ValueError:
        return None


def parse_when(raw: Any) -> Optional[When]:
    if isinstance(raw, When):
        return raw
    try:
        return When(str(raw).strip().lower())
    except ValueError:
        return None


def collation_key(text: str) -> Tuple[str, str, str]:
    """Sort key approximating locale-aware string comparison.

    Compares accent-free, case-folded text first, then accents, then case,
    so "adam" < "Émile" < "Zoe", lowercase sorts before uppercase,
    and the order is total.
    """
    folded = text.casefold()
    decomposed = unicodedata.normalize("NFKD", folded)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base, folded, text.swapcase()


def text_field(data: Dict[str, Any], key: str, default: Optional[str] = None) -> str:
    """Read a string field from a document, kept exactly as stored.

    A missing key gives `default`; null or a non-string value is rejected.

    Raises:
        ValueError: if the field is missing without a default, or not a string
    """
    if key not in data:
        if default is None:
            raise ValueError(f"missing field {key!r}")
        return default
    value = data[key]
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string, got {value!r}")
    return value

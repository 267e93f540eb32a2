from dataclasses import dataclass, field, replace
from typing import Any, Dict, List

from .activity import Activity
from .types import Grade, SubClass, normalize_grade, normalize_sub_class, text_field


@dataclass(frozen=True)
class Student:
    id: str
    first: str
    last: str
    grade: Grade
    sub_class: SubClass
    activities: List[Activity] = field(default_factory=list)

    @property
    def full_name(self) -> str:
        return full_name(self)

    @property
    def afterschool_activities(self) -> List[Activity]:
        return [a for a in self.activities if a.is_afterschool]

    @property
    def class_label(self) -> str:
        """e.g. 'K/A' or '3/C'"""
        return f"{self.grade.label}/{self.sub_class.value}"

    @property
    def merge_key(self) -> str:
        """Composite key identifying the same student across import batches"""
        return merge_key(self.grade, self.sub_class, self.first, self.last)

    def with_activities(self, activities: List[Activity]) -> "Student":
        return replace(self, activities=list(activities))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "first": self.first,
            "last": self.last,
            "grade": self.grade.value,
            "subClass": self.sub_class.value,
            "activities": [a.to_dict() for a in self.activities],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Student":
        """Build a Student from its document form.

        Raises:
            ValueError: on a missing or non-string id or name, an unknown grade
                or subclass, or a bad activity
        """
        student_id = text_field(data, "id")
        if not student_id.strip():
            raise ValueError("student id must not be empty")
        grade = normalize_grade(data.get("grade"))
        if grade is None:
            raise ValueError(f"student {student_id}: invalid grade {data.get('grade')!r}")
        sub_class = normalize_sub_class(data.get("subClass"))
        if sub_class is None:
            raise ValueError(f"student {student_id}: invalid subclass {data.get('subClass')!r}")
        raw_activities = data.get("activities") or []
        if not isinstance(raw_activities, list):
            raise ValueError(f"student {student_id}: activities must be a list")
        return cls(
            id=student_id,
            first=text_field(data, "first", ""),
            last=text_field(data, "last", ""),
            grade=grade,
            sub_class=sub_class,
            activities=[Activity.from_dict(a) for a in raw_activities],
        )


def full_name(student: Student) -> str:
    return f"{student.first} {student.last}".strip()


def merge_key(grade: Grade, sub_class: SubClass, first: str, last: str) -> str:
    return f"{grade.value}|{sub_class.value}|{first.lower()}|{last.lower()}"

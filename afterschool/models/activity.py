from dataclasses import dataclass
from typing import Any, Dict, Optional

from .types import Weekday, When, parse_weekday, parse_when, text_field


@dataclass(frozen=True)
class Activity:
    name: str
    when: When = When.AFTERSCHOOL
    day: Optional[Weekday] = None  # only meaningful for afterschool

    @property
    def is_afterschool(self) -> bool:
        return self.when is When.AFTERSCHOOL

    def matches(self, name: str, day: Optional[Weekday]) -> bool:
        """Exact afterschool match on name and day (an unset day only matches unset)."""
        return self.is_afterschool and self.name == name and self.day == day

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name, "when": self.when.value}
        if self.day is not None:
            data["day"] = self.day.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Activity":
        """Build an Activity from its document form.

        Raises:
            ValueError: if the entry is not an object, the name is blank or
                not a string, or `when` or `day` is not a known value
        """
        if not isinstance(data, dict):
            raise ValueError(f"activity must be an object, got {data!r}")
        name = text_field(data, "name")
        if not name.strip():
            raise ValueError("activity name must not be empty")
        when = parse_when(data.get("when", When.AFTERSCHOOL.value))
        if when is None:
            raise ValueError(f"unknown activity slot: {data.get('when')!r}")
        day = parse_weekday(data.get("day"))
        if day is None and data.get("day") not in (None, ""):
            raise ValueError(f"unknown day: {data.get('day')!r}")
        return cls(name=name, when=when, day=day)


def afterschool(name: str, day: Optional[Weekday] = None) -> Activity:
    """Shorthand for an afterschool Activity"""
    return Activity(name=name, when=When.AFTERSCHOOL, day=day)

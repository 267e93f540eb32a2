"""Roster store: the authoritative in-memory roster and activity list.

Every mutator replaces the held AppSnapshot with a new one, writes the full
state to the key-value backend and returns the new snapshot. Writes are fire
and forget: a failed write is logged and the in-memory state stays current.
"""
import json
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional

from afterschool.errors import MissingSelectionError, RosterError
from afterschool.logging import get_logger
from afterschool.models.activity import Activity, afterschool
from afterschool.models.snapshot import AppSnapshot
from afterschool.models.student import Student
from afterschool.models.types import Grade, SubClass, Weekday, When, collation_key
from afterschool.utils.catalog import catalog
from afterschool.utils.storage import (
    ACTIVITIES_KEY,
    ACTIVITY_COLORS_KEY,
    STUDENTS_KEY,
    KeyValueStore,
)

log = get_logger(__name__)

Confirm = Optional[Callable[[], bool]]

SEED_STUDENTS: List[Student] = [
    Student("S001", "Ava", "Nguyen", Grade.K, SubClass.A, [
        afterschool("Lego Builders", Weekday.MONDAY),
        Activity("Reading Buddies", When.IN_CLASS),
    ]),
    Student("S002", "Ben", "Ortiz", Grade.G1, SubClass.B, [
        afterschool("Soccer Club", Weekday.WEDNESDAY),
        Activity("Math Lab", When.LUNCH),
    ]),
    Student("S003", "Chloe", "Singh", Grade.G2, SubClass.C, [
        afterschool("Drama Crew", Weekday.THURSDAY),
        afterschool("Choir", Weekday.FRIDAY),
    ]),
]


def seed_activities(students: List[Student]) -> List[str]:
    """Unique afterschool activity names in first-seen order"""
    names: Dict[str, None] = {}
    for student in students:
        for activity in student.afterschool_activities:
            names.setdefault(activity.name, None)
    return list(names)


def seed_snapshot() -> AppSnapshot:
    return AppSnapshot(
        students=list(SEED_STUDENTS),
        activities=seed_activities(SEED_STUDENTS),
        activity_colors={},
    )


class RosterStore:
    def __init__(self, backend: KeyValueStore, seed: Optional[AppSnapshot] = None):
        self.backend = backend
        self.seed = seed if seed is not None else seed_snapshot()
        self._state = self.load_state()

    # -- reads ---------------------------------------------------------

    @property
    def state(self) -> AppSnapshot:
        return self._state

    @property
    def students(self) -> List[Student]:
        return list(self._state.students)

    @property
    def activities(self) -> List[str]:
        return list(self._state.activities)

    @property
    def activity_colors(self) -> Dict[str, str]:
        return dict(self._state.activity_colors or {})

    @property
    def catalog(self) -> List[str]:
        return catalog(self._state.activities, self._state.students)

    def get_student(self, student_id: str) -> Optional[Student]:
        return next((s for s in self._state.students if s.id == student_id), None)

    def color_for(self, name: str, fallback: str) -> str:
        return (self._state.activity_colors or {}).get(name) or fallback

    # -- persistence ---------------------------------------------------

    def _read_key(self, key: str) -> Optional[Any]:
        try:
            raw = self.backend.get(key)
            return None if raw is None else json.loads(raw)
        except (RosterError, ValueError) as e:
            log.warning("state_key_unreadable", key=key, error=str(e))
            return None

    def load_state(self) -> AppSnapshot:
        """Read the three persisted keys once, falling back to seed data
        for any key that is absent or unparseable."""
        students = self.seed.students
        raw_students = self._read_key(STUDENTS_KEY)
        if isinstance(raw_students, list):
            try:
                students = [Student.from_dict(s) for s in raw_students]
            except (AttributeError, ValueError) as e:
                log.warning("stored_students_invalid", error=str(e))

        activities = self.seed.activities
        raw_activities = self._read_key(ACTIVITIES_KEY)
        if isinstance(raw_activities, list) and all(isinstance(a, str) for a in raw_activities):
            activities = raw_activities

        colors = dict(self.seed.activity_colors or {})
        raw_colors = self._read_key(ACTIVITY_COLORS_KEY)
        if isinstance(raw_colors, dict):
            colors = {str(k): str(v) for k, v in raw_colors.items()}

        log.info("state_loaded", students=len(students), activities=len(activities))
        return AppSnapshot(students=list(students), activities=list(activities), activity_colors=colors)

    def save_state(self) -> None:
        """Write the full state to the backend. Failures are logged, not raised."""
        try:
            self.backend.set(STUDENTS_KEY, json.dumps([s.to_dict() for s in self._state.students]))
            self.backend.set(ACTIVITIES_KEY, json.dumps(self._state.activities))
            self.backend.set(ACTIVITY_COLORS_KEY, json.dumps(self._state.activity_colors or {}))
        except Exception as e:
            log.warning("state_save_failed", error=str(e))

    def _commit(self, state: AppSnapshot) -> AppSnapshot:
        self._state = state
        self.save_state()
        return state

    # -- students ------------------------------------------------------

    def add_or_update_student(self, student: Student) -> AppSnapshot:
        students = self.students
        for index, existing in enumerate(students):
            if existing.id == student.id:
                students[index] = student
                break
        else:
            students.append(student)
        return self._commit(replace(self._state, students=students))

    def delete_student(self, student_id: str, confirm: Confirm = None) -> AppSnapshot:
        """Remove a student; unknown ids leave the roster as it is."""
        if confirm is not None and not confirm():
            return self._state
        students = [s for s in self._state.students if s.id != student_id]
        log.info("student_deleted", student_id=student_id, found=len(students) != len(self._state.students))
        return self._commit(replace(self._state, students=students))

    def clear_all(self, confirm: Confirm = None) -> AppSnapshot:
        if confirm is not None and not confirm():
            return self._state
        log.info("roster_cleared", students=len(self._state.students))
        return self._commit(replace(self._state, students=[]))

    def _update_student(self, student_id: str, update: Callable[[Student], Student]) -> AppSnapshot:
        students = [update(s) if s.id == student_id else s for s in self._state.students]
        return self._commit(replace(self._state, students=students))

    def assign_activity(self, student_id: str, name: str, day: Optional[Weekday] = None) -> AppSnapshot:
        """Give a student an afterschool activity.

        Without a day, any existing afterschool entry of that name counts as
        already assigned; with a day only the same name and day does.

        Raises:
            MissingSelectionError: if no activity name is given
        """
        name = (name or "").strip()
        if not name:
            raise MissingSelectionError("Select an activity first.")

        def assign(student: Student) -> Student:
            exists = any(
                a.is_afterschool and a.name == name and (day is None or a.day == day)
                for a in student.activities
            )
            if exists:
                return student
            return student.with_activities(student.activities + [afterschool(name, day)])

        return self._update_student(student_id, assign)

    def remove_activity(self, student_id: str, name: str, day: Optional[Weekday] = None) -> AppSnapshot:
        """Drop matching afterschool entries; without a day every day of `name` goes."""
        def remove(student: Student) -> Student:
            return student.with_activities([
                a for a in student.activities
                if not (a.is_afterschool and a.name == name and (day is None or a.day == day))
            ])

        return self._update_student(student_id, remove)

    # -- activity catalog ----------------------------------------------

    def add_activity_to_catalog(self, name: str, color: Optional[str] = None) -> AppSnapshot:
        name = (name or "").strip()
        if not name:
            return self._state
        activities = self.activities
        if name not in activities:
            activities = sorted(activities + [name], key=collation_key)
        colors = self.activity_colors
        if color:
            colors[name] = color
        return self._commit(replace(self._state, activities=activities, activity_colors=colors))

    def remove_activity_from_catalog(self, name: str) -> AppSnapshot:
        """Forget an activity name and its color. Students keep their entries."""
        activities = [a for a in self._state.activities if a != name]
        colors = self.activity_colors
        colors.pop(name, None)
        return self._commit(replace(self._state, activities=activities, activity_colors=colors))

    def set_activity_color(self, name: str, color: str) -> AppSnapshot:
        colors = self.activity_colors
        colors[name] = color
        return self._commit(replace(self._state, activity_colors=colors))

    # -- whole state ---------------------------------------------------

    def restore(self, snapshot: AppSnapshot) -> AppSnapshot:
        """Replace the roster with a snapshot. A snapshot without a color
        map keeps the current colors."""
        colors = self.activity_colors if snapshot.activity_colors is None else dict(snapshot.activity_colors)
        log.info("state_restored", students=len(snapshot.students), activities=len(snapshot.activities))
        return self._commit(AppSnapshot(
            students=list(snapshot.students),
            activities=list(snapshot.activities),
            activity_colors=colors,
        ))

    def replace_state(self, students: List[Student], activities: List[str]) -> AppSnapshot:
        return self._commit(replace(self._state, students=list(students), activities=list(activities)))

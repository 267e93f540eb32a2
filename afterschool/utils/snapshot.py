"""Snapshot codec: the whole roster as a portable JSON document.

Document shape::

    {"students": [Student, ...], "activities": ["Chess Club", ...],
     "activityColors": {"Chess Club": "#6366F1"}}

`activityColors` is optional on input.
"""
import json
from datetime import datetime
from typing import Any, Dict

from afterschool.errors import SnapshotError
from afterschool.models.snapshot import AppSnapshot
from afterschool.models.student import Student

SNAPSHOT_PREFIX = "lila_afterschool_snapshot"


def serialize(snapshot: AppSnapshot) -> Dict[str, Any]:
    document: Dict[str, Any] = {
        "students": [s.to_dict() for s in snapshot.students],
        "activities": list(snapshot.activities),
    }
    if snapshot.activity_colors is not None:
        document["activityColors"] = dict(snapshot.activity_colors)
    return document


def deserialize(document: Any) -> AppSnapshot:
    """Validate a snapshot document and build an AppSnapshot from it.

    Args:
        document: Parsed JSON value

    Returns:
        AppSnapshot; activity_colors is None when the document has no color map

    Raises:
        SnapshotError: if `students` or `activities` is missing or not a list,
            or any entry inside them is invalid
    """
    if not isinstance(document, dict):
        raise SnapshotError("Invalid snapshot file: expected a JSON object.")
    students = document.get("students")
    activities = document.get("activities")
    if not isinstance(students, list) or not isinstance(activities, list):
        raise SnapshotError("Invalid snapshot file: 'students' and 'activities' must be lists.")

    if not all(isinstance(name, str) for name in activities):
        raise SnapshotError("Invalid snapshot file: activity names must be strings.")

    colors = document.get("activityColors")
    if colors is not None:
        if not isinstance(colors, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in colors.items()
        ):
            raise SnapshotError("Invalid snapshot file: 'activityColors' must map names to colors.")
        colors = dict(colors)

    parsed = []
    for index, raw in enumerate(students):
        if not isinstance(raw, dict):
            raise SnapshotError(f"Invalid snapshot file: student #{index + 1} is not an object.")
        try:
            parsed.append(Student.from_dict(raw))
        except ValueError as e:
            raise SnapshotError(f"Invalid snapshot file: {e}") from e

    return AppSnapshot(students=parsed, activities=list(activities), activity_colors=colors)


def dumps_snapshot(snapshot: AppSnapshot) -> str:
    return json.dumps(serialize(snapshot), indent=2, ensure_ascii=False)


def loads_snapshot(text: str) -> AppSnapshot:
    """Parse snapshot JSON text.

    Raises:
        SnapshotError: if the text is not JSON or not a valid snapshot
    """
    try:
        document = json.loads(text)
    except (TypeError, ValueError) as e:
        raise SnapshotError("Failed to import file. Make sure it's a valid snapshot JSON.") from e
    return deserialize(document)


def snapshot_filename(now: datetime) -> str:
    """e.g. lila_afterschool_snapshot_2025-01-31-14-05-09.json"""
    return f"{SNAPSHOT_PREFIX}_{now.strftime('%Y-%m-%d-%H-%M-%S')}.json"

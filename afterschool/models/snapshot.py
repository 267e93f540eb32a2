from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .student import Student


@dataclass(frozen=True)
class AppSnapshot:
    """Full roster state: students, the explicit activity list and activity colors.

    This is both what the store holds and what gets exported and restored.
    activity_colors is None only for a restored document that carried no
    color map; the store always holds a dict.
    """
    students: List[Student] = field(default_factory=list)
    activities: List[str] = field(default_factory=list)
    activity_colors: Optional[Dict[str, str]] = field(default_factory=dict)

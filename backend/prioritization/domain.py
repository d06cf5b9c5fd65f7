"""
Domain types for task prioritization.

These are plain dataclasses shared by the scoring, calibration and ordering
modules. They carry no persistence concerns; see models.py for the stored
representation and store.py for the conversion between the two.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum
from typing import Dict, Optional


class TaskStatus(Enum):
    """Lifecycle state of a task."""
    INCOMPLETE = "incomplete"
    IN_PROGRESS = "in-progress"
    COMPLETE = "complete"


class EisenhowerQuadrant(IntEnum):
    """Eisenhower Matrix quadrant, numbered the way the dashboards show it."""
    DO_FIRST = 1    # Urgent + Important
    SCHEDULE = 2    # Important, not urgent
    DELEGATE = 3    # Urgent, not important
    ELIMINATE = 4   # Neither


def _parse_datetime(value) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


@dataclass
class Task:
    """
    A single task as rated by the user.

    Ratings are nominally on a 1-5 scale but nothing here enforces a bound.
    estimated_time is expressed in minutes.
    """
    id: str
    title: str
    importance: float
    urgency: float
    impact: float
    effort: float
    estimated_time: float = 0.0
    category: str = ""
    description: Optional[str] = None
    notes: Optional[str] = None
    status: TaskStatus = TaskStatus.INCOMPLETE
    created_at: datetime = field(default_factory=datetime.now)
    modified_at: datetime = field(default_factory=datetime.now)
    deadline: Optional[datetime] = None
    year_assignment: Optional[int] = None
    month_assignment: Optional[int] = None
    week_assignment: Optional[int] = None
    project_id: Optional[str] = None

    def __post_init__(self) -> None:
        self.id = str(self.id)
        self.importance = float(self.importance)
        self.urgency = float(self.urgency)
        self.impact = float(self.impact)
        self.effort = float(self.effort)
        self.estimated_time = float(self.estimated_time)
        if not isinstance(self.status, TaskStatus):
            self.status = TaskStatus(self.status)

    @property
    def is_complete(self) -> bool:
        return self.status is TaskStatus.COMPLETE

    @classmethod
    def from_dict(cls, data: Dict) -> "Task":
        """
        Build a Task from a plain mapping such as a validated API payload.

        Missing ratings default to the middle of the usual 1-5 scale and
        missing timestamps default to now.
        """
        now = datetime.now()
        return cls(
            id=data.get("id") or "",
            title=data.get("title", "Untitled Task"),
            importance=data.get("importance", 3),
            urgency=data.get("urgency", 3),
            impact=data.get("impact", 3),
            effort=data.get("effort", 3),
            estimated_time=data.get("estimated_time", 0) or 0,
            category=data.get("category") or "",
            description=data.get("description"),
            notes=data.get("notes"),
            status=data.get("status") or TaskStatus.INCOMPLETE,
            created_at=_parse_datetime(data.get("created_at")) or now,
            modified_at=_parse_datetime(data.get("modified_at")) or now,
            deadline=_parse_datetime(data.get("deadline")),
            year_assignment=data.get("year_assignment"),
            month_assignment=data.get("month_assignment"),
            week_assignment=data.get("week_assignment"),
            project_id=data.get("project_id"),
        )

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "notes": self.notes,
            "importance": self.importance,
            "urgency": self.urgency,
            "impact": self.impact,
            "effort": self.effort,
            "estimated_time": self.estimated_time,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
            "modified_at": self.modified_at.isoformat(),
            "deadline": self.deadline.isoformat() if self.deadline else None,
            "year_assignment": self.year_assignment,
            "month_assignment": self.month_assignment,
            "week_assignment": self.week_assignment,
            "project_id": self.project_id,
        }


@dataclass(frozen=True)
class TaskMetrics:
    """Derived per-task scores. Recomputed on every read, never stored."""
    priority_score: float
    scheduling_weight: float
    eisenhower_quadrant: EisenhowerQuadrant
    impact_effort_ratio: float

    def to_dict(self) -> Dict:
        return {
            "priority_score": round(self.priority_score, 3),
            "scheduling_weight": round(self.scheduling_weight, 3),
            "eisenhower_quadrant": int(self.eisenhower_quadrant),
            "impact_effort_ratio": round(self.impact_effort_ratio, 3),
        }

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass
class Task:
    title: str
    description: Optional[str] = None
    priority: Priority = Priority.MEDIUM
    # Calendar day only; any time-of-day stored here is ignored.
    due_date: Optional[datetime] = None
    # Optional separate due time in HH:MM (24h)
    due_time: Optional[str] = None
    completed: bool = False
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)
    user_id: Optional[str] = None
    id: Optional[str] = None

    @classmethod
    def from_doc(cls, doc: dict) -> "Task":
        try:
            priority = Priority(doc.get("priority") or Priority.MEDIUM.value)
        except ValueError:
            priority = Priority.MEDIUM
        return cls(
            title=doc.get("title", ""),
            description=doc.get("description"),
            priority=priority,
            due_date=doc.get("due_date"),
            due_time=doc.get("due_time"),
            completed=bool(doc.get("completed", False)),
            created_at=doc.get("created_at") or datetime.utcnow(),
            updated_at=doc.get("updated_at") or datetime.utcnow(),
            user_id=doc.get("user_id"),
            id=str(doc["_id"]) if doc.get("_id") is not None else doc.get("id"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "priority": self.priority.value,
            "due_date": self.due_date.date().isoformat() if self.due_date else None,
            "due_time": self.due_time,
            "completed": self.completed,
            "user_id": self.user_id,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


def find_incomplete_tasks(db, user_id: str) -> List[Task]:
    """Fetch a user's incomplete tasks in insertion order."""
    cursor = db.tasks.find({"user_id": user_id, "completed": False}).sort("_id", 1)
    return [Task.from_doc(doc) for doc in cursor]

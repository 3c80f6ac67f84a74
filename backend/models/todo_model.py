from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass
class Todo:
    user_id: str
    text: str = ""
    completed: bool = False
    order: int = 0
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)
    id: Optional[str] = None

    def to_doc(self) -> dict:
        return {
            "user_id": self.user_id,
            "text": self.text,
            "completed": self.completed,
            "order": self.order,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


def list_todos(db, user_id: str) -> List[dict]:
    return list(db.todos.find({"user_id": user_id}).sort([("order", 1), ("created_at", 1)]))


def next_order(db, user_id: str) -> int:
    last = db.todos.find_one({"user_id": user_id}, sort=[("order", -1)])
    return last["order"] + 1 if last else 0


def seed_default_todos(db, user_id: str, slots: int) -> List[dict]:
    """Give a new user a fixed number of blank planner slots."""
    docs = [Todo(user_id=user_id, order=i).to_doc() for i in range(slots)]
    if docs:
        db.todos.insert_many(docs)
    return list_todos(db, user_id)

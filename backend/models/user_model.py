from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash


@dataclass
class User:
    name: str
    email: str
    password_hash: str = ""
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)
    id: Optional[str] = None

    @classmethod
    def from_doc(cls, doc: dict) -> "User":
        return cls(
            name=doc.get("name", ""),
            email=doc.get("email", ""),
            password_hash=doc.get("password_hash", ""),
            created_at=doc.get("created_at") or datetime.utcnow(),
            updated_at=doc.get("updated_at") or datetime.utcnow(),
            id=str(doc["_id"]) if doc.get("_id") is not None else None,
        )

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    def to_doc(self) -> dict:
        return {
            "name": self.name,
            "email": self.email,
            "password_hash": self.password_hash,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    def to_dict(self) -> dict:
        # Never expose the password hash
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "created_at": self.created_at.isoformat(),
        }


def find_user_by_email(db, email: str) -> Optional[User]:
    doc = db.users.find_one({"email": email.strip().lower()})
    return User.from_doc(doc) if doc else None

"""Request payload validation.

Each validator returns ``(clean, errors)`` where ``errors`` is a list of
``{"field": ..., "message": ...}`` dicts; an empty list means the payload is
usable as-is.
"""
import re
from datetime import date, datetime, time

from backend.models.task_model import Priority
from backend.services.notifications import DUE_TIME_PATTERN

EMAIL_PATTERN = re.compile(r"^[\w.+-]+@[\w-]+(\.[\w-]+)*\.[A-Za-z]{2,}$")

TITLE_MAX = 100
DESCRIPTION_MAX = 500
NAME_MIN, NAME_MAX = 2, 50
PASSWORD_MIN = 6
TODO_TEXT_MAX = 500


def _error(field, message):
    return {"field": field, "message": message}


def _clean_str(value):
    return value.strip() if isinstance(value, str) else value


def parse_due_date(value):
    """Accept ``YYYY-MM-DD`` or a full ISO timestamp; keep only the calendar day."""
    if isinstance(value, datetime):
        return datetime.combine(value.date(), time.min)
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    return datetime.combine(parsed.date(), time.min)


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------
def validate_signup(payload):
    errors = []
    name = _clean_str(payload.get("name")) or ""
    email = (_clean_str(payload.get("email")) or "").lower()
    password = payload.get("password") or ""

    if not name:
        errors.append(_error("name", "Name is required"))
    elif not NAME_MIN <= len(name) <= NAME_MAX:
        errors.append(_error("name", f"Name must be between {NAME_MIN} and {NAME_MAX} characters"))

    if not email:
        errors.append(_error("email", "Email is required"))
    elif not EMAIL_PATTERN.match(email):
        errors.append(_error("email", "Please provide a valid email"))

    if not password:
        errors.append(_error("password", "Password is required"))
    elif not isinstance(password, str) or len(password) < PASSWORD_MIN:
        errors.append(_error("password", f"Password must be at least {PASSWORD_MIN} characters long"))
    elif not any(ch.isdigit() for ch in password):
        errors.append(_error("password", "Password must contain at least one number"))

    return {"name": name, "email": email, "password": password}, errors


def validate_login(payload):
    errors = []
    email = (_clean_str(payload.get("email")) or "").lower()
    password = payload.get("password") or ""
    if not email:
        errors.append(_error("email", "Email is required"))
    elif not EMAIL_PATTERN.match(email):
        errors.append(_error("email", "Please provide a valid email"))
    if not password:
        errors.append(_error("password", "Password is required"))
    return {"email": email, "password": password}, errors


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------
def _check_title(title, errors):
    if not isinstance(title, str) or not title.strip():
        errors.append(_error("title", "Task title is required"))
    elif len(title.strip()) > TITLE_MAX:
        errors.append(_error("title", f"Title cannot exceed {TITLE_MAX} characters"))


def _check_description(description, errors):
    if description is None:
        return
    if not isinstance(description, str):
        errors.append(_error("description", "Description must be text"))
    elif len(description.strip()) > DESCRIPTION_MAX:
        errors.append(_error("description", f"Description cannot exceed {DESCRIPTION_MAX} characters"))


def _check_priority(priority, errors):
    try:
        return Priority(priority)
    except ValueError:
        errors.append(_error("priority", "Priority must be low, medium, or high"))
        return None


def _check_due_time(due_time, errors):
    if due_time in (None, ""):
        return None
    if not isinstance(due_time, str) or not DUE_TIME_PATTERN.match(due_time):
        errors.append(_error("due_time", "Due time must be in HH:MM 24-hour format"))
        return None
    return due_time


def validate_task_create(payload, today=None):
    today = today or date.today()
    errors = []
    clean = {}

    _check_title(payload.get("title"), errors)
    clean["title"] = _clean_str(payload.get("title"))

    _check_description(payload.get("description"), errors)
    clean["description"] = _clean_str(payload.get("description"))

    priority = _check_priority(payload.get("priority") or Priority.MEDIUM.value, errors)
    clean["priority"] = priority.value if priority else None

    raw_date = payload.get("due_date")
    if raw_date in (None, ""):
        errors.append(_error("due_date", "Due date is required"))
    else:
        due_date = parse_due_date(raw_date)
        if due_date is None:
            errors.append(_error("due_date", "Please provide a valid date"))
        elif due_date.date() < today:
            errors.append(_error("due_date", "Due date cannot be in the past"))
        clean["due_date"] = due_date

    clean["due_time"] = _check_due_time(payload.get("due_time"), errors)
    return clean, errors


def validate_task_update(payload):
    """Partial update; only fields present in the payload are returned."""
    errors = []
    updates = {}

    if "title" in payload:
        _check_title(payload["title"], errors)
        updates["title"] = _clean_str(payload["title"])
    if "description" in payload:
        _check_description(payload["description"], errors)
        updates["description"] = _clean_str(payload["description"])
    if "priority" in payload:
        priority = _check_priority(payload["priority"], errors)
        updates["priority"] = priority.value if priority else None
    if "due_date" in payload:
        due_date = parse_due_date(payload["due_date"])
        if due_date is None:
            errors.append(_error("due_date", "Please provide a valid date"))
        updates["due_date"] = due_date
    if "due_time" in payload:
        updates["due_time"] = _check_due_time(payload["due_time"], errors)
    if "completed" in payload:
        if not isinstance(payload["completed"], bool):
            errors.append(_error("completed", "Completed must be a boolean value"))
        updates["completed"] = payload["completed"]

    return updates, errors


# ---------------------------------------------------------------------------
# Todos
# ---------------------------------------------------------------------------
def validate_todo(payload):
    """Fields shared by todo create/update; only present keys are returned."""
    errors = []
    clean = {}
    if "text" in payload:
        text = payload["text"] if payload["text"] is not None else ""
        if not isinstance(text, str):
            errors.append(_error("text", "Text must be a string"))
        elif len(text) > TODO_TEXT_MAX:
            errors.append(_error("text", f"Text cannot exceed {TODO_TEXT_MAX} characters"))
        clean["text"] = text
    if "completed" in payload:
        if not isinstance(payload["completed"], bool):
            errors.append(_error("completed", "Completed must be a boolean value"))
        clean["completed"] = payload["completed"]
    if "order" in payload:
        order = payload["order"]
        if isinstance(order, bool) or not isinstance(order, int):
            errors.append(_error("order", "Order must be an integer"))
        clean["order"] = order
    return clean, errors

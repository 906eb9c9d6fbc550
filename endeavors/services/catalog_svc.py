from __future__ import annotations

import sqlite3

from ..db import get_conn
from ..logs import LogContext
from ..repository import exercise_repo, tier_repo
from .utils import rows_to_dicts


def list_tiers() -> list[dict]:
    with get_conn() as conn:
        return rows_to_dicts(tier_repo.list_all(conn))


def list_exercises(user_id: int, q: str | None = None) -> list[dict]:
    """Shared library first, then the user's own exercises."""
    with get_conn() as conn:
        library = exercise_repo.list_library(conn, q)
        own = exercise_repo.list_user_exercises(conn, user_id, q)
    items = [
        {
            "exercise_library_id": r["exercise_library_id"],
            "user_exercise_library_id": None,
            "name": r["exercise_name"],
            "muscle_group": r["muscle_group"],
            "equipment": r["equipment"],
            "difficulty": r["difficulty"],
            "source": "library",
        }
        for r in library
    ]
    items += [
        {
            "exercise_library_id": None,
            "user_exercise_library_id": r["user_exercise_library_id"],
            "name": r["exercise_name"],
            "description": r["description"],
            "source": "user",
        }
        for r in own
    ]
    return items


def create_user_exercise(user_id: int, name: str, description: str | None, log: LogContext) -> int:
    name = (name or "").strip()
    if not name:
        raise ValueError("exercise_name_required")
    with get_conn() as conn:
        try:
            new_id = exercise_repo.insert_user_exercise(conn, user_id, name, description)
        except sqlite3.IntegrityError:
            raise ValueError("exercise_already_exists")
    log.set_entity("USER_EXERCISE", new_id)
    log.set_after({"id": new_id, "name": name, "description": description})
    return new_id

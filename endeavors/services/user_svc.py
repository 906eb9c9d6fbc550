from __future__ import annotations

from ..db import get_conn
from ..repository import user_repo


def get_user(user_id: int) -> dict | None:
    with get_conn() as conn:
        row = user_repo.get_user(conn, user_id)
    if row is None:
        return None
    d = dict(row)
    d["is_admin"] = bool(d["is_admin"])
    return d


def create_user(name: str, email: str | None = None, is_admin: bool = False) -> int:
    with get_conn() as conn:
        return user_repo.insert_user(conn, name, email, is_admin)

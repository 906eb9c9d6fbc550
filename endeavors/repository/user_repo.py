from __future__ import annotations

from sqlite3 import Connection


def get_user(conn: Connection, user_id: int):
    return conn.execute(
        "SELECT id, name, email, is_admin FROM users WHERE id=?", (user_id,)
    ).fetchone()


def insert_user(conn: Connection, name: str, email: str | None = None, is_admin: bool = False) -> int:
    cur = conn.execute(
        "INSERT INTO users(name, email, is_admin) VALUES(?,?,?)",
        (name, email, 1 if is_admin else 0),
    )
    return int(cur.lastrowid)

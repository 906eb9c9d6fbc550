from __future__ import annotations

from sqlite3 import Connection


def insert_message(conn: Connection, first_name: str, last_name: str, email: str,
                   inquiry_type: str, message: str) -> int:
    cur = conn.execute(
        "INSERT INTO contact_messages(first_name, last_name, email, inquiry_type, message) "
        "VALUES(?,?,?,?,?)",
        (first_name, last_name, email, inquiry_type, message),
    )
    return int(cur.lastrowid)


def count_recent_from(conn: Connection, email: str, minutes: int) -> int:
    row = conn.execute(
        "SELECT COUNT(1) AS c FROM contact_messages "
        "WHERE email=? AND created_at >= datetime('now', ?)",
        (email, f"-{int(minutes)} minutes"),
    ).fetchone()
    return int(row["c"])

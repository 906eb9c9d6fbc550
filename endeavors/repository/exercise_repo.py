from __future__ import annotations

from sqlite3 import Connection


def list_library(conn: Connection, q: str | None = None):
    sql = (
        "SELECT exercise_library_id, exercise_name, muscle_group, equipment, difficulty "
        "FROM exercise_library"
    )
    params: list[object] = []
    if q:
        sql += " WHERE exercise_name LIKE ?"
        params.append(f"%{q}%")
    sql += " ORDER BY exercise_name"
    return conn.execute(sql, params).fetchall()


def list_user_exercises(conn: Connection, user_id: int, q: str | None = None):
    sql = (
        "SELECT user_exercise_library_id, user_id, exercise_name, description, created_at "
        "FROM user_exercise_library WHERE user_id=?"
    )
    params: list[object] = [user_id]
    if q:
        sql += " AND exercise_name LIKE ?"
        params.append(f"%{q}%")
    sql += " ORDER BY exercise_name"
    return conn.execute(sql, params).fetchall()


def insert_library_exercise(conn: Connection, name: str, muscle_group: str | None,
                            equipment: str | None, difficulty: str | None) -> None:
    conn.execute(
        "INSERT OR IGNORE INTO exercise_library(exercise_name, muscle_group, equipment, difficulty) "
        "VALUES(?,?,?,?)",
        (name, muscle_group, equipment, difficulty),
    )


def insert_user_exercise(conn: Connection, user_id: int, name: str, description: str | None) -> int:
    cur = conn.execute(
        "INSERT INTO user_exercise_library(user_id, exercise_name, description) VALUES(?,?,?)",
        (user_id, name, description),
    )
    return int(cur.lastrowid)


def library_exists(conn: Connection, exercise_library_id: int) -> bool:
    row = conn.execute(
        "SELECT 1 FROM exercise_library WHERE exercise_library_id=?", (exercise_library_id,)
    ).fetchone()
    return row is not None


def user_exercise_owner(conn: Connection, user_exercise_library_id: int) -> int | None:
    row = conn.execute(
        "SELECT user_id FROM user_exercise_library WHERE user_exercise_library_id=?",
        (user_exercise_library_id,),
    ).fetchone()
    return None if row is None else int(row["user_id"])

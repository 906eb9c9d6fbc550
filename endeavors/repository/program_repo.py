from __future__ import annotations

import json
from sqlite3 import Connection, Row

_PROGRAM_COLS = (
    "program_id, user_id, program_name, phase_focus, periodization_type, progression_rules, "
    "program_duration, notes, tier_continuum_id, start_date, end_date, deleted, created_at, updated_at"
)

_EXERCISE_SELECT = (
    "SELECT rpe.program_exercises_id, rpe.program_id, rpe.program_instance, rpe.exercise_source, "
    "rpe.exercise_library_id, rpe.user_exercise_library_id, rpe.pairing, rpe.notes, "
    "rpe.planned_sets, rpe.actual_sets, "
    "COALESCE(el.exercise_name, uel.exercise_name) AS exercise_name "
    "FROM resist_program_exercises rpe "
    "LEFT JOIN exercise_library el ON el.exercise_library_id = rpe.exercise_library_id "
    "LEFT JOIN user_exercise_library uel ON uel.user_exercise_library_id = rpe.user_exercise_library_id "
)


def _loads(raw, default):
    if raw is None or raw == "":
        return default
    return json.loads(raw)


def program_row_to_dict(row: Row) -> dict:
    d = dict(row)
    d["progression_rules"] = _loads(d.get("progression_rules"), None)
    d["deleted"] = bool(d.get("deleted"))
    return d


def exercise_row_to_dict(row: Row) -> dict:
    d = dict(row)
    d["planned_sets"] = _loads(d.get("planned_sets"), [])
    d["actual_sets"] = _loads(d.get("actual_sets"), None)
    return d


def insert_program(conn: Connection, user_id: int, data: dict) -> int:
    cur = conn.execute(
        "INSERT INTO resist_programs(user_id, program_name, phase_focus, periodization_type, "
        "progression_rules, program_duration, notes, tier_continuum_id, start_date, end_date) "
        "VALUES(?,?,?,?,?,?,?,?,?,?)",
        (
            user_id,
            data["program_name"],
            data.get("phase_focus"),
            data.get("periodization_type"),
            json.dumps(data.get("progression_rules")) if data.get("progression_rules") is not None else None,
            data["program_duration"],
            data.get("notes"),
            data.get("tier_continuum_id"),
            data.get("start_date"),
            data.get("end_date"),
        ),
    )
    return int(cur.lastrowid)


def update_program(conn: Connection, program_id: int, data: dict) -> None:
    conn.execute(
        "UPDATE resist_programs SET program_name=?, phase_focus=?, periodization_type=?, "
        "progression_rules=?, program_duration=?, notes=?, tier_continuum_id=?, "
        "start_date=?, end_date=?, updated_at=datetime('now') WHERE program_id=?",
        (
            data["program_name"],
            data.get("phase_focus"),
            data.get("periodization_type"),
            json.dumps(data.get("progression_rules")) if data.get("progression_rules") is not None else None,
            data["program_duration"],
            data.get("notes"),
            data.get("tier_continuum_id"),
            data.get("start_date"),
            data.get("end_date"),
            program_id,
        ),
    )


def soft_delete(conn: Connection, program_id: int) -> None:
    conn.execute(
        "UPDATE resist_programs SET deleted=1, updated_at=datetime('now') WHERE program_id=?",
        (program_id,),
    )


def get_program(conn: Connection, program_id: int, include_deleted: bool = False):
    sql = f"SELECT {_PROGRAM_COLS} FROM resist_programs WHERE program_id=?"
    if not include_deleted:
        sql += " AND deleted=0"
    return conn.execute(sql, (program_id,)).fetchone()


def list_programs_for_user(conn: Connection, user_id: int):
    return conn.execute(
        "SELECT p.program_id, p.user_id, p.program_name, p.phase_focus, p.periodization_type, "
        "p.progression_rules, p.program_duration, p.notes, p.tier_continuum_id, p.start_date, "
        "p.end_date, p.deleted, p.created_at, p.updated_at, "
        "(SELECT COUNT(1) FROM resist_program_exercises e "
        " WHERE e.program_id = p.program_id AND e.program_instance = 1) AS exercise_count "
        "FROM resist_programs p WHERE p.user_id=? AND p.deleted=0 "
        "ORDER BY p.created_at DESC, p.program_id DESC",
        (user_id,),
    ).fetchall()


def list_programs_for_analysis(conn: Connection, user_id: int):
    return conn.execute(
        "SELECT p.program_id, p.program_name, p.program_duration, p.phase_focus, "
        "p.periodization_type, p.created_at, "
        "COUNT(e.program_exercises_id) AS exercise_count, "
        "MAX(CASE WHEN e.actual_sets IS NOT NULL AND e.actual_sets != '[]' THEN 1 ELSE 0 END) AS has_actual_data "
        "FROM resist_programs p "
        "LEFT JOIN resist_program_exercises e ON e.program_id = p.program_id "
        "WHERE p.user_id=? AND p.deleted=0 "
        "GROUP BY p.program_id ORDER BY p.created_at DESC, p.program_id DESC",
        (user_id,),
    ).fetchall()


def insert_exercise(conn: Connection, program_id: int, week: int, ex: dict) -> int:
    actual = ex.get("actual_sets")
    cur = conn.execute(
        "INSERT INTO resist_program_exercises(program_id, program_instance, exercise_source, "
        "exercise_library_id, user_exercise_library_id, pairing, notes, planned_sets, actual_sets) "
        "VALUES(?,?,?,?,?,?,?,?,?)",
        (
            program_id,
            week,
            ex["exercise_source"],
            ex.get("exercise_library_id"),
            ex.get("user_exercise_library_id"),
            ex.get("pairing"),
            ex.get("notes"),
            json.dumps(ex.get("planned_sets") or []),
            json.dumps(actual) if actual is not None else None,
        ),
    )
    return int(cur.lastrowid)


def delete_exercises(conn: Connection, program_id: int) -> None:
    conn.execute("DELETE FROM resist_program_exercises WHERE program_id=?", (program_id,))


def list_exercises(conn: Connection, program_id: int):
    return conn.execute(
        _EXERCISE_SELECT
        + "WHERE rpe.program_id=? ORDER BY rpe.program_instance ASC, rpe.program_exercises_id ASC",
        (program_id,),
    ).fetchall()


def exercise_in_program(conn: Connection, program_exercises_id: int, program_id: int) -> bool:
    row = conn.execute(
        "SELECT 1 FROM resist_program_exercises WHERE program_exercises_id=? AND program_id=?",
        (program_exercises_id, program_id),
    ).fetchone()
    return row is not None


def update_actual_sets(conn: Connection, program_exercises_id: int, program_id: int, actual_sets: list) -> None:
    conn.execute(
        "UPDATE resist_program_exercises SET actual_sets=?, updated_at=datetime('now') "
        "WHERE program_exercises_id=? AND program_id=?",
        (json.dumps(actual_sets), program_exercises_id, program_id),
    )


def list_actuals_for_user(conn: Connection, user_id: int):
    """Exercise rows with recorded actual sets, newest program first."""
    return conn.execute(
        "SELECT rpe.program_id, p.program_name, rpe.program_instance, p.created_at AS execution_date, "
        "rpe.actual_sets, rpe.exercise_library_id, rpe.user_exercise_library_id, "
        "COALESCE(el.exercise_name, uel.exercise_name) AS exercise_name "
        "FROM resist_program_exercises rpe "
        "JOIN resist_programs p ON p.program_id = rpe.program_id "
        "LEFT JOIN exercise_library el ON el.exercise_library_id = rpe.exercise_library_id "
        "LEFT JOIN user_exercise_library uel ON uel.user_exercise_library_id = rpe.user_exercise_library_id "
        "WHERE p.user_id=? AND p.deleted=0 AND rpe.actual_sets IS NOT NULL AND rpe.actual_sets != '[]' "
        "ORDER BY p.created_at DESC, rpe.program_id DESC, rpe.program_instance ASC",
        (user_id,),
    ).fetchall()

from __future__ import annotations

import json
from sqlite3 import Connection, Row

_SESSION_COLS = (
    "s.cme_session_id, s.user_id, s.session_name, s.macrocycle_phase, s.focus_block, s.notes, "
    "s.start_date, s.end_date, s.created_at, s.updated_at"
)

_ACTIVITY_SELECT = (
    "SELECT sa.cme_session_activity_id, sa.cme_session_id, sa.cme_activity_family_id, "
    "sa.cme_activity_library_id, sa.planned_steps, sa.actual_steps, sa.notes, sa.created_at, sa.updated_at, "
    "cal.activity AS activity_name, caf.activity_family_name AS activity_family "
    "FROM cme_sessions_activities sa "
    "LEFT JOIN cme_activity_library cal ON cal.cme_activity_library_id = sa.cme_activity_library_id "
    "LEFT JOIN cme_activity_family caf ON caf.cme_activity_family_id = sa.cme_activity_family_id "
)

# template sessions are reached through cme_session_templates, not a user's list
_NOT_TEMPLATE = "NOT EXISTS (SELECT 1 FROM cme_session_templates t WHERE t.cme_session_id = s.cme_session_id)"


def _loads(raw):
    if raw is None or raw == "":
        return []
    return json.loads(raw)


def activity_row_to_dict(row: Row) -> dict:
    d = dict(row)
    d["planned_steps"] = _loads(d.get("planned_steps"))
    d["actual_steps"] = _loads(d.get("actual_steps"))
    return d


# ---- activity library ----

def upsert_family(conn: Connection, name: str) -> int:
    conn.execute("INSERT OR IGNORE INTO cme_activity_family(activity_family_name) VALUES(?)", (name,))
    row = conn.execute(
        "SELECT cme_activity_family_id FROM cme_activity_family WHERE activity_family_name=?", (name,)
    ).fetchone()
    return int(row["cme_activity_family_id"])


def upsert_activity(conn: Connection, activity: str, family: str | None, equipment: str | None = None) -> int:
    family_id = upsert_family(conn, family) if family else None
    conn.execute(
        "INSERT INTO cme_activity_library(activity, cme_activity_family_id, equipment) VALUES(?,?,?) "
        "ON CONFLICT(activity) DO UPDATE SET cme_activity_family_id=excluded.cme_activity_family_id, "
        "equipment=excluded.equipment",
        (activity, family_id, equipment),
    )
    row = conn.execute(
        "SELECT cme_activity_library_id FROM cme_activity_library WHERE activity=?", (activity,)
    ).fetchone()
    return int(row["cme_activity_library_id"])


def list_activity_library(conn: Connection):
    return conn.execute(
        "SELECT cal.cme_activity_library_id, cal.activity, cal.equipment, cal.cme_activity_family_id, "
        "caf.activity_family_name AS activity_family "
        "FROM cme_activity_library cal "
        "LEFT JOIN cme_activity_family caf ON caf.cme_activity_family_id = cal.cme_activity_family_id "
        "ORDER BY caf.activity_family_name, cal.activity"
    ).fetchall()


def get_library_activity(conn: Connection, library_id: int):
    return conn.execute(
        "SELECT cme_activity_library_id, activity, cme_activity_family_id FROM cme_activity_library "
        "WHERE cme_activity_library_id=?",
        (library_id,),
    ).fetchone()


# ---- sessions ----

def insert_session(conn: Connection, user_id: int, data: dict) -> int:
    cur = conn.execute(
        "INSERT INTO cme_sessions(user_id, session_name, macrocycle_phase, focus_block, notes, start_date, end_date) "
        "VALUES(?,?,?,?,?,?,?)",
        (
            user_id,
            data["session_name"],
            data.get("macrocycle_phase"),
            data.get("focus_block"),
            data.get("notes"),
            data.get("start_date"),
            data.get("end_date"),
        ),
    )
    return int(cur.lastrowid)


def update_session(conn: Connection, session_id: int, data: dict) -> None:
    conn.execute(
        "UPDATE cme_sessions SET session_name=?, macrocycle_phase=?, focus_block=?, notes=?, "
        "start_date=?, end_date=?, updated_at=datetime('now') WHERE cme_session_id=?",
        (
            data["session_name"],
            data.get("macrocycle_phase"),
            data.get("focus_block"),
            data.get("notes"),
            data.get("start_date"),
            data.get("end_date"),
            session_id,
        ),
    )


def set_start_date(conn: Connection, session_id: int, start_date: str) -> None:
    conn.execute(
        "UPDATE cme_sessions SET start_date=?, updated_at=datetime('now') WHERE cme_session_id=?",
        (start_date, session_id),
    )


def get_session(conn: Connection, session_id: int):
    return conn.execute(
        f"SELECT {_SESSION_COLS} FROM cme_sessions s WHERE s.cme_session_id=?", (session_id,)
    ).fetchone()


def list_sessions_for_user(conn: Connection, user_id: int):
    return conn.execute(
        f"SELECT {_SESSION_COLS}, "
        "(SELECT COUNT(1) FROM cme_sessions_activities sa WHERE sa.cme_session_id = s.cme_session_id) "
        "AS exercise_count "
        f"FROM cme_sessions s WHERE s.user_id=? AND {_NOT_TEMPLATE} "
        "ORDER BY s.created_at DESC, s.cme_session_id DESC",
        (user_id,),
    ).fetchall()


def list_activity_names_for_user(conn: Connection, user_id: int):
    """(cme_session_id, activity name) pairs in insertion order, for list summaries."""
    return conn.execute(
        "SELECT sa.cme_session_id, COALESCE(cal.activity, 'Unknown Activity') AS activity_name "
        "FROM cme_sessions_activities sa "
        "JOIN cme_sessions s ON s.cme_session_id = sa.cme_session_id "
        "LEFT JOIN cme_activity_library cal ON cal.cme_activity_library_id = sa.cme_activity_library_id "
        "WHERE s.user_id=? ORDER BY sa.cme_session_activity_id",
        (user_id,),
    ).fetchall()


# ---- session activities ----

def insert_session_activity(conn: Connection, session_id: int, family_id: int | None, library_id: int | None,
                            planned_steps: list, actual_steps: list, notes: str | None) -> int:
    cur = conn.execute(
        "INSERT INTO cme_sessions_activities(cme_session_id, cme_activity_family_id, cme_activity_library_id, "
        "planned_steps, actual_steps, notes) VALUES(?,?,?,?,?,?)",
        (session_id, family_id, library_id, json.dumps(planned_steps), json.dumps(actual_steps), notes),
    )
    return int(cur.lastrowid)


def delete_session_activities(conn: Connection, session_id: int) -> None:
    conn.execute("DELETE FROM cme_sessions_activities WHERE cme_session_id=?", (session_id,))


def list_session_activities(conn: Connection, session_id: int):
    return conn.execute(
        _ACTIVITY_SELECT + "WHERE sa.cme_session_id=? ORDER BY sa.cme_session_activity_id",
        (session_id,),
    ).fetchall()


def activity_in_session(conn: Connection, activity_id: int, session_id: int) -> bool:
    row = conn.execute(
        "SELECT 1 FROM cme_sessions_activities WHERE cme_session_activity_id=? AND cme_session_id=?",
        (activity_id, session_id),
    ).fetchone()
    return row is not None


def update_actual_steps(conn: Connection, activity_id: int, session_id: int, steps: list) -> None:
    conn.execute(
        "UPDATE cme_sessions_activities SET actual_steps=?, updated_at=datetime('now') "
        "WHERE cme_session_activity_id=? AND cme_session_id=?",
        (json.dumps(steps), activity_id, session_id),
    )


# ---- templates ----

def insert_template(conn: Connection, name: str, tier_id: int | None, session_id: int) -> int:
    cur = conn.execute(
        "INSERT INTO cme_session_templates(template_name, tier_continuum_id, cme_session_id) VALUES(?,?,?)",
        (name, tier_id, session_id),
    )
    return int(cur.lastrowid)


def list_templates(conn: Connection):
    return conn.execute(
        "SELECT t.cme_template_id, t.template_name, t.tier_continuum_id, t.cme_session_id, t.created_at, "
        "tc.tier_continuum_name, s.macrocycle_phase, s.focus_block, "
        "(SELECT COUNT(1) FROM cme_sessions_activities sa WHERE sa.cme_session_id = t.cme_session_id) "
        "AS exercise_count "
        "FROM cme_session_templates t "
        "JOIN cme_sessions s ON s.cme_session_id = t.cme_session_id "
        "LEFT JOIN tier_continuum tc ON tc.tier_continuum_id = t.tier_continuum_id "
        "ORDER BY t.tier_continuum_id, t.template_name"
    ).fetchall()


def get_template(conn: Connection, template_id: int):
    return conn.execute(
        "SELECT cme_template_id, template_name, tier_continuum_id, cme_session_id, created_at "
        "FROM cme_session_templates WHERE cme_template_id=?",
        (template_id,),
    ).fetchone()

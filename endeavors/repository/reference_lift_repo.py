from __future__ import annotations

from sqlite3 import Connection


def list_ref_lifts(conn: Connection):
    return conn.execute(
        "SELECT id, exercise_name, struct_bal_ref_lift_load, struct_bal_ref_lift_note "
        "FROM struct_bal_ref_lifts ORDER BY id"
    ).fetchall()


def upsert_ref_lift(conn: Connection, name: str, load: float, note: str | None):
    conn.execute(
        "INSERT INTO struct_bal_ref_lifts(exercise_name, struct_bal_ref_lift_load, struct_bal_ref_lift_note) "
        "VALUES(?,?,?) ON CONFLICT(exercise_name) DO UPDATE SET "
        "struct_bal_ref_lift_load=excluded.struct_bal_ref_lift_load, "
        "struct_bal_ref_lift_note=excluded.struct_bal_ref_lift_note",
        (name, float(load), note),
    )


def insert_balanced_lift(conn: Connection, user_id: int, reference_lift_id: int, load: float,
                         load_unit: str, reps: int, master_lift_id: int | None) -> int:
    cur = conn.execute(
        "INSERT INTO struct_balanced_lifts(user_id, reference_lift_id, balanced_load, load_unit, reps, master_lift_id) "
        "VALUES(?,?,?,?,?,?)",
        (user_id, reference_lift_id, float(load), load_unit, int(reps), master_lift_id),
    )
    return int(cur.lastrowid)


def list_balanced_lifts(conn: Connection, user_id: int):
    return conn.execute(
        "SELECT b.id, b.reference_lift_id, r.exercise_name, b.balanced_load, b.load_unit, b.reps, "
        "b.master_lift_id, r.struct_bal_ref_lift_load, b.created_at "
        "FROM struct_balanced_lifts b "
        "JOIN struct_bal_ref_lifts r ON r.id = b.reference_lift_id "
        "WHERE b.user_id=? ORDER BY b.created_at DESC, b.id ASC",
        (user_id,),
    ).fetchall()

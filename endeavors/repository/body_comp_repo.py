from __future__ import annotations

import json
from sqlite3 import Connection


def insert_entry(conn: Connection, user_id: int, method: str, weight: float, metrics: dict,
                 skinfolds: dict | None, circumferences: dict | None) -> int:
    cur = conn.execute(
        "INSERT INTO body_composition_entries(user_id, body_fat_method, weight, body_fat_percentage, "
        "fat_mass, fat_free_mass, skinfold_measurements, circumference_measurements) "
        "VALUES(?,?,?,?,?,?,?,?)",
        (
            user_id,
            method,
            weight,
            metrics.get("body_fat_percentage"),
            metrics.get("fat_mass"),
            metrics.get("fat_free_mass"),
            json.dumps(skinfolds) if skinfolds else None,
            json.dumps(circumferences) if circumferences else None,
        ),
    )
    return int(cur.lastrowid)


def list_entries(conn: Connection, user_id: int) -> list[dict]:
    rows = conn.execute(
        "SELECT id, entry_date, body_fat_method, weight, body_fat_percentage, fat_mass, fat_free_mass, "
        "skinfold_measurements, circumference_measurements "
        "FROM body_composition_entries WHERE user_id=? ORDER BY entry_date DESC, id DESC",
        (user_id,),
    ).fetchall()
    out = []
    for r in rows:
        d = dict(r)
        for k in ("skinfold_measurements", "circumference_measurements"):
            d[k] = json.loads(d[k]) if d[k] else None
        out.append(d)
    return out

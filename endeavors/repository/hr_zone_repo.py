from __future__ import annotations

import json
from sqlite3 import Connection


def upsert_zones(conn: Connection, user_id: int, activity_type: str, method: str, zones: list[dict],
                 max_hr: int | None, resting_hr: int | None) -> int:
    conn.execute(
        "INSERT INTO heart_rate_zones(user_id, activity_type, calculation_method, zone_ranges, "
        "max_heart_rate, resting_heart_rate) VALUES(?,?,?,?,?,?) "
        "ON CONFLICT(user_id, activity_type) DO UPDATE SET "
        "calculation_method=excluded.calculation_method, zone_ranges=excluded.zone_ranges, "
        "max_heart_rate=excluded.max_heart_rate, resting_heart_rate=excluded.resting_heart_rate, "
        "updated_at=datetime('now')",
        (user_id, activity_type, method, json.dumps(zones), max_hr, resting_hr),
    )
    row = conn.execute(
        "SELECT hr_zone_id FROM heart_rate_zones WHERE user_id=? AND activity_type=?",
        (user_id, activity_type),
    ).fetchone()
    return int(row["hr_zone_id"])


def list_zones(conn: Connection, user_id: int) -> list[dict]:
    rows = conn.execute(
        "SELECT hr_zone_id, activity_type, calculation_method, zone_ranges, max_heart_rate, "
        "resting_heart_rate, updated_at FROM heart_rate_zones WHERE user_id=? ORDER BY activity_type",
        (user_id,),
    ).fetchall()
    out = []
    for r in rows:
        d = dict(r)
        d["zone_ranges"] = json.loads(d["zone_ranges"])
        out.append(d)
    return out

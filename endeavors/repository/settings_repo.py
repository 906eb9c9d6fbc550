from __future__ import annotations

import json
from sqlite3 import Connection

SCALAR_COLUMNS = (
    "height_unit", "weight_unit", "distance_unit", "temperature_unit", "time_format",
    "date_format", "language", "sidebar_expand_mode",
    "notifications_email", "notifications_text", "notifications_app",
)
JSON_COLUMNS = ("fitness_settings", "health_settings", "lifestyle_settings", "nutrition_settings")


def get_settings(conn: Connection, user_id: int) -> dict | None:
    row = conn.execute("SELECT * FROM user_settings WHERE user_id=?", (user_id,)).fetchone()
    if row is None:
        return None
    d = dict(row)
    for k in JSON_COLUMNS:
        d[k] = json.loads(d[k]) if d[k] else {}
    for k in ("notifications_email", "notifications_text", "notifications_app"):
        d[k] = bool(d[k])
    return d


def insert_defaults(conn: Connection, user_id: int) -> None:
    conn.execute("INSERT OR IGNORE INTO user_settings(user_id) VALUES(?)", (user_id,))


def upsert_settings(conn: Connection, user_id: int, values: dict) -> None:
    cols = list(SCALAR_COLUMNS) + list(JSON_COLUMNS)
    params = [user_id]
    for c in SCALAR_COLUMNS:
        v = values[c]
        params.append(int(v) if isinstance(v, bool) else v)
    for c in JSON_COLUMNS:
        params.append(json.dumps(values.get(c) or {}))
    placeholders = ",".join(["?"] * (len(cols) + 1))
    updates = ", ".join(f"{c}=excluded.{c}" for c in cols)
    conn.execute(
        f"INSERT INTO user_settings(user_id, {', '.join(cols)}, updated_at) "
        f"VALUES({placeholders}, datetime('now')) "
        f"ON CONFLICT(user_id) DO UPDATE SET {updates}, updated_at=datetime('now')",
        params,
    )

from __future__ import annotations

from sqlite3 import Connection


def upsert_metric(conn: Connection, m: dict) -> None:
    conn.execute(
        "INSERT INTO web_vitals_metrics(metric_id, metric_name, value, delta, rating, ts, url, "
        "user_agent, session_id, user_id) VALUES(?,?,?,?,?,?,?,?,?,?) "
        "ON CONFLICT(metric_id) DO UPDATE SET value=excluded.value, delta=excluded.delta, "
        "rating=excluded.rating, updated_at=datetime('now')",
        (
            m["id"], m["name"], m["value"], m.get("delta"), m["rating"], m["timestamp"],
            m.get("url"), m.get("user_agent"), m.get("session_id"), m.get("user_id"),
        ),
    )


def list_metrics(conn: Connection, since: str | None = None, name: str | None = None):
    sql = "SELECT metric_id, metric_name, value, rating, ts, url FROM web_vitals_metrics"
    where, params = [], []
    if since:
        where.append("ts >= ?")
        params.append(since)
    if name:
        where.append("metric_name = ?")
        params.append(name)
    if where:
        sql += " WHERE " + " AND ".join(where)
    sql += " ORDER BY ts ASC"
    return conn.execute(sql, params).fetchall()

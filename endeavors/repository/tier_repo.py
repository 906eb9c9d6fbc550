from __future__ import annotations

from sqlite3 import Connection


def list_all(conn: Connection):
    return conn.execute(
        "SELECT tier_continuum_id, tier_continuum_name FROM tier_continuum ORDER BY tier_continuum_id"
    ).fetchall()


def upsert(conn: Connection, tier_id: int, name: str):
    conn.execute(
        "INSERT INTO tier_continuum(tier_continuum_id, tier_continuum_name) VALUES(?, ?) "
        "ON CONFLICT(tier_continuum_id) DO UPDATE SET tier_continuum_name=excluded.tier_continuum_name",
        (tier_id, name),
    )


def exists(conn: Connection, tier_id: int) -> bool:
    row = conn.execute("SELECT 1 FROM tier_continuum WHERE tier_continuum_id=?", (tier_id,)).fetchone()
    return row is not None

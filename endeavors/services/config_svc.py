# endeavors/services/config_svc.py
from ..db import get_conn
from ..logs import LogContext

DEFAULTS = {
    "default_load_unit": "lbs",
    # structural balance: deviation (percent) from the reference ratio
    "imbalance_warn_pct": "10",
    "imbalance_alert_pct": "20",
    "pr_max_reps": "15",
    "pairing_group_size": "2",
    "contact_max_per_hour": "3",
}

_CASTS = {
    "default_load_unit": str,
    "imbalance_warn_pct": float,
    "imbalance_alert_pct": float,
    "pr_max_reps": int,
    "pairing_group_size": int,
    "contact_max_per_hour": int,
}


def ensure_default_config():
    """Insert missing keys without touching existing values."""
    with get_conn() as conn:
        for k, v in DEFAULTS.items():
            conn.execute(
                "INSERT INTO config(key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO NOTHING",
                (k, v),
            )


def get_config() -> dict:
    with get_conn() as conn:
        rows = conn.execute("SELECT key, value FROM config").fetchall()
    cfg = {r["key"]: r["value"] for r in rows}
    out = {}
    for k, cast in _CASTS.items():
        try:
            out[k] = cast(cfg.get(k, DEFAULTS[k]))
        except (TypeError, ValueError):
            out[k] = cast(DEFAULTS[k])
    return out


def _validate(k: str, v) -> str:
    if k not in _CASTS:
        raise ValueError(f"unknown config key: {k}")
    try:
        val = _CASTS[k](v)
    except (TypeError, ValueError):
        raise ValueError(f"invalid value for {k}: {v!r}")
    if k == "default_load_unit" and val not in ("lbs", "kg"):
        raise ValueError("default_load_unit must be lbs or kg")
    if k in ("pr_max_reps", "pairing_group_size", "contact_max_per_hour") and val < 1:
        raise ValueError(f"{k} must be >= 1")
    if k in ("imbalance_warn_pct", "imbalance_alert_pct") and val <= 0:
        raise ValueError(f"{k} must be positive")
    return str(val)


def update_config(upd: dict, log: LogContext) -> list[str]:
    clean = {k: _validate(k, v) for k, v in upd.items()}
    updated = []
    with get_conn() as conn:
        before = {r["key"]: r["value"] for r in conn.execute("SELECT key,value FROM config")}
        for k, v in clean.items():
            conn.execute(
                "INSERT INTO config(key,value) VALUES(?,?) "
                "ON CONFLICT(key) DO UPDATE SET value=excluded.value",
                (k, v)
            )
            updated.append(k)
        after = {r["key"]: r["value"] for r in conn.execute("SELECT key,value FROM config")}
    log.set_before(before); log.set_after(after)
    return updated

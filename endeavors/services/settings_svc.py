from __future__ import annotations

from ..db import get_conn, transaction
from ..logs import LogContext
from ..repository import settings_repo

# canonical (API) key -> user_settings column
GENERAL_FIELDS = {
    "heightUnit": "height_unit",
    "weightUnit": "weight_unit",
    "distanceUnit": "distance_unit",
    "temperatureUnit": "temperature_unit",
    "timeFormat": "time_format",
    "dateFormat": "date_format",
    "language": "language",
    "sidebarExpandMode": "sidebar_expand_mode",
    "notificationsEmail": "notifications_email",
    "notificationsText": "notifications_text",
    "notificationsApp": "notifications_app",
}
SECTIONS = {
    "fitness": "fitness_settings",
    "health": "health_settings",
    "lifestyle": "lifestyle_settings",
    "nutrition": "nutrition_settings",
}


def _to_canonical(row: dict) -> dict:
    out = {"general": {k: row[col] for k, col in GENERAL_FIELDS.items()}}
    for section, col in SECTIONS.items():
        out[section] = row.get(col) or {}
    return out


def get_user_settings(user: dict) -> dict:
    """Settings of the user; a defaults row is created on first read."""
    with get_conn() as conn:
        row = settings_repo.get_settings(conn, user["id"])
        if row is None:
            settings_repo.insert_defaults(conn, user["id"])
            row = settings_repo.get_settings(conn, user["id"])
    return _to_canonical(row)


def update_user_settings(user: dict, data: dict, log: LogContext) -> dict:
    """
    Merge a (possibly partial) canonical settings object into the stored row.
    General keys that are missing keep their value; a section that is given
    replaces the stored one.
    """
    with get_conn() as conn:
        with transaction(conn):
            settings_repo.insert_defaults(conn, user["id"])
            current = settings_repo.get_settings(conn, user["id"])
            values = dict(current)
            for k, v in (data.get("general") or {}).items():
                if v is not None and k in GENERAL_FIELDS:
                    values[GENERAL_FIELDS[k]] = v
            for section, col in SECTIONS.items():
                if data.get(section) is not None:
                    values[col] = data[section]
            settings_repo.upsert_settings(conn, user["id"], values)
            after = settings_repo.get_settings(conn, user["id"])
    log.set_entity("USER_SETTINGS", user["id"])
    log.set_before(_to_canonical(current))
    log.set_after(_to_canonical(after))
    return _to_canonical(after)

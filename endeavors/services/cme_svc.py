from __future__ import annotations

import logging

from ..db import get_conn, transaction
from ..domain.cme import expand_steps, total_duration
from ..logs import LogContext
from ..repository import cme_repo, tier_repo
from .utils import check_owner, rows_to_dicts

logger = logging.getLogger(__name__)


def list_activities() -> list[dict]:
    with get_conn() as conn:
        return rows_to_dicts(cme_repo.list_activity_library(conn))


def load_owned_session(conn, user: dict, session_id: int) -> dict:
    row = cme_repo.get_session(conn, session_id)
    if row is None:
        raise LookupError("session_not_found")
    session = dict(row)
    check_owner(user, session["user_id"])
    return session


def _activities(conn, session_id: int) -> list[dict]:
    out = []
    for r in cme_repo.list_session_activities(conn, session_id):
        d = cme_repo.activity_row_to_dict(r)
        d["planned_duration"] = total_duration(d["planned_steps"])
        d["actual_duration"] = total_duration(d["actual_steps"])
        out.append(d)
    return out


def _validate_header(name_key: str, data: dict) -> None:
    if not (data.get(name_key) or "").strip():
        raise ValueError(f"{name_key}_required")


def _insert_activities(conn, session_id: int, activities: list[dict]) -> int:
    """Insert planned activities; the family comes from the library entry."""
    for a in activities:
        library_id = a.get("cme_activity_library_id")
        family_id = None
        if library_id is not None:
            lib = cme_repo.get_library_activity(conn, library_id)
            if lib is None:
                raise ValueError(f"cme_activity_library_id not found: {library_id}")
            family_id = lib["cme_activity_family_id"]
        cme_repo.insert_session_activity(
            conn, session_id, family_id, library_id, expand_steps(a), [], a.get("notes")
        )
    return len(activities)


def list_sessions(user: dict) -> list[dict]:
    with get_conn() as conn:
        rows = cme_repo.list_sessions_for_user(conn, user["id"])
        names: dict[int, list[str]] = {}
        for r in cme_repo.list_activity_names_for_user(conn, user["id"]):
            names.setdefault(r["cme_session_id"], []).append(r["activity_name"])
    out = []
    for r in rows:
        d = dict(r)
        d["exercise_count"] = int(d["exercise_count"] or 0)
        d["exercise_summary"] = ", ".join(names.get(d["cme_session_id"], [])) or "No exercises"
        out.append(d)
    return out


def get_session(user: dict, session_id: int) -> dict:
    with get_conn() as conn:
        session = load_owned_session(conn, user, session_id)
        session["activities"] = _activities(conn, session_id)
    return session


def create_session(user: dict, data: dict, log: LogContext) -> dict:
    _validate_header("session_name", data)
    with get_conn() as conn:
        with transaction(conn):
            session_id = cme_repo.insert_session(conn, user["id"], data)
            n = _insert_activities(conn, session_id, data.get("activities") or [])
    log.set_entity("CME_SESSION", session_id)
    log.set_after({"cme_session_id": session_id, "session_name": data["session_name"], "activities": n})
    return {"cme_session_id": session_id, "activity_count": n}


def update_session(user: dict, session_id: int, data: dict, log: LogContext) -> dict:
    """Replace the header and planned activities; recorded actuals are dropped with them."""
    _validate_header("session_name", data)
    with get_conn() as conn:
        before = load_owned_session(conn, user, session_id)
        with transaction(conn):
            cme_repo.update_session(conn, session_id, data)
            cme_repo.delete_session_activities(conn, session_id)
            n = _insert_activities(conn, session_id, data.get("activities") or [])
    log.set_entity("CME_SESSION", session_id)
    log.set_before(before)
    log.set_after({"session_name": data["session_name"], "activities": n})
    return {"cme_session_id": session_id, "activity_count": n}


def record_actuals(user: dict, session_id: int, updates: list[dict], session_date: str | None,
                   log: LogContext) -> int:
    """
    Store performed steps for existing session activities.

    Every cme_session_activity_id must belong to the session; otherwise nothing
    is written. session_date, when given, becomes the session's start_date.
    """
    if not updates:
        raise ValueError("no activities to update")
    with get_conn() as conn:
        load_owned_session(conn, user, session_id)
        bad = [u["cme_session_activity_id"] for u in updates
               if not cme_repo.activity_in_session(conn, u["cme_session_activity_id"], session_id)]
        if bad:
            logger.warning("actuals for cme session %s reference foreign activity rows %s", session_id, bad)
            raise ValueError(f"activities not in session: {bad}")
        steps = {u["cme_session_activity_id"]: expand_steps(u, actual=True) for u in updates}
        with transaction(conn):
            for activity_id, performed in steps.items():
                cme_repo.update_actual_steps(conn, activity_id, session_id, performed)
            if session_date:
                cme_repo.set_start_date(conn, session_id, session_date)
    log.set_entity("CME_SESSION", session_id)
    log.set_after({"updated": list(steps), "session_date": session_date})
    return len(steps)


def list_templates() -> list[dict]:
    with get_conn() as conn:
        rows = cme_repo.list_templates(conn)
    out = []
    for r in rows:
        d = dict(r)
        d["exercise_count"] = int(d["exercise_count"] or 0)
        out.append(d)
    return out


def get_template(template_id: int) -> dict:
    with get_conn() as conn:
        row = cme_repo.get_template(conn, template_id)
        if row is None:
            raise LookupError("template_not_found")
        template = dict(row)
        session = dict(cme_repo.get_session(conn, template["cme_session_id"]))
        template.update({k: session[k] for k in ("macrocycle_phase", "focus_block", "notes")})
        template["activities"] = _activities(conn, template["cme_session_id"])
    return template


def create_template(admin: dict, data: dict, log: LogContext) -> dict:
    """Save a session owned by the creating admin and register it as a template."""
    _validate_header("template_name", data)
    activities = data.get("activities") or []
    if not activities:
        raise ValueError("at least one activity is required")
    name = data["template_name"].strip()
    with get_conn() as conn:
        tier = data.get("tier_continuum_id")
        if tier is not None and not tier_repo.exists(conn, tier):
            raise ValueError("tier_not_found")
        with transaction(conn):
            session_id = cme_repo.insert_session(conn, admin["id"], {**data, "session_name": name})
            n = _insert_activities(conn, session_id, activities)
            template_id = cme_repo.insert_template(conn, name, tier, session_id)
    log.set_entity("CME_TEMPLATE", template_id)
    log.set_after({"cme_template_id": template_id, "cme_session_id": session_id, "activities": n})
    return {"cme_template_id": template_id, "cme_session_id": session_id, "activity_count": n}

from __future__ import annotations

import logging

from ..db import get_conn, transaction
from ..logs import LogContext
from ..domain.pairing import next_pairing, renumber_pairings
from ..domain.session_stats import generate_progressed_weeks, session_stats
from ..repository import exercise_repo, program_repo, tier_repo
from .config_svc import get_config
from .utils import check_owner

logger = logging.getLogger(__name__)

MAX_PROGRAM_WEEKS = 52


def load_owned_program(conn, user: dict, program_id: int) -> dict:
    row = program_repo.get_program(conn, program_id)
    if row is None:
        raise LookupError("program_not_found")
    program = program_repo.program_row_to_dict(row)
    check_owner(user, program["user_id"])
    return program


def program_weeks(conn, program: dict) -> list[list[dict]]:
    """Exercise rows grouped by week, weeks 1..program_duration."""
    rows = [program_repo.exercise_row_to_dict(r) for r in program_repo.list_exercises(conn, program["program_id"])]
    total = max([program["program_duration"]] + [r["program_instance"] for r in rows])
    weeks: list[list[dict]] = [[] for _ in range(total)]
    for r in rows:
        weeks[r["program_instance"] - 1].append(r)
    return weeks


def _validate_header(conn, data: dict) -> None:
    if not (data.get("program_name") or "").strip():
        raise ValueError("program_name_required")
    duration = int(data.get("program_duration") or 0)
    if duration < 1 or duration > MAX_PROGRAM_WEEKS:
        raise ValueError(f"program_duration must be between 1 and {MAX_PROGRAM_WEEKS}")
    if len(data.get("weekly_exercises") or []) > duration:
        raise ValueError("more weeks of exercises than program_duration")
    tier = data.get("tier_continuum_id")
    if tier is not None and not tier_repo.exists(conn, tier):
        raise ValueError("tier_not_found")


def _validate_exercise(conn, user: dict, ex: dict) -> None:
    source = ex.get("exercise_source")
    if source == "library":
        lib_id = ex.get("exercise_library_id")
        if lib_id is None or not exercise_repo.library_exists(conn, lib_id):
            raise ValueError(f"exercise_library_id not found: {lib_id}")
    elif source == "user":
        uid = ex.get("user_exercise_library_id")
        owner = None if uid is None else exercise_repo.user_exercise_owner(conn, uid)
        if owner is None or owner != int(user["id"]):
            raise ValueError(f"user_exercise_library_id not found: {uid}")
    else:
        raise ValueError(f"invalid exercise_source: {source}")


def _insert_weeks(conn, user: dict, program_id: int, weekly: list[list[dict]], group_size: int) -> int:
    count = 0
    for week_idx, week in enumerate(weekly):
        placed: list[dict] = []
        for ex in week:
            _validate_exercise(conn, user, ex)
            if not ex.get("pairing"):
                ex = {**ex, "pairing": next_pairing(placed, group_size)}
            program_repo.insert_exercise(conn, program_id, week_idx + 1, ex)
            placed.append(ex)
            count += 1
    return count


def list_programs(user: dict) -> list[dict]:
    with get_conn() as conn:
        rows = program_repo.list_programs_for_user(conn, user["id"])
    out = []
    for r in rows:
        d = program_repo.program_row_to_dict(r)
        d["exercise_count"] = int(r["exercise_count"] or 0)
        out.append(d)
    return out


def get_program(user: dict, program_id: int) -> dict:
    with get_conn() as conn:
        program = load_owned_program(conn, user, program_id)
        program["weekly_exercises"] = program_weeks(conn, program)
    return program


def create_program(user: dict, data: dict, log: LogContext) -> dict:
    group_size = get_config()["pairing_group_size"]
    with get_conn() as conn:
        _validate_header(conn, data)
        with transaction(conn):
            program_id = program_repo.insert_program(conn, user["id"], data)
            n = _insert_weeks(conn, user, program_id, data.get("weekly_exercises") or [], group_size)
    log.set_entity("PROGRAM", program_id)
    log.set_after({"program_id": program_id, "program_name": data["program_name"], "exercises": n})
    return {"program_id": program_id, "exercise_count": n}


def update_program(user: dict, program_id: int, data: dict, log: LogContext) -> dict:
    """Replace the header and every exercise row of a program."""
    group_size = get_config()["pairing_group_size"]
    with get_conn() as conn:
        before = load_owned_program(conn, user, program_id)
        _validate_header(conn, data)
        with transaction(conn):
            program_repo.update_program(conn, program_id, data)
            program_repo.delete_exercises(conn, program_id)
            n = _insert_weeks(conn, user, program_id, data.get("weekly_exercises") or [], group_size)
    log.set_entity("PROGRAM", program_id)
    log.set_before(before)
    log.set_after({"program_name": data["program_name"], "exercises": n})
    return {"program_id": program_id, "exercise_count": n}


def delete_program(user: dict, program_id: int, log: LogContext) -> None:
    with get_conn() as conn:
        program = load_owned_program(conn, user, program_id)
        program_repo.soft_delete(conn, program_id)
    log.set_entity("PROGRAM", program_id)
    log.set_before({"program_name": program["program_name"]})


def duplicate_program(user: dict, program_id: int, new_name: str | None, log: LogContext) -> dict:
    """Copy a program and its planned sets for the caller; actual sets are not copied."""
    with get_conn() as conn:
        src = load_owned_program(conn, user, program_id)
        weeks = program_weeks(conn, src)
        data = {**src, "program_name": new_name or f"{src['program_name']} (Copy)"}
        with transaction(conn):
            new_id = program_repo.insert_program(conn, user["id"], data)
            n = 0
            for week_idx, week in enumerate(weeks):
                for ex in week:
                    program_repo.insert_exercise(conn, new_id, week_idx + 1, {**ex, "actual_sets": None})
                    n += 1
    log.set_entity("PROGRAM", new_id)
    log.set_after({"source_program_id": program_id, "program_id": new_id, "exercises": n})
    return {"program_id": new_id, "exercise_count": n}


def record_actuals(user: dict, program_id: int, updates: list[dict], log: LogContext) -> int:
    """
    Store actual sets for existing exercise rows.

    Every program_exercises_id must belong to the program; otherwise nothing
    is written.
    """
    if not updates:
        raise ValueError("no exercises to update")
    with get_conn() as conn:
        load_owned_program(conn, user, program_id)
        bad = [u["program_exercises_id"] for u in updates
               if not program_repo.exercise_in_program(conn, u["program_exercises_id"], program_id)]
        if bad:
            logger.warning("actuals for program %s reference foreign exercise rows %s", program_id, bad)
            raise ValueError(f"exercises not in program: {bad}")
        with transaction(conn):
            for u in updates:
                program_repo.update_actual_sets(conn, u["program_exercises_id"], program_id, u["actual_sets"] or [])
    log.set_entity("PROGRAM", program_id)
    log.set_after({"updated": [u["program_exercises_id"] for u in updates]})
    return len(updates)


def renumber(exercises: list[dict], group_size: int | None = None) -> list[dict]:
    if group_size is None:
        group_size = get_config()["pairing_group_size"]
    return renumber_pairings(exercises, group_size)


def stats_for_session(exercises: list[dict], unit: str | None = None) -> dict:
    return session_stats(exercises, unit or get_config()["default_load_unit"])


def progression(base_week: list[dict], program_length: int, rules: dict | None) -> list[dict]:
    weeks = generate_progressed_weeks(base_week, program_length, rules)
    return [{"week": w, "exercises": exs} for w, exs in weeks.items()]

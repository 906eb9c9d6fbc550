from __future__ import annotations

import logging

from ..db import get_conn, transaction
from ..logs import LogContext
from ..domain.structural_balance import (
    calculate_balanced_lifts,
    find_imbalances,
    group_imbalances_by_exercise,
    performance_records,
)
from ..domain.units import convert_load, normalize_load_unit, to_number
from ..repository import program_repo, reference_lift_repo
from .config_svc import get_config
from .utils import rows_to_dicts

logger = logging.getLogger(__name__)


def list_reference_lifts() -> list[dict]:
    with get_conn() as conn:
        return rows_to_dicts(reference_lift_repo.list_ref_lifts(conn))


def calculate(master_lift_id: int, master_load: float, load_unit: str | None = None) -> dict:
    lifts = list_reference_lifts()
    unit = normalize_load_unit(load_unit or get_config()["default_load_unit"])
    return {
        "master_lift_id": master_lift_id,
        "master_load": master_load,
        "load_unit": unit,
        "lifts": calculate_balanced_lifts(lifts, master_lift_id, master_load),
    }


def save_balanced_lifts(user: dict, master_lift_id: int, master_load: float, load_unit: str | None,
                        reps: int, log: LogContext) -> dict:
    """Calculate and store one row per reference lift, all in one transaction."""
    res = calculate(master_lift_id, master_load, load_unit)
    with get_conn() as conn:
        with transaction(conn):
            ids = [
                reference_lift_repo.insert_balanced_lift(
                    conn, user["id"], lift["id"], lift["bal_lift_load"], res["load_unit"], reps, master_lift_id
                )
                for lift in res["lifts"]
            ]
    log.set_entity("BALANCED_LIFTS", master_lift_id)
    log.set_after({"master_load": master_load, "load_unit": res["load_unit"], "saved": len(ids)})
    return {**res, "saved": len(ids)}


def list_balanced_lifts(user: dict) -> list[dict]:
    with get_conn() as conn:
        return rows_to_dicts(reference_lift_repo.list_balanced_lifts(conn, user["id"]))


def _actual_sets(user: dict, unit: str) -> list[dict]:
    """Flatten every recorded actual set of the user into PR input, loads in `unit`."""
    with get_conn() as conn:
        rows = program_repo.list_actuals_for_user(conn, user["id"])
    out = []
    for r in rows:
        row = program_repo.exercise_row_to_dict(r)
        if not row["exercise_name"]:
            logger.warning("skipping actual sets of program %s: exercise has no name", r["program_id"])
            continue
        for s in row["actual_sets"] or []:
            load = to_number(s.get("load"))
            if load is None:
                continue
            out.append({
                "exercise_name": row["exercise_name"],
                "reps": s.get("reps"),
                "load": convert_load(load, s.get("loadUnit"), unit),
                "load_unit": unit,
                "date": r["execution_date"],
                "program_name": r["program_name"],
            })
    return out


def get_performance_records(user: dict, unit: str | None = None) -> list[dict]:
    cfg = get_config()
    unit = normalize_load_unit(unit or cfg["default_load_unit"])
    return performance_records(_actual_sets(user, unit), cfg["pr_max_reps"])


def analyze(user: dict, unit: str | None = None) -> dict:
    cfg = get_config()
    records = get_performance_records(user, unit)
    imbalances = find_imbalances(
        records, list_reference_lifts(), cfg["imbalance_warn_pct"], cfg["imbalance_alert_pct"]
    )
    return {
        "performance_records": records,
        "imbalances": imbalances,
        "imbalances_by_exercise": group_imbalances_by_exercise(imbalances),
    }

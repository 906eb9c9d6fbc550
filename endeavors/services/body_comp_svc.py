from __future__ import annotations

from ..db import get_conn
from ..logs import LogContext
from ..domain.body_composition import CIRCUMFERENCE_SITES, SKINFOLD_SITES, all_metrics, metrics_from_percentage
from ..domain.units import round_amount
from ..repository import body_comp_repo

MAX_WEIGHT = 500
MAX_SKINFOLD_MM = 100


def _check_sites(values: dict | None, allowed: tuple[str, ...], label: str) -> dict:
    values = {k: v for k, v in (values or {}).items() if v is not None}
    unknown = sorted(set(values) - set(allowed))
    if unknown:
        raise ValueError(f"unknown {label} sites: {', '.join(unknown)}")
    return values


def compute_metrics(data: dict) -> dict:
    weight = float(data.get("weight") or 0)
    if weight <= 0 or weight > MAX_WEIGHT:
        raise ValueError(f"weight must be in (0, {MAX_WEIGHT}]")

    method = data.get("body_fat_method")
    if method == "skinfold":
        skinfolds = _check_sites(data.get("skinfold_measurements"), SKINFOLD_SITES, "skinfold")
        for site, v in skinfolds.items():
            if v < 0 or v > MAX_SKINFOLD_MM:
                raise ValueError(f"skinfold {site} must be between 0 and {MAX_SKINFOLD_MM} mm")
        age = data.get("age")
        if age is None or not 1 <= age <= 150:
            raise ValueError("age between 1 and 150 is required for the skinfold method")
        if data.get("sex") not in ("male", "female"):
            raise ValueError("sex (male/female) is required for the skinfold method")
        metrics = all_metrics(weight, skinfolds, age, data["sex"] == "male")
    elif method == "manual":
        pct = data.get("body_fat_percentage")
        if pct is None or pct < 0 or pct > 100:
            raise ValueError("body_fat_percentage must be between 0 and 100")
        metrics = metrics_from_percentage(weight, float(pct))
    else:
        raise ValueError(f"invalid body_fat_method: {method}")
    return {k: round_amount(v) for k, v in metrics.items()}


def save_entry(user: dict, data: dict, log: LogContext) -> dict:
    metrics = compute_metrics(data)
    skinfolds = data.get("skinfold_measurements") if data["body_fat_method"] == "skinfold" else None
    circumferences = _check_sites(data.get("circumference_measurements"), CIRCUMFERENCE_SITES, "circumference")
    with get_conn() as conn:
        entry_id = body_comp_repo.insert_entry(
            conn, user["id"], data["body_fat_method"], float(data["weight"]), metrics, skinfolds, circumferences
        )
    log.set_entity("BODY_COMPOSITION", entry_id)
    log.set_after(metrics)
    return {"id": entry_id, **metrics}


def list_entries(user: dict) -> list[dict]:
    with get_conn() as conn:
        return body_comp_repo.list_entries(conn, user["id"])

from __future__ import annotations

from ..db import get_conn
from ..domain.units import normalize_load_unit
from ..domain.volume import program_volume_analysis, volume_progression
from ..repository import program_repo
from .config_svc import get_config
from .program_svc import load_owned_program, program_weeks


def program_analysis(user: dict, program_id: int, unit: str | None = None) -> dict:
    unit = normalize_load_unit(unit or get_config()["default_load_unit"])
    with get_conn() as conn:
        program = load_owned_program(conn, user, program_id)
        weeks = program_weeks(conn, program)
    analysis = program_volume_analysis(program, weeks, unit)
    analysis["progression"] = volume_progression(analysis["overall_volume_data"])
    return analysis


def programs_for_analysis(user: dict) -> list[dict]:
    with get_conn() as conn:
        rows = program_repo.list_programs_for_analysis(conn, user["id"])
    out = []
    for r in rows:
        d = dict(r)
        d["exercise_count"] = int(d["exercise_count"] or 0)
        d["has_actual_data"] = bool(d["has_actual_data"])
        out.append(d)
    return out

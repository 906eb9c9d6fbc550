from __future__ import annotations

import copy
import math

from .units import KG_TO_LBS_COARSE, convert_load, round_amount, round_half_up, to_number

DEFAULT_TEMPO = "2010"


def time_under_tension(reps: float = 0, tempo: str | None = DEFAULT_TEMPO) -> float:
    """
    Seconds under tension for a set.

    tempo is four phases (eccentric, bottom pause, concentric, top pause);
    X means explosive and counts as 0. Short strings are padded with 0.
    """
    if not reps or reps <= 0:
        return 0
    t = str(tempo or DEFAULT_TEMPO).upper().replace("X", "0").ljust(4, "0")[:4]
    per_rep = sum(int(c) if c in "0123456789" else 0 for c in t)
    return reps * per_rep


def set_duration(s: dict) -> float:
    """Work time of one set in seconds, rest excluded."""
    if s.get("duration") is not None:
        d = to_number(s.get("duration")) or 0.0
        return d if s.get("durationUnit") == "seconds" else d * 60
    return time_under_tension(to_number(s.get("reps")) or 0, s.get("tempo") or DEFAULT_TEMPO)


def session_duration(exercises: list[dict]) -> float:
    total = 0.0
    for ex in exercises or []:
        for s in ex.get("planned_sets") or []:
            total += set_duration(s) + (to_number(s.get("restSec")) or 0.0)
    return total


def session_total_load(exercises: list[dict], preferred_unit: str = "lbs") -> float:
    total = 0.0
    for ex in exercises or []:
        for s in ex.get("planned_sets") or []:
            reps = to_number(s.get("reps")) or 0.0
            load = to_number(s.get("load")) or 0.0
            total += convert_load(reps * load, s.get("loadUnit"), preferred_unit, factor=KG_TO_LBS_COARSE)
    return round_amount(total)


def format_duration(seconds: float) -> str:
    if seconds < 60:
        return f"{int(seconds)}s"
    return f"{math.ceil(seconds / 60)} minutes"


def session_stats(exercises: list[dict], preferred_unit: str = "lbs") -> dict:
    duration = session_duration(exercises)
    return {
        "estimated_duration": format_duration(duration),
        "duration_seconds": duration,
        "total_exercises": len(exercises or []),
        "total_sets": sum(len(ex.get("planned_sets") or []) for ex in exercises or []),
        "total_reps": sum(
            int(to_number(s.get("reps")) or 0)
            for ex in exercises or []
            for s in ex.get("planned_sets") or []
        ),
        "total_load": session_total_load(exercises, preferred_unit),
    }


def _progress_set(s: dict, idx: int, base_sets: list[dict], week: int, ptype: str, settings: dict) -> dict:
    new = dict(s)
    if ptype == "Linear":
        load_inc = float(settings.get("load_increment_percentage") or 0)
        vol_inc = float(settings.get("volume_increment_percentage") or 0)
        load = to_number(s.get("load"))
        if load is not None:
            progressed = round_half_up(load * (1 + load_inc * (week - 1) / 100), 2)
            new["load"] = str(int(progressed)) if progressed == int(progressed) else str(progressed)
        if to_number(s.get("reps")) is not None and base_sets:
            base_total = sum(to_number(b.get("reps")) or 0 for b in base_sets)
            total = int(round_half_up(base_total * (1 + vol_inc / 100) ** (week - 1)))
            per_set, remainder = divmod(total, len(base_sets))
            new["reps"] = per_set + (1 if idx < remainder else 0)
    elif ptype == "Undulating":
        pcts = settings.get("weekly_volume_percentages") or []
        pct = pcts[week - 1] if week - 1 < len(pcts) else 100
        reps = to_number(s.get("reps"))
        if reps is not None:
            new["reps"] = max(1, int(round_half_up(reps * float(pct) / 100)))

    subs = s.get("subSets")
    if isinstance(subs, list):
        new["subSets"] = [_progress_set(sub, i, subs, week, ptype, settings) for i, sub in enumerate(subs)]
    return new


def generate_progressed_weeks(base_week: list[dict], program_length: int, rules: dict | None) -> dict[int, list[dict]]:
    """
    Build weeks 1..program_length from the base week's exercises.

    rules: {"type": "Linear" | "Undulating" | other, "settings": {...}}.
    Linear scales load by load_increment_percentage per week and spreads the
    compounded total reps (volume_increment_percentage) over the sets, the
    earliest sets taking the remainder. Undulating scales reps by
    weekly_volume_percentages[week - 1]. Other types repeat the base week.
    """
    if program_length < 1:
        raise ValueError("program_length must be >= 1")
    rules = rules or {}
    ptype = rules.get("type") or ""
    settings = rules.get("settings") or {}

    out: dict[int, list[dict]] = {}
    for week in range(1, program_length + 1):
        exercises = []
        for ex in copy.deepcopy(base_week):
            base_sets = ex.get("planned_sets") or []
            ex["planned_sets"] = [
                _progress_set(s, i, base_sets, week, ptype, settings) for i, s in enumerate(base_sets)
            ]
            exercises.append(ex)
        out[week] = exercises
    return out

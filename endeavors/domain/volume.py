"""
Program volume analysis: rep x load volume per exercise and per week,
planned against actual.

`weekly_exercises` is a list indexed by week (week 1 first); each week is a
list of exercise dicts carrying exercise_library_id, user_exercise_library_id,
exercise_name, planned_sets and actual_sets.
"""
from __future__ import annotations

import math

from .units import convert_load, to_number


def set_volume(s: dict, preferred_unit: str = "lbs") -> float:
    reps = to_number(s.get("reps")) or 0.0
    load = to_number(s.get("load")) or 0.0
    if reps == 0 or load == 0:
        return 0.0
    return reps * convert_load(load, s.get("loadUnit"), preferred_unit)


def exercise_volume(exercise: dict, preferred_unit: str = "lbs") -> tuple[float, float | None]:
    """(planned, actual); actual is None when no actual set has positive volume."""
    planned = sum(set_volume(s, preferred_unit) for s in (exercise.get("planned_sets") or []))
    actual = 0.0
    has_actual = False
    for s in exercise.get("actual_sets") or []:
        v = set_volume(s, preferred_unit)
        actual += v
        if v > 0:
            has_actual = True
    return planned, (actual if has_actual else None)


def exercise_key(exercise: dict) -> tuple[int, int]:
    return (int(exercise.get("exercise_library_id") or 0), int(exercise.get("user_exercise_library_id") or 0))


def _point(week: int, planned: float, actual: float | None) -> dict:
    return {
        "week": week,
        "planned_volume": planned,
        "actual_volume": actual,
        "volume_difference": (actual - planned) if actual is not None else None,
        "volume_percentage": (actual / planned * 100) if (actual is not None and planned) else None,
    }


def _average_pct(total_planned: float, total_actual: float, weeks_with_actual: int) -> float | None:
    if weeks_with_actual == 0 or not total_planned:
        return None
    return total_actual / total_planned * 100


def exercise_volume_series(exercise: dict, weekly_exercises: list[list[dict]], preferred_unit: str = "lbs") -> dict:
    key = exercise_key(exercise)
    name = exercise.get("exercise_name")
    if not name:
        name = (f"Exercise {key[0]}" if key[0] else f"User Exercise {key[1]}")

    weekly = []
    total_planned = 0.0
    total_actual = 0.0
    weeks_with_actual = 0
    for idx, week in enumerate(weekly_exercises):
        match = next((ex for ex in week if exercise_key(ex) == key), None)
        if match is None:
            weekly.append(_point(idx + 1, 0.0, None))
            continue
        planned, actual = exercise_volume(match, preferred_unit)
        weekly.append(_point(idx + 1, planned, actual))
        total_planned += planned
        if actual is not None:
            total_actual += actual
            weeks_with_actual += 1

    return {
        "exercise_name": name,
        "exercise_id": key[0] or key[1],
        "weekly_data": weekly,
        "total_planned_volume": total_planned,
        "total_actual_volume": total_actual if weeks_with_actual else None,
        "average_volume_percentage": _average_pct(total_planned, total_actual, weeks_with_actual),
    }


def program_volume_analysis(program: dict, weekly_exercises: list[list[dict]], preferred_unit: str = "lbs") -> dict:
    unique: dict[tuple[int, int], dict] = {}
    for week in weekly_exercises:
        for ex in week:
            unique.setdefault(exercise_key(ex), ex)

    exercise_data = [exercise_volume_series(ex, weekly_exercises, preferred_unit) for ex in unique.values()]

    overall = []
    total_planned = 0.0
    total_actual = 0.0
    weeks_with_actual = 0
    for idx, week in enumerate(weekly_exercises):
        week_planned = 0.0
        week_actual = 0.0
        has_actual = False
        for ex in week:
            planned, actual = exercise_volume(ex, preferred_unit)
            week_planned += planned
            if actual is not None:
                week_actual += actual
                has_actual = True
        overall.append(_point(idx + 1, week_planned, week_actual if has_actual else None))
        total_planned += week_planned
        if has_actual:
            total_actual += week_actual
            weeks_with_actual += 1

    return {
        "program_id": program.get("program_id"),
        "program_name": program.get("program_name"),
        "total_weeks": len(weekly_exercises),
        "load_unit": preferred_unit,
        "exercise_data": exercise_data,
        "overall_volume_data": overall,
        "total_planned_volume": total_planned,
        "total_actual_volume": total_actual if weeks_with_actual else None,
        "average_volume_percentage": _average_pct(total_planned, total_actual, weeks_with_actual),
    }


def volume_progression(points: list[dict]) -> dict:
    planned = [p["planned_volume"] for p in points if p["planned_volume"] > 0]
    if len(planned) < 2:
        return {"is_progressive": False, "progression_type": "none", "average_weekly_increase": 0.0, "consistency": 0.0}

    increases = [(planned[i] - planned[i - 1]) / planned[i - 1] * 100 for i in range(1, len(planned))]
    mean = sum(increases) / len(increases)

    if all(inc > 0 for inc in increases):
        ptype = "linear"
    elif any(inc < 0 for inc in increases) and any(inc > 0 for inc in increases):
        ptype = "undulating"
    elif any(abs(inc) > 1 for inc in increases):
        ptype = "mixed"
    else:
        ptype = "none"

    variance = sum((inc - mean) ** 2 for inc in increases) / len(increases)
    consistency = max(0.0, 100 - math.sqrt(variance) * 10)
    return {
        "is_progressive": mean > 0,
        "progression_type": ptype,
        "average_weekly_increase": mean,
        "consistency": consistency,
    }

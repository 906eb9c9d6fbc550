from __future__ import annotations

from .units import round_load

ZONE_INFO = {
    1: ("Zone 1 - Active Recovery", "Very light intensity, active recovery"),
    2: ("Zone 2 - Aerobic Base", "Light intensity, aerobic base building"),
    3: ("Zone 3 - Aerobic Threshold", "Moderate intensity, aerobic threshold"),
    4: ("Zone 4 - Lactate Threshold", "High intensity, lactate threshold"),
    5: ("Zone 5 - Anaerobic", "Maximum intensity, anaerobic capacity"),
}
# lower bound of each zone as a fraction; the upper bound is the next zone's lower bound
ZONE_FRACTIONS = (0.5, 0.6, 0.7, 0.8, 0.9, 1.0)

METHODS = ("age", "karvonen", "manual", "custom")
ACTIVITY_TYPES = ("general", "running", "cycling", "swimming", "rowing")


def max_hr_from_age(age: int) -> int:
    if age <= 0:
        raise ValueError("age must be positive")
    return 220 - int(age)


def zones_from_max_hr(max_hr: int) -> list[dict]:
    if max_hr <= 0:
        raise ValueError("max heart rate must be positive")
    out = []
    for zid in range(1, 6):
        lo, hi = ZONE_FRACTIONS[zid - 1], ZONE_FRACTIONS[zid]
        out.append({
            "id": zid,
            "minBpm": round_load(max_hr * lo),
            "maxBpm": max_hr if zid == 5 else round_load(max_hr * hi),
        })
    return out


def zones_karvonen(max_hr: int, resting_hr: int) -> list[dict]:
    if max_hr <= 0 or resting_hr <= 0:
        raise ValueError("max and resting heart rate must be positive")
    if resting_hr >= max_hr:
        raise ValueError("resting heart rate must be below max heart rate")
    reserve = max_hr - resting_hr
    out = []
    for zid in range(1, 6):
        lo, hi = ZONE_FRACTIONS[zid - 1], ZONE_FRACTIONS[zid]
        out.append({
            "id": zid,
            "minBpm": round_load(reserve * lo + resting_hr),
            "maxBpm": max_hr if zid == 5 else round_load(reserve * hi + resting_hr),
        })
    return out


def describe_zones(zones: list[dict]) -> list[dict]:
    """Fill name/description onto stored {id, minBpm, maxBpm} ranges."""
    out = []
    for z in zones:
        name, desc = ZONE_INFO.get(int(z["id"]), (f"Zone {z['id']}", ""))
        out.append({"id": int(z["id"]), "name": name, "description": desc,
                    "minBpm": z["minBpm"], "maxBpm": z["maxBpm"]})
    return out


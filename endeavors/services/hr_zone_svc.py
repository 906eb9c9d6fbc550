from __future__ import annotations

from ..db import get_conn
from ..logs import LogContext
from ..domain.heart_rate import (
    ACTIVITY_TYPES,
    METHODS,
    describe_zones,
    max_hr_from_age,
    zones_from_max_hr,
    zones_karvonen,
)
from ..repository import hr_zone_repo


def _check_manual(zones: list[dict]) -> list[dict]:
    if len(zones) != 5:
        raise ValueError("exactly five zones are required")
    out = []
    for z in sorted(zones, key=lambda z: int(z["id"])):
        lo, hi = int(z["minBpm"]), int(z["maxBpm"])
        if lo <= 0 or hi < lo:
            raise ValueError(f"invalid range for zone {z['id']}")
        out.append({"id": int(z["id"]), "minBpm": lo, "maxBpm": hi})
    if [z["id"] for z in out] != [1, 2, 3, 4, 5]:
        raise ValueError("zone ids must be 1..5")
    return out


def calculate_zones(method: str, age: int | None = None, max_hr: int | None = None,
                    resting_hr: int | None = None, zones: list[dict] | None = None) -> dict:
    """
    Five zones for one of the methods:
      age      -- max HR = 220 - age, percent of max
      karvonen -- heart-rate reserve; needs resting HR and max HR (or age)
      manual   -- percent of a measured max HR
      custom   -- caller supplied ranges, checked and stored as given
    """
    if method not in METHODS:
        raise ValueError(f"invalid method: {method}")
    if method == "custom":
        ranges = _check_manual(zones or [])
        return {"method": method, "max_heart_rate": ranges[-1]["maxBpm"], "resting_heart_rate": resting_hr,
                "zones": describe_zones(ranges)}

    if method == "age" or (method == "karvonen" and max_hr is None):
        if age is None:
            raise ValueError("age is required")
        max_hr = max_hr_from_age(age)
    if max_hr is None:
        raise ValueError("max_heart_rate is required")

    if method == "karvonen":
        if resting_hr is None:
            raise ValueError("resting_heart_rate is required for karvonen")
        ranges = zones_karvonen(max_hr, resting_hr)
    else:
        ranges = zones_from_max_hr(max_hr)
    return {"method": method, "max_heart_rate": max_hr, "resting_heart_rate": resting_hr,
            "zones": describe_zones(ranges)}


def save_zones(user: dict, activity_type: str, data: dict, log: LogContext) -> dict:
    if activity_type not in ACTIVITY_TYPES:
        raise ValueError(f"invalid activity_type: {activity_type}")
    res = calculate_zones(data["method"], data.get("age"), data.get("max_heart_rate"),
                          data.get("resting_heart_rate"), data.get("zones"))
    stored = [{"id": z["id"], "minBpm": z["minBpm"], "maxBpm": z["maxBpm"]} for z in res["zones"]]
    with get_conn() as conn:
        zone_id = hr_zone_repo.upsert_zones(conn, user["id"], activity_type, res["method"], stored,
                                            res["max_heart_rate"], res["resting_heart_rate"])
    log.set_entity("HR_ZONES", zone_id)
    log.set_after({"activity_type": activity_type, **res})
    return {"hr_zone_id": zone_id, "activity_type": activity_type, **res}


def get_zones(user: dict) -> list[dict]:
    with get_conn() as conn:
        rows = hr_zone_repo.list_zones(conn, user["id"])
    for r in rows:
        r["zone_ranges"] = describe_zones(r["zone_ranges"])
    return rows

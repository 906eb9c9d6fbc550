from __future__ import annotations

from .units import round_load

IMBALANCE_WARN_PCT = 10.0
IMBALANCE_ALERT_PCT = 20.0
PR_MAX_REPS = 15


def calculate_balanced_lifts(ref_lifts: list[dict], master_lift_id: int, master_load: float) -> list[dict]:
    """
    Proportional target loads for every reference lift, scaled from the
    master lift: new_load = round(master_load * ref_load_i / ref_load_master).

    ref_lifts: dicts with keys id, exercise_name, struct_bal_ref_lift_load,
    and optionally struct_bal_ref_lift_note. Order is preserved.
    """
    master = next((r for r in ref_lifts if int(r["id"]) == int(master_lift_id)), None)
    if master is None:
        raise ValueError("master_lift_not_found")
    master_ref = float(master["struct_bal_ref_lift_load"] or 0.0)
    if master_ref <= 0:
        raise ValueError("master_reference_load_must_be_positive")
    master_load = float(master_load)
    if master_load < 0:
        raise ValueError("master_load_must_not_be_negative")

    out = []
    for r in ref_lifts:
        factor = float(r["struct_bal_ref_lift_load"] or 0.0) / master_ref
        out.append({
            "id": r["id"],
            "exercise_name": r["exercise_name"],
            "load_factor": factor,
            "bal_lift_load": round_load(master_load * factor),
            "bal_lift_note": r.get("struct_bal_ref_lift_note"),
            "is_master": int(r["id"]) == int(master_lift_id),
        })
    return out


def performance_records(sets: list[dict], max_reps: int = PR_MAX_REPS) -> list[dict]:
    """
    Heaviest load per (exercise, rep count) for rep counts 1..max_reps.

    Each input set carries exercise_name, reps, load, load_unit, date and
    program_name. Sets without positive reps and load are ignored; on a tie
    the first set seen wins.
    """
    best: dict[tuple[str, int], dict] = {}
    order: list[tuple[str, int]] = []
    for s in sets:
        try:
            reps = int(float(s.get("reps") or 0))
            load = float(s.get("load") or 0)
        except (TypeError, ValueError):
            continue
        if reps <= 0 or load <= 0 or reps > max_reps:
            continue
        key = (s["exercise_name"], reps)
        cur = best.get(key)
        if cur is None:
            order.append(key)
        if cur is None or load > cur["max_load"]:
            best[key] = {
                "exercise_name": s["exercise_name"],
                "rep_count": reps,
                "max_load": load,
                "load_unit": s.get("load_unit") or "lbs",
                "date": s.get("date"),
                "program_name": s.get("program_name"),
            }
    return [best[k] for k in order]


def find_imbalances(
    records: list[dict],
    ref_lifts: list[dict],
    warn_pct: float = IMBALANCE_WARN_PCT,
    alert_pct: float = IMBALANCE_ALERT_PCT,
) -> list[dict]:
    """Compare every pair of same-rep-count records against the reference ratios."""
    ref_map = {
        str(r["exercise_name"]).lower(): float(r["struct_bal_ref_lift_load"])
        for r in ref_lifts
        if r.get("struct_bal_ref_lift_load")
    }
    out = []
    for i in range(len(records)):
        for j in range(i + 1, len(records)):
            r1, r2 = records[i], records[j]
            if r1["rep_count"] != r2["rep_count"]:
                continue
            ref1 = ref_map.get(r1["exercise_name"].lower())
            ref2 = ref_map.get(r2["exercise_name"].lower())
            if ref1 is None or ref2 is None:
                continue
            actual = r1["max_load"] / r2["max_load"]
            ideal = ref1 / ref2
            deviation = abs((actual - ideal) / ideal) * 100
            if deviation < warn_pct:
                continue
            out.append({
                "exercise1": r1["exercise_name"],
                "exercise2": r2["exercise_name"],
                "rep_count": r1["rep_count"],
                "actual_ratio": actual,
                "ideal_ratio": ideal,
                "deviation": deviation,
                "severity": "red" if deviation >= alert_pct else "yellow",
                "exercise1_load": r1["max_load"],
                "exercise2_load": r2["max_load"],
                "load_unit": r1["load_unit"],
            })
    return out


def group_imbalances_by_exercise(imbalances: list[dict]) -> dict[str, list[dict]]:
    """List each imbalance under both of its exercises; ratios flip for the second one."""
    grouped: dict[str, list[dict]] = {}
    for imb in imbalances:
        for name in (imb["exercise1"], imb["exercise2"]):
            first = name == imb["exercise1"]
            grouped.setdefault(name, []).append({
                "compared_exercise": imb["exercise2"] if first else imb["exercise1"],
                "rep_count": imb["rep_count"],
                "actual_ratio": imb["actual_ratio"] if first else 1 / imb["actual_ratio"],
                "ideal_ratio": imb["ideal_ratio"] if first else 1 / imb["ideal_ratio"],
                "deviation": imb["deviation"],
                "severity": imb["severity"],
                "user_load": imb["exercise1_load"] if first else imb["exercise2_load"],
                "compared_load": imb["exercise2_load"] if first else imb["exercise1_load"],
                "load_unit": imb["load_unit"],
            })
    return grouped

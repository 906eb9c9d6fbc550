"""Jackson-Pollock seven-site skinfold estimate and derived masses."""
from __future__ import annotations

SKINFOLD_SITES = ("chest", "abdomen", "thigh", "triceps", "axilla", "subscapula", "suprailiac")
CIRCUMFERENCE_SITES = (
    "neck", "shoulders", "chest", "waist", "hips",
    "leftBicepRelaxed", "leftBicepFlexed", "rightBicepRelaxed", "rightBicepFlexed",
    "leftForearm", "rightForearm", "leftThigh", "rightThigh", "leftCalf", "rightCalf",
)

_MALE = (1.112, 0.00043499, 0.00000055, 0.00028826)
_FEMALE = (1.097, 0.00046971, 0.00000056, 0.00012828)


def body_density(skinfolds: dict[str, float], age: float, is_male: bool) -> float:
    missing = [s for s in SKINFOLD_SITES if skinfolds.get(s) is None]
    if missing:
        raise ValueError(f"missing skinfold sites: {', '.join(missing)}")
    total = sum(float(skinfolds[s]) for s in SKINFOLD_SITES)
    c0, c1, c2, c3 = _MALE if is_male else _FEMALE
    return c0 - c1 * total + c2 * total * total - c3 * float(age)


def body_fat_percentage(density: float) -> float:
    if density <= 0:
        raise ValueError("body density must be positive")
    return 495 / density - 450


def fat_mass(weight: float, body_fat_pct: float) -> float:
    return weight * body_fat_pct / 100


def fat_free_mass(weight: float, fat: float) -> float:
    return weight - fat


def all_metrics(weight: float, skinfolds: dict[str, float], age: float, is_male: bool) -> dict:
    pct = body_fat_percentage(body_density(skinfolds, age, is_male))
    fm = fat_mass(weight, pct)
    return {"body_fat_percentage": pct, "fat_mass": fm, "fat_free_mass": fat_free_mass(weight, fm)}


def metrics_from_percentage(weight: float, body_fat_pct: float) -> dict:
    fm = fat_mass(weight, body_fat_pct)
    return {"body_fat_percentage": body_fat_pct, "fat_mass": fm, "fat_free_mass": fat_free_mass(weight, fm)}

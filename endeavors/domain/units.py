from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP

KG_TO_LBS = 2.20462
# session load totals use the coarser factor
KG_TO_LBS_COARSE = 2.2


def round_half_up(value: float, precision: int = 0) -> float:
    """Round with half-up semantics using Decimal (Python's round() is banker's)."""
    if value == 0.0:
        return 0.0
    quant = Decimal("1") if precision == 0 else Decimal("0." + "0" * (precision - 1) + "1")
    return float(Decimal(str(value)).quantize(quant, rounding=ROUND_HALF_UP))


def round_load(value: float) -> int:
    """Round a load to a whole number."""
    return int(round_half_up(value, 0))


def round_amount(value: float) -> float:
    """Round volume/load totals to 2 decimal places."""
    return round_half_up(value, 2)


def normalize_load_unit(unit: str | None) -> str:
    """Only an exact "kg" is kilograms; anything else, "kgs" included, counts as lbs."""
    return "kg" if unit == "kg" else "lbs"


def convert_load(value: float, from_unit: str | None, to_unit: str | None, factor: float = KG_TO_LBS) -> float:
    src = normalize_load_unit(from_unit)
    dst = normalize_load_unit(to_unit)
    if src == dst:
        return value
    if src == "kg":
        return value * factor
    return value / factor


def to_number(val) -> float | None:
    """Numeric value of an int/float/numeric string, else None."""
    if val is None or isinstance(val, bool):
        return None
    if isinstance(val, (int, float)):
        return None if val != val else float(val)
    if isinstance(val, str) and val.strip():
        try:
            return float(val)
        except ValueError:
            return None
    return None

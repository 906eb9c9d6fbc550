"""
Cardiometabolic (CME) session steps.

An activity arrives as a list of intervals. Without `use_intervals` only the
first interval is kept as a single step. With it, repeat-block headers are
expanded: the block's member intervals are emitted repeat_count times, each
copy tagged with its repeat number. Members are never emitted on their own.
Durations are minutes.
"""
from __future__ import annotations

from .units import to_number

DEFAULT_STEP_TYPE = "Work"
DEFAULT_REPEATS = 2
MAX_REPEATS = 50


def _step(interval: dict, actual: bool) -> dict:
    duration = to_number(interval.get("duration")) or 0
    metrics = dict(interval.get("metrics") or {})
    step = {
        "step_type": interval.get("step_type") or DEFAULT_STEP_TYPE,
        "duration": duration,
        "metrics": metrics,
        "notes": interval.get("notes") or "",
        "heart_rate": interval.get("heart_rate"),
    }
    if actual:
        step["actual_duration"] = duration
        step["actual_distance"] = metrics.get("Distance")
        step["actual_pace"] = metrics.get("Pace")
        step["actual_heart_rate"] = interval.get("heart_rate")
    if duration > 0:
        metrics["Duration"] = duration
    return step


def _repeats(interval: dict) -> int:
    raw = interval.get("repeat_count")
    n = int(to_number(raw) or 0) or DEFAULT_REPEATS
    if n < 1 or n > MAX_REPEATS:
        raise ValueError(f"repeat_count must be between 1 and {MAX_REPEATS}")
    return n


def expand_steps(activity: dict, actual: bool = False) -> list[dict]:
    """Flatten an activity's intervals into stored steps; actual=True adds the actual_* fields."""
    intervals = activity.get("intervals") or []
    if not activity.get("use_intervals"):
        return [_step(intervals[0] if intervals else {}, actual)]

    steps = []
    for interval in intervals:
        block_id = interval.get("block_id")
        if interval.get("is_block_header") and block_id:
            members = [i for i in intervals if i.get("block_id") == block_id and not i.get("is_block_header")]
            total = _repeats(interval)
            for n in range(total):
                for m in members:
                    step = _step(m, actual)
                    step["repeat_block"] = {"block_id": block_id, "repeat_number": n + 1, "total_repeats": total}
                    steps.append(step)
        elif not interval.get("is_repeat_block"):
            steps.append(_step(interval, actual))
    return steps


def total_duration(steps: list[dict] | None) -> float:
    return sum(to_number(s.get("duration")) or 0 for s in steps or [])

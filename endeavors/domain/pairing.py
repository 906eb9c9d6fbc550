from __future__ import annotations

PASSTHROUGH_PREFIXES = ("WU", "CD")
DEFAULT_GROUP_SIZE = 2


def is_passthrough(pairing: str | None) -> bool:
    """Warm-up and cool-down entries keep their label and never take a slot."""
    return bool(pairing) and str(pairing).upper().startswith(PASSTHROUGH_PREFIXES)


def group_letter(index: int) -> str:
    """0 -> A, 25 -> Z, 26 -> AA."""
    letters = ""
    index += 1
    while index > 0:
        index, rem = divmod(index - 1, 26)
        letters = chr(ord("A") + rem) + letters
    return letters


def _labels(count: int, group_size: int):
    for i in range(count):
        group, pos = divmod(i, group_size)
        yield f"{group_letter(group)}{pos + 1}"


def _slots(exercises: list[dict]) -> int:
    return sum(1 for ex in exercises if not is_passthrough(ex.get("pairing")))


def renumber_pairings(exercises: list[dict], group_size: int = DEFAULT_GROUP_SIZE) -> list[dict]:
    """
    Reassign A1, A2, B1 ... labels after a reorder.

    Returns new dicts; the input list is left untouched. Entries whose
    pairing starts with WU/CD are copied unchanged.
    """
    if group_size < 1:
        raise ValueError("group_size must be >= 1")
    labels = _labels(_slots(exercises), group_size)
    out = []
    for ex in exercises:
        if is_passthrough(ex.get("pairing")):
            out.append(dict(ex))
        else:
            out.append({**ex, "pairing": next(labels)})
    return out


def next_pairing(exercises: list[dict], group_size: int = DEFAULT_GROUP_SIZE) -> str:
    """Label the next appended exercise would get once the list is renumbered."""
    if group_size < 1:
        raise ValueError("group_size must be >= 1")
    group, pos = divmod(_slots(exercises), group_size)
    return f"{group_letter(group)}{pos + 1}"

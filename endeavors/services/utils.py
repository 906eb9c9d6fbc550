from __future__ import annotations

# endeavors/services/utils.py


def rows_to_dicts(rows) -> list[dict]:
    return [dict(r) for r in rows]


def check_owner(user: dict, owner_id: int) -> None:
    """Raise PermissionError unless the user owns the row or is an admin."""
    if int(owner_id) != int(user["id"]) and not user.get("is_admin"):
        raise PermissionError("forbidden")

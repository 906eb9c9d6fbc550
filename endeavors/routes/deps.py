from __future__ import annotations

import logging
from typing import Optional

from fastapi import Header, HTTPException

from ..logs import LogContext
from ..services.user_svc import get_user

logger = logging.getLogger(__name__)

_STATUS = ((ValueError, 400), (LookupError, 404), (PermissionError, 403))


def current_user(x_user_id: Optional[str] = Header(None)) -> dict:
    """Caller resolved from the X-User-Id header set by the session layer."""
    if not x_user_id or not x_user_id.strip().isdigit():
        raise HTTPException(status_code=401, detail="unauthorized")
    user = get_user(int(x_user_id))
    if user is None:
        raise HTTPException(status_code=401, detail="unauthorized")
    return user


def require_admin(user: dict) -> None:
    if not user.get("is_admin"):
        raise HTTPException(status_code=403, detail="admin only")


def fail(log: Optional[LogContext], e: Exception) -> HTTPException:
    """Map a service exception to an HTTPException; mutations also get an ERROR log record."""
    for exc_type, status in _STATUS:
        if isinstance(e, exc_type):
            if log is not None:
                log.write("ERROR", str(e))
            return HTTPException(status_code=status, detail=str(e))
    logger.exception("unhandled error")
    if log is not None:
        log.write("ERROR", "internal error")
    return HTTPException(status_code=500, detail="internal error")

from __future__ import annotations

import logging
import re

from ..db import get_conn
from ..logs import LogContext
from ..repository import contact_repo
from .config_svc import get_config

logger = logging.getLogger(__name__)

INQUIRY_TYPES = ("general", "therapy", "beta", "bug", "feature")
MAX_MESSAGE_LEN = 5000
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class RateLimited(Exception):
    pass


def submit_message(data: dict, log: LogContext) -> int:
    first = (data.get("first_name") or "").strip()
    last = (data.get("last_name") or "").strip()
    email = (data.get("email") or "").strip().lower()
    message = (data.get("message") or "").strip()
    inquiry = data.get("inquiry_type") or "general"

    if not first or not last:
        raise ValueError("first and last name are required")
    if not _EMAIL_RE.match(email):
        raise ValueError("invalid email")
    if not message:
        raise ValueError("message is required")
    if len(message) > MAX_MESSAGE_LEN:
        raise ValueError(f"message longer than {MAX_MESSAGE_LEN} characters")
    if inquiry not in INQUIRY_TYPES:
        raise ValueError(f"invalid inquiry type: {inquiry}")

    limit = get_config()["contact_max_per_hour"]
    with get_conn() as conn:
        if contact_repo.count_recent_from(conn, email, 60) >= limit:
            logger.warning("contact rate limit reached for %s", email)
            raise RateLimited("too many messages, try again later")
        msg_id = contact_repo.insert_message(conn, first, last, email, inquiry, message)
    log.set_entity("CONTACT_MESSAGE", msg_id)
    return msg_id

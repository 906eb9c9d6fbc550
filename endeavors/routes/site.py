from __future__ import annotations

from typing import List, Literal, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from ..logs import LogContext
from ..services.contact_svc import RateLimited, submit_message
from ..services.web_vitals_svc import ingest, stats
from .deps import fail

router = APIRouter()


class ContactBody(BaseModel):
    firstname: str
    lastname: str
    email: str
    message: str
    inquiryType: str = "general"


class WebVital(BaseModel):
    id: str
    name: str
    value: float
    delta: Optional[float] = None
    rating: Literal["good", "needs-improvement", "poor"]
    timestamp: str
    url: Optional[str] = None
    user_agent: Optional[str] = None
    session_id: Optional[str] = None


class WebVitalsBatch(BaseModel):
    metrics: List[WebVital] = Field(..., max_length=100)
    user_id: Optional[int] = None


@router.post("/api/contact", status_code=201)
def api_contact(body: ContactBody):
    log = LogContext("CONTACT_MESSAGE")
    log.set_payload({"email": body.email, "inquiryType": body.inquiryType})
    try:
        msg_id = submit_message(
            {
                "first_name": body.firstname,
                "last_name": body.lastname,
                "email": body.email,
                "message": body.message,
                "inquiry_type": body.inquiryType,
            },
            log,
        )
        log.write("OK")
        return {"message": "ok", "id": msg_id}
    except RateLimited as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=429, detail=str(e))
    except Exception as e:
        raise fail(log, e)


@router.post("/api/web-vitals")
def api_web_vitals(body: WebVitalsBatch):
    try:
        n = ingest([m.model_dump() for m in body.metrics], body.user_id)
        return {"success": True, "count": n}
    except Exception as e:
        raise fail(None, e)


@router.get("/api/web-vitals-stats")
def api_web_vitals_stats(since: Optional[str] = None, name: Optional[str] = None):
    return {"items": stats(since, name)}

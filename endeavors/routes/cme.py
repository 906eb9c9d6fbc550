from __future__ import annotations

from typing import List, Literal, Optional, Union

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..logs import LogContext
from ..services import cme_svc
from .deps import current_user, fail, require_admin

router = APIRouter()


class HeartRateIn(BaseModel):
    type: Literal["zone", "custom"]
    value: str
    min: Optional[str] = None
    max: Optional[str] = None


class IntervalIn(BaseModel):
    step_type: str = "Work"
    duration: float = Field(0, ge=0)  # minutes
    metrics: dict = {}
    notes: str = ""
    heart_rate: Optional[HeartRateIn] = None
    is_repeat_block: bool = False
    block_id: Optional[int] = None
    repeat_count: Optional[Union[int, str]] = None
    is_block_header: bool = False


class ActivityIn(BaseModel):
    cme_activity_library_id: Optional[int] = None
    use_intervals: bool = False
    intervals: List[IntervalIn] = []
    notes: Optional[str] = None


class SessionBody(BaseModel):
    session_name: str
    macrocycle_phase: Optional[str] = None
    focus_block: Optional[str] = None
    notes: Optional[str] = None
    start_date: Optional[str] = None  # YYYY-MM-DD
    end_date: Optional[str] = None
    activities: List[ActivityIn] = []


class ActualActivityIn(BaseModel):
    cme_session_activity_id: int
    use_intervals: bool = False
    intervals: List[IntervalIn] = []


class ActualsBody(BaseModel):
    session_date: Optional[str] = None
    activities: List[ActualActivityIn]


class TemplateBody(BaseModel):
    template_name: str
    tier_continuum_id: Optional[int] = None
    macrocycle_phase: Optional[str] = None
    focus_block: Optional[str] = None
    notes: Optional[str] = None
    activities: List[ActivityIn] = []


@router.get("/api/cme-activities")
def api_cme_activities(user: dict = Depends(current_user)):
    return {"items": cme_svc.list_activities()}


@router.get("/api/cme-sessions")
def api_cme_session_list(user: dict = Depends(current_user)):
    return {"items": cme_svc.list_sessions(user)}


@router.post("/api/cme-sessions", status_code=201)
def api_cme_session_create(body: SessionBody, user: dict = Depends(current_user)):
    log = LogContext("CREATE_CME_SESSION", user["id"])
    data = body.model_dump()
    log.set_payload({k: v for k, v in data.items() if k != "activities"})
    try:
        res = cme_svc.create_session(user, data, log)
        log.write("OK")
        return {"message": "ok", **res}
    except Exception as e:
        raise fail(log, e)


@router.get("/api/cme-sessions/{session_id}")
def api_cme_session_get(session_id: int, user: dict = Depends(current_user)):
    try:
        return cme_svc.get_session(user, session_id)
    except Exception as e:
        raise fail(None, e)


@router.put("/api/cme-sessions/{session_id}")
def api_cme_session_update(session_id: int, body: SessionBody, user: dict = Depends(current_user)):
    log = LogContext("UPDATE_CME_SESSION", user["id"])
    data = body.model_dump()
    log.set_payload({k: v for k, v in data.items() if k != "activities"})
    try:
        res = cme_svc.update_session(user, session_id, data, log)
        log.write("OK")
        return {"message": "ok", **res}
    except Exception as e:
        raise fail(log, e)


@router.post("/api/cme-sessions/{session_id}/actuals")
def api_cme_session_actuals(session_id: int, body: ActualsBody, user: dict = Depends(current_user)):
    log = LogContext("RECORD_CME_ACTUALS", user["id"])
    log.set_payload({"cme_session_id": session_id, "count": len(body.activities)})
    try:
        n = cme_svc.record_actuals(
            user, session_id, [a.model_dump() for a in body.activities], body.session_date, log
        )
        log.write("OK")
        return {"message": "ok", "updated": n}
    except Exception as e:
        raise fail(log, e)


@router.get("/api/cme-templates")
def api_cme_template_list(user: dict = Depends(current_user)):
    return {"items": cme_svc.list_templates()}


@router.get("/api/cme-templates/{template_id}")
def api_cme_template_get(template_id: int, user: dict = Depends(current_user)):
    try:
        return cme_svc.get_template(template_id)
    except Exception as e:
        raise fail(None, e)


@router.post("/api/cme-templates", status_code=201)
def api_cme_template_create(body: TemplateBody, user: dict = Depends(current_user)):
    require_admin(user)
    log = LogContext("CREATE_CME_TEMPLATE", user["id"])
    data = body.model_dump()
    log.set_payload({k: v for k, v in data.items() if k != "activities"})
    try:
        res = cme_svc.create_template(user, data, log)
        log.write("OK")
        return {"message": "ok", **res}
    except Exception as e:
        raise fail(log, e)

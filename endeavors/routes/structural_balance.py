from __future__ import annotations

from typing import Literal, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..logs import LogContext
from ..services import structural_balance_svc as sb_svc
from .deps import current_user, fail

router = APIRouter()


class BalanceBody(BaseModel):
    master_lift_id: int
    master_load: float = Field(..., ge=0)
    load_unit: Optional[Literal["lbs", "kg"]] = None


class SaveBalanceBody(BalanceBody):
    reps: int = Field(1, ge=1, le=15)


@router.get("/api/reference-lifts")
def api_reference_lifts():
    return {"items": sb_svc.list_reference_lifts()}


@router.post("/api/structural-balance/calculate")
def api_structural_balance_calculate(body: BalanceBody):
    try:
        return sb_svc.calculate(body.master_lift_id, body.master_load, body.load_unit)
    except Exception as e:
        raise fail(None, e)


@router.get("/api/balanced-lifts")
def api_balanced_lifts(user: dict = Depends(current_user)):
    return {"items": sb_svc.list_balanced_lifts(user)}


@router.post("/api/balanced-lifts", status_code=201)
def api_balanced_lifts_save(body: SaveBalanceBody, user: dict = Depends(current_user)):
    log = LogContext("SAVE_BALANCED_LIFTS", user["id"])
    log.set_payload(body.model_dump())
    try:
        res = sb_svc.save_balanced_lifts(user, body.master_lift_id, body.master_load, body.load_unit, body.reps, log)
        log.write("OK")
        return {"message": "ok", **res}
    except Exception as e:
        raise fail(log, e)


@router.get("/api/structural-balance-analysis")
def api_structural_balance_analysis(unit: Optional[Literal["lbs", "kg"]] = None, user: dict = Depends(current_user)):
    return sb_svc.analyze(user, unit)

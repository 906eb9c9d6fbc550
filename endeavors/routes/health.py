from __future__ import annotations

from typing import Dict, List, Literal, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..logs import LogContext
from ..services import body_comp_svc, hr_zone_svc
from .deps import current_user, fail

router = APIRouter()


class BodyCompositionBody(BaseModel):
    body_fat_method: Literal["skinfold", "manual"]
    weight: float
    body_fat_percentage: Optional[float] = None
    age: Optional[int] = None
    sex: Optional[Literal["male", "female"]] = None
    skinfold_measurements: Optional[Dict[str, float]] = None
    circumference_measurements: Optional[Dict[str, float]] = None


class ZoneIn(BaseModel):
    id: int
    minBpm: int
    maxBpm: int


class ZoneCalcBody(BaseModel):
    method: Literal["age", "karvonen", "manual", "custom"]
    age: Optional[int] = Field(None, ge=1, le=120)
    max_heart_rate: Optional[int] = Field(None, ge=1, le=250)
    resting_heart_rate: Optional[int] = Field(None, ge=1, le=250)
    zones: Optional[List[ZoneIn]] = None


class ZoneSaveBody(ZoneCalcBody):
    activity_type: str = "general"


@router.get("/api/body-composition")
def api_body_composition_list(user: dict = Depends(current_user)):
    return {"items": body_comp_svc.list_entries(user)}


@router.post("/api/body-composition", status_code=201)
def api_body_composition_save(body: BodyCompositionBody, user: dict = Depends(current_user)):
    log = LogContext("SAVE_BODY_COMPOSITION", user["id"])
    data = body.model_dump()
    log.set_payload(data)
    try:
        res = body_comp_svc.save_entry(user, data, log)
        log.write("OK")
        return {"message": "ok", **res}
    except Exception as e:
        raise fail(log, e)


@router.get("/api/heart-rate-zones")
def api_heart_rate_zones(user: dict = Depends(current_user)):
    return {"items": hr_zone_svc.get_zones(user)}


@router.post("/api/heart-rate-zones/calculate")
def api_heart_rate_zones_calculate(body: ZoneCalcBody):
    try:
        zones = [z.model_dump() for z in body.zones] if body.zones else None
        return hr_zone_svc.calculate_zones(body.method, body.age, body.max_heart_rate,
                                           body.resting_heart_rate, zones)
    except Exception as e:
        raise fail(None, e)


@router.post("/api/heart-rate-zones")
def api_heart_rate_zones_save(body: ZoneSaveBody, user: dict = Depends(current_user)):
    log = LogContext("SAVE_HR_ZONES", user["id"])
    data = body.model_dump()
    log.set_payload(data)
    try:
        res = hr_zone_svc.save_zones(user, body.activity_type, data, log)
        log.write("OK")
        return {"message": "ok", **res}
    except Exception as e:
        raise fail(log, e)

from __future__ import annotations

from typing import Literal, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..logs import LogContext
from ..services.settings_svc import get_user_settings, update_user_settings
from .deps import current_user, fail

router = APIRouter()


class GeneralSettings(BaseModel):
    heightUnit: Optional[Literal["ft_in", "in", "cm"]] = None
    weightUnit: Optional[Literal["lbs", "kgs"]] = None
    distanceUnit: Optional[Literal["miles", "km", "m"]] = None
    temperatureUnit: Optional[Literal["F", "C"]] = None
    timeFormat: Optional[Literal["12h", "24h"]] = None
    dateFormat: Optional[str] = None
    language: Optional[str] = None
    sidebarExpandMode: Optional[Literal["hover", "click"]] = None
    notificationsEmail: Optional[bool] = None
    notificationsText: Optional[bool] = None
    notificationsApp: Optional[bool] = None


class UserSettingsBody(BaseModel):
    general: Optional[GeneralSettings] = None
    fitness: Optional[dict] = None
    health: Optional[dict] = None
    lifestyle: Optional[dict] = None
    nutrition: Optional[dict] = None


@router.get("/api/user-settings")
def api_user_settings_get(user: dict = Depends(current_user)):
    return get_user_settings(user)


@router.put("/api/user-settings")
def api_user_settings_put(body: UserSettingsBody, user: dict = Depends(current_user)):
    log = LogContext("UPDATE_USER_SETTINGS", user["id"])
    data = body.model_dump()
    log.set_payload(data)
    try:
        res = update_user_settings(user, data, log)
        log.write("OK")
        return res
    except Exception as e:
        raise fail(log, e)

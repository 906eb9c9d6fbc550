from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ..logs import LogContext
from ..services.config_svc import get_config, update_config
from .deps import current_user, require_admin

router = APIRouter()


@router.get("/api/settings/get")
def api_settings_get():
    return get_config()


class SettingsUpdateBody(BaseModel):
    updates: dict


@router.post("/api/settings/update")
def api_settings_update(body: SettingsUpdateBody, user: dict = Depends(current_user)):
    require_admin(user)
    log = LogContext("SETTINGS_UPDATE", user["id"])
    log.set_payload(body.model_dump())
    try:
        updated_keys = update_config(body.updates, log)
        log.write("OK")
        return {"message": "ok", "updated": updated_keys}
    except Exception as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=400, detail=str(e))

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..logs import LogContext
from ..services.catalog_svc import create_user_exercise, list_exercises, list_tiers
from .deps import current_user, fail

router = APIRouter()


@router.get("/api/tier-continuum")
def api_tier_continuum():
    return {"success": True, "tiers": list_tiers()}


@router.get("/api/exercises")
def api_exercises(q: Optional[str] = None, user: dict = Depends(current_user)):
    return {"items": list_exercises(user["id"], q)}


class UserExerciseCreate(BaseModel):
    exercise_name: str
    description: Optional[str] = None


@router.post("/api/user-exercises", status_code=201)
def api_user_exercise_create(body: UserExerciseCreate, user: dict = Depends(current_user)):
    log = LogContext("CREATE_USER_EXERCISE", user["id"])
    log.set_payload(body.model_dump())
    try:
        new_id = create_user_exercise(user["id"], body.exercise_name, body.description, log)
        log.write("OK")
        return {"message": "ok", "user_exercise_library_id": new_id}
    except Exception as e:
        raise fail(log, e)

from __future__ import annotations

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from ..logs import LogContext
from ..services import program_svc
from .deps import current_user, fail

router = APIRouter()

PREFIX = "/api/resistance-training"


class ExerciseIn(BaseModel):
    exercise_source: Literal["library", "user"]
    exercise_library_id: Optional[int] = None
    user_exercise_library_id: Optional[int] = None
    pairing: Optional[str] = None
    notes: Optional[str] = None
    planned_sets: List[dict] = []
    actual_sets: Optional[List[dict]] = None


class ProgramBody(BaseModel):
    program_name: str
    phase_focus: Optional[str] = None
    periodization_type: Optional[str] = None
    progression_rules: Optional[dict] = None
    program_duration: int = Field(4, ge=1, le=program_svc.MAX_PROGRAM_WEEKS)
    notes: Optional[str] = None
    tier_continuum_id: Optional[int] = None
    start_date: Optional[str] = None  # YYYY-MM-DD
    end_date: Optional[str] = None
    weekly_exercises: List[List[ExerciseIn]] = []


class DuplicateBody(BaseModel):
    program_name: Optional[str] = None


class ActualIn(BaseModel):
    program_exercises_id: int
    actual_sets: List[dict]


class ActualsBody(BaseModel):
    exercises: List[ActualIn]


class PairingItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    pairing: Optional[str] = None


class RenumberBody(BaseModel):
    exercises: List[PairingItem]
    group_size: Optional[int] = Field(None, ge=1)


class StatsSetIn(BaseModel):
    model_config = ConfigDict(extra="allow")

    tempo: Optional[str] = None


class StatsExerciseIn(BaseModel):
    model_config = ConfigDict(extra="allow")

    planned_sets: List[StatsSetIn] = []


class SessionStatsBody(BaseModel):
    exercises: List[StatsExerciseIn]
    unit: Optional[Literal["lbs", "kg"]] = None


class ProgressionBody(BaseModel):
    base_week: List[dict]
    program_length: int = Field(..., ge=1, le=program_svc.MAX_PROGRAM_WEEKS)
    rules: Optional[dict] = None


@router.get(f"{PREFIX}/programs")
def api_program_list(user: dict = Depends(current_user)):
    return {"items": program_svc.list_programs(user)}


@router.post(f"{PREFIX}/programs", status_code=201)
def api_program_create(body: ProgramBody, user: dict = Depends(current_user)):
    log = LogContext("CREATE_PROGRAM", user["id"])
    data = body.model_dump()
    log.set_payload({k: v for k, v in data.items() if k != "weekly_exercises"})
    try:
        res = program_svc.create_program(user, data, log)
        log.write("OK")
        return {"message": "ok", **res}
    except Exception as e:
        raise fail(log, e)


@router.get(f"{PREFIX}/programs/{{program_id}}")
def api_program_get(program_id: int, user: dict = Depends(current_user)):
    try:
        return program_svc.get_program(user, program_id)
    except Exception as e:
        raise fail(None, e)


@router.put(f"{PREFIX}/programs/{{program_id}}")
def api_program_update(program_id: int, body: ProgramBody, user: dict = Depends(current_user)):
    log = LogContext("UPDATE_PROGRAM", user["id"])
    data = body.model_dump()
    log.set_payload({k: v for k, v in data.items() if k != "weekly_exercises"})
    try:
        res = program_svc.update_program(user, program_id, data, log)
        log.write("OK")
        return {"message": "ok", **res}
    except Exception as e:
        raise fail(log, e)


@router.delete(f"{PREFIX}/programs/{{program_id}}")
def api_program_delete(program_id: int, user: dict = Depends(current_user)):
    log = LogContext("DELETE_PROGRAM", user["id"])
    try:
        program_svc.delete_program(user, program_id, log)
        log.write("OK")
        return {"message": "ok"}
    except Exception as e:
        raise fail(log, e)


@router.post(f"{PREFIX}/programs/{{program_id}}/duplicate", status_code=201)
def api_program_duplicate(program_id: int, body: DuplicateBody, user: dict = Depends(current_user)):
    log = LogContext("DUPLICATE_PROGRAM", user["id"])
    log.set_payload(body.model_dump())
    try:
        res = program_svc.duplicate_program(user, program_id, body.program_name, log)
        log.write("OK")
        return {"message": "ok", **res}
    except Exception as e:
        raise fail(log, e)


@router.post(f"{PREFIX}/programs/{{program_id}}/actuals")
def api_program_actuals(program_id: int, body: ActualsBody, user: dict = Depends(current_user)):
    log = LogContext("RECORD_ACTUALS", user["id"])
    log.set_payload({"program_id": program_id, "count": len(body.exercises)})
    try:
        n = program_svc.record_actuals(user, program_id, [e.model_dump() for e in body.exercises], log)
        log.write("OK")
        return {"message": "ok", "updated": n}
    except Exception as e:
        raise fail(log, e)


@router.post(f"{PREFIX}/pairings/renumber")
def api_pairings_renumber(body: RenumberBody):
    try:
        exercises = [e.model_dump(exclude_unset=True) for e in body.exercises]
        return {"exercises": program_svc.renumber(exercises, body.group_size)}
    except Exception as e:
        raise fail(None, e)


@router.post(f"{PREFIX}/session-stats")
def api_session_stats(body: SessionStatsBody):
    try:
        exercises = [e.model_dump(exclude_unset=True) for e in body.exercises]
        return program_svc.stats_for_session(exercises, body.unit)
    except Exception as e:
        raise fail(None, e)


@router.post(f"{PREFIX}/progression")
def api_progression(body: ProgressionBody):
    try:
        return {"weeks": program_svc.progression(body.base_week, body.program_length, body.rules)}
    except Exception as e:
        raise fail(None, e)

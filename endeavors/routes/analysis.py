from __future__ import annotations

from typing import Literal, Optional

from fastapi import APIRouter, Depends

from ..services.analysis_svc import program_analysis, programs_for_analysis
from ..services.structural_balance_svc import get_performance_records
from .deps import current_user, fail

router = APIRouter()


@router.get("/api/resistance-training/program-analysis")
def api_program_analysis(
    program_id: int,
    unit: Optional[Literal["lbs", "kg"]] = None,
    user: dict = Depends(current_user),
):
    try:
        return program_analysis(user, program_id, unit)
    except Exception as e:
        raise fail(None, e)


@router.get("/api/resistance-training/programs-for-analysis")
def api_programs_for_analysis(user: dict = Depends(current_user)):
    return {"items": programs_for_analysis(user)}


@router.get("/api/resistance-training/performance-records")
def api_performance_records(unit: Optional[Literal["lbs", "kg"]] = None, user: dict = Depends(current_user)):
    return {"items": get_performance_records(user, unit)}

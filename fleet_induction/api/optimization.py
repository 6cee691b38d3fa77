# fleet_induction/api/optimization.py
from fastapi import APIRouter, Depends
from typing import Any, Dict, List, Optional
from datetime import datetime, timezone
import logging

from pydantic import BaseModel, Field

from fleet_induction.models.optimization import ScoringParameters
from fleet_induction.security import require_api_key
from fleet_induction.services.fleet_kpis import compute_fleet_kpis
from fleet_induction.services.optimizer import evaluate_fleet

router = APIRouter()
logger = logging.getLogger(__name__)


class InductionRunRequest(BaseModel):
    # Raw records so that one malformed train is reported, not the whole request rejected
    trains: List[Dict[str, Any]] = Field(..., description="Fleet snapshot, one record per train")
    now: Optional[datetime] = Field(None, description="Planning reference time; defaults to the current UTC time")
    parameters: Optional[ScoringParameters] = None


@router.post("/run")
async def run_optimization(request: InductionRunRequest, _auth=Depends(require_api_key)):
    """Score, resolve and rank the supplied fleet"""
    now = request.now or datetime.now(timezone.utc)
    evaluation = evaluate_fleet(request.trains, now, request.parameters)

    return {
        "evaluated_at": evaluation.evaluated_at.isoformat(),
        "parameters": evaluation.parameters.model_dump(),
        "results": [r.summary() for r in evaluation.results],
        "errors": [e.model_dump() for e in evaluation.errors],
        "kpis": compute_fleet_kpis(evaluation, now),
    }

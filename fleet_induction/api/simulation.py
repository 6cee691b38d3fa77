from fastapi import APIRouter, Depends
from typing import Any, Dict, List, Optional
from datetime import datetime, timezone
import logging

from pydantic import BaseModel, Field

from fleet_induction.models.optimization import WhatIfScenario
from fleet_induction.security import require_api_key
from fleet_induction.services.whatif_simulator import run_whatif

router = APIRouter()
logger = logging.getLogger(__name__)


class WhatIfRequest(BaseModel):
    trains: List[Dict[str, Any]]
    now: Optional[datetime] = None
    # Shape and parameter ranges are validated here, so bad scenarios are a 422
    scenario: WhatIfScenario = Field(default_factory=WhatIfScenario)


@router.post("/whatif")
async def run_whatif_simulation(request: WhatIfRequest, _auth=Depends(require_api_key)):
    """Compare the default plan against a parameterized scenario"""
    now = request.now or datetime.now(timezone.utc)
    logger.info(f"What-if requested for {len(request.trains)} trains")
    return run_whatif(request.trains, now, request.scenario)

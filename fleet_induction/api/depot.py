# fleet_induction/api/depot.py
from fastapi import APIRouter, Depends, HTTPException
from typing import Optional
import logging

from pydantic import BaseModel

from fleet_induction.models.depot import DepotLayout, MoveResult
from fleet_induction.security import require_api_key
from fleet_induction.services.depot_manager import DepotBayManager

router = APIRouter()
logger = logging.getLogger(__name__)

# Single writer shared by all requests in this process
depot_manager: Optional[DepotBayManager] = None


class MoveRequest(BaseModel):
    train_id: str
    target_bay_id: str


def _require_manager() -> DepotBayManager:
    if depot_manager is None:
        raise HTTPException(status_code=404, detail="No depot layout loaded")
    return depot_manager


@router.put("/layout")
async def load_layout(layout: DepotLayout, _auth=Depends(require_api_key)):
    """Replace the depot layout that bay moves operate on"""
    global depot_manager
    try:
        depot_manager = DepotBayManager(layout)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    logger.info(f"Loaded depot layout with {len(layout.bays)} bays")
    return depot_manager.snapshot().model_dump()


@router.get("/layout")
async def get_layout(_auth=Depends(require_api_key)):
    return _require_manager().snapshot().model_dump()


@router.post("/move", response_model=MoveResult)
async def move_train(request: MoveRequest, _auth=Depends(require_api_key)):
    """Move a train into a bay; rejected (not an error) when the bay is taken"""
    return _require_manager().move_train(request.train_id, request.target_bay_id)

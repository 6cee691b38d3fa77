"""
Depot layout models consumed by the bay manager and the what-if simulator
"""
from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class BayType(str, Enum):
    SERVICE = "service"
    STANDBY = "standby"
    IBL = "IBL"
    MAINTENANCE = "maintenance"


class Bay(BaseModel):
    """A single stabling position; `occupied_by` is the train currently parked there"""
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    bay_id: str = Field(..., alias="id")
    x: int = 0
    y: int = 0
    bay_type: BayType = Field(default=BayType.STANDBY, alias="type")
    capacity: int = Field(default=1, ge=1)
    cleaning_capable: bool = Field(default=False, alias="cleaningCapacity")
    occupied_by: Optional[str] = Field(default=None, alias="occupied")


class GridLayout(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    rows: int = Field(default=0, ge=0)
    columns: int = Field(default=0, ge=0)
    bay_prefix: List[str] = Field(default_factory=list)


class CleaningManpower(BaseModel):
    shift1: int = 0
    shift2: int = 0


class CleaningSlots(BaseModel):
    available: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)
    manpower: CleaningManpower = Field(default_factory=CleaningManpower)


class DepotLayout(BaseModel):
    """Depot topology plus current occupancy"""
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    grid: GridLayout = Field(default_factory=GridLayout, alias="layout")
    bays: List[Bay] = Field(default_factory=list)
    cleaning_slots: CleaningSlots = Field(default_factory=CleaningSlots)


class MoveResult(BaseModel):
    success: bool
    train_id: str
    target_bay_id: str
    previous_bay_id: Optional[str] = None
    reason: Optional[str] = Field(None, description="Why the move was rejected; None on success")

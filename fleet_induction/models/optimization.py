from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from fleet_induction.config import get_config
from fleet_induction.models.train import Train, TrainStatus


class ConflictSeverity(str, Enum):
    BLOCKING = "blocking"   # forces IBL regardless of score
    ADVISORY = "advisory"


class Conflict(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str
    domain: str
    severity: ConflictSeverity = ConflictSeverity.ADVISORY

    @property
    def is_blocking(self) -> bool:
        return self.severity == ConflictSeverity.BLOCKING

    def __str__(self) -> str:
        return self.message


class DomainEvaluation(BaseModel):
    """Outcome of one evaluator for one train"""
    model_config = ConfigDict(frozen=True)

    domain: str
    score: int
    reasons: Tuple[str, ...] = ()
    conflicts: Tuple[Conflict, ...] = ()


class ScoringParameters(BaseModel):
    """What-if knobs threaded into the evaluators"""
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        json_schema_extra={
            "example": {
                "cleaningSlots": 3,
                "brandingWeight": 10,
                "mileageWeight": 20,
                "maintenanceBuffer": 7,
                "fitnessBuffer": 7,
            }
        },
    )

    cleaning_slots: int = Field(
        default_factory=lambda: get_config()["cleaning_slots"], ge=1, le=6,
        description="Cleaning slots available tonight",
    )
    branding_weight: int = Field(
        default_factory=lambda: get_config()["branding_weight"], ge=0, le=30,
        description="Scale of the branding domain (10 = standard)",
    )
    mileage_weight: int = Field(
        default_factory=lambda: get_config()["mileage_weight"], ge=5, le=40,
        description="Scale of the system-health domain (20 = standard)",
    )
    maintenance_buffer: int = Field(
        default_factory=lambda: get_config()["maintenance_buffer"], ge=1, le=14,
        description="Maintenance buffer in days",
    )
    fitness_buffer: int = Field(
        default_factory=lambda: get_config()["fitness_buffer"], ge=1, le=21,
        description="Days before certificate expiry that raise a warning",
    )


class WhatIfScenario(BaseModel):
    """Parameter overrides plus per-train attribute overrides for one what-if run"""
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    parameters: Optional[ScoringParameters] = None
    override_train_attributes: Dict[str, Dict[str, Any]] = Field(
        default_factory=dict,
        description="train_id -> {dotted attribute path: value}",
    )


class OptimizationResult(BaseModel):
    """Engine output for one train; built once per run and never mutated"""
    model_config = ConfigDict(frozen=True)

    train: Train
    recommended_status: TrainStatus
    score: int = Field(..., ge=0, le=100)
    reasons: List[str] = Field(default_factory=list)
    conflicts: List[Conflict] = Field(default_factory=list)
    breakdown: Dict[str, int] = Field(default_factory=dict, description="Score per domain, in evaluation order")
    induction_rank: Optional[int] = Field(None, description="1-based nightly induction priority")

    @property
    def train_id(self) -> str:
        return self.train.train_id

    @property
    def conflict_messages(self) -> List[str]:
        return [c.message for c in self.conflicts]

    @property
    def has_blocking_conflict(self) -> bool:
        return any(c.is_blocking for c in self.conflicts)

    def summary(self) -> Dict[str, Any]:
        """Flat, JSON-ready view used by the API and simulation reports"""
        return {
            "train_id": self.train_id,
            "induction_rank": self.induction_rank,
            "recommended_status": self.recommended_status.value,
            "score": self.score,
            "breakdown": dict(self.breakdown),
            "reasons": list(self.reasons),
            "conflicts": [
                {"message": c.message, "domain": c.domain, "severity": c.severity.value}
                for c in self.conflicts
            ],
        }


class TrainEvaluationError(BaseModel):
    train_id: Optional[str] = None
    error_type: str
    field: Optional[str] = None
    message: str


class FleetEvaluation(BaseModel):
    """Ranked results plus the trains that could not be evaluated"""
    results: List[OptimizationResult] = Field(default_factory=list)
    errors: List[TrainEvaluationError] = Field(default_factory=list)
    evaluated_at: datetime
    parameters: ScoringParameters

    @property
    def ranked_train_ids(self) -> List[str]:
        return [r.train_id for r in self.results]

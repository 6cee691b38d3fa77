# Fleet Induction Engine
from fleet_induction.exceptions import ConfigurationError, InductionEngineError, MalformedInputError
from fleet_induction.models.optimization import (
    Conflict,
    ConflictSeverity,
    FleetEvaluation,
    OptimizationResult,
    ScoringParameters,
    WhatIfScenario,
)
from fleet_induction.models.train import Train, TrainStatus
from fleet_induction.services.depot_manager import DepotBayManager
from fleet_induction.services.optimizer import evaluate_fleet, rank_fleet

__all__ = [
    "ConfigurationError",
    "InductionEngineError",
    "MalformedInputError",
    "Conflict",
    "ConflictSeverity",
    "FleetEvaluation",
    "OptimizationResult",
    "ScoringParameters",
    "WhatIfScenario",
    "Train",
    "TrainStatus",
    "DepotBayManager",
    "evaluate_fleet",
    "rank_fleet",
]

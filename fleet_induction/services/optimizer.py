# fleet_induction/services/optimizer.py
from datetime import datetime
from typing import Any, List, Mapping, Optional, Sequence, Union
import logging

from fleet_induction.exceptions import InductionEngineError
from fleet_induction.models.optimization import (
    FleetEvaluation,
    OptimizationResult,
    ScoringParameters,
    TrainEvaluationError,
)
from fleet_induction.models.train import Train
from fleet_induction.services.ranker import rank_induction
from fleet_induction.services.scorer import TrainScorer
from fleet_induction.utils.normalization import ensure_utc

logger = logging.getLogger(__name__)

TrainInput = Union[Train, Mapping[str, Any]]


class FleetInductionOptimizer:
    """Nightly induction planner: score every train, resolve status, rank the fleet.

    This is a greedy per-train scorer. Each train is evaluated on its own, so one
    malformed record never stops the rest of the fleet from being planned; its
    failure is reported in FleetEvaluation.errors instead.
    """

    def __init__(self, parameters: Optional[ScoringParameters] = None):
        self.parameters = parameters or ScoringParameters()
        self.scorer = TrainScorer(self.parameters)

    def _evaluate_one(self, record: TrainInput, now: datetime) -> OptimizationResult:
        train = Train.from_record(record)
        return self.scorer.score_train(train, now)

    def optimize(self, trains: Sequence[TrainInput], now: datetime) -> FleetEvaluation:
        now = ensure_utc(now)
        logger.info(f"Evaluating {len(trains)} trains for induction at {now.isoformat()}")

        results: List[OptimizationResult] = []
        errors: List[TrainEvaluationError] = []
        for record in trains:
            try:
                results.append(self._evaluate_one(record, now))
            except InductionEngineError as e:
                logger.warning(f"Skipping train {e.train_id or '<unknown>'}: {e}")
                errors.append(
                    TrainEvaluationError(
                        train_id=e.train_id,
                        error_type=type(e).__name__,
                        field=e.field,
                        message=e.message,
                    )
                )

        ranked = rank_induction(results)
        logger.info(f"Induction plan ready: {len(ranked)} ranked, {len(errors)} failed")
        return FleetEvaluation(results=ranked, errors=errors, evaluated_at=now, parameters=self.parameters)

    def rank(self, trains: Sequence[TrainInput], now: datetime) -> List[OptimizationResult]:
        """Strict variant: raise on the first train that cannot be evaluated"""
        now = ensure_utc(now)
        return rank_induction([self._evaluate_one(record, now) for record in trains])


def evaluate_fleet(
    trains: Sequence[TrainInput],
    now: datetime,
    parameters: Optional[ScoringParameters] = None,
) -> FleetEvaluation:
    """Engine entry point: ranked recommendations plus per-train errors."""
    return FleetInductionOptimizer(parameters).optimize(trains, now)


def rank_fleet(
    trains: Sequence[TrainInput],
    now: datetime,
    parameters: Optional[ScoringParameters] = None,
) -> List[OptimizationResult]:
    return FleetInductionOptimizer(parameters).rank(trains, now)

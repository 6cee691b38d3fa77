# fleet_induction/services/scorer.py
from datetime import datetime
from typing import Callable, Dict, List, Optional
import logging

from fleet_induction.core.scoring_config import DOMAIN_ORDER, SCORE_CEILING, SCORE_FLOOR
from fleet_induction.models.optimization import (
    Conflict,
    DomainEvaluation,
    OptimizationResult,
    ScoringParameters,
)
from fleet_induction.models.train import Train
from fleet_induction.services.evaluators import (
    evaluate_branding,
    evaluate_cleaning,
    evaluate_fitness,
    evaluate_job_cards,
    evaluate_system_health,
)
from fleet_induction.services.status_resolver import resolve_status
from fleet_induction.utils.normalization import ensure_utc

logger = logging.getLogger(__name__)

Evaluator = Callable[[Train, datetime, Optional[ScoringParameters]], DomainEvaluation]


class TrainScorer:
    """Runs the five domain evaluators against one train and merges their output.

    Evaluators run in a fixed order (fitness, job cards, system health,
    branding, cleaning); reasons and conflicts are concatenated in that order.
    """

    def __init__(self, parameters: Optional[ScoringParameters] = None):
        self.parameters = parameters or ScoringParameters()
        self.domain_evaluators: Dict[str, Evaluator] = {
            "fitness": evaluate_fitness,
            "job_cards": evaluate_job_cards,
            "system_health": evaluate_system_health,
            "branding": evaluate_branding,
            "cleaning": evaluate_cleaning,
        }

    def evaluate_domains(self, train: Train, now: datetime) -> List[DomainEvaluation]:
        now = ensure_utc(now)
        return [
            self.domain_evaluators[domain](train, now, self.parameters)
            for domain in DOMAIN_ORDER
        ]

    def score_train(self, train: Train, now: datetime) -> OptimizationResult:
        """Score one train and resolve its recommended status"""
        evaluations = self.evaluate_domains(train, now)

        reasons: List[str] = []
        conflicts: List[Conflict] = []
        breakdown: Dict[str, int] = {}
        for evaluation in evaluations:
            reasons.extend(evaluation.reasons)
            conflicts.extend(evaluation.conflicts)
            breakdown[evaluation.domain] = evaluation.score

        total = sum(breakdown.values())
        score = max(SCORE_FLOOR, min(SCORE_CEILING, total))
        status = resolve_status(score, conflicts)

        logger.debug(f"{train.train_id}: breakdown={breakdown} score={score} status={status.value}")

        return OptimizationResult(
            train=train,
            recommended_status=status,
            score=score,
            reasons=reasons,
            conflicts=conflicts,
            breakdown=breakdown,
        )

# fleet_induction/services/ranker.py
from typing import List, Sequence
import logging

from fleet_induction.models.optimization import OptimizationResult

logger = logging.getLogger(__name__)


def rank_induction(results: Sequence[OptimizationResult]) -> List[OptimizationResult]:
    """Order results by descending score and stamp the 1-based induction rank.

    The sort is stable, so trains with equal scores keep their fleet-input
    order. Each returned result is a fresh copy carrying `induction_rank`.
    """
    ordered = sorted(results, key=lambda result: -result.score)
    ranked = [
        result.model_copy(update={"induction_rank": position})
        for position, result in enumerate(ordered, start=1)
    ]

    logger.info(
        f"Induction ranking: {sum(1 for r in ranked if r.recommended_status.value == 'service')} service, "
        f"{sum(1 for r in ranked if r.recommended_status.value == 'standby')} standby, "
        f"{sum(1 for r in ranked if r.recommended_status.value == 'IBL')} IBL, "
        f"TOTAL: {len(ranked)}"
    )
    return ranked

# fleet_induction/services/fleet_kpis.py
from datetime import datetime
from typing import Any, Dict
import logging

import numpy as np

from fleet_induction.models.optimization import FleetEvaluation
from fleet_induction.models.train import JobCardPriority, TrainStatus
from fleet_induction.utils.normalization import ensure_utc

logger = logging.getLogger(__name__)

BRANDING_COMPLIANCE_RATIO = 0.9


def compute_fleet_kpis(evaluation: FleetEvaluation, now: datetime) -> Dict[str, Any]:
    """Compute Key Performance Indicators from one induction run"""
    now = ensure_utc(now)
    results = evaluation.results
    trains = [r.train for r in results]
    total = len(trains)

    status_counts = {status: 0 for status in TrainStatus}
    for result in results:
        status_counts[result.recommended_status] += 1

    service_ready = sum(
        1 for t in trains
        if not any(jc.is_open and jc.priority in (JobCardPriority.CRITICAL, JobCardPriority.HIGH) for jc in t.job_cards)
    )
    critical_issues = sum(
        1 for t in trains
        if any(jc.is_open and jc.priority == JobCardPriority.CRITICAL for jc in t.job_cards)
        or t.fitness_expiry.rolling_stock < now
        or t.fitness_expiry.signal_telecom < now
    )
    branding_on_target = sum(
        1 for t in trains
        if t.branding.target_hours > 0
        and t.branding.current_hours / t.branding.target_hours >= BRANDING_COMPLIANCE_RATIO
    )

    scores = np.array([r.score for r in results], dtype=float)
    mileages = np.array([t.current_mileage for t in trains], dtype=float)

    return {
        "total_trains": total,
        "num_service_trains": int(status_counts[TrainStatus.SERVICE]),
        "num_standby_trains": int(status_counts[TrainStatus.STANDBY]),
        "num_ibl_trains": int(status_counts[TrainStatus.IBL]),
        "num_errors": len(evaluation.errors),
        "average_score": round(float(scores.mean()), 2) if total else 0.0,
        "fleet_readiness": round(service_ready / total, 4) if total else 0.0,
        "critical_issues": int(critical_issues),
        "branding_compliance": round(branding_on_target / total, 4) if total else 0.0,
        # Population std-dev of odometer readings; lower means better balanced wear
        "mileage_balance": round(float(mileages.std()), 2) if total else 0.0,
    }

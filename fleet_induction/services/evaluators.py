# fleet_induction/services/evaluators.py
"""Per-domain induction evaluators.

Each evaluator is a pure function of (train, now, parameters) and returns a
DomainEvaluation. Conflicts carry their own severity so the status resolver
never has to interpret message text.
"""
import math
from datetime import datetime
from typing import List, Optional

from fleet_induction.core.scoring_config import (
    BASE_BRANDING_WEIGHT,
    BASE_MILEAGE_WEIGHT,
    BRANDING_HIGH_COMPLETION_CUTOFF,
    BRANDING_MEDIUM_COMPLETION_CUTOFF,
    CLEANING_INTERVAL_HOURS,
    SCORING_WEIGHTS,
    SERVICE_DUE_SOON_RATIO,
    SUBSYSTEM_PENALTIES,
)
from fleet_induction.exceptions import ConfigurationError
from fleet_induction.models.optimization import (
    Conflict,
    ConflictSeverity,
    DomainEvaluation,
    ScoringParameters,
)
from fleet_induction.models.train import BrandingPriority, JobCardPriority, Train
from fleet_induction.utils.normalization import format_hours, round_half_up

SECONDS_PER_DAY = 86400
SECONDS_PER_HOUR = 3600

# subsystem attribute -> (overdue conflict text, due-soon issue text)
_SUBSYSTEM_LABELS = {
    "bogie": ("Bogie service overdue", "bogie service due soon"),
    "hvac": ("HVAC service overdue", "HVAC service due soon"),
    "brakes": ("Brake service overdue", "brake service due soon"),
}


def _scale(score: int, weight: int, base_weight: int) -> int:
    """Rescale a domain score by a what-if weight relative to its standard weight"""
    if weight == base_weight:
        return score
    return round_half_up(score * max(0, weight) / base_weight)


def days_until(expiry: datetime, now: datetime) -> int:
    """Whole days remaining, rounded up (a certificate expiring in 1h has 1 day left)"""
    return math.ceil((expiry - now).total_seconds() / SECONDS_PER_DAY)


def evaluate_fitness(train: Train, now: datetime, parameters: Optional[ScoringParameters] = None) -> DomainEvaluation:
    """Check rolling-stock and signal/telecom certificate validity"""
    parameters = parameters or ScoringParameters()
    rolling_stock_days = days_until(train.fitness_expiry.rolling_stock, now)
    signal_telecom_days = days_until(train.fitness_expiry.signal_telecom, now)

    if rolling_stock_days < 0 or signal_telecom_days < 0:
        return DomainEvaluation(
            domain="fitness",
            score=SCORING_WEIGHTS["FITNESS_EXPIRED"],
            conflicts=(Conflict(message="Fitness certificate expired", domain="fitness",
                                severity=ConflictSeverity.BLOCKING),),
        )

    buffer_days = parameters.fitness_buffer
    if rolling_stock_days <= buffer_days or signal_telecom_days <= buffer_days:
        return DomainEvaluation(
            domain="fitness",
            score=SCORING_WEIGHTS["FITNESS_EXPIRING"],
            reasons=(f"Fitness expiry: RS({rolling_stock_days}d), S&T({signal_telecom_days}d)",),
            conflicts=(Conflict(message=f"Fitness certificate expiring within {buffer_days} days",
                                domain="fitness"),),
        )

    return DomainEvaluation(
        domain="fitness",
        score=SCORING_WEIGHTS["FITNESS_VALID"],
        reasons=("Valid fitness certificates",),
    )


def evaluate_job_cards(train: Train, now: datetime, parameters: Optional[ScoringParameters] = None) -> DomainEvaluation:
    """Check open job cards; severity dominates count"""
    open_counts = {priority: 0 for priority in JobCardPriority}
    for job_card in train.job_cards:
        if job_card.is_open:
            open_counts[job_card.priority] += 1

    critical = open_counts[JobCardPriority.CRITICAL]
    high = open_counts[JobCardPriority.HIGH]
    medium = open_counts[JobCardPriority.MEDIUM]

    if critical > 0:
        return DomainEvaluation(
            domain="job_cards",
            score=SCORING_WEIGHTS["JOB_CARDS_CRITICAL_OPEN"],
            conflicts=(Conflict(message=f"{critical} critical job cards open", domain="job_cards",
                                severity=ConflictSeverity.BLOCKING),),
        )

    if high > 0:
        return DomainEvaluation(
            domain="job_cards",
            score=SCORING_WEIGHTS["JOB_CARDS_HIGH_OPEN"],
            reasons=("High priority maintenance pending",),
            conflicts=(Conflict(message=f"{high} high priority job cards open", domain="job_cards"),),
        )

    if medium > 0:
        return DomainEvaluation(
            domain="job_cards",
            score=SCORING_WEIGHTS["JOB_CARDS_MEDIUM_OPEN"],
            reasons=(f"{medium} medium priority job cards open",),
        )

    return DomainEvaluation(
        domain="job_cards",
        score=SCORING_WEIGHTS["JOB_CARDS_CLOSED"],
        reasons=("All job cards closed",),
    )


def evaluate_system_health(train: Train, now: datetime, parameters: Optional[ScoringParameters] = None) -> DomainEvaluation:
    """Apply per-subsystem penalties for overdue or nearly due service"""
    parameters = parameters or ScoringParameters()
    max_score = SCORING_WEIGHTS["SYSTEM_HEALTH_MAX"]
    penalty = 0
    issues: List[str] = []
    conflicts: List[Conflict] = []

    for name, (overdue_text, due_soon_text) in _SUBSYSTEM_LABELS.items():
        component = getattr(train.system_health, name)
        overdue_penalty, due_soon_penalty = SUBSYSTEM_PENALTIES[name]
        if component.mileage >= component.next_service:
            conflicts.append(Conflict(message=overdue_text, domain="system_health",
                                      severity=ConflictSeverity.BLOCKING))
            penalty += overdue_penalty
        elif component.utilization > SERVICE_DUE_SOON_RATIO:
            issues.append(due_soon_text)
            penalty += due_soon_penalty

    reasons: List[str] = []
    if penalty == 0:
        reasons.append("All systems healthy")
    elif issues:
        reasons.append(f"Moderate wear: {', '.join(issues)}")

    score = max(0, max_score - penalty)
    return DomainEvaluation(
        domain="system_health",
        score=_scale(score, parameters.mileage_weight, BASE_MILEAGE_WEIGHT),
        reasons=tuple(reasons),
        conflicts=tuple(conflicts),
    )


def evaluate_branding(train: Train, now: datetime, parameters: Optional[ScoringParameters] = None) -> DomainEvaluation:
    """Reward trains that still owe advertiser exposure hours. Advisory only."""
    parameters = parameters or ScoringParameters()
    branding = train.branding
    if branding.target_hours <= 0:
        raise ConfigurationError(
            "branding target hours must be positive", train_id=train.train_id, field="branding.target_hours"
        )

    completion = branding.current_hours / branding.target_hours
    score = SCORING_WEIGHTS["BRANDING_BASELINE"]

    if completion >= 1.0:
        reason = "Branding target achieved"
    else:
        shortfall = format_hours(branding.target_hours - branding.current_hours)
        if branding.priority == BrandingPriority.HIGH and completion < BRANDING_HIGH_COMPLETION_CUTOFF:
            reason = f"High priority branding: {shortfall}h remaining"
            score += SCORING_WEIGHTS["BRANDING_HIGH_PRIORITY_BONUS"]
        elif branding.priority == BrandingPriority.MEDIUM and completion < BRANDING_MEDIUM_COMPLETION_CUTOFF:
            reason = f"Medium priority branding: {shortfall}h remaining"
            score += SCORING_WEIGHTS["BRANDING_MEDIUM_PRIORITY_BONUS"]
        else:
            reason = f"Branding target: {round_half_up(completion * 100)}% complete"

    return DomainEvaluation(
        domain="branding",
        score=_scale(score, parameters.branding_weight, BASE_BRANDING_WEIGHT),
        reasons=(reason,),
    )


def evaluate_cleaning(train: Train, now: datetime, parameters: Optional[ScoringParameters] = None) -> DomainEvaluation:
    hours_since_cleaned = (now - train.last_cleaned).total_seconds() / SECONDS_PER_HOUR

    if hours_since_cleaned > CLEANING_INTERVAL_HOURS:
        return DomainEvaluation(
            domain="cleaning",
            score=SCORING_WEIGHTS["CLEANING_DUE"],
            reasons=(f"Cleaned {round_half_up(hours_since_cleaned)}h ago - due for cleaning",),
        )
    return DomainEvaluation(
        domain="cleaning",
        score=SCORING_WEIGHTS["CLEANING_RECENT"],
        reasons=("Recently cleaned",),
    )

# fleet_induction/services/status_resolver.py
from typing import Iterable

from fleet_induction.config import settings
from fleet_induction.models.optimization import Conflict
from fleet_induction.models.train import TrainStatus


def resolve_status(score: int, conflicts: Iterable[Conflict]) -> TrainStatus:
    """Map a train's score and conflicts to its recommended status.

    A blocking conflict (expired certificate, open critical job card, overdue
    subsystem service) sends the train to IBL whatever it scored. Otherwise the
    score is split into service / standby / IBL tiers.
    """
    if any(conflict.is_blocking for conflict in conflicts):
        return TrainStatus.IBL

    if score >= settings.service_score_threshold:
        return TrainStatus.SERVICE
    if score >= settings.standby_score_threshold:
        return TrainStatus.STANDBY
    return TrainStatus.IBL

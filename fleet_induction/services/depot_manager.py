# fleet_induction/services/depot_manager.py
"""Bay occupancy for the depot layout.

Moves are serialized per manager: vacating the old bay and occupying the new
one happen under the same lock, so a train never holds two bays and a bay
never holds two trains.
"""
import logging
import threading
from typing import Dict, List, Optional, Sequence

from fleet_induction.core.scoring_config import SCORING_WEIGHTS
from fleet_induction.models.depot import Bay, BayType, DepotLayout, MoveResult
from fleet_induction.models.optimization import OptimizationResult

logger = logging.getLogger(__name__)


class DepotBayManager:
    def __init__(self, layout: DepotLayout) -> None:
        self._lock = threading.Lock()
        self._grid = layout.grid
        self._cleaning_slots = layout.cleaning_slots
        self._bays: Dict[str, Bay] = {}
        self._train_to_bay: Dict[str, str] = {}

        for bay in layout.bays:
            if bay.bay_id in self._bays:
                raise ValueError(f"Duplicate bay id in layout: {bay.bay_id}")
            self._bays[bay.bay_id] = bay
            if bay.occupied_by is None:
                continue
            if bay.occupied_by in self._train_to_bay:
                raise ValueError(
                    f"Train {bay.occupied_by} occupies both {self._train_to_bay[bay.occupied_by]} and {bay.bay_id}"
                )
            self._train_to_bay[bay.occupied_by] = bay.bay_id

    def move_train(self, train_id: str, target_bay_id: str) -> MoveResult:
        """Move a train into a bay, vacating whichever bay it held before"""
        with self._lock:
            previous_bay_id = self._train_to_bay.get(train_id)
            target = self._bays.get(target_bay_id)

            if target is None:
                return self._rejected(train_id, target_bay_id, previous_bay_id, f"unknown bay {target_bay_id}")
            if target.occupied_by == train_id:
                return MoveResult(success=True, train_id=train_id, target_bay_id=target_bay_id,
                                  previous_bay_id=previous_bay_id)
            if target.occupied_by is not None:
                return self._rejected(
                    train_id, target_bay_id, previous_bay_id,
                    f"bay {target_bay_id} occupied by {target.occupied_by}",
                )

            if previous_bay_id is not None:
                self._bays[previous_bay_id] = self._bays[previous_bay_id].model_copy(update={"occupied_by": None})
            self._bays[target_bay_id] = target.model_copy(update={"occupied_by": train_id})
            self._train_to_bay[train_id] = target_bay_id

        logger.info(f"Moved {train_id}: {previous_bay_id or 'unassigned'} -> {target_bay_id}")
        return MoveResult(success=True, train_id=train_id, target_bay_id=target_bay_id,
                          previous_bay_id=previous_bay_id)

    def _rejected(self, train_id: str, target_bay_id: str, previous_bay_id: Optional[str], reason: str) -> MoveResult:
        logger.warning(f"Rejected move of {train_id} to {target_bay_id}: {reason}")
        return MoveResult(success=False, train_id=train_id, target_bay_id=target_bay_id,
                          previous_bay_id=previous_bay_id, reason=reason)

    def occupant(self, bay_id: str) -> Optional[str]:
        with self._lock:
            bay = self._bays.get(bay_id)
            return bay.occupied_by if bay else None

    def bay_of(self, train_id: str) -> Optional[str]:
        with self._lock:
            return self._train_to_bay.get(train_id)

    def free_bays(self, bay_type: Optional[BayType] = None) -> List[Bay]:
        with self._lock:
            return [
                bay for bay in self._bays.values()
                if bay.occupied_by is None and (bay_type is None or bay.bay_type == bay_type)
            ]

    def snapshot(self) -> DepotLayout:
        """Copy of the current layout; later moves do not affect it"""
        with self._lock:
            return DepotLayout(
                grid=self._grid.model_copy(),
                bays=list(self._bays.values()),
                cleaning_slots=self._cleaning_slots.model_copy(),
            )


def allocate_cleaning_slots(results: Sequence[OptimizationResult], slots: int) -> List[str]:
    """Give the available cleaning slots to trains due for cleaning, in ranked order"""
    due = [
        result.train_id for result in results
        if result.breakdown.get("cleaning") == SCORING_WEIGHTS["CLEANING_DUE"]
    ]
    return due[:max(0, slots)]

"""Tests for bay occupancy moves and cleaning slot allocation"""
import threading

import pytest

from fleet_induction.models.depot import BayType, DepotLayout
from fleet_induction.services.depot_manager import DepotBayManager, allocate_cleaning_slots
from fleet_induction.services.ranker import rank_induction
from fleet_induction.services.scorer import TrainScorer


def _layout(**occupants):
    bays = [
        {"id": "A1", "x": 0, "y": 0, "type": "service", "occupied": occupants.get("A1")},
        {"id": "A2", "x": 1, "y": 0, "type": "service", "occupied": occupants.get("A2")},
        {"id": "B1", "x": 0, "y": 1, "type": "standby", "cleaningCapacity": True, "occupied": occupants.get("B1")},
        {"id": "C1", "x": 0, "y": 2, "type": "IBL", "occupied": occupants.get("C1")},
    ]
    return DepotLayout.model_validate({
        "layout": {"rows": 3, "columns": 2, "bayPrefix": ["A", "B", "C"]},
        "bays": bays,
        "cleaningSlots": {"available": 2, "total": 3, "manpower": {"shift1": 4, "shift2": 2}},
    })


def test_move_into_free_bay_vacates_previous_bay():
    manager = DepotBayManager(_layout(A1="KMRL-001"))

    result = manager.move_train("KMRL-001", "B1")

    assert result.success
    assert result.previous_bay_id == "A1"
    assert manager.occupant("A1") is None
    assert manager.occupant("B1") == "KMRL-001"
    assert manager.bay_of("KMRL-001") == "B1"


def test_unassigned_train_can_be_placed():
    manager = DepotBayManager(_layout())

    result = manager.move_train("KMRL-009", "C1")

    assert result.success
    assert result.previous_bay_id is None
    assert manager.bay_of("KMRL-009") == "C1"


def test_move_into_occupied_bay_is_rejected():
    manager = DepotBayManager(_layout(A1="KMRL-001", A2="KMRL-002"))

    result = manager.move_train("KMRL-001", "A2")

    assert not result.success
    assert result.reason == "bay A2 occupied by KMRL-002"
    assert manager.occupant("A1") == "KMRL-001"
    assert manager.occupant("A2") == "KMRL-002"


def test_move_to_unknown_bay_is_rejected():
    manager = DepotBayManager(_layout(A1="KMRL-001"))

    result = manager.move_train("KMRL-001", "Z9")

    assert not result.success
    assert result.reason == "unknown bay Z9"
    assert manager.bay_of("KMRL-001") == "A1"


def test_move_into_own_bay_is_a_no_op():
    manager = DepotBayManager(_layout(A1="KMRL-001"))

    result = manager.move_train("KMRL-001", "A1")

    assert result.success
    assert manager.occupant("A1") == "KMRL-001"


def test_free_bays_by_type():
    manager = DepotBayManager(_layout(A1="KMRL-001"))

    assert [bay.bay_id for bay in manager.free_bays()] == ["A2", "B1", "C1"]
    assert [bay.bay_id for bay in manager.free_bays(BayType.SERVICE)] == ["A2"]


def test_snapshot_is_independent_of_later_moves():
    manager = DepotBayManager(_layout(A1="KMRL-001"))
    before = manager.snapshot()

    manager.move_train("KMRL-001", "A2")

    assert {bay.bay_id: bay.occupied_by for bay in before.bays}["A1"] == "KMRL-001"
    after = {bay.bay_id: bay.occupied_by for bay in manager.snapshot().bays}
    assert after["A1"] is None
    assert after["A2"] == "KMRL-001"
    assert manager.snapshot().cleaning_slots.available == 2


def test_concurrent_moves_into_one_bay_admit_a_single_train():
    manager = DepotBayManager(_layout())
    barrier = threading.Barrier(8)
    results = []
    results_lock = threading.Lock()

    def _move(train_id):
        barrier.wait()
        outcome = manager.move_train(train_id, "B1")
        with results_lock:
            results.append(outcome)

    threads = [threading.Thread(target=_move, args=(f"KMRL-{i:03d}",)) for i in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    winners = [r for r in results if r.success]
    assert len(winners) == 1
    assert manager.occupant("B1") == winners[0].train_id
    occupied = [bay for bay in manager.snapshot().bays if bay.occupied_by is not None]
    assert len(occupied) == 1


def test_layout_with_train_in_two_bays_is_rejected():
    with pytest.raises(ValueError):
        DepotBayManager(_layout(A1="KMRL-001", B1="KMRL-001"))


def test_layout_with_duplicate_bay_ids_is_rejected():
    layout = DepotLayout.model_validate({"bays": [{"id": "A1"}, {"id": "A1"}]})
    with pytest.raises(ValueError):
        DepotBayManager(layout)


def test_cleaning_slots_go_to_highest_ranked_due_trains(make_train, now):
    scorer = TrainScorer()
    results = rank_induction([
        scorer.score_train(make_train(train_id="KMRL-001", cleaned_hours_ago=30, rs_days=3), now),
        scorer.score_train(make_train(train_id="KMRL-002", cleaned_hours_ago=6), now),
        scorer.score_train(make_train(train_id="KMRL-003", cleaned_hours_ago=48), now),
        scorer.score_train(make_train(train_id="KMRL-004", cleaned_hours_ago=72, job_cards=[("open", "medium")]), now),
    ])

    assert allocate_cleaning_slots(results, 2) == ["KMRL-003", "KMRL-004"]
    assert allocate_cleaning_slots(results, 6) == ["KMRL-003", "KMRL-004", "KMRL-001"]
    assert allocate_cleaning_slots(results, 0) == []

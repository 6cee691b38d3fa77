"""Tests for fleet KPI aggregation"""
import pytest

from fleet_induction import evaluate_fleet
from fleet_induction.services.fleet_kpis import compute_fleet_kpis


def test_kpis_for_mixed_fleet(make_record, now):
    trains = [
        make_record(train_id="KMRL-001", current_mileage=40000),
        make_record(train_id="KMRL-002", rs_days=3, job_cards=[("open", "high")], current_mileage=60000,
                    target_hours=100, current_hours=50),
        make_record(train_id="KMRL-003", st_days=-1, current_mileage=50000),
    ]
    evaluation = evaluate_fleet(trains, now)

    kpis = compute_fleet_kpis(evaluation, now)

    assert kpis["total_trains"] == 3
    assert kpis["num_service_trains"] == 1
    assert kpis["num_standby_trains"] == 1
    assert kpis["num_ibl_trains"] == 1
    assert kpis["num_errors"] == 0
    assert kpis["critical_issues"] == 1
    assert kpis["fleet_readiness"] == pytest.approx(2 / 3, abs=1e-4)
    assert kpis["branding_compliance"] == pytest.approx(2 / 3, abs=1e-4)
    assert kpis["mileage_balance"] == pytest.approx(8164.97, abs=0.01)
    assert kpis["average_score"] == pytest.approx(
        sum(r.score for r in evaluation.results) / 3, abs=0.01
    )


def test_errors_are_counted_but_not_scored(make_record, now):
    evaluation = evaluate_fleet([make_record(), make_record(train_id="KMRL-002", target_hours=0)], now)

    kpis = compute_fleet_kpis(evaluation, now)

    assert kpis["total_trains"] == 1
    assert kpis["num_errors"] == 1
    assert kpis["average_score"] == 97.0


def test_empty_fleet_yields_zeroes(now):
    kpis = compute_fleet_kpis(evaluate_fleet([], now), now)

    assert kpis["total_trains"] == 0
    assert kpis["average_score"] == 0.0
    assert kpis["fleet_readiness"] == 0.0
    assert kpis["mileage_balance"] == 0.0

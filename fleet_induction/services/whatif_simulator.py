"""What-If Simulation Service - Runs deterministic scenario comparisons"""
import copy
import uuid
from typing import Any, Dict, List, Mapping, Sequence, Union
from datetime import datetime, timezone
import logging

from fleet_induction.models.optimization import FleetEvaluation, ScoringParameters, WhatIfScenario
from fleet_induction.models.train import Train
from fleet_induction.services.depot_manager import allocate_cleaning_slots
from fleet_induction.services.fleet_kpis import compute_fleet_kpis
from fleet_induction.services.optimizer import TrainInput, evaluate_fleet
from fleet_induction.utils.normalization import set_nested_value

logger = logging.getLogger(__name__)

_DELTA_KEYS = (
    "num_service_trains",
    "num_standby_trains",
    "num_ibl_trains",
    "num_errors",
    "average_score",
    "critical_issues",
    "cleaning_slots_used",
    "cleaning_backlog",
)


def _record_id(record: Any) -> Any:
    if not isinstance(record, Mapping):
        return None
    return record.get("id", record.get("train_id"))


def _to_snapshot(trains: Sequence[TrainInput]) -> List[Any]:
    """Deep-copy the fleet into plain dicts so scenario overrides never touch the caller's data"""
    snapshot = []
    for record in trains:
        if isinstance(record, Train):
            snapshot.append(record.model_dump())
        elif isinstance(record, Mapping):
            snapshot.append(copy.deepcopy(dict(record)))
        else:
            # Left for evaluate_fleet to report as malformed
            snapshot.append(copy.deepcopy(record))
    return snapshot


def _apply_overrides(snapshot: List[Any], scenario: WhatIfScenario) -> List[Any]:
    """
    Apply scenario overrides to a copy of the snapshot.

    Supports:
    - override_train_attributes: {train_id: {"dot.path": value}} using the
      record's own key style (e.g. "fitness_expiry.signal_telecom")
    """
    scenario_snapshot = copy.deepcopy(snapshot)

    for train_id, overrides in scenario.override_train_attributes.items():
        for record in scenario_snapshot:
            if _record_id(record) == train_id:
                for path, value in overrides.items():
                    set_nested_value(record, path, value)
                logger.debug(f"Applied overrides to train {train_id}: {overrides}")
                break
        else:
            logger.warning(f"Override target {train_id} not found in snapshot")

    return scenario_snapshot


def _decision_rows(evaluation: FleetEvaluation) -> List[Dict[str, Any]]:
    return [r.summary() for r in evaluation.results]


def _compute_kpis(evaluation: FleetEvaluation, now: datetime, cleaning_slots: int) -> Dict[str, Any]:
    kpis = compute_fleet_kpis(evaluation, now)
    due_for_cleaning = allocate_cleaning_slots(evaluation.results, len(evaluation.results))
    assigned = allocate_cleaning_slots(evaluation.results, cleaning_slots)
    kpis["cleaning_slots_used"] = len(assigned)
    kpis["cleaning_backlog"] = len(due_for_cleaning) - len(assigned)
    kpis["cleaning_assignments"] = assigned
    return kpis


def _generate_explain_log(baseline_kpis: Dict[str, Any], scenario_kpis: Dict[str, Any],
                          scenario: WhatIfScenario, parameters: ScoringParameters,
                          status_changes: List[Dict[str, Any]]) -> List[str]:
    """Generate human-readable explanation of how scenario changed results compared to baseline"""
    explain_log = []

    labels = {
        "num_service_trains": "Service trains",
        "num_standby_trains": "Standby trains",
        "num_ibl_trains": "IBL trains",
        "critical_issues": "Critical issues",
        "cleaning_backlog": "Cleaning backlog",
    }
    for key, label in labels.items():
        before, after = baseline_kpis.get(key, 0), scenario_kpis.get(key, 0)
        if after != before:
            explain_log.append(f"{label} changed by {after - before:+d} (baseline: {before}, scenario: {after})")

    before_avg, after_avg = baseline_kpis.get("average_score", 0.0), scenario_kpis.get("average_score", 0.0)
    if abs(after_avg - before_avg) > 0.01:
        explain_log.append(
            f"Average score changed by {after_avg - before_avg:+.2f} (baseline: {before_avg:.2f}, scenario: {after_avg:.2f})"
        )

    defaults = ScoringParameters()
    for name in ScoringParameters.model_fields:
        if getattr(parameters, name) != getattr(defaults, name):
            explain_log.append(f"Parameter {name} set to {getattr(parameters, name)} (default: {getattr(defaults, name)})")

    if scenario.override_train_attributes:
        explain_log.append(f"Applied attribute overrides to {len(scenario.override_train_attributes)} trains")

    for change in status_changes:
        explain_log.append(f"{change['train_id']}: {change['baseline']} -> {change['scenario']}")

    if not explain_log:
        explain_log.append("No significant changes detected between baseline and scenario")

    return explain_log


def run_whatif(trains: Sequence[TrainInput], now: datetime,
               scenario: Union[WhatIfScenario, Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Run What-If simulation comparing baseline vs scenario.

    Args:
        trains: Fleet snapshot (Train models or raw records); never mutated
        now: Planning reference time shared by both runs
        scenario: WhatIfScenario, or a mapping with "parameters" and
            "override_train_attributes" (train_id -> {dot.path: value})

    Returns:
        Dictionary with keys:
        - simulation_id, timestamp
        - parameters: effective scenario parameters
        - baseline / scenario: KPI dicts
        - deltas: scenario - baseline for numeric KPIs
        - status_changes: trains whose recommendation differs
        - explain_log: Human-readable explanation
        - results: ALWAYS an array of two objects [baseline_result, scenario_result]
    """
    simulation_id = str(uuid.uuid4())
    logger.info(f"Starting What-If simulation {simulation_id}")

    # Invalid parameters or a badly shaped scenario raise pydantic.ValidationError to the caller
    scenario = WhatIfScenario.model_validate(scenario)
    parameters = scenario.parameters or ScoringParameters()
    baseline_parameters = ScoringParameters()

    snapshot = _to_snapshot(trains)
    scenario_snapshot = _apply_overrides(snapshot, scenario)

    logger.info("Running baseline evaluation")
    baseline = evaluate_fleet(snapshot, now, baseline_parameters)
    baseline_kpis = _compute_kpis(baseline, now, baseline_parameters.cleaning_slots)

    logger.info("Running scenario evaluation")
    scenario_eval = evaluate_fleet(scenario_snapshot, now, parameters)
    scenario_kpis = _compute_kpis(scenario_eval, now, parameters.cleaning_slots)

    deltas = {}
    for key in _DELTA_KEYS:
        delta = scenario_kpis[key] - baseline_kpis[key]
        deltas[key] = round(delta, 2) if isinstance(delta, float) else delta

    baseline_status = {r.train_id: r.recommended_status.value for r in baseline.results}
    status_changes = [
        {"train_id": r.train_id, "baseline": baseline_status[r.train_id], "scenario": r.recommended_status.value}
        for r in scenario_eval.results
        if r.train_id in baseline_status and baseline_status[r.train_id] != r.recommended_status.value
    ]

    explain_log = _generate_explain_log(baseline_kpis, scenario_kpis, scenario, parameters, status_changes)

    results = [
        {"type": "baseline", "kpis": baseline_kpis, "decisions": _decision_rows(baseline)},
        {"type": "scenario", "kpis": scenario_kpis, "decisions": _decision_rows(scenario_eval)},
    ]

    return {
        "simulation_id": simulation_id,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "parameters": parameters.model_dump(),
        "baseline": baseline_kpis,
        "scenario": scenario_kpis,
        "deltas": deltas,
        "status_changes": status_changes,
        "explain_log": explain_log,
        "results": results,  # ALWAYS an array
    }

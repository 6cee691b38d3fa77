"""Shared fixtures: a fixed planning time and a train record factory"""
from datetime import datetime, timedelta, timezone

import pytest

from fleet_induction.models.train import Train

NOW = datetime(2025, 1, 15, 22, 0, tzinfo=timezone.utc)


def build_record(
    train_id="KMRL-001",
    rs_days=30,
    st_days=30,
    job_cards=(),
    bogie=(50000, 100000),
    hvac=(50000, 100000),
    brakes=(50000, 100000),
    target_hours=100,
    current_hours=100,
    branding_priority="low",
    cleaned_hours_ago=12,
    current_mileage=50000,
    now=NOW,
):
    """A healthy train by default: valid certificates, no open cards, fresh service, branding met"""
    return {
        "train_id": train_id,
        "rolling_stock_type": "Alstom Metropolis",
        "current_mileage": current_mileage,
        "fitness_expiry": {
            "rolling_stock": (now + timedelta(days=rs_days)).isoformat(),
            "signal_telecom": (now + timedelta(days=st_days)).isoformat(),
        },
        "job_cards": [
            {"job_card_id": f"JC-{i}", "category": "inspection", "status": status, "priority": priority}
            for i, (status, priority) in enumerate(job_cards, start=1)
        ],
        "branding": {
            "advertiser": "Kerala Tourism",
            "target_hours": target_hours,
            "current_hours": current_hours,
            "priority": branding_priority,
        },
        "system_health": {
            "bogie": {"mileage": bogie[0], "next_service": bogie[1]},
            "hvac": {"mileage": hvac[0], "next_service": hvac[1]},
            "brakes": {"mileage": brakes[0], "next_service": brakes[1]},
        },
        "last_cleaned": (now - timedelta(hours=cleaned_hours_ago)).isoformat(),
        "current_bay": None,
        "status": "standby",
    }


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_record():
    return build_record


@pytest.fixture
def make_train():
    def _make(**kwargs):
        return Train.from_record(build_record(**kwargs))
    return _make

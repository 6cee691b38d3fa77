# fleet_induction/core/scoring_config.py

# Centralized scoring weights for nightly induction.
# Shared by the evaluators, the status resolver and the what-if simulator.

DOMAIN_ORDER = ("fitness", "job_cards", "system_health", "branding", "cleaning")

SCORING_WEIGHTS = {
    # Fitness certificates (statutory, dominant)
    "FITNESS_VALID": 40,
    "FITNESS_EXPIRING": 10,
    "FITNESS_EXPIRED": 0,

    # Job cards
    "JOB_CARDS_CLOSED": 25,
    "JOB_CARDS_MEDIUM_OPEN": 20,
    "JOB_CARDS_HIGH_OPEN": 10,
    "JOB_CARDS_CRITICAL_OPEN": 0,

    # System health (starts at max, penalties subtracted)
    "SYSTEM_HEALTH_MAX": 20,

    # Branding (baseline plus urgency bonus)
    "BRANDING_BASELINE": 10,
    "BRANDING_HIGH_PRIORITY_BONUS": 5,
    "BRANDING_MEDIUM_PRIORITY_BONUS": 2,

    # Cleaning (due trains score higher so they surface for cleaning bays)
    "CLEANING_DUE": 5,
    "CLEANING_RECENT": 2,
}

# (overdue penalty, due-soon penalty) per subsystem; brakes are safety-critical
SUBSYSTEM_PENALTIES = {
    "bogie": (10, 2),
    "hvac": (10, 2),
    "brakes": (15, 3),
}

SERVICE_DUE_SOON_RATIO = 0.9
BRANDING_HIGH_COMPLETION_CUTOFF = 0.8
BRANDING_MEDIUM_COMPLETION_CUTOFF = 0.9
CLEANING_INTERVAL_HOURS = 24

SCORE_FLOOR = 0
SCORE_CEILING = 100

# Reference values the what-if weights are scaled against
BASE_BRANDING_WEIGHT = 10
BASE_MILEAGE_WEIGHT = 20

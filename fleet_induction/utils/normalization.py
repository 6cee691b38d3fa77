# fleet_induction/utils/normalization.py
import math
from datetime import datetime, timezone
from typing import Any, Dict


def ensure_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC so they compare against aware ones"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_hours(value: float) -> str:
    """Render hour counts without a trailing '.0' (120.0 -> '120', 12.5 -> '12.5')"""
    return f"{value:g}"


def set_nested_value(obj: Dict[str, Any], path: str, value: Any) -> None:
    """Set a nested value in a dictionary using dot-separated path (e.g., 'fitness_expiry.signal_telecom')"""
    keys = path.split('.')
    current = obj
    for key in keys[:-1]:
        if key not in current or not isinstance(current[key], dict):
            current[key] = {}
        current = current[key]
    current[keys[-1]] = value


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (12.5 -> 13), unlike round()'s half-to-even"""
    return math.floor(value + 0.5)

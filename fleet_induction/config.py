# fleet_induction/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from dotenv import load_dotenv
from typing import Optional
import logging
import os
import yaml
from pathlib import Path

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # API Configuration
    api_host: str = Field(default="127.0.0.1", env="API_HOST")
    api_port: int = Field(default=8000, env="API_PORT")
    api_key: Optional[str] = Field(default=None, env="API_KEY")
    environment: Optional[str] = Field(default=None, env="ENVIRONMENT")
    log_level: str = Field(default="INFO", env="LOG_LEVEL")

    # Scoring defaults (what-if panel starting values)
    default_cleaning_slots: int = Field(default=3, env="DEFAULT_CLEANING_SLOTS")
    default_branding_weight: int = Field(default=10, env="DEFAULT_BRANDING_WEIGHT")
    default_mileage_weight: int = Field(default=20, env="DEFAULT_MILEAGE_WEIGHT")
    maintenance_buffer_days: int = Field(default=7, env="MAINTENANCE_BUFFER_DAYS")
    fitness_buffer_days: int = Field(default=7, env="FITNESS_BUFFER_DAYS")

    # Status thresholds
    service_score_threshold: int = Field(default=70, env="SERVICE_SCORE_THRESHOLD")
    standby_score_threshold: int = Field(default=40, env="STANDBY_SCORE_THRESHOLD")

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


load_dotenv(".env")

# Load defaults from YAML shipped with the package
_defaults_path = Path(__file__).parent / "defaults.yaml"
_defaults = {}
if _defaults_path.exists():
    try:
        with open(_defaults_path, "r") as f:
            _defaults = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Could not load defaults.yaml: {e}")

settings = Settings()

# Environment wins over defaults.yaml
_YAML_OVERRIDES = {
    "DEFAULT_CLEANING_SLOTS": "default_cleaning_slots",
    "DEFAULT_BRANDING_WEIGHT": "default_branding_weight",
    "DEFAULT_MILEAGE_WEIGHT": "default_mileage_weight",
    "MAINTENANCE_BUFFER_DAYS": "maintenance_buffer_days",
    "FITNESS_BUFFER_DAYS": "fitness_buffer_days",
    "SERVICE_SCORE_THRESHOLD": "service_score_threshold",
    "STANDBY_SCORE_THRESHOLD": "standby_score_threshold",
}
for _key, _attr in _YAML_OVERRIDES.items():
    if _key in _defaults and not os.getenv(_key):
        setattr(settings, _attr, int(_defaults[_key]))


def get_config() -> dict:
    """
    Lightweight accessor for the scoring defaults handed to ScoringParameters.
    """
    return {
        "cleaning_slots": settings.default_cleaning_slots,
        "branding_weight": settings.default_branding_weight,
        "mileage_weight": settings.default_mileage_weight,
        "maintenance_buffer": settings.maintenance_buffer_days,
        "fitness_buffer": settings.fitness_buffer_days,
    }

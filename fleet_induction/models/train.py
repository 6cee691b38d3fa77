from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union, get_args

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from fleet_induction.exceptions import MalformedInputError
from fleet_induction.utils.normalization import ensure_utc


class TrainStatus(str, Enum):
    SERVICE = "service"
    STANDBY = "standby"
    IBL = "IBL"


class JobCardStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class JobCardPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class BrandingPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Records arrive either snake_case or in the camelCase shape of the depot feeds
_SNAPSHOT_CONFIG = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)


def _utc_timestamp(value: datetime) -> datetime:
    # Parses fine but falls outside datetime's range once shifted to UTC (e.g. year 1 at +05:00)
    try:
        return ensure_utc(value)
    except OverflowError:
        raise ValueError("timestamp out of range when converted to UTC")


def _nested_model(annotation: Any) -> Optional[type]:
    for candidate in (annotation, *get_args(annotation)):
        if isinstance(candidate, type) and issubclass(candidate, BaseModel):
            return candidate
    return None


def _field_path(model: type, loc: Sequence[Any]) -> str:
    """Translate a pydantic error location (aliases, list indexes) into dotted field names"""
    names: List[str] = []
    current: Optional[type] = model
    for part in loc:
        if isinstance(part, int) or current is None:
            names.append(str(part))
            continue
        name, current = _resolve_field(current, part)
        names.append(name)
    return ".".join(names)


def _resolve_field(model: type, key: str) -> Tuple[str, Optional[type]]:
    for name, info in model.model_fields.items():
        if key in (name, info.alias):
            return name, _nested_model(info.annotation)
    return str(key), None


class JobCard(BaseModel):
    model_config = _SNAPSHOT_CONFIG

    job_card_id: str = Field(..., alias="id")
    category: str = Field(default="", alias="type", description="Work-order category, e.g. brake, HVAC")
    status: JobCardStatus
    priority: JobCardPriority

    @property
    def is_open(self) -> bool:
        return self.status == JobCardStatus.OPEN


class FitnessExpiry(BaseModel):
    model_config = _SNAPSHOT_CONFIG

    rolling_stock: datetime
    signal_telecom: datetime

    @field_validator("rolling_stock", "signal_telecom")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        return _utc_timestamp(value)


class Branding(BaseModel):
    model_config = _SNAPSHOT_CONFIG

    advertiser: Optional[str] = None
    # Non-positive targets are accepted here and rejected by the branding evaluator
    target_hours: float
    current_hours: float = Field(default=0.0, ge=0)
    priority: BrandingPriority = BrandingPriority.LOW


class SystemComponent(BaseModel):
    model_config = _SNAPSHOT_CONFIG

    mileage: int = Field(..., ge=0)
    next_service: int = Field(..., ge=0, description="Mileage at which the next service is due")

    @property
    def utilization(self) -> float:
        if self.next_service <= 0:
            return float("inf")
        return self.mileage / self.next_service


class SystemHealth(BaseModel):
    model_config = _SNAPSHOT_CONFIG

    bogie: SystemComponent
    hvac: SystemComponent
    brakes: SystemComponent


class Train(BaseModel):
    """Point-in-time snapshot of one trainset, immutable for an evaluation run"""
    model_config = _SNAPSHOT_CONFIG

    train_id: str = Field(..., alias="id")
    rolling_stock_type: str = Field(default="", alias="type")
    current_mileage: int = Field(default=0, ge=0)
    fitness_expiry: FitnessExpiry
    job_cards: List[JobCard] = Field(default_factory=list)
    branding: Branding
    system_health: SystemHealth
    last_cleaned: datetime
    current_bay: Optional[str] = None
    status: TrainStatus = TrainStatus.STANDBY

    @field_validator("last_cleaned")
    @classmethod
    def _last_cleaned_utc(cls, value: datetime) -> datetime:
        return _utc_timestamp(value)

    @classmethod
    def from_record(cls, record: Union["Train", Mapping[str, Any]]) -> "Train":
        """Validate a raw record into a Train.

        Validation failures are raised as MalformedInputError carrying the
        train id (when readable) and the dotted path of the first bad field.
        """
        if isinstance(record, cls):
            return record
        if not isinstance(record, Mapping):
            raise MalformedInputError(
                f"expected a mapping, got {type(record).__name__}", train_id=None, field="<record>"
            )
        try:
            return cls.model_validate(record)
        except ValidationError as e:
            first = e.errors()[0]
            field = _field_path(cls, first["loc"]) or "<record>"
            train_id = record.get("id", record.get("train_id"))
            raise MalformedInputError(
                first["msg"], train_id=str(train_id) if train_id is not None else None, field=field
            ) from e

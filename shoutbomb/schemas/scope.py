from pydantic import BaseModel, ValidationError, field_validator, model_validator
from typing import FrozenSet, List, Optional
from datetime import date, timedelta
from shoutbomb.configs import DUE_WINDOW_DAYS, BLOCKING_PENALTIES
from shoutbomb.core.exceptions import ConfigurationError

class EvaluationScope(BaseModel):
    """Which loans to evaluate: circulating org units and an inclusive
    due date window, plus the standing penalties that block renewal."""

    org_units: List[int]
    window_start: date
    window_end: date
    blocking_penalties: FrozenSet[str]

    @field_validator('org_units')
    @classmethod
    def _has_org_units(cls, value):
        if not value:
            raise ValueError("at least one org unit is required")
        return sorted(set(value))

    @field_validator('blocking_penalties')
    @classmethod
    def _has_penalties(cls, value):
        if not value:
            raise ValueError("blocking penalty set must not be empty")
        return value

    @model_validator(mode='after')
    def _window_order(self):
        if self.window_start > self.window_end:
            raise ValueError("due date window starts after it ends")
        return self

    @classmethod
    def create(cls, **kwargs):
        """Like the constructor, but raises ConfigurationError."""
        missing = [k for k in ('window_start', 'window_end', 'blocking_penalties')
                   if kwargs.get(k) is None]
        if missing:
            raise ConfigurationError(f"Missing scope configuration: {', '.join(missing)}")
        try:
            return cls(**kwargs)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid scope configuration: {e}") from e

    @classmethod
    def build(cls, org_units, today: Optional[date] = None,
              days: Optional[int] = DUE_WINDOW_DAYS,
              blocking_penalties=BLOCKING_PENALTIES):
        """Scope for loans due between `today` and `today + days`."""
        if days is None:
            raise ConfigurationError("Missing scope configuration: due date window")
        today = today or date.today()
        return cls.create(
            org_units=list(org_units),
            window_start=today,
            window_end=today + timedelta(days=days),
            blocking_penalties=blocking_penalties,
        )

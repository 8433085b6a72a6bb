"""Pydantic model for the slot values gathered during an event report.

Dialogflow hands parameters over in several shapes: entity lists
(``["group-meditation"]``), ``sys.person`` objects (``{"name": "Krishna S"}``),
floats for ``sys.number`` and empty strings for unfilled slots.  Everything is
coerced here so the dialogue code only ever sees ``None`` or a usable value.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator

FIELD_NAMES: tuple[str, ...] = (
    "event_type",
    "event_day",
    "event_count",
    "coordinator_name",
    "coordinator_phone",
    "event_date",
    "event_institution",
    "event_city",
    "country",
    "trainer_id",
    "event_feedback",
)

# Preferred keys when a structured entity arrives instead of a plain value
_OBJECT_KEYS = ("name", "city", "country", "date_time", "startDate")


def _collapse(value: Any) -> Any:
    """Reduce list and object shaped values to one scalar."""
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if isinstance(value, dict):
        for key in _OBJECT_KEYS:
            if value.get(key):
                return value[key]
        value = next((v for v in value.values() if v), None)
    return value


def _to_count(value: Any) -> Optional[int]:
    try:
        count = int(float(value))
    except (TypeError, ValueError):
        return None
    # Zero attendance is treated as "not answered yet"
    return count if count > 0 else None


class ParameterSet(BaseModel):
    """Known values for every report field; ``None`` means not yet supplied."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    event_type: Optional[str] = None
    event_day: Optional[str] = None
    event_count: Optional[int] = None
    coordinator_name: Optional[str] = None
    coordinator_phone: Optional[str] = None
    event_date: Optional[str] = None
    event_institution: Optional[str] = None
    event_city: Optional[str] = None
    country: Optional[str] = None
    trainer_id: Optional[str] = None
    event_feedback: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def _coerce(cls, value: Any, info: ValidationInfo) -> Any:
        value = _collapse(value)
        if value is None:
            return None
        if isinstance(value, str):
            value = value.strip()
            if not value:
                return None
        if info.field_name == "event_count":
            return _to_count(value)
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        return str(value)

    @classmethod
    def from_raw(cls, raw: dict[str, Any] | None) -> "ParameterSet":
        """Build from an untrusted parameter mapping."""
        return cls.model_validate(raw or {})

    def is_present(self, name: str) -> bool:
        return getattr(self, name, None) is not None

    def merge(self, update: "ParameterSet") -> "ParameterSet":
        """Overlay ``update``'s present values on top of this set."""
        data = self.model_dump()
        data.update(update.model_dump(exclude_none=True))
        return ParameterSet(**data)

    def without(self, *names: str) -> "ParameterSet":
        data = self.model_dump()
        for name in names:
            data[name] = None
        return ParameterSet(**data)

    def to_context(self) -> dict[str, Any]:
        """Present values only, ready to be stored in a Dialogflow context."""
        return self.model_dump(exclude_none=True)

"""Pydantic models for the committed event report and its provenance."""

from __future__ import annotations

import json
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

UNKNOWN_SOURCE = "Unknown"
CONSOLE_SOURCE_DATA = "Maybe DialogFlow Console"


class Provenance(BaseModel):
    """Which client channel (Telegram, Twilio, ...) originated a submission."""

    model_config = ConfigDict(frozen=True)

    source: str = UNKNOWN_SOURCE
    source_data: str = CONSOLE_SOURCE_DATA

    @classmethod
    def from_request(cls, source: Optional[str], payload_data: Any) -> "Provenance":
        """Capture the request source; requests typed in the console carry none."""
        if not source:
            return cls()
        return cls(source=source, source_data=json.dumps(payload_data, default=str))


class EventRecord(BaseModel):
    """One completed event report. Built once on confirmation, never updated."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    phone: str
    type: str
    s_connect_type: str = ""
    event_day: str
    count: int
    date: str  # YYYY-MM-DD
    institution: str
    city: str
    zone: str
    country: str
    trainer_id: str
    feedback: str
    source: str = UNKNOWN_SOURCE
    source_data: str = CONSOLE_SOURCE_DATA

    def to_row(self) -> dict[str, Any]:
        """Flat JSON row for the analytics table."""
        return self.model_dump()

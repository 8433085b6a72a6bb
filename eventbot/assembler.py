"""Builds the committed EventRecord from a completed set of report fields."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Callable, Optional

from eventbot.models.parameters import ParameterSet
from eventbot.models.record import EventRecord, Provenance
from eventbot.normalizer import clean_date, resolve_branch
from eventbot.places.base import UNKNOWN, PlaceLookup
from eventbot.workflows.policy import SlotPolicy

log = logging.getLogger("eventbot.assembler")


class IncompleteReport(ValueError):
    """Raised when a record is requested before every applicable field is known."""

    def __init__(self, missing: list[str]) -> None:
        super().__init__(f"Report is missing fields: {', '.join(missing)}")
        self.missing = missing


def _new_id() -> str:
    return str(uuid.uuid4())


class RecordAssembler:
    """Turns known fields plus lookups into an immutable EventRecord.

    Apart from the injected ``id_generator`` the result depends only on the
    inputs, so a fixed generator makes assembly fully deterministic.
    """

    def __init__(
        self,
        place_lookup: PlaceLookup,
        policy: Optional[SlotPolicy] = None,
        id_generator: Callable[[], str] = _new_id,
    ) -> None:
        self._places = place_lookup
        self._policy = policy or SlotPolicy()
        self._new_id = id_generator

    @property
    def place_lookup(self) -> PlaceLookup:
        return self._places

    def assemble(
        self,
        known: ParameterSet,
        provenance: Optional[Provenance] = None,
        now: Optional[datetime] = None,
    ) -> EventRecord:
        missing = self._policy.missing(known)
        if missing:
            raise IncompleteReport(missing)

        known = self._policy.fill_skipped(known)
        provenance = provenance or Provenance()

        event_type, sub_type = resolve_branch(known.event_type)
        place = self._places.find_city(known.event_city)
        country = self._places.find_country(known.country)
        if country == UNKNOWN:
            country = place.country

        record = EventRecord(
            id=self._new_id(),
            name=known.coordinator_name,
            phone=known.coordinator_phone,
            type=event_type,
            s_connect_type=sub_type,
            event_day=known.event_day,
            count=known.event_count,
            date=clean_date(known.event_date, now=now),
            institution=known.event_institution,
            city=place.city.strip(),
            zone=place.zone.strip(),
            country=country.strip(),
            trainer_id=known.trainer_id,
            feedback=known.event_feedback,
            source=provenance.source,
            source_data=provenance.source_data,
        )
        log.info(
            "Assembled record %s: type=%s sub_type=%s city=%s zone=%s",
            record.id, record.type, record.s_connect_type or "-", record.city, record.zone,
        )
        return record

"""Tests for RecordAssembler: known fields to a committed EventRecord."""

from datetime import datetime

import pytest

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from centers.schema import Center
from eventbot.assembler import IncompleteReport, RecordAssembler
from eventbot.models import ParameterSet, Provenance
from eventbot.places import FuzzyPlaceLookup

NOW = datetime(2024, 3, 10, 12, 0, 0)

FULL = dict(
    event_type="Yoga",
    event_day="day-1",
    event_count=30,
    coordinator_name="Anita",
    coordinator_phone="9876543210",
    event_date="2024-03-01T12:00:00+05:30",
    event_institution="Green Valley School",
    event_city="Hyderabad",
    country="India",
    trainer_id="skip",
    event_feedback="None",
)


@pytest.fixture
def assembler():
    places = FuzzyPlaceLookup([
        Center(city="Hyderabad", zone="Telangana", country="India"),
        Center(city="Houston", zone="US-South", country="United States"),
    ])
    return RecordAssembler(places, id_generator=lambda: "rec-1")


class TestAssemble:
    def test_full_record(self, assembler):
        record = assembler.assemble(ParameterSet(**FULL), now=NOW)
        assert record.id == "rec-1"
        assert record.name == "Anita"
        assert record.phone == "9876543210"
        assert record.type == "Yoga"
        assert record.s_connect_type == ""
        assert record.event_day == "day-1"
        assert record.count == 30
        assert record.date == "2024-03-01"
        assert record.institution == "Green Valley School"
        assert record.city == "Hyderabad"
        assert record.zone == "Telangana"
        assert record.country == "India"
        assert record.trainer_id == "skip"
        assert record.feedback == "None"

    def test_console_provenance_by_default(self, assembler):
        record = assembler.assemble(ParameterSet(**FULL), now=NOW)
        assert record.source == "Unknown"
        assert record.source_data == "Maybe DialogFlow Console"

    def test_provenance_copied(self, assembler):
        provenance = Provenance.from_request("telegram", {"chat": {"id": 7}})
        record = assembler.assemble(ParameterSet(**FULL), provenance, now=NOW)
        assert record.source == "telegram"
        assert record.source_data == '{"chat": {"id": 7}}'

    def test_deterministic(self, assembler):
        known = ParameterSet(**FULL)
        assert assembler.assemble(known, now=NOW) == assembler.assemble(known, now=NOW)

    def test_s_connect_branch(self, assembler):
        record = assembler.assemble(ParameterSet(**dict(FULL, event_type="S-Connect-INSPIRE")), now=NOW)
        assert record.type == "s-connect"
        assert record.s_connect_type == "INSPIRE"

    def test_group_meditation_is_one_day(self, assembler):
        fields = dict(FULL, event_type="group-meditation")
        del fields["event_day"]
        record = assembler.assemble(ParameterSet(**fields), now=NOW)
        assert record.event_day == "1-day-event"

    def test_unknown_city(self, assembler):
        record = assembler.assemble(ParameterSet(**dict(FULL, event_city="Atlantis")), now=NOW)
        assert record.city == "Atlantis"
        assert record.zone == "unknown"
        assert record.country == "India"

    def test_country_falls_back_to_city(self, assembler):
        record = assembler.assemble(ParameterSet(**dict(FULL, event_city="Houston", country="Narnia")), now=NOW)
        assert record.country == "United States"

    def test_nothing_resolves(self, assembler):
        record = assembler.assemble(
            ParameterSet(**dict(FULL, event_city="Atlantis", country="Narnia")), now=NOW,
        )
        assert record.country == "unknown"

    def test_future_date_cleaned(self, assembler):
        record = assembler.assemble(ParameterSet(**dict(FULL, event_date="2025-01-15")), now=NOW)
        assert record.date == "2024-01-15"

    def test_incomplete_rejected(self, assembler):
        fields = dict(FULL)
        del fields["coordinator_phone"]
        with pytest.raises(IncompleteReport) as exc_info:
            assembler.assemble(ParameterSet(**fields), now=NOW)
        assert exc_info.value.missing == ["coordinator_phone"]

    def test_row_is_flat(self, assembler):
        row = assembler.assemble(ParameterSet(**FULL), now=NOW).to_row()
        assert row["count"] == 30
        assert all(not isinstance(v, (dict, list)) for v in row.values())

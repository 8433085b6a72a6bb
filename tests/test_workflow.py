"""Tests for the event report workflow definition and the SlotPolicy."""

import json

import pytest

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from eventbot.models import EventCategory, ParameterSet
from eventbot.workflows.event_report import FIELD_ORDER, WORKFLOW_DEF, WORKFLOW_ID
from eventbot.workflows.loader import load_workflow_jsonl
from eventbot.workflows.policy import Ask, Complete, SlotPolicy, Terminate

FULL = dict(
    event_type="Yoga",
    event_day="day-1",
    event_count=30,
    coordinator_name="Anita",
    coordinator_phone="9876543210",
    event_date="2024-03-01",
    event_institution="Green Valley School",
    event_city="Hyderabad",
    country="India",
    trainer_id="skip",
    event_feedback="None",
)


@pytest.fixture
def policy():
    return SlotPolicy()


class TestWorkflowDefinition:
    def test_loads(self):
        assert WORKFLOW_ID == "event_report"
        assert WORKFLOW_DEF.collect_intent == "event.info"
        assert WORKFLOW_DEF.confirm_intent == "event.info.yes"
        assert WORKFLOW_DEF.followup_context == "eventinfo-followup"

    def test_field_order(self):
        assert FIELD_ORDER == [
            "event_type", "event_day", "event_count", "coordinator_name",
            "coordinator_phone", "event_date", "event_institution", "event_city",
            "country", "trainer_id", "event_feedback",
        ]

    def test_every_slot_has_a_prompt(self):
        for slot in WORKFLOW_DEF.slots:
            assert slot.prompt.strip(), slot.name

    def test_u_connect_is_terminal(self):
        message = WORKFLOW_DEF.terminal_categories[EventCategory.U_CONNECT]
        assert "https://bit.ly/hfn-event-summary-submit" in message

    def test_group_meditation_skips_event_day(self):
        slot = next(s for s in WORKFLOW_DEF.slots if s.name == "event_day")
        assert slot.skip_for == [EventCategory.GROUP_MEDITATION]
        assert slot.skipped_value == "1-day-event"


class TestLoader:
    def _write(self, tmp_path, data):
        path = tmp_path / "wf.jsonl"
        path.write_text("\n" + json.dumps(data) + "\n", encoding="utf-8")
        return path

    def test_skips_blank_lines(self, tmp_path):
        path = self._write(tmp_path, {"id": "mini", "slots": [{"name": "event_type", "prompt": "Type?"}]})
        workflow = load_workflow_jsonl(path)
        assert workflow.id == "mini"
        assert workflow.slots[0].name == "event_type"

    def test_empty_file_rejected(self, tmp_path):
        path = tmp_path / "empty.jsonl"
        path.write_text("\n\n", encoding="utf-8")
        with pytest.raises(ValueError, match="No workflow"):
            load_workflow_jsonl(path)

    def test_duplicate_slot_rejected(self, tmp_path):
        path = self._write(tmp_path, {"id": "dup", "slots": [
            {"name": "event_type", "prompt": "a"},
            {"name": "event_type", "prompt": "b"},
        ]})
        with pytest.raises(ValueError, match="twice"):
            load_workflow_jsonl(path)

    def test_unknown_slot_rejected(self, tmp_path):
        path = self._write(tmp_path, {"id": "bad", "slots": [{"name": "shoe_size", "prompt": "?"}]})
        with pytest.raises(ValueError, match="shoe_size"):
            load_workflow_jsonl(path)

    def test_unknown_category_rejected(self, tmp_path):
        path = self._write(tmp_path, {"id": "bad", "terminal_categories": {"Cooking": "bye"}})
        with pytest.raises(ValueError):
            load_workflow_jsonl(path)


class TestNextAction:
    def test_empty_asks_for_type(self, policy):
        action = policy.next_action(ParameterSet())
        assert isinstance(action, Ask)
        assert action.field == "event_type"

    def test_asks_in_order(self, policy):
        action = policy.next_action(ParameterSet(event_type="Yoga"))
        assert action == Ask("event_day", policy.prompt_for("event_day"))

    def test_missing_exactly_one(self, policy):
        for name in FIELD_ORDER:
            known = ParameterSet(**{k: v for k, v in FULL.items() if k != name})
            action = policy.next_action(known)
            assert isinstance(action, Ask)
            assert action.field == name

    def test_complete(self, policy):
        assert isinstance(policy.next_action(ParameterSet(**FULL)), Complete)

    def test_group_meditation_never_asks_day(self, policy):
        action = policy.next_action(ParameterSet(event_type="group-meditation"))
        assert action.field == "event_count"

    def test_group_meditation_complete_without_day(self, policy):
        fields = dict(FULL, event_type="group-meditation")
        del fields["event_day"]
        assert isinstance(policy.next_action(ParameterSet(**fields)), Complete)

    def test_u_connect_terminates(self, policy):
        action = policy.next_action(ParameterSet(event_type="u-connect"))
        assert isinstance(action, Terminate)
        assert "Google forms" in action.message

    def test_u_connect_terminates_even_when_complete(self, policy):
        action = policy.next_action(ParameterSet(**dict(FULL, event_type="u-connect")))
        assert isinstance(action, Terminate)

    def test_unknown_category_asks_everything(self, policy):
        action = policy.next_action(ParameterSet(event_type="Cooking Class"))
        assert action.field == "event_day"

    def test_missing_lists_in_order(self, policy):
        known = ParameterSet(event_type="Yoga", coordinator_name="Anita")
        assert policy.missing(known) == [f for f in FIELD_ORDER if f not in ("event_type", "coordinator_name")]

    def test_prompt_for_unknown_field(self, policy):
        with pytest.raises(KeyError):
            policy.prompt_for("shoe_size")


class TestFillSkipped:
    def test_group_meditation_is_one_day(self, policy):
        known = policy.fill_skipped(ParameterSet(event_type="group-meditation"))
        assert known.event_day == "1-day-event"

    def test_overrides_supplied_day(self, policy):
        known = policy.fill_skipped(ParameterSet(event_type="group-meditation", event_day="day-2"))
        assert known.event_day == "1-day-event"

    def test_other_categories_untouched(self, policy):
        known = ParameterSet(event_type="Yoga", event_day="day-2")
        assert policy.fill_skipped(known) is known

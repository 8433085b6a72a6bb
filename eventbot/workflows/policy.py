"""Slot policy: which field to ask next, or whether the report is done."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

from eventbot.models.category import EventCategory
from eventbot.models.parameters import ParameterSet
from eventbot.workflows.schema import EventReportWorkflowDef, SlotDef

log = logging.getLogger("eventbot.policy")


@dataclass(frozen=True)
class Ask:
    """The next applicable field that has no value yet."""

    field: str
    prompt: str


@dataclass(frozen=True)
class Terminate:
    """The category is handled outside this bot; end the conversation."""

    message: str


@dataclass(frozen=True)
class Complete:
    """Every applicable field is present."""


SlotAction = Union[Ask, Terminate, Complete]


class SlotPolicy:
    """Evaluates a workflow's ordered slots against the known fields."""

    def __init__(self, workflow: Optional[EventReportWorkflowDef] = None) -> None:
        if workflow is None:
            from eventbot.workflows.event_report import WORKFLOW_DEF as workflow
        self._workflow = workflow

    @property
    def workflow(self) -> EventReportWorkflowDef:
        return self._workflow

    @property
    def field_order(self) -> list[str]:
        return [slot.name for slot in self._workflow.slots]

    def is_applicable(self, slot: SlotDef, known: ParameterSet) -> bool:
        category = EventCategory.parse(known.event_type)
        return category is None or category not in slot.skip_for

    def terminal_message(self, known: ParameterSet) -> Optional[str]:
        category = EventCategory.parse(known.event_type)
        if category is None:
            return None
        return self._workflow.terminal_categories.get(category)

    def missing(self, known: ParameterSet) -> list[str]:
        """All applicable fields without a value, in asking order."""
        return [
            slot.name for slot in self._workflow.slots
            if self.is_applicable(slot, known) and not known.is_present(slot.name)
        ]

    def next_action(self, known: ParameterSet) -> SlotAction:
        message = self.terminal_message(known)
        if message is not None:
            log.info("Terminal category %s", known.event_type)
            return Terminate(message)

        for slot in self._workflow.slots:
            if not self.is_applicable(slot, known):
                continue
            if not known.is_present(slot.name):
                return Ask(slot.name, slot.prompt)

        return Complete()

    def prompt_for(self, field: str) -> str:
        for slot in self._workflow.slots:
            if slot.name == field:
                return slot.prompt
        raise KeyError(field)

    def fill_skipped(self, known: ParameterSet) -> ParameterSet:
        """Give skipped slots their stand-in value (e.g. group meditations are one-day events)."""
        filled = {
            slot.name: slot.skipped_value
            for slot in self._workflow.slots
            if slot.skipped_value and not self.is_applicable(slot, known)
        }
        if not filled:
            return known
        return known.merge(ParameterSet(**filled))

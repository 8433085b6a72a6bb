"""Pydantic models for the slot-filling workflow definition.

A workflow declares which Dialogflow intents drive the report, the context
names used to carry state between turns, the ordered slots with their
prompts and skip rules, and the categories that end the conversation early.
"""

from __future__ import annotations

from pydantic import BaseModel

from eventbot.models.category import EventCategory


class SlotDef(BaseModel):
    """One field the coordinator is asked for."""

    name: str
    prompt: str
    skip_for: list[EventCategory] = []     # categories for which the slot is not asked
    skipped_value: str = ""                # stored value when the slot is skipped


class EventReportWorkflowDef(BaseModel):
    """A complete slot-filling workflow definition."""

    id: str
    collect_intent: str = "event.info"
    confirm_intent: str = "event.info.yes"
    deny_intent: str = "event.info.no"
    welcome_intents: list[str] = []
    restart_intents: list[str] = []
    restart_event: str = "Welcome"
    followup_context: str = "eventinfo-followup"
    session_end_context: str = "end_session"
    stale_contexts: list[str] = []         # platform slot-filling contexts cleared on reset
    terminal_categories: dict[EventCategory, str] = {}
    slots: list[SlotDef] = []

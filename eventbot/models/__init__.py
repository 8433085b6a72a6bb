"""Data models for the event-report dialogue."""

from .category import EventCategory
from .parameters import FIELD_NAMES, ParameterSet
from .record import EventRecord, Provenance
from .state import ConversationState, DialoguePhase

__all__ = [
    "ConversationState",
    "DialoguePhase",
    "EventCategory",
    "EventRecord",
    "FIELD_NAMES",
    "ParameterSet",
    "Provenance",
]

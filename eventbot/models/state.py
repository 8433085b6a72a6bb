"""Conversation state carried between turns in a Dialogflow context."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from .parameters import ParameterSet

# Bookkeeping keys stored next to the report fields in the context parameters
PHASE_KEY = "dialog_phase"
PENDING_FIELD_KEY = "pending_field"
TOKEN_KEY = "submission_token"


class DialoguePhase(str, Enum):
    AWAITING_TYPE = "awaiting_type"
    AWAITING_FIELD = "awaiting_field"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    TERMINATED = "terminated"


class ConversationState(BaseModel):
    """Everything the controller needs to resume a report on the next turn.

    The state is passed into and returned from every controller call; the
    transport is responsible for storing it between turns.  A *blank* state
    (initial phase, nothing known) tells the transport to clear its contexts.
    """

    phase: DialoguePhase = DialoguePhase.AWAITING_TYPE
    known: ParameterSet = Field(default_factory=ParameterSet)
    pending_field: str = ""
    submission_token: str = ""
    lifespan: int = 0

    @classmethod
    def initial(cls) -> "ConversationState":
        return cls()

    @property
    def is_blank(self) -> bool:
        return (
            self.phase in (DialoguePhase.AWAITING_TYPE, DialoguePhase.TERMINATED)
            and not self.known.to_context()
        )

    def to_context_parameters(self) -> dict[str, Any]:
        params = self.known.to_context()
        params[PHASE_KEY] = self.phase.value
        if self.pending_field:
            params[PENDING_FIELD_KEY] = self.pending_field
        if self.submission_token:
            params[TOKEN_KEY] = self.submission_token
        return params

    @classmethod
    def from_context_parameters(
        cls, params: dict[str, Any] | None, lifespan: int = 0,
    ) -> "ConversationState":
        params = params or {}
        try:
            phase = DialoguePhase(params.get(PHASE_KEY, DialoguePhase.AWAITING_FIELD.value))
        except ValueError:
            phase = DialoguePhase.AWAITING_FIELD
        return cls(
            phase=phase,
            known=ParameterSet.from_raw(params),
            pending_field=str(params.get(PENDING_FIELD_KEY) or ""),
            submission_token=str(params.get(TOKEN_KEY) or ""),
            lifespan=lifespan,
        )

"""ConversationChannel ABC: normalizes different NLU webhooks into turns.

Each NLU platform posts its own request shape and expects its own reply.
The ConversationChannel interface lets the dialogue controller work only
with InboundTurn / TurnOutcome values.

Implementors handle the translation in both directions:
  inbound:  platform request → InboundTurn (intent, parameters, stored state)
  outbound: TurnOutcome → platform response (text, contexts, follow-up event)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from eventbot.models.parameters import ParameterSet
from eventbot.models.record import Provenance
from eventbot.models.state import ConversationState

if TYPE_CHECKING:
    from eventbot.session import TurnOutcome


@dataclass
class InboundTurn:
    """One user turn as seen by the controller."""

    intent: str
    parameters: ParameterSet = field(default_factory=ParameterSet)
    state: ConversationState = field(default_factory=ConversationState.initial)
    provenance: Provenance = field(default_factory=Provenance)
    session: str = ""
    language_code: str = "en"


class ConversationChannel(ABC):
    """Abstract NLU channel: one concrete channel per webhook format."""

    @abstractmethod
    def parse_turn(self, body: dict[str, Any]) -> InboundTurn:
        """Decode a webhook request body.

        The stored ConversationState is loaded from whatever the platform
        carries between turns (contexts, session attributes, ...).

        Raises:
            ValueError: the body is not a valid request for this channel.
        """

    @abstractmethod
    def render_reply(self, turn: InboundTurn, outcome: "TurnOutcome") -> dict[str, Any]:
        """Encode the controller's outcome as the platform's response body.

        The outcome's state is saved back into the platform's carrier; a
        blank state clears it.
        """

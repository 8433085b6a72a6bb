"""Per-turn dialogue controller: drives an event report through Dialogflow turns.

Each webhook call is handled by ``DialogueController.handle_turn``, which:
  1. Reads the matched intent and the ConversationState loaded by the channel
  2. For the collect intent: merges the turn's parameters into the known
     fields and asks the SlotPolicy for the next field, a terminal redirect,
     or completion (which produces the yes/no confirmation)
  3. For the confirm intent: assembles the record from the *stored* state,
     commits it through the PersistenceGateway, and thanks the coordinator
  4. Returns a TurnOutcome with the reply text and the state to store

The controller holds no per-conversation memory; the state travels in and
out of every call.  Turns of one conversation are assumed to arrive one at a
time (Dialogflow's session model), so no locking is done here.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from eventbot.assembler import RecordAssembler
from eventbot.channels.base import InboundTurn
from eventbot.config import settings
from eventbot.models.parameters import ParameterSet
from eventbot.models.state import ConversationState, DialoguePhase
from eventbot.normalizer import InvalidDate, clean_date
from eventbot.responses import ResponseComposer
from eventbot.storage.base import PersistError
from eventbot.storage.gateway import PersistenceGateway
from eventbot.workflows.policy import Ask, Complete, SlotPolicy, Terminate

log = logging.getLogger("eventbot.session")


def redact_pii(value: Optional[str]) -> str:
    """Mask PII for logging: show first 3 and last 2 chars only."""
    if not value or len(value) <= 5:
        return "***"
    return value[:3] + "***" + value[-2:]


def _new_token() -> str:
    return uuid.uuid4().hex


class OutcomeKind(str, Enum):
    WELCOME = "welcome"
    ASK = "ask"
    TERMINATE = "terminate"
    CONFIRM = "confirm"
    COMMITTED = "committed"
    FAILED = "failed"
    RESTART = "restart"


@dataclass
class TurnOutcome:
    """What the controller decided for one turn."""

    kind: OutcomeKind
    text: str
    state: ConversationState
    field: str = ""                 # field being asked for (ASK only)
    followup_event: str = ""        # forces the next turn to this platform event
    session_end_marker: bool = False
    record_id: str = ""             # set only when a record was committed


class DialogueController:
    """The event-report state machine.

    Typical use from a webhook::

        turn = channel.parse_turn(body)
        outcome = await controller.handle_turn(turn)
        return channel.render_reply(turn, outcome)
    """

    def __init__(
        self,
        policy: SlotPolicy,
        assembler: RecordAssembler,
        gateway: PersistenceGateway,
        composer: ResponseComposer,
        context_lifespan: Optional[int] = None,
        token_factory: Callable[[], str] = _new_token,
    ) -> None:
        self._policy = policy
        self._assembler = assembler
        self._gateway = gateway
        self._composer = composer
        self._lifespan = context_lifespan if context_lifespan is not None else settings.context_lifespan
        self._new_token = token_factory

    @property
    def policy(self) -> SlotPolicy:
        return self._policy

    @property
    def gateway(self) -> PersistenceGateway:
        return self._gateway

    # ── Public API ────────────────────────────────────────────

    async def handle_turn(self, turn: InboundTurn) -> TurnOutcome:
        workflow = self._policy.workflow
        log.info("Turn: intent=%r phase=%s", turn.intent, turn.state.phase.value)

        if turn.intent in workflow.welcome_intents:
            return TurnOutcome(OutcomeKind.WELCOME, self._composer.welcome(), ConversationState.initial())
        if turn.intent == workflow.collect_intent:
            return self.collect(turn.state, turn.parameters)
        if turn.intent == workflow.confirm_intent:
            return await self.confirm(turn)
        if turn.intent == workflow.deny_intent:
            log.info("Coordinator rejected the summary, starting over")
            # Dialogflow drops fulfillment text when a follow-up event is
            # set; the Welcome intent supplies the reply.
            return self._restart()
        if turn.intent in workflow.restart_intents:
            return self._restart()

        log.warning("No handler for intent %r, restarting", turn.intent)
        return self._restart()

    def collect(self, state: ConversationState, parameters: ParameterSet) -> TurnOutcome:
        """Merge this turn's values and decide what to ask next."""
        known = state.known.merge(parameters)
        action = self._policy.next_action(known)

        if isinstance(action, Terminate):
            log.info("Category %r is handled elsewhere, ending session", known.event_type)
            return TurnOutcome(
                OutcomeKind.TERMINATE,
                self._composer.redirect(action.message),
                ConversationState(phase=DialoguePhase.TERMINATED),
                session_end_marker=True,
            )

        if isinstance(action, Ask):
            return self._ask(known, action.field, self._composer.prompt(action.prompt))

        if not isinstance(action, Complete):
            raise TypeError(f"Unexpected slot action {action!r}")

        try:
            date = clean_date(known.event_date)
        except InvalidDate as e:
            log.info("%s, asking again", e)
            prompt = self._policy.prompt_for("event_date")
            return self._ask(known.without("event_date"), "event_date", self._composer.invalid_date(prompt))

        place = self._assembler.place_lookup.find_city(known.event_city)
        token = state.submission_token or self._new_token()
        log.info(
            "All fields present for %s (phone=%s), awaiting confirmation",
            known.event_type, redact_pii(known.coordinator_phone),
        )
        return TurnOutcome(
            OutcomeKind.CONFIRM,
            self._composer.confirmation(known, date, place.city),
            ConversationState(
                phase=DialoguePhase.AWAITING_CONFIRMATION,
                known=known,
                submission_token=token,
                lifespan=self._lifespan,
            ),
        )

    async def confirm(self, turn: InboundTurn) -> TurnOutcome:
        """Commit the stored report. The live turn only carries the "yes"."""
        state = turn.state
        if not state.known.to_context():
            log.info("Confirmation with no stored report, restarting")
            return self._restart()

        if not isinstance(self._policy.next_action(state.known), Complete):
            return self.collect(state, ParameterSet())

        try:
            record = self._assembler.assemble(state.known, turn.provenance)
        except InvalidDate:
            return self.collect(state, ParameterSet())

        try:
            ack = await self._gateway.commit(record, token=state.submission_token or self._new_token())
        except PersistError:
            return TurnOutcome(OutcomeKind.FAILED, self._composer.apology(), ConversationState.initial())

        if ack.duplicate:
            log.info("Confirmation replayed for document %s, nothing new stored", ack.document_id)
            record_id = ""
        else:
            log.info("Report %s committed as document %s", record.id, ack.document_id)
            record_id = record.id
        return TurnOutcome(
            OutcomeKind.COMMITTED,
            self._composer.thank_you(record),
            ConversationState.initial(),
            record_id=record_id,
        )

    # ── Internal ─────────────────────────────────────────────

    def _ask(self, known: ParameterSet, field: str, text: str) -> TurnOutcome:
        phase = DialoguePhase.AWAITING_TYPE if field == "event_type" else DialoguePhase.AWAITING_FIELD
        log.info("Asking for %s", field)
        return TurnOutcome(
            OutcomeKind.ASK,
            text,
            ConversationState(phase=phase, known=known, pending_field=field, lifespan=self._lifespan),
            field=field,
        )

    def _restart(self) -> TurnOutcome:
        return TurnOutcome(
            OutcomeKind.RESTART,
            "",
            ConversationState.initial(),
            followup_event=self._policy.workflow.restart_event,
        )

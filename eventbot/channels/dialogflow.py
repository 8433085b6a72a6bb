"""Dialogflow ES (v2) fulfillment channel.

Request fields used::

    session                                  projects/<p>/agent/sessions/<s>
    queryResult.intent.displayName           matched intent
    queryResult.parameters                   slot values of this turn
    queryResult.outputContexts[]             active contexts (carry the report)
    originalDetectIntentRequest.source       telegram, twilio, ... (absent in console)
    originalDetectIntentRequest.payload.data raw client payload

The in-progress report lives in the follow-up context; writing it back with
``lifespanCount: 0`` clears it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from eventbot.channels.base import ConversationChannel, InboundTurn
from eventbot.models.parameters import ParameterSet
from eventbot.models.record import Provenance
from eventbot.models.state import ConversationState
from eventbot.workflows.schema import EventReportWorkflowDef

if TYPE_CHECKING:
    from eventbot.session import TurnOutcome

log = logging.getLogger("eventbot.channels.dialogflow")


class _DialogflowModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class DialogflowIntent(_DialogflowModel):
    display_name: str = Field("", alias="displayName")


class DialogflowContext(_DialogflowModel):
    name: str
    lifespan_count: int = Field(0, alias="lifespanCount")
    parameters: Optional[dict[str, Any]] = None


class DialogflowQueryResult(_DialogflowModel):
    query_text: str = Field("", alias="queryText")
    parameters: Optional[dict[str, Any]] = None
    intent: DialogflowIntent = Field(default_factory=DialogflowIntent)
    output_contexts: list[DialogflowContext] = Field(default_factory=list, alias="outputContexts")
    language_code: str = Field("en", alias="languageCode")


class DialogflowOriginalRequest(_DialogflowModel):
    source: str = ""
    payload: Optional[dict[str, Any]] = None


class WebhookRequest(_DialogflowModel):
    response_id: str = Field("", alias="responseId")
    session: str
    query_result: DialogflowQueryResult = Field(alias="queryResult")
    original_detect_intent_request: DialogflowOriginalRequest = Field(
        default_factory=DialogflowOriginalRequest, alias="originalDetectIntentRequest",
    )


def context_id(name: str) -> str:
    """Short context name from its full resource path."""
    return name.rsplit("/contexts/", 1)[-1]


class DialogflowChannel(ConversationChannel):
    """Maps Dialogflow ES webhook requests/responses to controller turns."""

    def __init__(self, workflow: EventReportWorkflowDef, session_end_lifespan: int = 2) -> None:
        self._workflow = workflow
        self._session_end_lifespan = session_end_lifespan

    def parse_turn(self, body: dict[str, Any]) -> InboundTurn:
        try:
            request = WebhookRequest.model_validate(body)
        except ValidationError as e:
            raise ValueError(f"Invalid Dialogflow webhook request: {e}") from e

        result = request.query_result
        state = ConversationState.initial()
        for ctx in result.output_contexts:
            if context_id(ctx.name) == self._workflow.followup_context:
                state = ConversationState.from_context_parameters(
                    ctx.parameters, lifespan=ctx.lifespan_count,
                )
                break

        original = request.original_detect_intent_request
        provenance = Provenance.from_request(original.source, (original.payload or {}).get("data"))

        log.debug(
            "Dialogflow turn: response_id=%s intent=%s source=%s",
            request.response_id, result.intent.display_name, provenance.source,
        )
        return InboundTurn(
            intent=result.intent.display_name,
            parameters=ParameterSet.from_raw(result.parameters),
            state=state,
            provenance=provenance,
            session=request.session,
            language_code=result.language_code or "en",
        )

    def render_reply(self, turn: InboundTurn, outcome: "TurnOutcome") -> dict[str, Any]:
        prefix = f"{turn.session}/contexts/"
        contexts: list[dict[str, Any]] = []

        if outcome.state.is_blank:
            for name in [self._workflow.followup_context, *self._workflow.stale_contexts]:
                contexts.append({"name": prefix + name, "lifespanCount": 0})
        else:
            contexts.append({
                "name": prefix + self._workflow.followup_context,
                "lifespanCount": outcome.state.lifespan,
                "parameters": outcome.state.to_context_parameters(),
            })

        if outcome.session_end_marker:
            contexts.append({
                "name": prefix + self._workflow.session_end_context,
                "lifespanCount": self._session_end_lifespan,
            })

        body: dict[str, Any] = {}
        if outcome.text:
            body["fulfillmentText"] = outcome.text
            body["fulfillmentMessages"] = [{"text": {"text": [outcome.text]}}]
        if contexts:
            body["outputContexts"] = contexts
        if outcome.followup_event:
            body["followupEventInput"] = {
                "name": outcome.followup_event,
                "languageCode": turn.language_code,
            }
        return body

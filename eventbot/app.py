"""FastAPI application: fulfillment webhook for the event report bot.

Endpoints:

  POST /dialogflow/webhook   Dialogflow ES fulfillment (one call per turn)
  GET  /health               Health check

The flow for every turn:
  1. Dialogflow matches an intent and posts the turn to /dialogflow/webhook
  2. DialogflowChannel loads the stored report from the follow-up context
  3. DialogueController decides the reply and the state to store
  4. DialogflowChannel writes reply text and contexts back to Dialogflow
"""

from __future__ import annotations

# Load .env into os.environ early so Google client libraries see
# GOOGLE_APPLICATION_CREDENTIALS and friends.
from dotenv import load_dotenv
load_dotenv()

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

# Configure root logger early so all app loggers (eventbot.session, etc.)
# have a handler and are visible when run via `uvicorn eventbot.app:app`.
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(name)-20s %(levelname)-7s %(message)s",
)

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from eventbot.assembler import RecordAssembler
from eventbot.auth import require_webhook_token
from eventbot.channels.base import ConversationChannel
from eventbot.channels.dialogflow import DialogflowChannel
from eventbot.config import settings
from eventbot.places.fuzzy import FuzzyPlaceLookup
from eventbot.responses import ResponseComposer
from eventbot.session import DialogueController
from eventbot.storage.base import AnalyticsSink, RecordStore
from eventbot.storage.gateway import PersistenceGateway
from eventbot.workflows.policy import SlotPolicy

log = logging.getLogger("eventbot.app")

_START_TIME = time.time()


def _create_store() -> RecordStore:
    if settings.storage_backend == "memory":
        from eventbot.storage.memory import InMemoryRecordStore
        return InMemoryRecordStore()

    from eventbot.storage.firestore import FirestoreRecordStore
    return FirestoreRecordStore(
        collection=settings.firestore_collection,
        project=settings.google_cloud_project,
        service_account_path=settings.google_service_account_json,
    )


def _create_sink() -> Optional[AnalyticsSink]:
    if settings.analytics_backend == "none":
        return None
    if settings.analytics_backend == "memory":
        from eventbot.storage.memory import InMemoryAnalyticsSink
        return InMemoryAnalyticsSink()

    from eventbot.storage.bigquery import BigQueryAnalyticsSink
    return BigQueryAnalyticsSink(
        dataset=settings.bigquery_dataset,
        table=settings.bigquery_table,
        project=settings.google_cloud_project,
        service_account_path=settings.google_service_account_json,
    )


def _create_controller() -> DialogueController:
    """Build a DialogueController wired to the configured backends."""
    for warning in settings.validate_startup():
        log.warning(warning)

    policy = SlotPolicy()
    places = FuzzyPlaceLookup.from_json(
        settings.centers_path or None, threshold=settings.place_match_threshold,
    )
    gateway = PersistenceGateway(
        _create_store(),
        _create_sink(),
        mirror_retries=settings.mirror_retries,
        mirror_backoff_seconds=settings.mirror_backoff_seconds,
        mirror_in_background=settings.mirror_in_background,
    )
    return DialogueController(
        policy,
        RecordAssembler(places, policy),
        gateway,
        ResponseComposer(settings.support_email, settings.help_email),
        context_lifespan=settings.context_lifespan,
    )


def create_app(
    controller: Optional[DialogueController] = None,
    channel: Optional[ConversationChannel] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    The controller is built on startup unless one is passed in, so importing
    this module never opens Google Cloud clients.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.controller is None:
            app.state.controller = _create_controller()
        if app.state.channel is None:
            app.state.channel = DialogflowChannel(
                app.state.controller.policy.workflow,
                session_end_lifespan=settings.session_end_lifespan,
            )
        yield
        pending = app.state.controller.gateway.pending_mirrors
        if pending:
            log.info("Waiting for %d analytics mirror write(s)", pending)
        await app.state.controller.gateway.drain()

    app = FastAPI(
        title="Event Report Bot",
        description="Dialogflow fulfillment webhook for Heartfulness event reports",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.controller = controller
    app.state.channel = channel

    # ── Health check ───────────────────────────────────────────

    @app.get("/health")
    async def health() -> JSONResponse:
        """Lightweight health check; confirms the event loop is responsive."""
        uptime = round(time.time() - _START_TIME, 1)
        return JSONResponse({"status": "ok", "uptime": uptime})

    # ── Dialogflow fulfillment ─────────────────────────────────

    @app.post("/dialogflow/webhook", dependencies=[Depends(require_webhook_token)])
    async def dialogflow_webhook(request: Request) -> JSONResponse:
        """One conversational turn.

        Malformed bodies get a 400; every other failure is turned into a
        reply by the controller so the coordinator always hears back.
        """
        channel: ConversationChannel = request.app.state.channel
        controller: DialogueController = request.app.state.controller

        try:
            body = await request.json()
        except ValueError:
            return JSONResponse({"error": "Request body is not JSON"}, status_code=400)
        if not isinstance(body, dict):
            return JSONResponse({"error": "Request body must be a JSON object"}, status_code=400)

        try:
            turn = channel.parse_turn(body)
        except ValueError as e:
            log.warning("Rejected webhook request: %s", e)
            return JSONResponse({"error": str(e)}, status_code=400)

        outcome = await controller.handle_turn(turn)
        log.info("Turn outcome: %s", outcome.kind.value)
        return JSONResponse(channel.render_reply(turn, outcome))

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    log_config = uvicorn.config.LOGGING_CONFIG
    log_config["formatters"]["default"]["fmt"] = (
        "%(asctime)s %(name)-12s %(levelname)-8s %(message)s"
    )

    uvicorn.run(
        "eventbot.app:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_config=log_config,
    )

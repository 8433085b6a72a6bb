"""Application configuration via environment variables."""

from __future__ import annotations

import logging

from pydantic_settings import BaseSettings

log = logging.getLogger("eventbot.config")

_STORAGE_BACKENDS = {"firestore", "memory"}
_ANALYTICS_BACKENDS = {"bigquery", "memory", "none"}


class Settings(BaseSettings):
    # Dialogue contexts (lifespans are counted in conversational turns)
    context_lifespan: int = 12
    session_end_lifespan: int = 2

    # Webhook auth
    webhook_token: str = ""

    # Google Cloud
    google_cloud_project: str = ""
    google_service_account_json: str = ""

    # Durable record store
    storage_backend: str = "firestore"
    firestore_collection: str = "event-summary"

    # Analytics mirror
    analytics_backend: str = "bigquery"
    bigquery_dataset: str = "hfn_event_bot"
    bigquery_table: str = "event_summary"
    mirror_retries: int = 3
    mirror_backoff_seconds: float = 0.5
    mirror_in_background: bool = True

    # Place lookup
    centers_path: str = ""
    place_match_threshold: int = 85

    # Contacts shown to coordinators
    support_email: str = "itsupport@heartfulness.org"
    help_email: str = "it@heartfulness.org"

    # Server
    host: str = "127.0.0.1"
    port: int = 8080
    debug: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    def validate_startup(self) -> list[str]:
        """Validate configuration at startup. Returns warnings, raises on errors."""
        warnings: list[str] = []

        if self.storage_backend not in _STORAGE_BACKENDS:
            raise ValueError(
                f"STORAGE_BACKEND must be one of {sorted(_STORAGE_BACKENDS)}, "
                f"got {self.storage_backend!r}."
            )
        if self.analytics_backend not in _ANALYTICS_BACKENDS:
            raise ValueError(
                f"ANALYTICS_BACKEND must be one of {sorted(_ANALYTICS_BACKENDS)}, "
                f"got {self.analytics_backend!r}."
            )

        if not self.webhook_token:
            warnings.append(
                "WEBHOOK_TOKEN not set. The Dialogflow webhook accepts unauthenticated calls."
            )

        if self.storage_backend == "memory":
            warnings.append(
                "STORAGE_BACKEND=memory. Event reports are lost when the process exits."
            )

        if self.context_lifespan < 2:
            warnings.append(
                "CONTEXT_LIFESPAN below 2. Reports will expire between prompts."
            )

        return warnings


settings = Settings()

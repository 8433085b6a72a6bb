"""Google Cloud credentials shared by the Firestore and BigQuery clients."""

from __future__ import annotations

import logging
import os

from google.auth import default as google_auth_default
from google.oauth2 import service_account

log = logging.getLogger("eventbot.storage")

SCOPES = ["https://www.googleapis.com/auth/cloud-platform"]


def build_credentials(service_account_path: str = ""):
    """Service-account key file when configured, else application default credentials."""
    key_path = service_account_path or os.environ.get("GOOGLE_APPLICATION_CREDENTIALS", "")
    if key_path and os.path.exists(key_path):
        log.info("Using service account key %s", key_path)
        return service_account.Credentials.from_service_account_file(key_path, scopes=SCOPES)
    creds, _ = google_auth_default(scopes=SCOPES)
    return creds

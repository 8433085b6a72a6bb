"""Authentication dependency for the Dialogflow webhook.

Dialogflow ES can send a static header with every fulfillment call; configure
it as ``Authorization: Bearer <WEBHOOK_TOKEN>`` in the agent's fulfillment
settings.

Behavior matrix:
  WEBHOOK_TOKEN set + valid token   → allow
  WEBHOOK_TOKEN set + wrong/missing → 401 Unauthorized
  WEBHOOK_TOKEN empty               → allow (startup logs a warning)
"""

from __future__ import annotations

import logging
import secrets

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from eventbot.config import settings

log = logging.getLogger("eventbot.auth")

_bearer_scheme = HTTPBearer(auto_error=False)


async def require_webhook_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
) -> None:
    """FastAPI dependency: protect the webhook with a shared bearer token."""
    key = settings.webhook_token
    if not key:
        return

    if credentials is None or not secrets.compare_digest(credentials.credentials, key):
        log.warning("Rejected webhook call with invalid or missing token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing webhook token.",
            headers={"WWW-Authenticate": "Bearer"},
        )

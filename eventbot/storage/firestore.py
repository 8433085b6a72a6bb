"""Firestore record store.

Each report is written inside a transaction as ``{"entry": <record>}`` in
the ``event-summary`` collection.  The Firestore client is synchronous, so
calls run in the default thread pool.
"""

from __future__ import annotations

import asyncio
import logging
from functools import partial
from typing import Any, Optional

from google.api_core import exceptions as google_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import firestore

from eventbot.models.record import EventRecord
from eventbot.storage.base import CommitAck, PersistError, RecordStore
from eventbot.storage.credentials import build_credentials

log = logging.getLogger("eventbot.storage.firestore")


@firestore.transactional
def _create_in_transaction(transaction, ref, data: dict[str, Any]) -> None:
    transaction.create(ref, data)


class FirestoreRecordStore(RecordStore):
    """RecordStore backed by a Firestore collection."""

    def __init__(
        self,
        collection: str = "event-summary",
        client: Optional[firestore.Client] = None,
        project: str = "",
        service_account_path: str = "",
    ) -> None:
        self._collection = collection
        if client is None:
            client = firestore.Client(
                project=project or None,
                credentials=build_credentials(service_account_path),
            )
        self._client = client

    async def _run_in_executor(self, func, *args, **kwargs) -> Any:
        """Run a synchronous Firestore call in the default thread pool."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(func, *args, **kwargs))

    async def save(self, record: EventRecord, token: str = "") -> CommitAck:
        return await self._run_in_executor(self._save_sync, record, token)

    def _save_sync(self, record: EventRecord, token: str) -> CommitAck:
        ref = self._client.collection(self._collection).document(token or None)
        try:
            _create_in_transaction(self._client.transaction(), ref, {"entry": record.model_dump()})
        except google_exceptions.AlreadyExists:
            log.warning("Submission %s already stored, not writing it again", ref.id)
            return CommitAck(document_id=ref.id, duplicate=True)
        except (google_exceptions.GoogleAPIError, auth_exceptions.GoogleAuthError) as e:
            raise PersistError(f"Firestore write to {self._collection} failed: {e}") from e

        log.info("Stored record %s as %s/%s", record.id, self._collection, ref.id)
        return CommitAck(document_id=ref.id)

"""Persistence gateway: durable commit plus best-effort analytics mirror.

The durable write is attempted exactly once so the coordinator gets a
timely yes/no.  The mirror runs after it, retried with jittered exponential
backoff, and its failure is only logged.  The two writes are not atomic
with each other.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Awaitable, Callable, Optional, TypeVar

from eventbot.models.record import EventRecord
from eventbot.storage.base import AnalyticsSink, CommitAck, MirrorError, PersistError, RecordStore

log = logging.getLogger("eventbot.storage.gateway")

T = TypeVar("T")


async def call_with_retries(
    fn: Callable[[], Awaitable[T]],
    *,
    retries: int = 3,
    backoff_seconds: float = 0.5,
    max_backoff_seconds: float = 30.0,
) -> T:
    """Await ``fn()`` up to ``retries`` times, sleeping with jittered backoff between tries."""
    last_exception: Exception | None = None
    delay = backoff_seconds

    for attempt in range(max(retries, 1)):
        try:
            return await fn()
        except Exception as e:
            last_exception = e
            log.warning("Attempt %d/%d failed: %s", attempt + 1, retries, e)

        if attempt + 1 < retries:
            await asyncio.sleep(random.uniform(delay * 0.8, delay * 1.2))
            delay = min(delay * 2, max_backoff_seconds)

    raise MirrorError(f"All {retries} attempts failed") from last_exception


class PersistenceGateway:
    """Commits records to the store and mirrors them to analytics."""

    def __init__(
        self,
        store: RecordStore,
        sink: Optional[AnalyticsSink] = None,
        *,
        mirror_retries: int = 3,
        mirror_backoff_seconds: float = 0.5,
        mirror_in_background: bool = True,
    ) -> None:
        self._store = store
        self._sink = sink
        self._mirror_retries = mirror_retries
        self._mirror_backoff_seconds = mirror_backoff_seconds
        self._mirror_in_background = mirror_in_background
        self._pending: set[asyncio.Task] = set()

    async def commit(self, record: EventRecord, token: str = "") -> CommitAck:
        """Store ``record``; raises PersistError when the durable write fails."""
        try:
            ack = await self._store.save(record, token)
        except PersistError:
            log.exception("Durable write failed for record %s", record.id)
            raise
        except Exception as e:
            log.exception("Durable write failed for record %s", record.id)
            raise PersistError(str(e)) from e

        if ack.duplicate:
            log.info("Submission %s was already committed, skipping mirror", ack.document_id)
            return ack

        if self._sink is not None:
            if self._mirror_in_background:
                task = asyncio.create_task(self._mirror(record))
                self._pending.add(task)
                task.add_done_callback(self._pending.discard)
            else:
                await self._mirror(record)

        return ack

    async def _mirror(self, record: EventRecord) -> None:
        row = record.to_row()
        try:
            await call_with_retries(
                lambda: self._sink.insert(row),
                retries=self._mirror_retries,
                backoff_seconds=self._mirror_backoff_seconds,
            )
        except MirrorError as e:
            log.error("Analytics mirror failed for record %s: %s", record.id, e.__cause__ or e)
            return
        log.info("Mirrored record %s to analytics", record.id)

    async def drain(self) -> None:
        """Wait for background mirror writes (used on shutdown and in tests)."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    @property
    def pending_mirrors(self) -> int:
        return len(self._pending)

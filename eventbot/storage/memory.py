"""In-process record store and analytics sink for local runs and tests."""

from __future__ import annotations

import uuid
from typing import Any

from eventbot.models.record import EventRecord
from eventbot.storage.base import AnalyticsSink, CommitAck, RecordStore


class InMemoryRecordStore(RecordStore):
    def __init__(self) -> None:
        self.documents: dict[str, dict[str, Any]] = {}

    async def save(self, record: EventRecord, token: str = "") -> CommitAck:
        document_id = token or uuid.uuid4().hex
        if document_id in self.documents:
            return CommitAck(document_id=document_id, duplicate=True)
        self.documents[document_id] = {"entry": record.model_dump()}
        return CommitAck(document_id=document_id)


class InMemoryAnalyticsSink(AnalyticsSink):
    def __init__(self) -> None:
        self.rows: list[dict[str, Any]] = []

    async def insert(self, row: dict[str, Any]) -> None:
        self.rows.append(dict(row))

"""Abstract base classes for the record store and the analytics sink.

The record store is the system of record: one document per report, written
once.  The analytics sink is a best-effort mirror of the same rows.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from eventbot.models.record import EventRecord


class PersistError(Exception):
    """The durable write failed; the report must not be treated as saved."""


class MirrorError(Exception):
    """The analytics insert failed or rejected the row."""


@dataclass(frozen=True)
class CommitAck:
    """Acknowledgement of a durable write."""

    document_id: str
    duplicate: bool = False  # the submission token had already been committed


class RecordStore(ABC):
    """Durable, document-oriented store for event reports."""

    @abstractmethod
    async def save(self, record: EventRecord, token: str = "") -> CommitAck:
        """Write ``record`` as a single new document.

        Args:
            record: The assembled report.
            token: Submission token used as the document id.  Saving the
                same token twice must not create a second document; the
                second call returns ``CommitAck(duplicate=True)``.  An
                empty token lets the store generate a fresh id.

        Raises:
            PersistError: the write did not happen.
        """


class AnalyticsSink(ABC):
    """Append-only tabular sink accepting one JSON row per report."""

    @abstractmethod
    async def insert(self, row: dict[str, Any]) -> None:
        """Insert one row. Unknown fields are ignored by the sink.

        Raises:
            MirrorError: the row was not accepted.
        """

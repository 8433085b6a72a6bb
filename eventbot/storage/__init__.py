"""Record store and analytics sink abstractions and the persistence gateway."""

from .base import AnalyticsSink, CommitAck, MirrorError, PersistError, RecordStore
from .gateway import PersistenceGateway

__all__ = [
    "AnalyticsSink",
    "CommitAck",
    "MirrorError",
    "PersistError",
    "PersistenceGateway",
    "RecordStore",
]

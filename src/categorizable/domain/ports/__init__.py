"""Domain port definitions for adapters."""

from __future__ import annotations

from .notifications import (
    CategoryEvent,
    NotificationSink,
    NullNotificationSink,
    RecordingNotificationSink,
)
from .persistence import (
    AssociationChanges,
    AssociationStore,
    CategoryDirectory,
    OwnerRepository,
    Repository,
)
from .unit_of_work import (
    CategorizableRepositories,
    CategorizableUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "AssociationChanges",
    "AssociationStore",
    "CategorizableRepositories",
    "CategorizableUnitOfWork",
    "CategoryDirectory",
    "CategoryEvent",
    "NotificationSink",
    "NullNotificationSink",
    "OwnerRepository",
    "RecordingNotificationSink",
    "Repository",
    "RepositoryCollection",
    "UnitOfWork",
]

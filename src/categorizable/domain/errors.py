"""Error taxonomy for category reconciliation."""

from __future__ import annotations


class CategorizableError(Exception):
    """Base class for categorizable domain errors."""


class ClassificationError(CategorizableError, TypeError):
    """Raised when a raw value cannot be read as a category reference."""


class OwnerNotPersistedError(CategorizableError):
    """Raised when an immediate mutation targets an owner without durable identity."""


class StoreError(CategorizableError):
    """Raised when the backing store fails to answer or apply a request."""

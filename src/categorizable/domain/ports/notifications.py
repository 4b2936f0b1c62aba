"""Ports for announcing category changes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from categorizable.domain.model import Categorizable, CategorizeMode


@dataclass(frozen=True, slots=True)
class CategoryEvent:
    """One before/after notification of a category mutation."""

    name: str
    owner: Categorizable
    mode: CategorizeMode
    category_ids: tuple[int, ...]


@runtime_checkable
class NotificationSink(Protocol):
    """Fire-and-forget receiver of category events."""

    def publish(self, event: CategoryEvent) -> None: ...


class NullNotificationSink:
    """Discards every event."""

    def publish(self, event: CategoryEvent) -> None:
        _ = event


class RecordingNotificationSink:
    """Keeps published events in memory, in order."""

    def __init__(self) -> None:
        self.events: list[CategoryEvent] = []

    def publish(self, event: CategoryEvent) -> None:
        self.events.append(event)

    @property
    def names(self) -> list[str]:
        return [event.name for event in self.events]

"""Category notification settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Final

from .errors import ConfigurationError

DEFAULT_EVENT_NAMESPACE: Final[str] = "categorizable.category"


@dataclass(frozen=True, slots=True)
class EventConfig:
    """Naming used for the before/after notifications of a category mutation."""

    namespace: str = DEFAULT_EVENT_NAMESPACE

    def __post_init__(self) -> None:
        if not self.namespace or any(ch.isspace() for ch in self.namespace):
            raise ConfigurationError(
                f"Invalid event namespace {self.namespace!r}: must be non-empty without spaces"
            )


def get_event_config() -> EventConfig:
    value = os.getenv("CATEGORIZABLE_EVENT_NAMESPACE")
    if value is None:
        return EventConfig()
    return EventConfig(namespace=value.strip())

"""Owner lifecycle signals.

Persistence adapters announce when an owner has been created (it now has an
id) and when it has been deleted. Interested parties register handlers.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from categorizable.domain.model import Categorizable

type LifecycleHandler = Callable[[Categorizable], None]

log = logging.getLogger(__name__)


class LifecycleSignals:
    """Registry of ``created`` / ``deleted`` handlers for categorizable owners."""

    def __init__(self) -> None:
        self._created: list[LifecycleHandler] = []
        self._deleted: list[LifecycleHandler] = []

    def on_created(self, handler: LifecycleHandler) -> None:
        if handler not in self._created:
            self._created.append(handler)

    def on_deleted(self, handler: LifecycleHandler) -> None:
        if handler not in self._deleted:
            self._deleted.append(handler)

    def created(self, owner: Categorizable) -> None:
        log.debug("Owner created: %s#%s", owner.categorizable_type, owner.id)
        for handler in tuple(self._created):
            handler(owner)

    def deleted(self, owner: Categorizable) -> None:
        log.debug("Owner deleted: %s#%s", owner.categorizable_type, owner.id)
        for handler in tuple(self._deleted):
            handler(owner)

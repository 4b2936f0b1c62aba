"""Notification sink that writes category events to the log."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from categorizable.domain.ports.notifications import CategoryEvent

log = logging.getLogger(__name__)


class LoggingNotificationSink:
    def __init__(self, logger: logging.Logger | None = None, level: int = logging.INFO) -> None:
        self.logger = logger or log
        self.level = level

    def publish(self, event: CategoryEvent) -> None:
        self.logger.log(
            self.level,
            "%s owner=%s#%s categories=%s",
            event.name,
            event.owner.categorizable_type,
            event.owner.id,
            list(event.category_ids),
        )


if TYPE_CHECKING:
    from categorizable.domain.ports.notifications import NotificationSink

    _sink_check: NotificationSink = LoggingNotificationSink()

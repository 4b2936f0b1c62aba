"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class CategorizeMode(StrEnum):
    ATTACH = "attach"
    SYNC = "sync"
    DETACH = "detach"

    @property
    def before_event(self) -> str:
        return f"{self.value}ing"

    @property
    def after_event(self) -> str:
        return f"{self.value}ed"


class KeyColumn(StrEnum):
    ID = "id"
    SLUG = "slug"

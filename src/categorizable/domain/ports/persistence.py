"""Ports for persisting categories, owners and their associations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from categorizable.domain.model import Categorizable, Category

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence

    from categorizable.domain.model import OwnerKey
    from categorizable.domain.scopes import CategoryScope


@dataclass(frozen=True, slots=True)
class AssociationChanges:
    """Category ids actually added or removed by one store mutation."""

    attached: tuple[int, ...] = ()
    detached: tuple[int, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.attached or self.detached)


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class CategoryDirectory(Repository[Category], Protocol):
    """Read access to the categories an owner can be tagged with."""

    def get(self, category_id: int) -> Category | None: ...

    def find_by_ids(self, category_ids: Collection[int]) -> Sequence[Category]: ...

    def find_by_slugs(self, slugs: Collection[str]) -> Sequence[Category]: ...

    def list_all(self) -> Sequence[Category]: ...


@runtime_checkable
class AssociationStore(Protocol):
    """Owner to category links, addressed by polymorphic owner key."""

    def category_ids(self, owner: OwnerKey) -> frozenset[int]: ...

    def load_categories(self, owner: OwnerKey) -> tuple[Category, ...]: ...

    def attach(self, owner: OwnerKey, category_ids: Collection[int]) -> AssociationChanges: ...

    def sync(self, owner: OwnerKey, category_ids: Collection[int]) -> AssociationChanges: ...

    def detach(self, owner: OwnerKey, category_ids: Collection[int]) -> AssociationChanges: ...


@runtime_checkable
class OwnerRepository[TOwner: Categorizable](Repository[TOwner], Protocol):
    """Persistence contract for categorizable owners.

    ``add`` announces the owner as created once it has an id; ``remove``
    announces it as deleted.
    """

    def get(self, owner_id: int) -> TOwner | None: ...

    def remove(self, entity: TOwner) -> None: ...

    def filter(self, *scopes: CategoryScope) -> list[TOwner]: ...

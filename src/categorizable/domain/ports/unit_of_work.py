"""Unit-of-work abstractions for coordinating repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from categorizable.domain.model import Article, Product

if TYPE_CHECKING:
    from types import TracebackType

    from categorizable.domain.lifecycle import LifecycleSignals
    from categorizable.domain.ports.persistence import (
        AssociationStore,
        CategoryDirectory,
        OwnerRepository,
    )


@runtime_checkable
class RepositoryCollection(Protocol):
    """Marker protocol for groups of repositories managed together."""


@runtime_checkable
class UnitOfWork[TRepositories: RepositoryCollection](Protocol):
    """Generic unit-of-work boundary around a repository collection."""

    @property
    def repositories(self) -> TRepositories: ...

    @property
    def signals(self) -> LifecycleSignals: ...

    def __enter__(self) -> UnitOfWork[TRepositories]: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@dataclass(slots=True)
class CategorizableRepositories(RepositoryCollection):
    """Repositories required to categorize owners."""

    categories: CategoryDirectory
    associations: AssociationStore
    articles: OwnerRepository[Article]
    products: OwnerRepository[Product]

    def owners(self, categorizable_type: str) -> OwnerRepository:
        """Return the owner repository for a discriminator value."""
        by_type: dict[str, OwnerRepository] = {
            Article.CATEGORIZABLE_TYPE: self.articles,
            Product.CATEGORIZABLE_TYPE: self.products,
        }
        try:
            return by_type[categorizable_type]
        except KeyError:
            known = ", ".join(sorted(by_type))
            raise ValueError(
                f"Unknown owner type {categorizable_type!r} (expected one of: {known})"
            ) from None


type CategorizableUnitOfWork = UnitOfWork[CategorizableRepositories]

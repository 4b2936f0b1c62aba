"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING, cast

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import SQLAlchemyError

from categorizable.adapters.sqlalchemy.mappings import (
    categorizable_table,
    category_table,
    owner_table_for,
)
from categorizable.adapters.sqlalchemy.scopes import compile_scope
from categorizable.domain.errors import StoreError
from categorizable.domain.model import Article, Categorizable, Category, Product
from categorizable.domain.ports.persistence import AssociationChanges

if TYPE_CHECKING:
    from collections.abc import Collection, Iterator, Sequence

    from sqlalchemy.orm import Session

    from categorizable.domain.lifecycle import LifecycleSignals
    from categorizable.domain.model import OwnerKey
    from categorizable.domain.scopes import CategoryScope

log = logging.getLogger(__name__)


@contextmanager
def store_errors(action: str) -> Iterator[None]:
    """Re-raise SQLAlchemy failures while doing ``action`` as ``StoreError``."""
    try:
        yield
    except SQLAlchemyError as exc:
        raise StoreError(f"Failed to {action}: {exc}") from exc


class SqlAlchemyCategoryDirectory:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Category) -> None:
        with store_errors(f"add category {entity.slug!r}"):
            self.session.add(entity)
            self.session.flush()

    def get(self, category_id: int) -> Category | None:
        with store_errors(f"load category {category_id}"):
            return self.session.get(Category, category_id)

    def find_by_ids(self, category_ids: Collection[int]) -> Sequence[Category]:
        if not category_ids:
            return []
        stmt = select(Category).where(category_table.c.id.in_(list(category_ids)))
        with store_errors("look up categories by id"):
            return self.session.execute(stmt).scalars().all()

    def find_by_slugs(self, slugs: Collection[str]) -> Sequence[Category]:
        if not slugs:
            return []
        stmt = select(Category).where(category_table.c.slug.in_(list(slugs)))
        with store_errors("look up categories by slug"):
            return self.session.execute(stmt).scalars().all()

    def list_all(self) -> Sequence[Category]:
        stmt = select(Category).order_by(category_table.c.slug)
        with store_errors("list categories"):
            return self.session.execute(stmt).scalars().all()


class SqlAlchemyAssociationStore:
    """Rows of the polymorphic ``categorizables`` table for one session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def category_ids(self, owner: OwnerKey) -> frozenset[int]:
        stmt = select(categorizable_table.c.category_id).where(
            categorizable_table.c.categorizable_type == owner.categorizable_type,
            categorizable_table.c.categorizable_id == owner.categorizable_id,
        )
        with store_errors(f"read categories of {_describe(owner)}"):
            return frozenset(self.session.execute(stmt).scalars().all())

    def load_categories(self, owner: OwnerKey) -> tuple[Category, ...]:
        stmt = (
            select(Category)
            .join(categorizable_table, categorizable_table.c.category_id == category_table.c.id)
            .where(
                categorizable_table.c.categorizable_type == owner.categorizable_type,
                categorizable_table.c.categorizable_id == owner.categorizable_id,
            )
            .order_by(category_table.c.id)
        )
        with store_errors(f"load categories of {_describe(owner)}"):
            return tuple(self.session.execute(stmt).scalars().all())

    def attach(self, owner: OwnerKey, category_ids: Collection[int]) -> AssociationChanges:
        existing = self.category_ids(owner)
        added = sorted(set(category_ids) - existing)
        self._insert(owner, added)
        return AssociationChanges(attached=tuple(added))

    def sync(self, owner: OwnerKey, category_ids: Collection[int]) -> AssociationChanges:
        wanted = set(category_ids)
        existing = self.category_ids(owner)
        removed = sorted(existing - wanted)
        added = sorted(wanted - existing)
        self._delete(owner, removed)
        self._insert(owner, added)
        return AssociationChanges(attached=tuple(added), detached=tuple(removed))

    def detach(self, owner: OwnerKey, category_ids: Collection[int]) -> AssociationChanges:
        if not category_ids:
            return AssociationChanges()
        existing = self.category_ids(owner)
        removed = sorted(existing & set(category_ids))
        self._delete(owner, removed)
        return AssociationChanges(detached=tuple(removed))

    def _insert(self, owner: OwnerKey, category_ids: Sequence[int]) -> None:
        if not category_ids:
            return
        now = datetime.now(tz=UTC)
        rows = [
            {
                "categorizable_id": owner.categorizable_id,
                "categorizable_type": owner.categorizable_type,
                "category_id": category_id,
                "created_at": now,
                "updated_at": now,
            }
            for category_id in category_ids
        ]
        with store_errors(f"attach categories to {_describe(owner)}"):
            self.session.execute(insert(categorizable_table), rows)

    def _delete(self, owner: OwnerKey, category_ids: Sequence[int]) -> None:
        if not category_ids:
            return
        stmt = delete(categorizable_table).where(
            categorizable_table.c.categorizable_type == owner.categorizable_type,
            categorizable_table.c.categorizable_id == owner.categorizable_id,
            categorizable_table.c.category_id.in_(list(category_ids)),
        )
        with store_errors(f"detach categories from {_describe(owner)}"):
            self.session.execute(stmt)


class SqlAlchemyOwnerRepository[TOwner: Categorizable]:
    """Owner persistence that announces creation and deletion on ``signals``."""

    def __init__(
        self, session: Session, owner_cls: type[TOwner], signals: LifecycleSignals
    ) -> None:
        self.session = session
        self._owner_cls = owner_cls
        self._table = owner_table_for(owner_cls)
        self.signals = signals

    def add(self, entity: TOwner) -> None:
        with store_errors(f"create {self._owner_cls.__name__}"):
            self.session.add(entity)
            self.session.flush()
        self.signals.created(entity)

    def get(self, owner_id: int) -> TOwner | None:
        with store_errors(f"load {self._owner_cls.__name__} {owner_id}"):
            return self.session.get(self._owner_cls, owner_id)

    def remove(self, entity: TOwner) -> None:
        with store_errors(f"delete {self._owner_cls.__name__} {entity.id}"):
            self.session.delete(entity)
            self.session.flush()
        self.signals.deleted(entity)

    def filter(self, *scopes: CategoryScope) -> list[TOwner]:
        stmt = select(self._owner_cls).order_by(self._table.c.id)
        for scope in scopes:
            stmt = stmt.where(compile_scope(scope, self._owner_cls))
        with store_errors(f"filter {self._owner_cls.__name__} by categories"):
            return list(self.session.execute(stmt).scalars().all())


class SqlAlchemyArticleRepository(SqlAlchemyOwnerRepository[Article]):
    def __init__(self, session: Session, signals: LifecycleSignals) -> None:
        super().__init__(session, Article, signals)


class SqlAlchemyProductRepository(SqlAlchemyOwnerRepository[Product]):
    def __init__(self, session: Session, signals: LifecycleSignals) -> None:
        super().__init__(session, Product, signals)


def _describe(owner: OwnerKey) -> str:
    return f"{owner.categorizable_type}#{owner.categorizable_id}"


if TYPE_CHECKING:
    from categorizable.domain.lifecycle import LifecycleSignals as _Signals
    from categorizable.domain.ports.persistence import (
        AssociationStore,
        CategoryDirectory,
        OwnerRepository,
    )

    _session_stub = cast("Session", object())
    _signals_stub = cast("_Signals", object())
    _directory_check: CategoryDirectory = SqlAlchemyCategoryDirectory(_session_stub)
    _store_check: AssociationStore = SqlAlchemyAssociationStore(_session_stub)
    _article_check: OwnerRepository[Article] = SqlAlchemyArticleRepository(
        _session_stub, _signals_stub
    )

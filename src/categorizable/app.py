"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from categorizable.adapters.notifications import LoggingNotificationSink
from categorizable.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyCategorizableUnitOfWork,
    is_started,
    startup,
)
from categorizable.config import get_event_config
from categorizable.domain.model import (
    OWNER_CLASS_BY_TYPE,
    Categorizable,
    CategorizeMode,
    Category,
    KeyColumn,
)
from categorizable.domain.reconciler import CategorySetReconciler
from categorizable.domain.refs import category_ref
from categorizable.domain.resolver import CategoryReferenceResolver
from categorizable.domain.scopes import CategoryScopes

if TYPE_CHECKING:
    from collections.abc import Sequence

    from categorizable.domain.ports.notifications import NotificationSink
    from categorizable.domain.ports.persistence import AssociationChanges, OwnerRepository
    from categorizable.domain.ports.unit_of_work import CategorizableUnitOfWork
    from categorizable.domain.refs import CategoryInput

UnitOfWorkFactory = Callable[[], "CategorizableUnitOfWork"]


log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class OwnerFilter:
    """Category constraints for ``filter_owners``; empty fields are skipped."""

    with_all: CategoryInput = None
    with_any: CategoryInput = None
    without: CategoryInput = None
    uncategorized: bool = False
    column: KeyColumn = KeyColumn.SLUG


def build_reconciler(
    uow: CategorizableUnitOfWork,
    *,
    notifications: NotificationSink | None = None,
) -> CategorySetReconciler:
    """Wire a reconciler to the unit of work's repositories and lifecycle signals."""

    repositories = uow.repositories
    reconciler = CategorySetReconciler(
        CategoryReferenceResolver(repositories.categories),
        repositories.associations,
        notifications=notifications or LoggingNotificationSink(),
        event_namespace=get_event_config().namespace,
    )
    reconciler.subscribe(uow.signals)
    return reconciler


def _default_uow_factory() -> CategorizableUnitOfWork:
    if not is_started():
        startup()
    return SqlAlchemyCategorizableUnitOfWork()


def _owner_repository(uow: CategorizableUnitOfWork, owner_type: str) -> OwnerRepository:
    return uow.repositories.owners(owner_type)


def _require_owner(uow: CategorizableUnitOfWork, owner_type: str, owner_id: int) -> Categorizable:
    owner = _owner_repository(uow, owner_type).get(owner_id)
    if owner is None:
        raise LookupError(f"No {owner_type} with id {owner_id}")
    return owner


def create_category(
    name: str,
    *,
    slug: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> Category:
    uow_factory = unit_of_work_factory or _default_uow_factory
    category = Category.create(name, slug=slug)
    with uow_factory() as uow:
        uow.repositories.categories.add(category)
        uow.commit()
    log.info("Created category %s (%s)", category.slug, category.id)
    return category


def list_categories(
    *, unit_of_work_factory: UnitOfWorkFactory | None = None
) -> list[Category]:
    uow_factory = unit_of_work_factory or _default_uow_factory
    with uow_factory() as uow:
        return list(uow.repositories.categories.list_all())


def create_owner(
    owner_type: str,
    *,
    categories: CategoryInput = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    notifications: NotificationSink | None = None,
    **fields: object,
) -> Categorizable:
    """Create an owner; ``categories`` are queued and attached once it has an id."""

    uow_factory = unit_of_work_factory or _default_uow_factory
    owner_cls = OWNER_CLASS_BY_TYPE.get(owner_type)
    if owner_cls is None:
        known = ", ".join(sorted(OWNER_CLASS_BY_TYPE))
        raise ValueError(f"Unknown owner type {owner_type!r} (expected one of: {known})")
    owner = owner_cls(**fields)
    with uow_factory() as uow:
        reconciler = build_reconciler(uow, notifications=notifications)
        reconciler.assign(owner, categories)
        _owner_repository(uow, owner_type).add(owner)
        uow.commit()
    log.info("Created %s#%s", owner_type, owner.id)
    return owner


def remove_owner(
    owner_type: str,
    owner_id: int,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    notifications: NotificationSink | None = None,
) -> None:
    uow_factory = unit_of_work_factory or _default_uow_factory
    with uow_factory() as uow:
        build_reconciler(uow, notifications=notifications)
        owner = _require_owner(uow, owner_type, owner_id)
        _owner_repository(uow, owner_type).remove(owner)
        uow.commit()
    log.info("Removed %s#%s", owner_type, owner_id)


def categorize_owner(
    owner_type: str,
    owner_id: int,
    categories: CategoryInput,
    *,
    mode: CategorizeMode = CategorizeMode.ATTACH,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    notifications: NotificationSink | None = None,
) -> AssociationChanges:
    """Attach, sync or detach ``categories`` on an existing owner."""

    uow_factory = unit_of_work_factory or _default_uow_factory
    ref = category_ref(categories)
    with uow_factory() as uow:
        reconciler = build_reconciler(uow, notifications=notifications)
        owner = _require_owner(uow, owner_type, owner_id)
        changes = reconciler.apply(owner, ref, mode)
        uow.commit()
    return changes


def owner_categories(
    owner_type: str,
    owner_id: int,
    *,
    key_column: KeyColumn = KeyColumn.SLUG,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> dict[int | str, str]:
    uow_factory = unit_of_work_factory or _default_uow_factory
    with uow_factory() as uow:
        reconciler = build_reconciler(uow)
        owner = _require_owner(uow, owner_type, owner_id)
        return reconciler.category_list(owner, key_column)


def filter_owners(
    owner_type: str,
    owner_filter: OwnerFilter,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> Sequence[Categorizable]:
    uow_factory = unit_of_work_factory or _default_uow_factory
    with uow_factory() as uow:
        scopes = CategoryScopes(CategoryReferenceResolver(uow.repositories.categories))
        clauses = []
        if owner_filter.with_all is not None:
            clauses.append(scopes.with_all(owner_filter.with_all, owner_filter.column))
        if owner_filter.with_any is not None:
            clauses.append(scopes.with_any(owner_filter.with_any, owner_filter.column))
        if owner_filter.without is not None:
            clauses.append(scopes.without(owner_filter.without, owner_filter.column))
        if owner_filter.uncategorized:
            clauses.append(scopes.without_any())
        return _owner_repository(uow, owner_type).filter(*clauses)

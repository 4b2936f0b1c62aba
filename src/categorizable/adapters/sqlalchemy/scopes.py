"""Compile category scopes into correlated ``EXISTS`` clauses."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import and_, select, true

from categorizable.adapters.sqlalchemy.mappings import (
    categorizable_table,
    category_table,
    owner_table_for,
)
from categorizable.domain.scopes import ScopeKind

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement, Exists, Table

    from categorizable.domain.model import Categorizable
    from categorizable.domain.scopes import CategoryScope


def compile_scope(scope: CategoryScope, owner_cls: type[Categorizable]) -> ColumnElement[bool]:
    """Return a WHERE clause selecting the owners of ``owner_cls`` matched by ``scope``."""

    owner_table = owner_table_for(owner_cls)
    categorizable_type = owner_cls.CATEGORIZABLE_TYPE
    column = category_table.c[scope.column.value]

    if scope.kind is ScopeKind.WITH_ALL:
        clauses = [
            _has_categories(owner_table, categorizable_type, column == value)
            for value in scope.values
        ]
        return and_(true(), *clauses)
    if scope.kind is ScopeKind.WITH_ANY:
        return _has_categories(owner_table, categorizable_type, column.in_(scope.values))
    if scope.kind is ScopeKind.WITHOUT:
        return ~_has_categories(owner_table, categorizable_type, column.in_(scope.values))
    if scope.kind is ScopeKind.WITHOUT_ANY:
        return ~_has_categories(owner_table, categorizable_type)
    raise ValueError(f"Unsupported scope kind: {scope.kind!r}")


def _has_categories(
    owner_table: Table,
    categorizable_type: str,
    condition: ColumnElement[bool] | None = None,
) -> Exists:
    stmt = (
        select(categorizable_table.c.category_id)
        .join(category_table, category_table.c.id == categorizable_table.c.category_id)
        .where(
            categorizable_table.c.categorizable_type == categorizable_type,
            categorizable_table.c.categorizable_id == owner_table.c.id,
        )
    )
    if condition is not None:
        stmt = stmt.where(condition)
    return stmt.exists()

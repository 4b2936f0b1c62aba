"""Category filters over collections of owners.

A ``CategoryScope`` is a backend-neutral clause; persistence adapters compile
it into their own query language and AND the clauses together.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from categorizable.domain.model import KeyColumn
from categorizable.domain.refs import category_ref, is_empty

if TYPE_CHECKING:
    from categorizable.domain.refs import CategoryInput
    from categorizable.domain.resolver import CategoryReferenceResolver


class ScopeKind(StrEnum):
    WITH_ALL = "with_all"
    WITH_ANY = "with_any"
    WITHOUT = "without"
    WITHOUT_ANY = "without_any"


@dataclass(frozen=True, slots=True)
class CategoryScope:
    """One filter clause.

    - ``WITH_ALL``: one existence test per value, all must hold
    - ``WITH_ANY``: a single existence test over ``IN (values)``
    - ``WITHOUT``: no association with any of ``values``
    - ``WITHOUT_ANY``: no association at all (``values`` ignored)
    """

    kind: ScopeKind
    column: KeyColumn = KeyColumn.SLUG
    values: tuple[int | str, ...] = ()


class CategoryScopes:
    """Build scopes from raw references, resolving them for the wanted column."""

    def __init__(self, resolver: CategoryReferenceResolver) -> None:
        self.resolver = resolver

    def with_all(
        self, categories: CategoryInput, column: KeyColumn = KeyColumn.SLUG
    ) -> CategoryScope:
        return self._scope(ScopeKind.WITH_ALL, categories, column)

    def with_any(
        self, categories: CategoryInput, column: KeyColumn = KeyColumn.SLUG
    ) -> CategoryScope:
        return self._scope(ScopeKind.WITH_ANY, categories, column)

    def with_categories(
        self, categories: CategoryInput, column: KeyColumn = KeyColumn.SLUG
    ) -> CategoryScope:
        return self.with_any(categories, column)

    def without(
        self, categories: CategoryInput = None, column: KeyColumn = KeyColumn.SLUG
    ) -> CategoryScope:
        """Owners holding none of ``categories``; no categories at all when empty."""
        ref = category_ref(categories)
        if is_empty(ref):
            return self.without_any()
        return self._scope(ScopeKind.WITHOUT, ref, column)

    def without_any(self) -> CategoryScope:
        return CategoryScope(kind=ScopeKind.WITHOUT_ANY)

    def _scope(
        self, kind: ScopeKind, categories: CategoryInput, column: KeyColumn
    ) -> CategoryScope:
        column = KeyColumn(column)
        values = self.resolver.resolve_values(category_ref(categories), column)
        return CategoryScope(kind=kind, column=column, values=values)

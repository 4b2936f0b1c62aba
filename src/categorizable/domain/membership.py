"""Membership predicates over an owner's loaded categories.

Single-value references test plain membership, so ``has_any`` and ``has_all``
agree on them. For collections ``has_any`` asks for a non-empty intersection
and ``has_all`` for the same set on both sides.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from categorizable.domain.refs import (
    ByEntity,
    ByEntitySet,
    ById,
    ByIdList,
    BySlug,
    BySlugList,
    NoCategories,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from categorizable.domain.model import Category
    from categorizable.domain.refs import CategoryRef


def has_any(owned: Iterable[Category], ref: CategoryRef) -> bool:
    owned = tuple(owned)
    single = _single_match(owned, ref)
    if single is not None:
        return single
    held, wanted = _comparable_sets(owned, ref)
    return not held.isdisjoint(wanted)


def has_all(owned: Iterable[Category], ref: CategoryRef) -> bool:
    owned = tuple(owned)
    single = _single_match(owned, ref)
    if single is not None:
        return single
    held, wanted = _comparable_sets(owned, ref)
    if not wanted:
        return False
    return len(held) == len(wanted) and not held.symmetric_difference(wanted)


def _single_match(owned: tuple[Category, ...], ref: CategoryRef) -> bool | None:
    if isinstance(ref, BySlug):
        return any(category.slug == ref.slug for category in owned)
    if isinstance(ref, ById):
        return any(category.id == ref.category_id for category in owned)
    if isinstance(ref, ByEntity):
        return any(category.slug == ref.category.slug for category in owned)
    if isinstance(ref, NoCategories):
        return False
    return None


def _comparable_sets(
    owned: tuple[Category, ...], ref: CategoryRef
) -> tuple[set[object], set[object]]:
    if isinstance(ref, BySlugList):
        return {category.slug for category in owned}, set(ref.slugs)
    if isinstance(ref, ByIdList):
        return {category.id for category in owned}, set(ref.category_ids)
    if isinstance(ref, ByEntitySet):
        return (
            {category.id for category in owned},
            {category.id for category in ref.categories if category.id is not None},
        )
    raise TypeError(f"Unsupported category reference: {ref!r}")

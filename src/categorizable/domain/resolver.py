"""Resolution of category references against the category directory.

Every reference resolves with at most one directory query:
- ids and slugs are looked up with a single ``IN`` query; unknown keys are
  dropped silently
- instances are used as given, without a query
- ``NoCategories`` resolves to nothing
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from categorizable.domain.model import KeyColumn
from categorizable.domain.refs import (
    ByEntity,
    ByEntitySet,
    ById,
    ByIdList,
    BySlug,
    BySlugList,
    NoCategories,
    RefShape,
)

if TYPE_CHECKING:
    from categorizable.domain.model import Category
    from categorizable.domain.ports.persistence import CategoryDirectory
    from categorizable.domain.refs import CategoryRef

log = logging.getLogger(__name__)


class CategoryReferenceResolver:
    """Turn a ``CategoryRef`` into concrete categories or category ids."""

    def __init__(self, directory: CategoryDirectory) -> None:
        self.directory = directory

    def resolve(self, ref: CategoryRef) -> frozenset[int]:
        """Return the ids of the categories ``ref`` points at."""

        return frozenset(
            category.id
            for category in self.resolve_keeping_original(ref)
            if category.id is not None
        )

    def resolve_keeping_original(self, ref: CategoryRef) -> tuple[Category, ...]:
        """Return the category records ``ref`` points at, in reference order."""

        if isinstance(ref, NoCategories):
            return ()
        if isinstance(ref, ByEntity):
            return (ref.category,)
        if isinstance(ref, ByEntitySet):
            return ref.categories
        if isinstance(ref, (ById, ByIdList)):
            wanted_ids = (ref.category_id,) if isinstance(ref, ById) else ref.category_ids
            found = self.directory.find_by_ids(wanted_ids)
            by_id = {category.id: category for category in found}
            self._log_missing("id", wanted_ids, by_id)
            return tuple(by_id[key] for key in wanted_ids if key in by_id)
        if isinstance(ref, (BySlug, BySlugList)):
            wanted_slugs = (ref.slug,) if isinstance(ref, BySlug) else ref.slugs
            found = self.directory.find_by_slugs(wanted_slugs)
            by_slug = {category.slug: category for category in found}
            self._log_missing("slug", wanted_slugs, by_slug)
            return tuple(by_slug[key] for key in wanted_slugs if key in by_slug)
        raise TypeError(f"Unsupported category reference: {ref!r}")

    def resolve_values(self, ref: CategoryRef, column: KeyColumn) -> tuple[int | str, ...]:
        """Return the ``column`` values of ``ref``.

        References already expressed in ``column`` pass through unchanged;
        anything else is hydrated first and the column is plucked.
        """

        passthrough = raw_keys(ref, column)
        if passthrough is not None:
            return passthrough
        values: list[int | str] = []
        for category in self.resolve_keeping_original(ref):
            value = category.key(column)
            if value is not None and value not in values:
                values.append(value)
        return tuple(values)

    @staticmethod
    def _log_missing(
        field: str, wanted: tuple[int, ...] | tuple[str, ...], found: dict[object, Category]
    ) -> None:
        missing = [key for key in wanted if key not in found]
        if missing:
            log.debug("Ignoring unknown category %s(s): %s", field, missing)


def raw_keys(ref: CategoryRef, column: KeyColumn) -> tuple[int | str, ...] | None:
    """Return the keys carried by ``ref`` when they are ``column`` values, else ``None``."""

    if ref.shape is RefShape.EMPTY:
        return ()
    if column is KeyColumn.SLUG:
        if isinstance(ref, BySlug):
            return (ref.slug,)
        if isinstance(ref, BySlugList):
            return ref.slugs
    if column is KeyColumn.ID:
        if isinstance(ref, ById):
            return (ref.category_id,)
        if isinstance(ref, ByIdList):
            return ref.category_ids
    return None

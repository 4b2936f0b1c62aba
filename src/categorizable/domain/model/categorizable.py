"""
Owner building blocks:
polymorphic discriminator, durable identity, queued and loaded categories.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar, NamedTuple

from categorizable.domain.errors import OwnerNotPersistedError

if TYPE_CHECKING:
    from categorizable.domain.model.category import Category
    from categorizable.domain.refs import CategoryRef


class OwnerKey(NamedTuple):
    """Polymorphic address of an owner in the association store."""

    categorizable_type: str
    categorizable_id: int


@dataclass(eq=False, kw_only=True)
class Categorizable:
    """Base for any entity that can hold categories.

    ``id`` stays ``None`` until the owner has been persisted. Categories assigned
    before that are kept in ``pending_categories`` and applied once the owner is
    created.
    """

    # class-level discriminator; subclasses must override
    CATEGORIZABLE_TYPE: ClassVar[str]

    id: int | None = None

    _pending_categories: CategoryRef | None = field(default=None, init=False, repr=False)
    _loaded_categories: tuple[Category, ...] | None = field(
        default=None, init=False, repr=False
    )

    @property
    def categorizable_type(self) -> str:
        return self.CATEGORIZABLE_TYPE

    @property
    def is_persisted(self) -> bool:
        return self.id is not None

    def owner_key(self) -> OwnerKey:
        if self.id is None:
            raise OwnerNotPersistedError(
                f"{type(self).__name__} has no identity yet; persist it before "
                "changing its categories"
            )
        return OwnerKey(self.CATEGORIZABLE_TYPE, self.id)

    # pending ------------------------------------------------------------------

    @property
    def pending_categories(self) -> CategoryRef | None:
        return self._pending_categories

    def queue_categories(self, ref: CategoryRef) -> None:
        self._pending_categories = ref

    def take_pending_categories(self) -> CategoryRef | None:
        """Return the queued reference and clear it."""
        ref = self._pending_categories
        self._pending_categories = None
        return ref

    # loaded -------------------------------------------------------------------

    @property
    def categories_loaded(self) -> bool:
        return self._loaded_categories is not None

    @property
    def categories(self) -> tuple[Category, ...]:
        return self._loaded_categories or ()

    @property
    def category_ids(self) -> frozenset[int]:
        return frozenset(c.id for c in self.categories if c.id is not None)

    @property
    def category_slugs(self) -> frozenset[str]:
        return frozenset(c.slug for c in self.categories)

    def set_loaded_categories(self, categories: tuple[Category, ...]) -> None:
        self._loaded_categories = categories

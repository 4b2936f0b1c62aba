"""In-memory fakes of the category ports for domain tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

from categorizable.domain.model import Article, Category, OwnerKey
from categorizable.domain.ports.persistence import AssociationChanges

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable, Sequence


def make_categories(*slugs: str) -> list[Category]:
    return [Category(slug=slug, name=slug.replace("-", " ").title()) for slug in slugs]


def make_article(owner_id: int | None = 1, title: str = "Example") -> Article:
    return Article(title=title, id=owner_id)


class FakeCategoryDirectory:
    """Dict-backed category directory counting lookups."""

    def __init__(self, categories: Iterable[Category] = ()) -> None:
        self._by_id: dict[int, Category] = {}
        self.queries = 0
        for category in categories:
            self.add(category)

    def add(self, entity: Category) -> None:
        if entity.id is None:
            entity.id = max(self._by_id, default=0) + 1
        self._by_id[entity.id] = entity

    def get(self, category_id: int) -> Category | None:
        return self._by_id.get(category_id)

    def find_by_ids(self, category_ids: Collection[int]) -> Sequence[Category]:
        self.queries += 1
        return [self._by_id[key] for key in category_ids if key in self._by_id]

    def find_by_slugs(self, slugs: Collection[str]) -> Sequence[Category]:
        self.queries += 1
        wanted = set(slugs)
        return [category for category in self._by_id.values() if category.slug in wanted]

    def list_all(self) -> Sequence[Category]:
        return sorted(self._by_id.values(), key=lambda category: category.slug)

    def by_slug(self, slug: str) -> Category:
        return next(category for category in self._by_id.values() if category.slug == slug)


class FakeAssociationStore:
    """Association rows kept as a set of category ids per owner key."""

    def __init__(self, directory: FakeCategoryDirectory) -> None:
        self.directory = directory
        self.rows: dict[OwnerKey, set[int]] = {}
        self.fail_with: Exception | None = None

    def category_ids(self, owner: OwnerKey) -> frozenset[int]:
        return frozenset(self.rows.get(owner, set()))

    def load_categories(self, owner: OwnerKey) -> tuple[Category, ...]:
        ids = sorted(self.rows.get(owner, set()))
        return tuple(category for key in ids if (category := self.directory.get(key)))

    def attach(self, owner: OwnerKey, category_ids: Collection[int]) -> AssociationChanges:
        self._maybe_fail()
        current = self.rows.setdefault(owner, set())
        added = sorted(set(category_ids) - current)
        current.update(added)
        return AssociationChanges(attached=tuple(added))

    def sync(self, owner: OwnerKey, category_ids: Collection[int]) -> AssociationChanges:
        self._maybe_fail()
        current = self.rows.setdefault(owner, set())
        wanted = set(category_ids)
        added = sorted(wanted - current)
        removed = sorted(current - wanted)
        self.rows[owner] = wanted
        return AssociationChanges(attached=tuple(added), detached=tuple(removed))

    def detach(self, owner: OwnerKey, category_ids: Collection[int]) -> AssociationChanges:
        self._maybe_fail()
        current = self.rows.setdefault(owner, set())
        removed = sorted(current & set(category_ids))
        current.difference_update(removed)
        return AssociationChanges(detached=tuple(removed))

    def _maybe_fail(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

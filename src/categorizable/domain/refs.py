"""Category references.

A caller may refer to categories by id, by slug, by instance, by a list of any
one of those, or by ``None``. ``category_ref`` reads such a raw value once and
returns one of the closed set of variants below; everything downstream switches
on the variant instead of re-inspecting the value.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from categorizable.domain.errors import ClassificationError
from categorizable.domain.model.category import Category


class RefShape(StrEnum):
    """Which key a reference carries."""

    ID = "id"
    SLUG = "slug"
    ENTITY = "entity"
    EMPTY = "empty"


@dataclass(frozen=True, slots=True)
class ById:
    category_id: int

    shape = RefShape.ID


@dataclass(frozen=True, slots=True)
class BySlug:
    slug: str

    shape = RefShape.SLUG


@dataclass(frozen=True, slots=True)
class ByEntity:
    category: Category

    shape = RefShape.ENTITY


@dataclass(frozen=True, slots=True)
class ByIdList:
    category_ids: tuple[int, ...]

    shape = RefShape.ID

    def __post_init__(self) -> None:
        if not self.category_ids:
            raise ValueError("ByIdList requires at least one id; use NoCategories")


@dataclass(frozen=True, slots=True)
class BySlugList:
    slugs: tuple[str, ...]

    shape = RefShape.SLUG

    def __post_init__(self) -> None:
        if not self.slugs:
            raise ValueError("BySlugList requires at least one slug; use NoCategories")


@dataclass(frozen=True, slots=True)
class ByEntitySet:
    categories: tuple[Category, ...]

    shape = RefShape.ENTITY

    def __post_init__(self) -> None:
        if not self.categories:
            raise ValueError("ByEntitySet requires at least one category; use NoCategories")


@dataclass(frozen=True, slots=True)
class NoCategories:
    """Explicit empty reference; synced, it clears every association."""

    shape = RefShape.EMPTY


type CategoryRef = ById | BySlug | ByEntity | ByIdList | BySlugList | ByEntitySet | NoCategories

type CategoryInput = (
    CategoryRef | int | str | Category | Iterable[int] | Iterable[str] | Iterable[Category] | None
)

_REF_TYPES = (ById, BySlug, ByEntity, ByIdList, BySlugList, ByEntitySet, NoCategories)


def category_ref(value: CategoryInput) -> CategoryRef:
    """Classify a raw category reference.

    The shape of a collection is decided by its first element; every further
    element must share that shape.
    """

    if isinstance(value, _REF_TYPES):
        return value
    if value is None:
        return NoCategories()
    single = _classify_single(value)
    if single is not None:
        return single
    if isinstance(value, (bytes, bytearray, dict)) or not isinstance(value, Iterable):
        raise ClassificationError(f"Cannot read {value!r} as a category reference")

    items = tuple(value)
    if not items:
        return NoCategories()
    shape = _shape_of(items[0])
    if shape is None:
        raise ClassificationError(
            f"Cannot read {items[0]!r} as a category id, slug or instance"
        )
    mismatched = [item for item in items[1:] if _shape_of(item) is not shape]
    if mismatched:
        raise ClassificationError(
            f"Mixed category reference: expected only {shape.value} values, "
            f"got {mismatched[0]!r}"
        )
    if shape is RefShape.ID:
        return ByIdList(tuple(_dedupe(items)))
    if shape is RefShape.SLUG:
        return BySlugList(tuple(_dedupe(items)))
    return ByEntitySet(tuple(_dedupe(items)))


def _classify_single(value: object) -> CategoryRef | None:
    if isinstance(value, bool):
        raise ClassificationError("Booleans are not category ids")
    if isinstance(value, str):
        return BySlug(value)
    if isinstance(value, int):
        return ById(value)
    if isinstance(value, Category):
        return ByEntity(value)
    return None


def _shape_of(item: object) -> RefShape | None:
    if isinstance(item, bool):
        return None
    if isinstance(item, str):
        return RefShape.SLUG
    if isinstance(item, int):
        return RefShape.ID
    if isinstance(item, Category):
        return RefShape.ENTITY
    return None


def _dedupe[T](items: Iterable[T]) -> list[T]:
    """Drop repeats while preserving first-seen order."""
    seen: set[object] = set()
    result: list[T] = []
    for item in items:
        marker = id(item) if isinstance(item, Category) else item
        if marker in seen:
            continue
        seen.add(marker)
        result.append(item)
    return result


def is_empty(ref: CategoryRef) -> bool:
    return isinstance(ref, NoCategories)


__all__ = [
    "ByEntity",
    "ByEntitySet",
    "ById",
    "ByIdList",
    "BySlug",
    "BySlugList",
    "CategoryInput",
    "CategoryRef",
    "NoCategories",
    "RefShape",
    "category_ref",
    "is_empty",
]

"""Category entity and slug derivation."""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass

from .enums import KeyColumn


def slugify(value: str) -> str:
    """Derive a URL-friendly slug from a display name."""

    text = unicodedata.normalize("NFKC", value)
    text = text.casefold()
    text = "".join(ch for ch in text if not unicodedata.category(ch).startswith("P"))
    text = "-".join(text.split())
    if not text:
        raise ValueError(f"cannot derive a slug from {value!r}")
    return text


@dataclass(eq=False, kw_only=True)
class Category:
    """A named, sluggable tag. Identity is the integer id assigned by the store."""

    slug: str
    name: str
    id: int | None = None

    @classmethod
    def create(cls, name: str, *, slug: str | None = None) -> Category:
        return cls(slug=slug or slugify(name), name=name)

    def key(self, column: KeyColumn) -> int | str | None:
        if column is KeyColumn.ID:
            return self.id
        return self.slug

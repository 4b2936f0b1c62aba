"""Concrete categorizable owners shipped with the package."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Final

from .categorizable import Categorizable


@dataclass(eq=False, kw_only=True)
class Article(Categorizable):
    CATEGORIZABLE_TYPE: ClassVar[str] = "article"

    title: str


@dataclass(eq=False, kw_only=True)
class Product(Categorizable):
    CATEGORIZABLE_TYPE: ClassVar[str] = "product"

    name: str
    sku: str | None = None


OWNER_CLASS_BY_TYPE: Final[dict[str, type[Categorizable]]] = {
    Article.CATEGORIZABLE_TYPE: Article,
    Product.CATEGORIZABLE_TYPE: Product,
}

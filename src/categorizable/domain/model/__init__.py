"""Public domain model surface."""

from __future__ import annotations

from categorizable.domain.model.catalog import OWNER_CLASS_BY_TYPE, Article, Product
from categorizable.domain.model.categorizable import Categorizable, OwnerKey
from categorizable.domain.model.category import Category, slugify
from categorizable.domain.model.enums import CategorizeMode, KeyColumn

__all__ = [  # noqa: RUF022
    # base
    "Categorizable",
    "OwnerKey",
    "Category",
    "slugify",
    # owners
    "Article",
    "Product",
    "OWNER_CLASS_BY_TYPE",
    # enums
    "CategorizeMode",
    "KeyColumn",
]

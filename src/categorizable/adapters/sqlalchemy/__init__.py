"""SQLAlchemy adapter package for categorizable."""

from __future__ import annotations

from .mappings import (
    OWNER_TABLE_BY_CLASS,
    categorizable_table,
    create_all_tables,
    mapper_registry,
    start_mappers,
)
from .repositories import (
    SqlAlchemyArticleRepository,
    SqlAlchemyAssociationStore,
    SqlAlchemyCategoryDirectory,
    SqlAlchemyOwnerRepository,
    SqlAlchemyProductRepository,
)
from .scopes import compile_scope

__all__ = [
    "OWNER_TABLE_BY_CLASS",
    "SqlAlchemyArticleRepository",
    "SqlAlchemyAssociationStore",
    "SqlAlchemyCategoryDirectory",
    "SqlAlchemyOwnerRepository",
    "SqlAlchemyProductRepository",
    "categorizable_table",
    "compile_scope",
    "create_all_tables",
    "mapper_registry",
    "start_mappers",
]

"""SQLAlchemy mapping metadata for the categorizable domain model."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING, Final

from sqlalchemy import (
    Column,
    DateTime,
    Dialect,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    TypeDecorator,
    UniqueConstraint,
    orm,
)
from sqlalchemy.orm import configure_mappers

from categorizable.domain.model import Article, Categorizable, Category, Product

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Core tables -----------------------------------------------------------------

category_table = Table(
    "categories",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("slug", String(255), nullable=False, unique=True),
    Column("name", String, nullable=False),
)

article_table = Table(
    "articles",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", String, nullable=False),
)

product_table = Table(
    "products",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String, nullable=False),
    Column("sku", String(64), nullable=True),
)

# Polymorphic association: owners are addressed by (type, id), no owner FK.
categorizable_table = Table(
    "categorizables",
    mapper_registry.metadata,
    Column("categorizable_id", Integer, nullable=False),
    Column("categorizable_type", String(64), nullable=False),
    Column(
        "category_id",
        Integer,
        ForeignKey("categories.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("created_at", UTCDateTime(), nullable=True),
    Column("updated_at", UTCDateTime(), nullable=True),
    UniqueConstraint(
        "categorizable_id",
        "categorizable_type",
        "category_id",
        name="uq_categorizables_owner_category",
    ),
    Index("ix_categorizables_owner", "categorizable_type", "categorizable_id"),
)

OWNER_TABLE_BY_CLASS: Final[dict[type[Categorizable], Table]] = {
    Article: article_table,
    Product: product_table,
}


def owner_table_for(owner_cls: type[Categorizable]) -> Table:
    try:
        return OWNER_TABLE_BY_CLASS[owner_cls]
    except KeyError:
        raise LookupError(f"{owner_cls.__name__} is not mapped as a categorizable owner") from None


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Category, category_table)
    for owner_cls, table in OWNER_TABLE_BY_CLASS.items():
        mapper_registry.map_imperatively(owner_cls, table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)

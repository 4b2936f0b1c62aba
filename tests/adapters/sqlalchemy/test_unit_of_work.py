from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine

from categorizable.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyCategorizableUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from categorizable.app import build_reconciler
from categorizable.domain.errors import StoreError
from categorizable.domain.model import Article, Category, Product
from categorizable.domain.ports.notifications import RecordingNotificationSink

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_sqlalchemy_unit_of_work_requires_startup() -> None:
    with pytest.raises(StartupError):
        SqlAlchemyCategorizableUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:", future=True)
    engine_b = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b
    assert is_started()


def test_repositories_require_an_open_unit_of_work(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    uow = SqlAlchemyCategorizableUnitOfWork()

    with pytest.raises(StartupError):
        _ = uow.repositories


def test_owners_lookup_by_type(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemyCategorizableUnitOfWork() as uow:
        assert uow.repositories.owners("article") is uow.repositories.articles
        assert uow.repositories.owners("product") is uow.repositories.products
        with pytest.raises(ValueError, match="Unknown owner type"):
            uow.repositories.owners("comment")


def test_pending_categories_flush_on_create(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    sink = RecordingNotificationSink()

    with SqlAlchemyCategorizableUnitOfWork() as uow:
        uow.repositories.categories.add(Category.create("News"))
        uow.repositories.categories.add(Category.create("Sports"))
        reconciler = build_reconciler(uow, notifications=sink)
        article = Article(title="Queued")
        reconciler.assign(article, ["news", "sports"])
        uow.repositories.articles.add(article)
        uow.commit()

    assert article.id is not None
    assert article.category_slugs == {"news", "sports"}
    assert sink.names == ["categorizable.category.attaching", "categorizable.category.attached"]

    with SqlAlchemyCategorizableUnitOfWork() as uow:
        stored = uow.repositories.associations.category_ids(article.owner_key())
    assert len(stored) == 2


def test_remove_owner_clears_associations(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemyCategorizableUnitOfWork() as uow:
        uow.repositories.categories.add(Category.create("News"))
        reconciler = build_reconciler(uow, notifications=RecordingNotificationSink())
        product = Product(name="Lamp")
        uow.repositories.products.add(product)
        reconciler.categorize(product, "news")
        uow.commit()
        key = product.owner_key()

    with SqlAlchemyCategorizableUnitOfWork() as uow:
        build_reconciler(uow, notifications=RecordingNotificationSink())
        stored = uow.repositories.products.get(key.categorizable_id)
        assert stored is not None
        uow.repositories.products.remove(stored)
        uow.commit()

    with SqlAlchemyCategorizableUnitOfWork() as uow:
        assert uow.repositories.associations.category_ids(key) == frozenset()


def test_unit_of_work_rolls_back_on_error(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with (
        pytest.raises(RuntimeError, match="boom"),
        SqlAlchemyCategorizableUnitOfWork() as uow,
    ):
        uow.repositories.categories.add(Category.create("News"))
        raise RuntimeError("boom")

    with SqlAlchemyCategorizableUnitOfWork() as uow:
        assert list(uow.repositories.categories.list_all()) == []


def test_commit_failure_raises_store_error(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemyCategorizableUnitOfWork() as uow:
        uow.repositories.categories.add(Category.create("News"))
        uow.commit()

    with (
        pytest.raises(StoreError, match="commit unit of work"),
        SqlAlchemyCategorizableUnitOfWork() as uow,
    ):
        uow.session.add(Category.create("news"))
        uow.commit()

    with SqlAlchemyCategorizableUnitOfWork() as uow:
        assert [category.slug for category in uow.repositories.categories.list_all()] == ["news"]

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from categorizable.app import (
    OwnerFilter,
    categorize_owner,
    create_category,
    create_owner,
    filter_owners,
    list_categories,
    owner_categories,
    remove_owner,
)
from categorizable.domain.errors import ClassificationError
from categorizable.domain.model import Article, CategorizeMode, KeyColumn, Product
from categorizable.domain.ports.notifications import RecordingNotificationSink

if TYPE_CHECKING:
    from collections.abc import Callable

    from categorizable.adapters.sqlalchemy.unit_of_work import SqlAlchemyCategorizableUnitOfWork

    UowFactory = Callable[[], SqlAlchemyCategorizableUnitOfWork]


@pytest.fixture
def uow_factory(sqlite_unit_of_work: UowFactory) -> UowFactory:
    for name in ("News", "Sports", "Tech"):
        create_category(name, unit_of_work_factory=sqlite_unit_of_work)
    return sqlite_unit_of_work


def test_categories_are_listed_by_slug(uow_factory: UowFactory) -> None:
    create_category("Arts", slug="the-arts", unit_of_work_factory=uow_factory)

    slugs = [category.slug for category in list_categories(unit_of_work_factory=uow_factory)]

    assert slugs == ["news", "sports", "tech", "the-arts"]


def test_create_owner_attaches_queued_categories(uow_factory: UowFactory) -> None:
    sink = RecordingNotificationSink()

    owner = create_owner(
        "article",
        title="Match report",
        categories=["news", "sports"],
        unit_of_work_factory=uow_factory,
        notifications=sink,
    )

    assert isinstance(owner, Article)
    assert owner_categories("article", owner.id or 0, unit_of_work_factory=uow_factory) == {
        "news": "News",
        "sports": "Sports",
    }
    assert sink.names == ["categorizable.category.attaching", "categorizable.category.attached"]


def test_create_owner_without_categories_publishes_nothing(uow_factory: UowFactory) -> None:
    sink = RecordingNotificationSink()

    owner = create_owner(
        "product", name="Lamp", unit_of_work_factory=uow_factory, notifications=sink
    )

    assert isinstance(owner, Product)
    assert owner.id is not None
    assert sink.events == []


def test_create_owner_rejects_unknown_type(uow_factory: UowFactory) -> None:
    with pytest.raises(ValueError, match="Unknown owner type"):
        create_owner("comment", unit_of_work_factory=uow_factory)


def test_categorize_owner_modes(uow_factory: UowFactory) -> None:
    owner = create_owner("article", title="Story", unit_of_work_factory=uow_factory)
    assert owner.id is not None
    sink = RecordingNotificationSink()

    attached = categorize_owner(
        "article", owner.id, [1, 2], unit_of_work_factory=uow_factory, notifications=sink
    )
    synced = categorize_owner(
        "article",
        owner.id,
        ["tech"],
        mode=CategorizeMode.SYNC,
        unit_of_work_factory=uow_factory,
        notifications=sink,
    )
    detached = categorize_owner(
        "article",
        owner.id,
        "tech",
        mode=CategorizeMode.DETACH,
        unit_of_work_factory=uow_factory,
        notifications=sink,
    )

    assert attached.attached == (1, 2)
    assert synced.attached == (3,)
    assert synced.detached == (1, 2)
    assert detached.detached == (3,)
    assert owner_categories("article", owner.id, unit_of_work_factory=uow_factory) == {}
    assert sink.names[2:4] == ["categorizable.category.syncing", "categorizable.category.synced"]


def test_categorize_owner_rejects_mixed_references(uow_factory: UowFactory) -> None:
    owner = create_owner("article", title="Story", unit_of_work_factory=uow_factory)
    assert owner.id is not None

    with pytest.raises(ClassificationError):
        categorize_owner("article", owner.id, [1, "news"], unit_of_work_factory=uow_factory)


def test_categorize_missing_owner(uow_factory: UowFactory) -> None:
    with pytest.raises(LookupError, match="No product with id 42"):
        categorize_owner("product", 42, ["news"], unit_of_work_factory=uow_factory)


def test_owner_categories_by_id(uow_factory: UowFactory) -> None:
    owner = create_owner(
        "product", name="Ball", categories="sports", unit_of_work_factory=uow_factory
    )
    assert owner.id is not None

    listing = owner_categories(
        "product", owner.id, key_column=KeyColumn.ID, unit_of_work_factory=uow_factory
    )

    assert listing == {2: "Sports"}


def test_remove_owner_clears_categories(uow_factory: UowFactory) -> None:
    owner = create_owner(
        "article", title="Old", categories=["news"], unit_of_work_factory=uow_factory
    )
    assert owner.id is not None

    remove_owner("article", owner.id, unit_of_work_factory=uow_factory)
    recreated = create_owner("article", title="New", unit_of_work_factory=uow_factory)

    assert recreated.id is not None
    assert owner_categories("article", recreated.id, unit_of_work_factory=uow_factory) == {}


def test_filter_owners(uow_factory: UowFactory) -> None:
    for title, categories in (
        ("both", ["news", "sports"]),
        ("news", ["news"]),
        ("bare", None),
    ):
        create_owner("article", title=title, categories=categories, unit_of_work_factory=uow_factory)

    def titles(owner_filter: OwnerFilter) -> list[str]:
        owners = filter_owners("article", owner_filter, unit_of_work_factory=uow_factory)
        return [owner.title for owner in owners if isinstance(owner, Article)]

    assert titles(OwnerFilter(with_all=["news", "sports"])) == ["both"]
    assert titles(OwnerFilter(with_any=["news"], without=["sports"])) == ["news"]
    assert titles(OwnerFilter(uncategorized=True)) == ["bare"]
    assert titles(OwnerFilter(without=[])) == ["bare"]
    assert titles(OwnerFilter(with_any=[2], column=KeyColumn.ID)) == ["both"]
    assert titles(OwnerFilter()) == ["both", "news", "bare"]

from __future__ import annotations

import pytest

from categorizable.domain.model import CategorizeMode, KeyColumn
from categorizable.domain.ports.persistence import AssociationChanges
from categorizable.ui import cli as cli_module


def test_parse_category_tokens() -> None:
    assert cli_module.parse_category_tokens(["1", "news", "02"]) == [1, "news", 2]
    assert cli_module.parse_category_tokens(None) is None


def test_cli_attach(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    captured: dict[str, object] = {}

    def fake_categorize(*args: object, **kwargs: object) -> AssociationChanges:
        captured["args"] = args
        captured.update(kwargs)
        return AssociationChanges(attached=(1, 2))

    monkeypatch.setattr(cli_module, "categorize_owner", fake_categorize)

    cli_module.main(["attach", "article", "7", "1", "2"])

    assert captured["args"] == ("article", 7, [1, 2])
    assert captured["mode"] is CategorizeMode.ATTACH
    assert "attached=[1, 2] detached=[]" in capsys.readouterr().out


def test_cli_sync_accepts_no_categories(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_categorize(*args: object, **kwargs: object) -> AssociationChanges:
        captured["args"] = args
        captured.update(kwargs)
        return AssociationChanges()

    monkeypatch.setattr(cli_module, "categorize_owner", fake_categorize)

    cli_module.main(["sync", "product", "3"])

    assert captured["args"] == ("product", 3, [])
    assert captured["mode"] is CategorizeMode.SYNC


def test_cli_owner_add_forwards_fields(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    class _Owner:
        id = 11

    def fake_create(owner_type: str, **kwargs: object) -> _Owner:
        captured["owner_type"] = owner_type
        captured.update(kwargs)
        return _Owner()

    monkeypatch.setattr(cli_module, "create_owner", fake_create)

    cli_module.main(["owner-add", "product", "Lamp", "--sku", "L-1", "--categories", "home"])

    assert captured == {
        "owner_type": "product",
        "name": "Lamp",
        "sku": "L-1",
        "categories": ["home"],
    }


def test_cli_filter_builds_owner_filter(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_filter(owner_type: str, owner_filter: object) -> list[object]:
        captured["owner_type"] = owner_type
        captured["filter"] = owner_filter
        return []

    monkeypatch.setattr(cli_module, "filter_owners", fake_filter)

    cli_module.main(["filter", "article", "--any", "1", "2", "--uncategorized", "--column", "id"])

    owner_filter = captured["filter"]
    assert isinstance(owner_filter, cli_module.OwnerFilter)
    assert owner_filter.with_any == [1, 2]
    assert owner_filter.with_all is None
    assert owner_filter.uncategorized
    assert owner_filter.column is KeyColumn.ID


def test_cli_invalid_request_exits_with_2(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_categorize(*_: object, **__: object) -> AssociationChanges:
        raise ValueError("bad input")

    monkeypatch.setattr(cli_module, "categorize_owner", fake_categorize)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["detach", "article", "1", "news"])

    assert excinfo.value.code == 2


def test_cli_unexpected_failure_exits_with_1(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_categorize(*_: object, **__: object) -> AssociationChanges:
        raise LookupError("No article with id 1")

    monkeypatch.setattr(cli_module, "categorize_owner", fake_categorize)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["attach", "article", "1", "news"])

    assert excinfo.value.code == 1


def test_cli_rejects_unknown_owner_type() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["show", "comment", "1"])

    assert excinfo.value.code == 2

import json

import pytest

from commonlib.storage import ListStore, SnapshotStore, StoreError


def test_missing_snapshot_loads_as_none(tmp_path):
    assert SnapshotStore(tmp_path).load("products") is None


def test_save_then_load_round_trip(tmp_path):
    store = SnapshotStore(tmp_path / "data")
    records = [
        {"id": "1", "name": {"en": "Oval Plate", "it": "Piatto Ovale"}, "image": "/src/Büyük.png"},
        {"id": "2", "name": {"en": "Bowl"}},
    ]
    store.save("products", records)
    assert store.load("products") == records
    raw = (tmp_path / "data" / "products.json").read_text(encoding="utf-8")
    assert json.loads(raw) == records
    assert "\n  " in raw


def test_collections_are_independent(tmp_path):
    store = SnapshotStore(tmp_path)
    store.save("products", [{"id": "p"}])
    store.save("categories", [{"id": "c"}])
    assert store.load("products") == [{"id": "p"}]
    assert store.load("categories") == [{"id": "c"}]


def test_save_overwrites_whole_collection(tmp_path):
    store = SnapshotStore(tmp_path, backups=0)
    store.save("categories", [{"id": "1"}, {"id": "2"}])
    store.save("categories", [{"id": "3"}])
    assert store.load("categories") == [{"id": "3"}]
    assert list(tmp_path.glob("categories.json.*")) == []


def test_load_recovers_from_backup(tmp_path):
    path = tmp_path / "products.json"
    store = ListStore(path, backups=2)
    store.save([{"id": "1"}])
    store.save([{"id": "1"}, {"id": "2"}])
    path.write_text("{corrupt", encoding="utf-8")
    assert store.load() == [{"id": "1"}]


def test_backups_rotate(tmp_path):
    path = tmp_path / "products.json"
    store = ListStore(path, backups=2)
    for idx in range(4):
        store.save([{"id": str(idx)}])
    backups = sorted(p.name for p in tmp_path.glob("products.json.bak*"))
    assert backups == ["products.json.bak1", "products.json.bak2"]
    assert json.loads((tmp_path / "products.json.bak1").read_text()) == [{"id": "2"}]
    assert not (tmp_path / "products.json.tmp").exists()


def test_unreadable_snapshot_raises_instead_of_reporting_missing(tmp_path):
    path = tmp_path / "products.json"
    path.write_text('{"bad": true}', encoding="utf-8")
    with pytest.raises(StoreError, match="products.json"):
        ListStore(path).load()


def test_corrupt_snapshot_and_backups_raise(tmp_path):
    path = tmp_path / "products.json"
    store = ListStore(path, backups=1)
    store.save([{"id": "1"}])
    store.save([{"id": "2"}])
    path.write_text("{corrupt", encoding="utf-8")
    path.with_suffix(".json.bak1").write_text("[oops", encoding="utf-8")
    with pytest.raises(StoreError):
        store.load()


def test_write_failure_raises_store_error(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    store = SnapshotStore(blocker / "data")
    with pytest.raises(StoreError):
        store.save("products", [{"id": "1"}])

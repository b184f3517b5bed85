import pytest

from stockpilot.constants import COL_BRANDS, COL_PRODUCTS, COL_SETTINGS
from stockpilot.database import get_connection, open_store
from stockpilot.database.schema import get_current_version


def test_empty_collections_have_defaults(store):
    assert store.get(COL_PRODUCTS) == []
    assert store.get(COL_SETTINGS) == {}
    assert store.revision(COL_PRODUCTS) == 0


def test_unknown_collection_is_rejected(store):
    with pytest.raises(ValueError):
        store.get("nope")
    with pytest.raises(ValueError):
        store.set("nope", [])


def test_schema_version_is_stamped(db_path):
    conn = get_connection(db_path)
    try:
        assert get_current_version(conn) == "1"
    finally:
        conn.close()


def test_set_persists_and_bumps_revision(store, db_path):
    store.set(COL_BRANDS, [{"id": "b1", "name": "Nike"}])
    store.set(COL_BRANDS, [{"id": "b1", "name": "Nike"}, {"id": "b2", "name": "Puma"}])
    assert store.revision(COL_BRANDS) == 2

    other = open_store(db_path)
    try:
        assert [b["name"] for b in other.get(COL_BRANDS)] == ["Nike", "Puma"]
    finally:
        other.close()


def test_set_emits_collection_changed(store, qtbot):
    with qtbot.waitSignal(store.collectionChanged, timeout=1000) as blocker:
        store.set(COL_BRANDS, [{"id": "b1", "name": "Nike"}])
    assert blocker.args[0] == COL_BRANDS
    assert blocker.args[1] == [{"id": "b1", "name": "Nike"}]


def test_subscribe_filters_by_name_and_unsubscribes(store):
    seen = []
    unsubscribe = store.subscribe(lambda name, value: seen.append(name), COL_BRANDS)

    store.set(COL_PRODUCTS, [])
    store.set(COL_BRANDS, [])
    assert seen == [COL_BRANDS]

    unsubscribe()
    store.set(COL_BRANDS, [{"id": "x", "name": "Later"}])
    assert seen == [COL_BRANDS]


def test_transaction_notifies_once_after_commit(store):
    seen = []
    store.subscribe(lambda name, value: seen.append((name, len(value))))

    with store.transaction():
        store.set(COL_BRANDS, [{"id": "a", "name": "A"}])
        store.set(COL_BRANDS, [{"id": "a", "name": "A"}, {"id": "b", "name": "B"}])
        assert seen == []
        assert store.in_transaction

    assert seen == [(COL_BRANDS, 2)]
    assert not store.in_transaction


def test_failed_transaction_rolls_back_without_notification(store):
    store.set(COL_BRANDS, [{"id": "a", "name": "A"}])
    seen = []
    store.subscribe(lambda name, value: seen.append(name))

    with pytest.raises(RuntimeError):
        with store.transaction():
            store.set(COL_BRANDS, [])
            store.set(COL_PRODUCTS, [{"id": "p"}])
            raise RuntimeError("boom")

    assert store.get(COL_BRANDS) == [{"id": "a", "name": "A"}]
    assert store.get(COL_PRODUCTS) == []
    assert seen == []


def test_nested_transactions_join_the_outer_one(store):
    with pytest.raises(RuntimeError):
        with store.transaction():
            with store.transaction():
                store.set(COL_BRANDS, [{"id": "a", "name": "A"}])
            raise RuntimeError("outer fails")
    assert store.get(COL_BRANDS) == []


def test_external_changes_are_detected(store, db_path):
    seen = []
    store.subscribe(lambda name, value: seen.append((name, value)))

    other = open_store(db_path)
    try:
        other.set(COL_BRANDS, [{"id": "z", "name": "Zeta"}])
    finally:
        other.close()

    assert store.sync_external_changes() == [COL_BRANDS]
    assert seen == [(COL_BRANDS, [{"id": "z", "name": "Zeta"}])]
    # Nothing new the second time around
    assert store.sync_external_changes() == []


def test_own_writes_are_not_reported_as_external(store):
    store.set(COL_BRANDS, [])
    assert store.sync_external_changes() == []


def test_watcher_polls_for_external_changes(store, db_path, qtbot):
    store.start_watching(interval_ms=20)
    other = open_store(db_path)
    try:
        with qtbot.waitSignal(store.collectionChanged, timeout=2000):
            other.set(COL_BRANDS, [{"id": "w", "name": "Watched"}])
    finally:
        other.close()
        store.stop_watching()

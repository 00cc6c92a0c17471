"""
History scanner tests: ordering, delete markers and cursor release.
"""

import pytest

from worklog_ledger.core.errors import StoreIterationError
from worklog_ledger.core.history import open_history


def _fill(store, key, values):
    for value in values:
        store.put_state(key, value)


def test_entries_in_store_order(memory_store):
    _fill(memory_store, "SWabc123", ["v1", "v2", "v3"])

    with open_history(memory_store, "SWabc123") as entries:
        raws = [entry.raw for entry in entries]

    assert raws == ["v1", "v2", "v3"]


def test_duplicate_values_are_kept(memory_store):
    _fill(memory_store, "SWabc123", ["same", "same"])

    with open_history(memory_store, "SWabc123") as entries:
        assert len(list(entries)) == 2


def test_delete_markers_are_skipped(memory_store):
    _fill(memory_store, "SWabc123", ["v1"])
    memory_store.delete_state("SWabc123")
    _fill(memory_store, "SWabc123", ["v2"])

    with open_history(memory_store, "SWabc123") as entries:
        assert [entry.raw for entry in entries] == ["v1", "v2"]


def test_entries_carry_key_and_tx(memory_store):
    tx_id = memory_store.put_state("SWabc123", "v1")

    with open_history(memory_store, "SWabc123") as entries:
        entry = next(entries)

    assert entry.key == "SWabc123"
    assert entry.tx_id == tx_id


def test_unknown_key_yields_nothing(memory_store):
    with open_history(memory_store, "SWnobody") as entries:
        assert list(entries) == []
    assert memory_store.cursors[0].closed


def test_cursor_closed_after_completion(memory_store):
    _fill(memory_store, "SWabc123", ["v1", "v2"])

    with open_history(memory_store, "SWabc123") as entries:
        list(entries)
        assert not memory_store.cursors[0].closed

    assert memory_store.cursors[0].closed


def test_cursor_closed_on_early_exit(memory_store):
    _fill(memory_store, "SWabc123", ["v1", "v2", "v3"])

    with open_history(memory_store, "SWabc123") as entries:
        for entry in entries:
            break

    assert memory_store.cursors[0].closed


def test_cursor_closed_when_consumer_raises(memory_store):
    _fill(memory_store, "SWabc123", ["v1", "v2"])

    with pytest.raises(KeyError):
        with open_history(memory_store, "SWabc123") as entries:
            for entry in entries:
                raise KeyError(entry.raw)

    assert memory_store.cursors[0].closed


def test_fault_mid_scan(memory_store):
    _fill(memory_store, "SWabc123", ["v1", "v2", "v3"])
    memory_store.fail_at = 1
    seen = []

    with pytest.raises(StoreIterationError) as exc_info:
        with open_history(memory_store, "SWabc123") as entries:
            for entry in entries:
                seen.append(entry.raw)

    assert seen == ["v1"]
    assert exc_info.value.key == "SWabc123"
    assert isinstance(exc_info.value.cause, RuntimeError)
    assert memory_store.cursors[0].closed


def test_fault_opening_cursor(memory_store):
    memory_store.fail_on_open = True

    with pytest.raises(StoreIterationError):
        with open_history(memory_store, "SWabc123"):
            pass


def test_sqlite_history_order(sqlite_store):
    _fill(sqlite_store, "SWabc123", ["v1", "v2", "v3"])
    _fill(sqlite_store, "SWother", ["x1"])

    with open_history(sqlite_store, "SWabc123") as entries:
        assert [entry.raw for entry in entries] == ["v1", "v2", "v3"]


def test_close_fault_after_completion(memory_store):
    _fill(memory_store, "SWabc123", ["v1"])
    memory_store.fail_on_close = True

    with pytest.raises(StoreIterationError) as exc_info:
        with open_history(memory_store, "SWabc123") as entries:
            list(entries)

    assert isinstance(exc_info.value.cause, OSError)


def test_close_fault_does_not_mask_scan_fault(memory_store):
    _fill(memory_store, "SWabc123", ["v1", "v2"])
    memory_store.fail_at = 1
    memory_store.fail_on_close = True

    with pytest.raises(StoreIterationError) as exc_info:
        with open_history(memory_store, "SWabc123") as entries:
            list(entries)

    assert isinstance(exc_info.value.cause, RuntimeError)
    assert memory_store.cursors[0].closed


def test_close_fault_does_not_mask_consumer_error(memory_store):
    _fill(memory_store, "SWabc123", ["v1"])
    memory_store.fail_on_close = True

    with pytest.raises(KeyError):
        with open_history(memory_store, "SWabc123") as entries:
            for entry in entries:
                raise KeyError(entry.raw)

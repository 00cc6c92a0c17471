"""
Shared fixtures: an in-memory store double that records every adapter call
and can fail its history cursor on demand, plus a temporary SQLite ledger.
"""

import json

import pytest

from worklog_ledger.core.schema import KeyModification
from worklog_ledger.core.store import HistoryCursor, RecordStore, SQLiteRecordStore


class RecordingCursor(HistoryCursor):
    def __init__(self, modifications, fail_at=None, fail_on_close=False):
        self._items = list(modifications)
        self._index = 0
        self.fail_at = fail_at
        self.fail_on_close = fail_on_close
        self.closed = False

    def __next__(self):
        if self.fail_at is not None and self._index == self.fail_at:
            raise RuntimeError("cursor fault")
        if self._index >= len(self._items):
            raise StopIteration
        item = self._items[self._index]
        self._index += 1
        return item

    def close(self):
        self.closed = True
        if self.fail_on_close:
            raise OSError("close fault")


class InMemoryRecordStore(RecordStore):
    def __init__(self, fail_at=None, fail_on_open=False, fail_on_close=False):
        self.state = {}
        self.history = {}
        self.calls = []
        self.cursors = []
        self.fail_at = fail_at
        self.fail_on_open = fail_on_open
        self.fail_on_close = fail_on_close

    def get_state(self, key):
        self.calls.append(("get_state", key))
        return self.state.get(key)

    def put_state(self, key, value):
        self.calls.append(("put_state", key))
        return self._append(key, value, is_delete=False)

    def delete_state(self, key):
        self.calls.append(("delete_state", key))
        return self._append(key, "", is_delete=True)

    def get_history_for_key(self, key):
        self.calls.append(("get_history_for_key", key))
        if self.fail_on_open:
            raise ConnectionError("store unavailable")
        cursor = RecordingCursor(self.history.get(key, []), self.fail_at, self.fail_on_close)
        self.cursors.append(cursor)
        return cursor

    def put_record(self, key, record):
        """Write a JSON record (test convenience)."""
        return self.put_state(key, json.dumps(record))

    def _append(self, key, value, is_delete):
        tx_id = f"tx{sum(len(v) for v in self.history.values()) + 1}"
        self.history.setdefault(key, []).append(
            KeyModification(key=key, value=value, tx_id=tx_id, is_delete=is_delete)
        )
        self.state[key] = value
        return tx_id


@pytest.fixture
def memory_store():
    return InMemoryRecordStore()


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "ledger.db")


@pytest.fixture
def sqlite_store(db_path):
    return SQLiteRecordStore(db_path=db_path, namespace="swworklog")


@pytest.fixture
def worklog_history():
    """Three worklog events for profile abc123; only v2 is a Daily_Check."""
    return [
        {"profileId": "abc123", "assetType": "Health", "eventType": "Weekly_Review", "eventValue": True},
        {"profileId": "abc123", "assetType": "Health", "eventType": "Daily_Check", "eventValue": True},
        {"profileId": "abc123", "assetType": "Finance", "eventType": "Monthly_Close", "eventValue": False},
    ]

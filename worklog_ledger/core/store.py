"""
Record store adapter.

`RecordStore` is the narrow contract the query engine depends on: exact-key
state reads and writes plus a per-key history cursor that must be closed by
its user. `SQLiteRecordStore` implements it over the tables in `db.py`.
"""

import sqlite3
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Iterator, Optional

from . import config
from .db import get_db, init_db
from .schema import KeyModification
from ..util.logging import logger


class HistoryCursor(ABC):
    """Single-pass iterator over one key's modifications, oldest first."""

    def __iter__(self) -> Iterator[KeyModification]:
        return self

    @abstractmethod
    def __next__(self) -> KeyModification:
        ...

    @abstractmethod
    def close(self) -> None:
        """Release the underlying resource. Safe to call more than once."""


class RecordStore(ABC):
    """Key-value ledger with per-key history."""

    @abstractmethod
    def get_state(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def put_state(self, key: str, value: str) -> str:
        """Write a value and append it to the key's history. Returns the tx id."""

    @abstractmethod
    def delete_state(self, key: str) -> str:
        """Clear the current value and append a delete marker. Returns the tx id."""

    @abstractmethod
    def get_history_for_key(self, key: str) -> HistoryCursor:
        ...


class SQLiteHistoryCursor(HistoryCursor):
    """History cursor holding its own connection until closed."""

    def __init__(self, db_path: str, namespace: str, key: str):
        self._conn = sqlite3.connect(db_path)
        try:
            self._cursor = self._conn.execute(
                "SELECT key, value, tx_id, ts, is_delete FROM history "
                "WHERE namespace = ? AND key = ? ORDER BY id ASC",
                (namespace, key)
            )
        except sqlite3.Error:
            self._conn.close()
            raise
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def __next__(self) -> KeyModification:
        if self._closed:
            raise StopIteration
        row = self._cursor.fetchone()
        if row is None:
            raise StopIteration
        key, value, tx_id, ts, is_delete = row
        return KeyModification(
            key=key,
            value=value or "",
            tx_id=tx_id,
            timestamp=ts,
            is_delete=bool(is_delete)
        )

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._conn.close()


class SQLiteRecordStore(RecordStore):
    """Ledger store over SQLite, partitioned by chaincode namespace."""

    def __init__(self, db_path: str = None, namespace: str = None):
        self.db_path = db_path or config.DB_PATH
        self.namespace = namespace or config.CHAIN_CODE_ID_TRANSMGMT
        init_db(self.db_path)

    def get_state(self, key: str) -> Optional[str]:
        with get_db(self.db_path) as conn:
            row = conn.execute(
                "SELECT value FROM state WHERE namespace = ? AND key = ?",
                (self.namespace, key)
            ).fetchone()
        return row[0] if row else None

    def put_state(self, key: str, value: str) -> str:
        return self._append(key, value, is_delete=False)

    def delete_state(self, key: str) -> str:
        return self._append(key, "", is_delete=True)

    def get_history_for_key(self, key: str) -> SQLiteHistoryCursor:
        return SQLiteHistoryCursor(self.db_path, self.namespace, key)

    def _append(self, key: str, value: str, is_delete: bool) -> str:
        tx_id = uuid.uuid4().hex
        ts = datetime.now(timezone.utc).isoformat()
        with get_db(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute(
                "INSERT INTO history (namespace, key, value, tx_id, ts, is_delete) VALUES (?, ?, ?, ?, ?, ?)",
                (self.namespace, key, value, tx_id, ts, is_delete)
            )
            cursor.execute(
                "INSERT INTO state (namespace, key, value, tx_id, updated_at) VALUES (?, ?, ?, ?, ?) "
                "ON CONFLICT(namespace, key) DO UPDATE SET value = excluded.value, "
                "tx_id = excluded.tx_id, updated_at = excluded.updated_at",
                (self.namespace, key, value, tx_id, ts)
            )
            conn.commit()

        logger.log_ledger_operation("delete" if is_delete else "put", key, value)
        return tx_id

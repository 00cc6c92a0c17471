"""
SQLite backing for the ledger.
Current state lives in `state`; every write appends to `history`.
"""

import sqlite3
from contextlib import contextmanager
from typing import Generator

from . import config


@contextmanager
def get_db(db_path: str = None) -> Generator[sqlite3.Connection, None, None]:
    """Get a SQLite database connection."""
    conn = sqlite3.connect(db_path or config.DB_PATH)
    try:
        yield conn
    finally:
        conn.close()


def init_db(db_path: str = None):
    """Initialize the database with required tables."""
    config.ensure_db_directory(db_path)
    with get_db(db_path) as conn:
        cursor = conn.cursor()

        # Current value per key, scoped by chaincode namespace
        cursor.execute('''
            CREATE TABLE IF NOT EXISTS state (
                namespace TEXT NOT NULL,
                key TEXT NOT NULL,
                value TEXT,
                tx_id TEXT NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                PRIMARY KEY (namespace, key)
            )
        ''')

        # Append-only modification log; id gives commit order
        cursor.execute('''
            CREATE TABLE IF NOT EXISTS history (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                namespace TEXT NOT NULL,
                key TEXT NOT NULL,
                value TEXT,
                tx_id TEXT NOT NULL,
                ts TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                is_delete BOOLEAN DEFAULT FALSE
            )
        ''')

        cursor.execute('CREATE INDEX IF NOT EXISTS idx_history_ns_key_id ON history(namespace, key, id)')

        conn.commit()


def health_check(db_path: str = None):
    """Check database health."""
    try:
        with get_db(db_path) as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT name FROM sqlite_master WHERE type='table';")
            table_names = [table[0] for table in cursor.fetchall()]
            return all(table in table_names for table in ['state', 'history'])
    except sqlite3.Error:
        return False


def count_keys(db_path: str = None, namespace: str = None) -> int:
    """Count keys holding a current value."""
    try:
        with get_db(db_path) as conn:
            cursor = conn.cursor()
            if namespace is None:
                cursor.execute("SELECT COUNT(*) FROM state WHERE value != ''")
            else:
                cursor.execute("SELECT COUNT(*) FROM state WHERE namespace = ? AND value != ''", (namespace,))
            return cursor.fetchone()[0]
    except sqlite3.Error:
        return 0

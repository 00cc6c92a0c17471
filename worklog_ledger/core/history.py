"""
History scanning over a store cursor.
"""

from contextlib import contextmanager
from typing import Generator, Iterator

from .errors import StoreIterationError
from .schema import HistoryEntry
from .store import HistoryCursor, RecordStore
from ..util.logging import logger


@contextmanager
def open_history(store: RecordStore, key: str) -> Generator[Iterator[HistoryEntry], None, None]:
    """Open a key's history for one pass.

    Yields a lazy iterator of HistoryEntry in the order the store reports
    them. The cursor is closed when the block exits, whichever way it exits.
    Delete markers (empty values) are skipped. Store failures are raised as
    StoreIterationError.
    """
    try:
        cursor = store.get_history_for_key(key)
    except Exception as e:
        raise StoreIterationError(key, e) from e

    try:
        yield _entries(cursor, key)
    except BaseException:
        # the in-flight error wins over a failing close
        try:
            cursor.close()
        except Exception as close_error:
            logger.warning(f"History cursor for {key} failed to close: {close_error}")
        raise

    try:
        cursor.close()
    except Exception as e:
        raise StoreIterationError(key, e) from e


def _entries(cursor: HistoryCursor, key: str) -> Iterator[HistoryEntry]:
    while True:
        try:
            modification = next(cursor)
        except StopIteration:
            return
        except Exception as e:
            raise StoreIterationError(key, e) from e

        if modification.is_delete or not modification.value:
            continue

        yield HistoryEntry(
            key=modification.key,
            raw=modification.value,
            tx_id=modification.tx_id,
            timestamp=modification.timestamp
        )

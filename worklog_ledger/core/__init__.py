"""
Ledger core: store adapter, selector parsing and history queries.
"""

from .errors import (
    WorklogError,
    InvalidSelector,
    NotFound,
    DecodeFailure,
    StoreIterationError,
    UnknownOperation,
    InvalidArguments
)
from .query import point_lookup, filtered_history_query, run_history_query
from .selector import parse_selector, resolve_key, make_store_key
from .store import RecordStore, HistoryCursor, SQLiteRecordStore

__all__ = [
    'WorklogError',
    'InvalidSelector',
    'NotFound',
    'DecodeFailure',
    'StoreIterationError',
    'UnknownOperation',
    'InvalidArguments',
    'point_lookup',
    'filtered_history_query',
    'run_history_query',
    'parse_selector',
    'resolve_key',
    'make_store_key',
    'RecordStore',
    'HistoryCursor',
    'SQLiteRecordStore'
]

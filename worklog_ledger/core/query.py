"""
Ledger read paths: point lookup and filtered history queries.

A history query resolves its selector to one key, walks that key's history
in store order and keeps the entries whose record satisfies every equality
constraint. Results serialize as a JSON array of {"Key", "Record"} objects.
"""

import json
from typing import List, Union

from .errors import DecodeFailure, NotFound
from .evaluator import decode_record, matches
from .history import open_history
from .schema import QueryResultEntry, Selector
from .selector import parse_selector, resolve_key
from .store import RecordStore
from ..util.logging import logger


def point_lookup(store: RecordStore, key: str) -> str:
    """Current value under key, returned as stored."""
    value = store.get_state(key)
    if not value:
        logger.log_ledger_operation("get", key, status="not_found")
        raise NotFound(key)

    logger.log_ledger_operation("get", key, value)
    return value


def run_history_query(store: RecordStore, selector: Union[str, Selector]) -> List[QueryResultEntry]:
    """Matching history entries in scan order."""
    if not isinstance(selector, Selector):
        selector = parse_selector(selector)
    key = resolve_key(selector)

    results = []
    with open_history(store, key) as entries:
        for entry in entries:
            try:
                record, decoded = decode_record(entry.raw), True
            except DecodeFailure as e:
                logger.log_decode_failure(entry.key, entry.raw, e)
                record, decoded = entry.raw, False

            matched = matches(selector, record, decoded)
            logger.log_history_entry(entry.key, entry.tx_id, matched)
            if matched:
                results.append(QueryResultEntry(key=entry.key, record=record, decoded=decoded))

    logger.log_query(selector.as_dict(), key, len(results))
    return results


def serialize_results(results: List[QueryResultEntry]) -> str:
    return json.dumps([entry.to_dict() for entry in results], allow_nan=False)


def filtered_history_query(store: RecordStore, selector_text: str) -> str:
    """Run a selector query and return the serialized result array."""
    return serialize_results(run_history_query(store, selector_text))

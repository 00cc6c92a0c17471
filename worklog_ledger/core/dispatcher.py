"""
Ledger function dispatch.

Function names map onto a closed set of operations. Every handler takes the
store and the raw parameters (a JSON object string, or a list whose first
element is one) and returns the response payload as text.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import ValidationError

from .config import RequestConfig
from .errors import InvalidArguments, UnknownOperation, WorklogError
from .evaluator import strict_loads
from .query import point_lookup, filtered_history_query, run_history_query, serialize_results
from .selector import make_store_key, selector_from_mapping
from .store import RecordStore, SQLiteRecordStore
from ..api.schemas import WorklogRecord
from ..util.logging import logger, sanitize_record

Params = Union[str, List[str], None]


class Operation(str, Enum):
    INIT_LEDGER = "initLedger"
    CREATE_WORKLOG = "createSWWorklog"
    QUERY_WORKLOG = "queryWorklog"
    QUERY_ALL_WORKLOG_HIST = "queryAllWorklogHist"
    QUERY_WORKLOG_HIST = "queryWorklogHist"

    @classmethod
    def from_name(cls, name: str) -> "Operation":
        try:
            return cls(name)
        except ValueError:
            raise UnknownOperation(name)


@dataclass
class Response:
    """Success or error envelope returned to the transport."""
    status: int
    payload: Optional[str] = None
    message: str = ""
    error_type: Optional[str] = None

    @classmethod
    def success(cls, payload: Optional[str] = None) -> "Response":
        return cls(status=200, payload=payload)

    @classmethod
    def error(cls, err: WorklogError) -> "Response":
        return cls(status=500, message=err.message, error_type=err.error_type)

    @property
    def ok(self) -> bool:
        return self.status == 200


def parse_args(params: Params) -> Dict[str, Any]:
    """Decode function parameters into a JSON object."""
    if isinstance(params, (list, tuple)):
        params = params[0] if params else None
    if params is None or params == "":
        return {}
    try:
        args = strict_loads(params)
    except (TypeError, ValueError) as e:
        raise InvalidArguments(f"Arguments must be a JSON object string: {e}")
    if not isinstance(args, dict):
        raise InvalidArguments(f"Arguments must be a JSON object, got: {params}")
    return args


def _profile_key(args: Dict[str, Any]) -> str:
    profile_id = args.get("profileId")
    if profile_id is None or profile_id == "":
        raise InvalidArguments("profileId is required")
    return make_store_key(profile_id)


def init_ledger(store: RecordStore, params: Params) -> Optional[str]:
    logger.log_operation("ledger.init", "success")
    return None


def create_worklog(store: RecordStore, params: Params) -> str:
    """Write a worklog event under SW + profileId."""
    args = parse_args(params)
    try:
        record = WorklogRecord(**args)
    except ValidationError as e:
        raise InvalidArguments(f"Invalid worklog record: {e.error_count()} validation error(s)")

    key = _profile_key(args)
    try:
        value = json.dumps(record.ledger_fields(), allow_nan=False)
    except ValueError as e:
        raise InvalidArguments(f"Invalid worklog record: {e}")
    tx_id = store.put_state(key, value)
    return json.dumps({"key": key, "tx_id": tx_id})


def query_worklog(store: RecordStore, params: Params) -> str:
    """Current worklog record of a profile."""
    return point_lookup(store, _profile_key(parse_args(params)))


def query_all_worklog_hist(store: RecordStore, params: Params) -> str:
    """Every historical worklog record of a profile."""
    key = _profile_key(parse_args(params))
    return filtered_history_query(store, json.dumps({"selector": {"docType": key}}))


def query_worklog_hist(store: RecordStore, params: Params) -> str:
    """Historical records of a profile whose fields equal the remaining args."""
    args = parse_args(params)
    key = _profile_key(args)
    filters = {name: value for name, value in args.items() if name not in ("profileId", "docType")}
    selector = selector_from_mapping({"docType": key, **filters})
    return serialize_results(run_history_query(store, selector))


HANDLERS: Dict[Operation, Callable[[RecordStore, Params], Optional[str]]] = {
    Operation.INIT_LEDGER: init_ledger,
    Operation.CREATE_WORKLOG: create_worklog,
    Operation.QUERY_WORKLOG: query_worklog,
    Operation.QUERY_ALL_WORKLOG_HIST: query_all_worklog_hist,
    Operation.QUERY_WORKLOG_HIST: query_worklog_hist,
}


def store_for(config: RequestConfig, db_path: str = None) -> SQLiteRecordStore:
    """Ledger store for the chaincode a request is routed to."""
    return SQLiteRecordStore(db_path=db_path, namespace=config.chaincode_id)


def invoke(function: str, params: Params, config: RequestConfig, store: RecordStore = None) -> Response:
    """Run a ledger function and wrap its outcome in a Response.

    Unknown function names raise UnknownOperation. Errors raised by a known
    function come back as an error Response.
    """
    operation = Operation.from_name(function)
    if store is None:
        store = store_for(config)

    logger.log_dispatch(function, config.channel_name, config.chaincode_id,
                        details={"args": sanitize_record(params)})
    try:
        payload = HANDLERS[operation](store, params)
    except WorklogError as e:
        logger.log_error_envelope(function, e.error_type, e.message)
        return Response.error(e)

    return Response.success(payload)

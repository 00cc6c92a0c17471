"""
HTTP API for the worklog ledger.
"""

import json
from typing import Any, Dict

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from .schemas import (
    CreateWorklogResponse,
    ErrorResponse,
    HealthResponse,
    InvokeRequest,
    InvokeResponse,
    QueryRequest,
    QueryResponse,
    TransmgmtEvent,
    WorklogRecord,
)
from ..core import config
from ..core.config import VERSION, debug_enabled, request_config_for
from ..core.db import count_keys, health_check, init_db
from ..core.dispatcher import create_worklog, invoke, store_for
from ..core.errors import (
    InvalidArguments,
    InvalidSelector,
    NotFound,
    StoreIterationError,
    UnknownOperation,
    WorklogError,
)
from ..core.evaluator import strict_loads
from ..core.query import point_lookup, run_history_query
from ..core.selector import make_store_key, selector_from_mapping
from ..core.store import RecordStore
from ..util.logging import logger

ERROR_STATUS = {
    InvalidSelector: 400,
    InvalidArguments: 400,
    UnknownOperation: 400,
    NotFound: 404,
    StoreIterationError: 503,
}

app = FastAPI(
    title="Worklog Ledger API",
    version=VERSION,
    description="Append-only worklog ledger with history queries",
    docs_url="/docs" if debug_enabled() else None,
    redoc_url="/redoc" if debug_enabled() else None
)


def get_db_path() -> str:
    return config.DB_PATH


def ledger_db(db_path: str = Depends(get_db_path)) -> str:
    """Ledger path with its schema in place."""
    init_db(db_path)
    return db_path


def get_store(db_path: str = Depends(ledger_db)) -> RecordStore:
    return store_for(request_config_for("SWTransmgmt"), db_path)


def strip_ledger_timestamp(record: Any) -> Any:
    """Drop the ledger-side BCTimestamp from a record returned to clients."""
    if isinstance(record, dict):
        return {k: v for k, v in record.items() if k != "BCTimestamp"}
    return record


def _decode_for_client(raw: str) -> Any:
    try:
        return strip_ledger_timestamp(strict_loads(raw))
    except ValueError:
        return raw


@app.get("/health", response_model=HealthResponse)
def health_check_endpoint(db_path: str = Depends(ledger_db)):
    """Check system health."""
    db_health = health_check(db_path)
    return HealthResponse(
        status="healthy" if db_health else "unhealthy",
        version=VERSION,
        db_health=db_health,
        key_count=count_keys(db_path)
    )


@app.post("/worklog", response_model=CreateWorklogResponse)
def create_worklog_endpoint(record: WorklogRecord, store: RecordStore = Depends(get_store)):
    """Append a worklog event for a profile."""
    payload = json.loads(create_worklog(store, json.dumps(record.ledger_fields())))
    return CreateWorklogResponse(success=True, key=payload["key"], tx_id=payload["tx_id"])


@app.post("/events/transmgmt", response_model=CreateWorklogResponse)
def transmgmt_event_endpoint(event: TransmgmtEvent, store: RecordStore = Depends(get_store)):
    """Map a transaction-management event onto a worklog record and append it."""
    record = event.to_worklog()
    payload = json.loads(create_worklog(store, json.dumps(record.ledger_fields())))
    return CreateWorklogResponse(success=True, key=payload["key"], tx_id=payload["tx_id"])


@app.get("/worklog/{profile_id}")
def get_worklog_endpoint(profile_id: str, store: RecordStore = Depends(get_store)) -> Dict[str, Any]:
    """Current worklog record of a profile."""
    key = make_store_key(profile_id)
    return {"key": key, "record": _decode_for_client(point_lookup(store, key))}


@app.get("/worklog/{profile_id}/history", response_model=QueryResponse)
def get_worklog_history_endpoint(profile_id: str, request: Request, store: RecordStore = Depends(get_store)):
    """Historical records of a profile; query parameters are string equality filters."""
    filters = dict(request.query_params)
    filters.pop("docType", None)
    selector = selector_from_mapping({"docType": make_store_key(profile_id), **filters})
    return _query_response(run_history_query(store, selector))


@app.post("/query", response_model=QueryResponse)
def query_endpoint(request: QueryRequest, store: RecordStore = Depends(get_store)):
    """Run a selector query against a key's history."""
    return _query_response(run_history_query(store, json.dumps({"selector": request.selector})))


@app.post("/invoke", response_model=InvokeResponse)
def invoke_endpoint(request: InvokeRequest, db_path: str = Depends(ledger_db)):
    """Dispatch a ledger function by name."""
    try:
        request_config = request_config_for(request.event_type, request.fabric_username)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    response = invoke(
        request.function,
        json.dumps(request.args),
        request_config,
        store=store_for(request_config, db_path)
    )
    return InvokeResponse(
        status=response.status,
        payload=response.payload,
        message=response.message,
        error_type=response.error_type
    )


def _query_response(results) -> QueryResponse:
    items = [
        {"Key": entry.key, "Record": strip_ledger_timestamp(entry.record)}
        for entry in results
    ]
    return QueryResponse(results=items, count=len(items))


@app.exception_handler(WorklogError)
async def worklog_error_handler(request, exc: WorklogError):
    """Map ledger errors onto HTTP status codes."""
    status_code = ERROR_STATUS.get(type(exc), 500)
    content = ErrorResponse(error_type=exc.error_type, message=exc.message)
    return JSONResponse(status_code=status_code, content=content.model_dump(mode="json"))


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Handle all unhandled exceptions."""
    logger.error(f"Unhandled exception: {exc}")
    content = {"detail": "Internal server error"}
    if debug_enabled():
        content["debug"] = str(exc)
    return JSONResponse(
        status_code=500,
        content=content,
    )

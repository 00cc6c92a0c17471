"""
Request, response and record models for the worklog ledger API.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class WorklogRecord(BaseModel):
    """A worklog event as stored on the ledger.

    Known fields are optional; unknown fields are kept as extras so records
    written by newer clients survive a round trip.
    """
    model_config = ConfigDict(extra="allow")

    profileId: Optional[Union[str, int]] = None
    assetType: Optional[str] = None
    assetSubType: Optional[str] = None
    eventType: Optional[str] = None
    eventValue: Optional[Union[bool, int, float, str]] = None
    assetReference: Optional[str] = None
    latitude: Optional[Union[float, str]] = None
    longitude: Optional[Union[float, str]] = None
    RegulatoryZone: Optional[str] = None
    timestamp: Optional[Union[str, int]] = None
    BCTimestamp: Optional[int] = None

    def ledger_fields(self) -> Dict[str, Any]:
        """Fields that were supplied, extras included, in input order."""
        return self.model_dump(exclude_unset=True)


class TransmgmtEvent(BaseModel):
    """Inbound worklog event from the transaction-management queue."""
    model_config = ConfigDict(extra="ignore")

    selfProfileId: Union[str, int]
    assetType: Optional[str] = None
    assetSubType: Optional[str] = None
    eventType: Optional[str] = None
    eventValue: Optional[Union[bool, int, float, str]] = None
    assetReference: Optional[str] = None
    latitude: Optional[Union[float, str]] = None
    longitude: Optional[Union[float, str]] = None
    RegulatoryZone: Optional[str] = None
    timestamp: Optional[Union[str, int]] = None

    @field_validator('selfProfileId')
    @classmethod
    def profile_id_must_not_be_empty(cls, v):
        if isinstance(v, str) and not v.strip():
            raise ValueError('selfProfileId cannot be empty')
        return v

    def to_worklog(self, now: datetime = None) -> WorklogRecord:
        """Map onto a ledger record, stamping BCTimestamp in epoch milliseconds."""
        now = now or datetime.now()
        return WorklogRecord(
            profileId=self.selfProfileId,
            assetType=self.assetType,
            assetSubType=self.assetSubType,
            eventType=self.eventType,
            eventValue=self.eventValue,
            assetReference=self.assetReference,
            latitude=self.latitude,
            longitude=self.longitude,
            RegulatoryZone=self.RegulatoryZone,
            timestamp=self.timestamp,
            BCTimestamp=int(now.timestamp() * 1000)
        )


class InvokeRequest(BaseModel):
    function: str
    args: Dict[str, Any] = Field(default_factory=dict)
    event_type: str = "SWTransmgmt"
    fabric_username: Optional[str] = None

    @field_validator('function')
    @classmethod
    def function_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('function cannot be empty')
        return v


class InvokeResponse(BaseModel):
    status: int
    payload: Any = None
    message: str = ""
    error_type: Optional[str] = None


class QueryRequest(BaseModel):
    selector: Dict[str, Any]


class QueryResultItem(BaseModel):
    Key: str
    Record: Any


class QueryResponse(BaseModel):
    results: List[QueryResultItem]
    count: int


class CreateWorklogResponse(BaseModel):
    success: bool
    key: str
    tx_id: str


class HealthResponse(BaseModel):
    status: str
    version: str
    db_health: bool
    key_count: int


class ErrorResponse(BaseModel):
    error_type: str
    message: str
    timestamp: datetime = None

    def __init__(self, **data):
        super().__init__(timestamp=datetime.now(), **data)

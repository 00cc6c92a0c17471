"""
Typed values passed between the store adapter and the query engine.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

Scalar = Union[str, int, float, bool, None]


@dataclass(frozen=True)
class KeyModification:
    """One row of a key's history as reported by the store."""
    key: str
    value: str
    tx_id: str
    timestamp: Optional[str] = None
    is_delete: bool = False


@dataclass(frozen=True)
class HistoryEntry:
    key: str
    raw: str
    tx_id: str
    timestamp: Optional[str] = None


@dataclass(frozen=True)
class Selector:
    doc_type: str
    constraints: Dict[str, Scalar] = field(default_factory=dict)

    @property
    def is_doc_type_only(self) -> bool:
        return not self.constraints

    def as_dict(self) -> Dict[str, Scalar]:
        return {"docType": self.doc_type, **self.constraints}


@dataclass
class QueryResultEntry:
    key: str
    record: Any  # decoded JSON value, or the raw text when decoding failed
    decoded: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {"Key": self.key, "Record": self.record}

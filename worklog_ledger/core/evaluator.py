"""
Predicate evaluation for history entries.
"""

import json
from typing import Any

from .errors import DecodeFailure
from .schema import Scalar, Selector

_MISSING = object()


def _reject_constant(token: str) -> Any:
    raise ValueError(f"{token} is not a JSON value")


def strict_loads(text: str) -> Any:
    """json.loads that refuses the NaN, Infinity and -Infinity tokens."""
    return json.loads(text, parse_constant=_reject_constant)


def decode_record(raw: str) -> Any:
    """Decode a stored value as JSON, raising DecodeFailure otherwise."""
    try:
        return strict_loads(raw)
    except ValueError as e:
        raise DecodeFailure(f"Value is not JSON: {e}")


def field_value(record: Any, name: str) -> Any:
    """Field of a decoded record, or _MISSING when the record has no such field."""
    if not isinstance(record, dict):
        return _MISSING
    return record.get(name, _MISSING)


def values_equal(actual: Any, expected: Scalar) -> bool:
    # JSON true must not equal 1
    if isinstance(actual, bool) or isinstance(expected, bool):
        return isinstance(actual, bool) and isinstance(expected, bool) and actual == expected
    if isinstance(expected, (int, float)):
        return isinstance(actual, (int, float)) and actual == expected
    return type(actual) is type(expected) and actual == expected


def matches(selector: Selector, record: Any, decoded: bool = True) -> bool:
    """True when the record satisfies every equality constraint of the selector."""
    if selector.is_doc_type_only:
        return True
    if not decoded:
        return False

    verdict = True
    for name, expected in selector.constraints.items():
        actual = field_value(record, name)
        verdict = verdict and actual is not _MISSING and values_equal(actual, expected)
        if not verdict:
            break
    return verdict

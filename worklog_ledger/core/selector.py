"""
Selector parsing and key resolution.

A selector names a document type and zero or more field equality constraints:

    {"selector": {"docType": "SWabc123", "eventType": "Daily_Check"}}

The bare form without the "selector" envelope is accepted too. Only flat
equality is supported, so constraint values must be JSON scalars.
"""

import json
from typing import Any, Dict

from . import config
from .errors import InvalidSelector
from .evaluator import strict_loads
from .schema import Selector

_SCALAR_TYPES = (str, int, float, bool, type(None))


def parse_selector(text: str) -> Selector:
    """Parse selector text into a Selector, failing with InvalidSelector."""
    try:
        document = strict_loads(text)
    except (TypeError, ValueError) as e:
        raise InvalidSelector(f"Selector is not valid JSON: {e}")

    if not isinstance(document, dict):
        raise InvalidSelector(f"Selector must be a JSON object: {text}")

    body = document.get("selector", document)
    if not isinstance(body, dict):
        raise InvalidSelector(f"Selector body must be a JSON object: {text}")

    return selector_from_mapping(body)


def selector_from_mapping(body: Dict[str, Any]) -> Selector:
    """Build a Selector from an already decoded selector object."""
    doc_type = body.get("docType")
    if not isinstance(doc_type, str) or not doc_type:
        raise InvalidSelector(f"Cannot query without a docType element: {json.dumps(body)}")

    constraints = {}
    for field_name, expected in body.items():
        if field_name == "docType":
            continue
        if not isinstance(expected, _SCALAR_TYPES):
            raise InvalidSelector(f"Only equality on scalar values is supported, got {field_name}={expected!r}")
        constraints[field_name] = expected

    return Selector(doc_type=doc_type, constraints=constraints)


def resolve_key(selector: Selector, prefix: str = None) -> str:
    """Store key whose history answers the selector."""
    if prefix is None:
        prefix = config.SELECTOR_KEY_PREFIX
    return prefix + selector.doc_type


def make_store_key(profile_id: Any, tag: str = None) -> str:
    """Key of a profile's record stream: tag immediately followed by the id."""
    if tag is None:
        tag = config.WORKLOG_TAG
    return f"{tag}{profile_id}"

"""
Ledger configuration.
Process-wide settings come from the environment; per-request settings are
carried in an immutable RequestConfig.
"""

import os
from dataclasses import dataclass
from pathlib import Path

# Database path configuration
DB_PATH = os.getenv("DB_PATH", "./data/ledger.db")

DEBUG = os.getenv("DEBUG", "true").lower() == "true"

# Key layout: worklog keys are WORKLOG_TAG + profileId
WORKLOG_TAG = os.getenv("WORKLOG_TAG", "SW")
SELECTOR_KEY_PREFIX = os.getenv("SELECTOR_KEY_PREFIX", "")

# Ledger routing per event type
CHANNEL_NAME_IDENTITY = os.getenv("CHANNEL_NAME_IDENTITY", "mychannel")
CHAIN_CODE_ID_IDENTITY = os.getenv("CHAIN_CODE_ID_IDENTITY", "ngo")
CHANNEL_NAME_TRANSMGMT = os.getenv("CHANNEL_NAME_TRANSMGMT", "mychannel")
CHAIN_CODE_ID_TRANSMGMT = os.getenv("CHAIN_CODE_ID_TRANSMGMT", "swworklog")
FABRIC_USERNAME = os.getenv("FABRIC_USERNAME", "SWLambdaUser")

# Version string
VERSION = "1.0.0"


@dataclass(frozen=True)
class RequestConfig:
    """Ledger routing for a single request."""
    channel_name: str
    chaincode_id: str
    fabric_username: str = FABRIC_USERNAME


def request_config_for(event_type: str = "SWTransmgmt", fabric_username: str = None) -> RequestConfig:
    """Build the routing for an event type (SWIdentity|SWTransmgmt)."""
    username = fabric_username or FABRIC_USERNAME
    if event_type == "SWIdentity":
        return RequestConfig(CHANNEL_NAME_IDENTITY, CHAIN_CODE_ID_IDENTITY, username)
    if event_type == "SWTransmgmt":
        return RequestConfig(CHANNEL_NAME_TRANSMGMT, CHAIN_CODE_ID_TRANSMGMT, username)
    raise ValueError(f"Unknown event type: {event_type}")


def debug_enabled():
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "true").lower() == "true"


def ensure_db_directory(db_path: str = None):
    """Ensure the database directory exists."""
    Path(db_path or DB_PATH).parent.mkdir(parents=True, exist_ok=True)

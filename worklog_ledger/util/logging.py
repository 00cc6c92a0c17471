"""
Structured logging for ledger operations.
Query, history scan and write events are logged as "Operation: ..., Status: ..." lines.
"""

import logging
from typing import Any, Dict, List


class StructuredLogger:
    """Structured logger for ledger writes, point lookups and history queries."""

    def __init__(self, name: str = "worklog_ledger"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.INFO)

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {details}"

        self.logger.info(message)

    def log_ledger_operation(self, operation: str, key: str, value: str = None, status: str = "success"):
        """Log a state read or write against the ledger."""
        details = {"key": key}
        if value is not None:
            details["value"] = _truncate(value, 50)

        self.log_operation(f"ledger.{operation}", status, details)

    def log_query(self, selector: Dict[str, Any], key: str, result_count: int = None, status: str = "success"):
        """Log a history query."""
        details = {"key": key, "selector": selector}
        if result_count is not None:
            details["result_count"] = result_count

        self.log_operation("query.history", status, details)

    def log_history_entry(self, key: str, tx_id: str, matched: bool):
        """Log the verdict for one history entry (debug level)."""
        self.logger.debug(
            f"Operation: query.entry, Status: {'matched' if matched else 'skipped'}, "
            f"Details: {{'key': '{key}', 'tx_id': '{tx_id}'}}"
        )

    def log_decode_failure(self, key: str, raw: str, error: Exception):
        """Log a history value that could not be decoded as JSON."""
        details = {
            "key": key,
            "raw": _truncate(raw, 50),
            "error": str(error)[:100]
        }
        self.log_operation("query.decode", "fallback_raw", details)

    def log_dispatch(self, function: str, channel: str, chaincode_id: str, status: str = "success", details: Dict[str, Any] = None):
        """Log a dispatched ledger function."""
        log_details = {
            "function": function,
            "channel": channel,
            "chaincode_id": chaincode_id
        }
        if details:
            log_details.update(details)

        self.log_operation("dispatch", status, log_details)

    def log_error_envelope(self, function: str, error_type: str, message: str):
        """Log a domain error returned to the caller."""
        log_details = {
            "function": function,
            "error_type": error_type,
            "message": message[:100]
        }
        self.log_operation("dispatch.error", "failed", log_details)

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self.logger.error(message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)


def _truncate(value: str, limit: int) -> str:
    return value[:limit] + "..." if len(value) > limit else value


# Global logger instance
logger = StructuredLogger()


def sanitize_record(record: Any, hidden_fields: List[str] = None) -> Any:
    """Redact hidden fields from a record before it is written to a log line."""
    if hidden_fields is None:
        hidden_fields = ['authToken', 'fcmToken', 'email', 'phoneNo']

    if isinstance(record, dict):
        return {
            k: "[REDACTED]" if k in hidden_fields else sanitize_record(v, hidden_fields)
            for k, v in record.items()
        }
    elif isinstance(record, str):
        return _truncate(record, 100)
    elif isinstance(record, list):
        return [sanitize_record(item, hidden_fields) for item in record]
    else:
        return record

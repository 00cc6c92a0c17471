"""
Error taxonomy for ledger queries and dispatch.
"""


class WorklogError(Exception):
    """Base class for errors reported to ledger callers."""
    error_type = "WORKLOG_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidSelector(WorklogError):
    """Selector text is not a JSON object or has no usable docType."""
    error_type = "INVALID_SELECTOR"


class NotFound(WorklogError):
    """Point lookup found no value under the key."""
    error_type = "NOT_FOUND"

    def __init__(self, key: str):
        super().__init__(f"Key {key} does not exist")
        self.key = key


class DecodeFailure(WorklogError):
    """A stored value is not JSON. Recovered per entry, never surfaced by queries."""
    error_type = "DECODE_FAILURE"


class StoreIterationError(WorklogError):
    """The store's history cursor failed while opening or advancing."""
    error_type = "STORE_ITERATION_ERROR"

    def __init__(self, key: str, cause: Exception):
        super().__init__(f"History iteration failed for key {key}: {cause}")
        self.key = key
        self.cause = cause


class UnknownOperation(WorklogError):
    """No ledger function is registered under the requested name."""
    error_type = "UNKNOWN_OPERATION"

    def __init__(self, function: str):
        super().__init__(f"No ledger function with name: {function} found")
        self.function = function


class InvalidArguments(WorklogError):
    """Function arguments are malformed or miss a required field."""
    error_type = "INVALID_ARGUMENTS"

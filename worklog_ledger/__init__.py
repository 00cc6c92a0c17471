"""
Worklog ledger: append-only worklog events with history queries.
"""

__version__ = "1.0.0"

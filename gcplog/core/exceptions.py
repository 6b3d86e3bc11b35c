"""
Custom exceptions for the GCP log formatter.

These exceptions provide clear error semantics for the host agent.
Every failure is local to the single record being processed, so the agent can
count, log, or discard per error kind. RelabelDrop is deliberately not a
GCPLogError: a drop is a requested outcome, not a failure.
"""


class GCPLogError(Exception):
    """Base exception for record-level transform failures."""
    pass


class DecodeError(GCPLogError):
    """Raised when raw bytes are not a valid log entry (bad JSON or field types)."""
    pass


class TimestampError(GCPLogError):
    """Base exception for timestamp resolution failures."""
    pass


class TimestampParseError(TimestampError):
    """Raised when a timestamp string is not valid RFC3339."""
    pass


class MissingTimestampError(TimestampError):
    """Raised when no usable timestamp is found (empty or zero instant)."""
    pass


class RelabelDrop(Exception):
    """Signals that relabeling dropped the record; no output should be produced."""
    pass


class ConfigurationError(Exception):
    """Raised when configuration is invalid or missing."""
    pass

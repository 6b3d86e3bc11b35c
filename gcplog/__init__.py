"""
gcplog: turn Google Cloud Logging entries into labeled log records for Loki-style backends.

The library never configures logging on import. A host process that wants
gcplog's console (and optional rotating file) output calls setup_logging()
once at startup.
"""

from gcplog.core.exceptions import (
    DecodeError,
    GCPLogError,
    MissingTimestampError,
    RelabelDrop,
    TimestampError,
    TimestampParseError,
)
from gcplog.core.logging_config import setup_logging
from gcplog.entry.schema import GCPLogEntry, NormalizedRecord
from gcplog.formatter import FormatResult, GCPLogFormatter, format_entries, parse_gcp_log_entry
from gcplog.push import translate_push_message

__version__ = "0.1.0"

__all__ = [
    "DecodeError",
    "GCPLogError",
    "MissingTimestampError",
    "RelabelDrop",
    "TimestampError",
    "TimestampParseError",
    "GCPLogEntry",
    "NormalizedRecord",
    "FormatResult",
    "GCPLogFormatter",
    "format_entries",
    "parse_gcp_log_entry",
    "translate_push_message",
    "setup_logging",
]

"""
Entry module: decoding, label handling, and timestamp/line selection for Cloud Logging entries.

Pipeline per record:

    Raw bytes
        ↓
    Decoding (gcplog/entry/decoder.py) → GCPLogEntry
        ↓
    Label assembly (gcplog/entry/labels.py) → internal labels
        ↓
    Relabeling (gcplog/relabel)
        ↓
    Label finalization (gcplog/entry/labels.py) → final labels
        ↓
    Timestamp/line selection (gcplog/entry/resolver.py)
        ↓
    NormalizedRecord
"""

from gcplog.entry.decoder import decode_log_entry
from gcplog.entry.labels import (
    DEFAULT_PROVIDER,
    assemble_internal_labels,
    finalize_labels,
    sanitize_label_name,
)
from gcplog.entry.resolver import (
    ZERO_TIME,
    parse_rfc3339,
    resolve_line,
    resolve_timestamp,
)
from gcplog.entry.schema import GCPLogEntry, MonitoredResource, NormalizedRecord

__all__ = [
    # Schema
    "GCPLogEntry",
    "MonitoredResource",
    "NormalizedRecord",

    # Decoding
    "decode_log_entry",

    # Labels
    "DEFAULT_PROVIDER",
    "assemble_internal_labels",
    "finalize_labels",
    "sanitize_label_name",

    # Timestamp/line
    "ZERO_TIME",
    "parse_rfc3339",
    "resolve_line",
    "resolve_timestamp",
]

"""
Core module: label primitives and exception types.

Configuration lives in gcplog.core.config and logging setup in
gcplog.core.logging_config; both are imported explicitly by their users.
"""

from .exceptions import (
    ConfigurationError,
    DecodeError,
    GCPLogError,
    MissingTimestampError,
    RelabelDrop,
    TimestampError,
    TimestampParseError,
)
from .labels import (
    INTERNAL_PREFIX,
    Label,
    LabelList,
    is_internal_label,
    is_valid_label_name,
    is_valid_label_value,
    set_label,
    sorted_labels,
)

__all__ = [
    "ConfigurationError",
    "DecodeError",
    "GCPLogError",
    "MissingTimestampError",
    "RelabelDrop",
    "TimestampError",
    "TimestampParseError",
    "INTERNAL_PREFIX",
    "Label",
    "LabelList",
    "is_internal_label",
    "is_valid_label_name",
    "is_valid_label_value",
    "set_label",
    "sorted_labels",
]

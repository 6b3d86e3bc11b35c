"""
Label assembly and finalization.

Assembly turns a decoded entry into an internal-only label set: every label
the assembler introduces is prefixed with "__<provider>_" so it can feed
relabeling without ever reaching the backend on its own.

Finalization turns the relabeled list into the label set that ships with the
record:

    relabeled labels
        ↓
    drop internal ("__") labels
        ↓
    drop invalid names/values
        ↓
    overlay static caller labels (caller wins)
"""

import logging
import re
from typing import Callable, Dict, Iterable, Mapping, Optional

from gcplog.core.labels import (
    Label,
    is_internal_label,
    is_valid_label_name,
    is_valid_label_value,
    set_label,
)
from gcplog.entry.schema import GCPLogEntry

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER = "gcp"

_UNSAFE_CHARS_RE = re.compile(r"[^a-zA-Z0-9_]")


def sanitize_label_name(key: str) -> str:
    """
    Make an arbitrary key usable as a label name fragment.

    Every character outside [a-zA-Z0-9_] becomes "_", so
    "logging.googleapis.com/timestamp" turns into
    "logging_googleapis_com_timestamp". An empty key maps to "_".

    This mapping is a stable contract: relabel rules written against the
    resulting names depend on it.
    """
    if not key:
        return "_"
    return _UNSAFE_CHARS_RE.sub("_", key)


def _set_mapped(
    labels: Dict[str, str],
    prefix: str,
    source: Mapping[str, str],
    sanitizer: Callable[[str], str],
) -> None:
    # Sorted so that keys colliding after sanitization resolve deterministically:
    # the greatest original key wins.
    for key in sorted(source):
        set_label(labels, prefix + sanitizer(key), source[key])


def assemble_internal_labels(
    entry: GCPLogEntry,
    base: Optional[Mapping[str, str]] = None,
    provider: str = DEFAULT_PROVIDER,
    sanitizer: Callable[[str], str] = sanitize_label_name,
) -> Dict[str, str]:
    """
    Build the internal label set for one entry.

    Args:
        entry: Decoded log entry
        base: Internal labels from the outer context (e.g. push attributes)
        provider: Provider tag used in label names
        sanitizer: Maps map keys to label-name-safe fragments

    Returns:
        Ordered mapping of internal label name -> value

    Notes:
        - Later writes overwrite earlier ones on the same name
        - Entry labels are written last and win over resource labels
    """
    prefix = f"__{provider}_"
    labels: Dict[str, str] = {}

    for name, value in (base or {}).items():
        set_label(labels, name, value)

    set_label(labels, f"{prefix}logname", entry.log_name)
    set_label(labels, f"{prefix}resource_type", entry.resource_type)
    set_label(labels, f"{prefix}severity", entry.severity)

    _set_mapped(labels, f"{prefix}resource_labels_", entry.resource_labels, sanitizer)
    _set_mapped(labels, f"{prefix}labels_", entry.labels, sanitizer)

    return labels


def finalize_labels(
    processed: Iterable[Label],
    caller_labels: Optional[Mapping[str, str]] = None,
) -> Dict[str, str]:
    """
    Produce the label set that ships with the record.

    Args:
        processed: Relabeled (name, value) pairs
        caller_labels: Static labels from the target configuration

    Returns:
        Final label mapping
    """
    final: Dict[str, str] = {}

    for name, value in processed:
        if is_internal_label(name):
            continue
        if not is_valid_label_name(name) or not is_valid_label_value(value):
            logger.debug(f"Dropping invalid label: {name!r}")
            continue
        final[name] = value

    # Static labels always win
    final.update(caller_labels or {})
    return final

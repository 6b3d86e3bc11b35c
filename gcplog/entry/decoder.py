"""
Decoding of raw Cloud Logging entries.

Turns the raw bytes received from Pub/Sub into a GCPLogEntry. Decoding is
all-or-nothing: malformed JSON, a non-object payload, or a type mismatch on a
known field raises DecodeError and no record is produced. Bytes that are not
valid UTF-8 are replaced with U+FFFD rather than rejected.
"""

import json
from typing import Any, Union

from pydantic import ValidationError

from gcplog.core.exceptions import DecodeError
from gcplog.entry.schema import GCPLogEntry


def replace_lone_surrogates(value: Any) -> Any:
    """
    Replace lone surrogates in decoded JSON with U+FFFD.

    JSON escapes like "\\ud800" decode to lone surrogates, which have no
    UTF-8 encoding. Dicts and lists are walked recursively.
    """
    if isinstance(value, str):
        try:
            value.encode("utf-8")
            return value
        except UnicodeEncodeError:
            return value.encode("utf-16", "surrogatepass").decode("utf-16", "replace")
    if isinstance(value, dict):
        return {replace_lone_surrogates(k): replace_lone_surrogates(v) for k, v in value.items()}
    if isinstance(value, list):
        return [replace_lone_surrogates(item) for item in value]
    return value


def decode_log_entry(data: Union[bytes, str]) -> GCPLogEntry:
    """
    Decode one raw log entry.

    Args:
        data: JSON-encoded LogEntry

    Returns:
        GCPLogEntry with the documented fields extracted

    Raises:
        DecodeError: If data is not a JSON object matching the LogEntry field types
    """
    if isinstance(data, bytes):
        data = data.decode("utf-8", errors="replace")

    try:
        raw = json.loads(data)
    except ValueError as e:
        raise DecodeError(f"Malformed log entry JSON: {e}") from e

    if not isinstance(raw, dict):
        raise DecodeError(f"Expected JSON object, got {type(raw).__name__}")

    try:
        return GCPLogEntry.model_validate(replace_lone_surrogates(raw))
    except ValidationError as e:
        raise DecodeError(f"Invalid log entry fields: {e}") from e

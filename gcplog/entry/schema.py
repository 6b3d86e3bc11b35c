"""
Schemas for Cloud Logging entries and the normalized records built from them.

Design rationale:
- GCPLogEntry extracts only the documented LogEntry fields the formatter
  needs; everything else in the payload is ignored (the whole entry can still
  be shipped as the log line).
- Missing and null fields decode to empty values, so downstream stages never
  deal with None.
- NormalizedRecord is the {labels, timestamp, line} triple handed to the
  delivery layer.
"""

from datetime import datetime
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _drop_nulls(data: Any) -> Any:
    # A JSON null on a known field means "absent", same as a missing key.
    if isinstance(data, dict):
        return {key: value for key, value in data.items() if value is not None}
    return data


def _blank_null_values(data: Any) -> Any:
    # Inside a label map a null value reads as "", which later unsets the label.
    if isinstance(data, dict):
        return {key: "" if value is None else value for key, value in data.items()}
    return data


class MonitoredResource(BaseModel):
    """
    The monitored resource that produced the entry.

    Example: {"type": "gce_instance", "labels": {"zone": "us-central1-a"}}
    """

    model_config = ConfigDict(extra="ignore")

    type: str = ""
    labels: Dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _nulls_are_absent(cls, data: Any) -> Any:
        return _drop_nulls(data)

    @field_validator("labels", mode="before")
    @classmethod
    def _null_label_values(cls, value: Any) -> Any:
        return _blank_null_values(value)


class GCPLogEntry(BaseModel):
    """
    A decoded Cloud Logging LogEntry.

    Attributes:
        log_name: Resource name of the log (JSON `logName`)
        resource: Monitored resource (type and labels)
        timestamp: RFC3339 time the event occurred, or ""
        receive_timestamp: RFC3339 time Logging received the entry, or ""
        severity: DEFAULT, DEBUG, INFO, NOTICE, WARNING, ERROR, CRITICAL, ALERT, EMERGENCY
        labels: User or system defined entry labels
        text_payload: Plain text payload, or ""

    Notes:
        - Unknown fields are ignored
        - A wrong type on a known field fails validation
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    log_name: str = Field("", alias="logName")
    resource: MonitoredResource = Field(default_factory=MonitoredResource)
    timestamp: str = ""
    receive_timestamp: str = Field("", alias="receiveTimestamp")
    severity: str = ""
    labels: Dict[str, str] = Field(default_factory=dict)
    text_payload: str = Field("", alias="textPayload")

    @model_validator(mode="before")
    @classmethod
    def _nulls_are_absent(cls, data: Any) -> Any:
        return _drop_nulls(data)

    @field_validator("labels", mode="before")
    @classmethod
    def _null_label_values(cls, value: Any) -> Any:
        return _blank_null_values(value)

    @property
    def resource_type(self) -> str:
        return self.resource.type

    @property
    def resource_labels(self) -> Dict[str, str]:
        return self.resource.labels


class NormalizedRecord(BaseModel):
    """
    A log record ready for delivery.

    Attributes:
        labels: Final label set (no internal or invalid labels)
        timestamp: Timezone-aware UTC instant
        line: Log line text
    """

    model_config = ConfigDict(frozen=True)

    labels: Dict[str, str] = Field(default_factory=dict)
    timestamp: datetime
    line: str

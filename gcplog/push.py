"""
Pub/Sub push message translation.

A push subscription delivers each LogEntry wrapped in a JSON envelope with
base64 data and message attributes. The envelope's metadata becomes internal
labels that relabel rules can promote, then the decoded data goes through the
regular formatter.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Dict, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from gcplog.core.config import TargetConfig
from gcplog.core.exceptions import DecodeError
from gcplog.entry.decoder import replace_lone_surrogates
from gcplog.entry.labels import sanitize_label_name
from gcplog.entry.schema import NormalizedRecord
from gcplog.formatter import parse_gcp_log_entry
from gcplog.relabel import Relabeler, RuleRelabeler

# Internal label carrying the tenant of the push request; rules may promote it
TENANT_ID_LABEL = "__tenant_id__"


class PubSubMessage(BaseModel):
    """The message part of a push request."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    attributes: Dict[str, str] = Field(default_factory=dict)
    data: str = ""
    message_id: str = Field("", validation_alias=AliasChoices("message_id", "messageId"))
    publish_time: str = Field("", validation_alias=AliasChoices("publish_time", "publishTime"))


class PushMessage(BaseModel):
    """A Pub/Sub push request body."""

    model_config = ConfigDict(extra="ignore")

    message: PubSubMessage
    subscription: str = ""


def decode_push_message(body: Union[bytes, str]) -> PushMessage:
    """
    Decode a push request body.

    Raises:
        DecodeError: If the body is not a valid push envelope
    """
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    try:
        raw = json.loads(body)
    except ValueError as e:
        raise DecodeError(f"Malformed push request JSON: {e}") from e
    try:
        return PushMessage.model_validate(replace_lone_surrogates(raw))
    except ValidationError as e:
        raise DecodeError(f"Invalid push request: {e}") from e


def push_internal_labels(push: PushMessage, tenant_id: str = "") -> Dict[str, str]:
    """Internal labels carried by the push envelope."""
    labels = {
        "__gcp_message_id": push.message.message_id,
        "__gcp_subscription_name": push.subscription,
    }
    for key in sorted(push.message.attributes):
        labels[f"__gcp_attributes_{sanitize_label_name(key)}"] = push.message.attributes[key]
    if tenant_id:
        labels[TENANT_ID_LABEL] = tenant_id
    return labels


def translate_push_message(
    body: Union[bytes, str],
    target: Optional[TargetConfig] = None,
    relabeler: Optional[Relabeler] = None,
    tenant_id: str = "",
) -> NormalizedRecord:
    """
    Format the LogEntry carried by a push request.

    Args:
        body: Push request body
        target: Target policy; defaults to TargetConfig()
        relabeler: Custom relabel engine; defaults to the target's rules
        tenant_id: Tenant from the request headers, exposed as an internal label

    Returns:
        NormalizedRecord

    Raises:
        DecodeError: If the envelope or its base64 data is invalid
        RelabelDrop, TimestampParseError, MissingTimestampError: as parse_gcp_log_entry
    """
    target = target or TargetConfig()
    push = decode_push_message(body)

    try:
        data = base64.b64decode(push.message.data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"failed to decode data: {e}") from e

    return parse_gcp_log_entry(
        data,
        caller_labels=target.labels,
        base_labels=push_internal_labels(push, tenant_id),
        use_incoming_timestamp=target.use_incoming_timestamp,
        use_full_line=target.use_full_line,
        relabeler=relabeler or RuleRelabeler(target.relabel_configs),
    )

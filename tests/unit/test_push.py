"""
Unit tests for Pub/Sub push message translation.
"""

import base64
import json

import pytest

from gcplog.core.config import TargetConfig
from gcplog.core.exceptions import DecodeError, RelabelDrop
from gcplog.push import decode_push_message, push_internal_labels, translate_push_message


def make_push_body(entry, attributes=None, message_key="messageId") -> bytes:
    data = base64.b64encode(json.dumps(entry).encode()).decode()
    return json.dumps(
        {
            "message": {
                "attributes": attributes or {},
                "data": data,
                message_key: "8273649",
                "publishTime": "2025-02-07T10:30:02Z",
            },
            "subscription": "projects/demo-project/subscriptions/loki-push",
        }
    ).encode()


class TestDecodePushMessage:
    """Test push envelope decoding."""

    @pytest.mark.parametrize("message_key", ["messageId", "message_id"])
    def test_message_id_aliases(self, sample_entry, message_key):
        push = decode_push_message(make_push_body(sample_entry, message_key=message_key))

        assert push.message.message_id == "8273649"
        assert push.subscription == "projects/demo-project/subscriptions/loki-push"

    def test_missing_message(self):
        with pytest.raises(DecodeError):
            decode_push_message(b'{"subscription": "s"}')

    def test_malformed_body(self):
        with pytest.raises(DecodeError):
            decode_push_message(b"not json")


class TestPushInternalLabels:
    """Test labels derived from the push envelope."""

    def test_labels(self, sample_entry):
        push = decode_push_message(make_push_body(sample_entry, attributes={"logging.googleapis.com/timestamp": "t"}))

        labels = push_internal_labels(push, tenant_id="team-a")

        assert labels == {
            "__gcp_message_id": "8273649",
            "__gcp_subscription_name": "projects/demo-project/subscriptions/loki-push",
            "__gcp_attributes_logging_googleapis_com_timestamp": "t",
            "__tenant_id__": "team-a",
        }


class TestTranslatePushMessage:
    """Test formatting the entry carried by a push request."""

    def test_translate_with_promoted_labels(self, sample_entry):
        target = TargetConfig(
            labels={"job": "gcplog-push"},
            relabel_configs=[
                {"source_labels": ["__gcp_message_id"], "target_label": "message_id"},
                {"source_labels": ["__gcp_severity"], "target_label": "severity"},
                {"source_labels": ["__tenant_id__"], "target_label": "tenant"},
            ],
        )

        record = translate_push_message(make_push_body(sample_entry), target, tenant_id="team-a")

        assert record.labels == {
            "job": "gcplog-push",
            "message_id": "8273649",
            "severity": "INFO",
            "tenant": "team-a",
        }
        assert record.line == "Bucket object created"

    def test_full_line_is_decoded_data(self, sample_entry):
        target = TargetConfig(use_full_line=True)

        record = translate_push_message(make_push_body(sample_entry), target)

        assert json.loads(record.line) == sample_entry

    def test_internal_labels_not_shipped(self, sample_entry):
        record = translate_push_message(make_push_body(sample_entry), tenant_id="team-a")

        assert record.labels == {}

    def test_lone_surrogate_attribute_hashmod(self, sample_entry):
        body = make_push_body(sample_entry, attributes={"k": "\ud800"})
        target = TargetConfig(
            relabel_configs=[
                {"source_labels": ["__gcp_attributes_k"], "target_label": "shard", "modulus": 4, "action": "hashmod"},
            ],
        )

        record = translate_push_message(body, target)

        assert record.labels["shard"] in {"0", "1", "2", "3"}

    def test_lone_surrogate_attribute_replaced(self, sample_entry):
        push = decode_push_message(make_push_body(sample_entry, attributes={"k": "\ud800"}))

        assert push.message.attributes == {"k": "\ufffd"}

    def test_invalid_base64(self):
        body = json.dumps({"message": {"data": "!!not base64!!"}}).encode()

        with pytest.raises(DecodeError):
            translate_push_message(body)

    def test_relabel_drop(self, sample_entry, drop_relabeler):
        with pytest.raises(RelabelDrop):
            translate_push_message(make_push_body(sample_entry), relabeler=drop_relabeler)

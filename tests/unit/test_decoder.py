"""
Unit tests for log entry decoding.

Tests extraction of the documented LogEntry fields from raw JSON.
"""

import json

import pytest

from gcplog.core.exceptions import DecodeError, GCPLogError
from gcplog.entry.decoder import decode_log_entry


class TestDecodeLogEntry:
    """Test decoding raw bytes into GCPLogEntry."""

    def test_decode_full_entry(self, sample_raw):
        """Test that all documented fields are extracted."""
        entry = decode_log_entry(sample_raw)

        assert entry.log_name == "projects/demo-project/logs/cloudaudit.googleapis.com%2Factivity"
        assert entry.resource_type == "gcs_bucket"
        assert entry.resource_labels["bucket_name"] == "demo-bucket"
        assert entry.timestamp == "2025-02-07T10:30:00.123456789Z"
        assert entry.receive_timestamp == "2025-02-07T10:30:01.5Z"
        assert entry.severity == "INFO"
        assert entry.labels["env"] == "prod"
        assert entry.text_payload == "Bucket object created"

    def test_decode_accepts_str(self, sample_entry):
        """Test that text input decodes like bytes."""
        entry = decode_log_entry(json.dumps(sample_entry))

        assert entry.severity == "INFO"

    def test_unknown_fields_ignored(self):
        """Test forward compatibility with extra fields."""
        entry = decode_log_entry(b'{"logName": "a", "spanId": "123", "httpRequest": {"status": 200}}')

        assert entry.log_name == "a"
        assert not hasattr(entry, "spanId")

    def test_missing_fields_default_to_empty(self):
        """Test that an empty object decodes to empty values."""
        entry = decode_log_entry(b"{}")

        assert entry.log_name == ""
        assert entry.resource_type == ""
        assert entry.resource_labels == {}
        assert entry.timestamp == ""
        assert entry.receive_timestamp == ""
        assert entry.labels == {}
        assert entry.text_payload == ""

    def test_null_fields_treated_as_absent(self):
        """Test that JSON nulls on known fields decode to empty values."""
        entry = decode_log_entry(b'{"textPayload": null, "labels": null, "resource": {"labels": null}}')

        assert entry.text_payload == ""
        assert entry.labels == {}
        assert entry.resource_labels == {}

    def test_malformed_json(self):
        """Test that malformed JSON raises DecodeError."""
        with pytest.raises(DecodeError):
            decode_log_entry(b'{"logName": ')

    def test_invalid_utf8_replaced(self):
        """Test that stray non-UTF-8 bytes become U+FFFD instead of failing."""
        entry = decode_log_entry(b'{"textPayload": "caf\xe9", "logName": "\xff\xfe"}')

        assert entry.text_payload == "caf\ufffd"
        assert entry.log_name == "\ufffd\ufffd"

    def test_null_label_values_read_as_empty(self):
        """Test that a null inside a label map is an empty value, not an error."""
        entry = decode_log_entry(
            b'{"labels": {"a": null, "env": "prod"}, "resource": {"labels": {"z": null}}}'
        )

        assert entry.labels == {"a": "", "env": "prod"}
        assert entry.resource_labels == {"z": ""}

    def test_non_object_payload(self):
        """Test that a JSON array is rejected."""
        with pytest.raises(DecodeError):
            decode_log_entry(b'["not", "an", "entry"]')

    def test_type_mismatch_on_known_field(self):
        """Test that a number where a string is expected fails."""
        with pytest.raises(DecodeError):
            decode_log_entry(b'{"logName": 42}')

    def test_type_mismatch_on_label_value(self):
        """Test that non-string label values fail."""
        with pytest.raises(DecodeError):
            decode_log_entry(b'{"labels": {"retries": 3}}')

    def test_decode_error_is_gcplog_error(self):
        """Test the error hierarchy seen by the host agent."""
        with pytest.raises(GCPLogError):
            decode_log_entry(b"garbage")

    def test_lone_surrogate_replaced(self):
        """Test that invalid UTF-16 escapes become U+FFFD."""
        entry = decode_log_entry(b'{"labels": {"bad": "x\\ud800y"}, "textPayload": "\\ud83d\\ude00"}')

        assert entry.labels["bad"] == "x\ufffdy"
        assert entry.text_payload == "\U0001F600"

"""
Pytest configuration and shared fixtures.

Provides sample Cloud Logging entries, raw payloads, and stub relabel engines
for unit and integration tests.
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict

import pytest


FIXED_NOW = datetime(2025, 2, 7, 10, 30, 45, tzinfo=timezone.utc)


class IdentityRelabeler:
    """Relabeler stub that passes labels through untouched."""

    def process(self, labels):
        return sorted(labels.items())


class DropAllRelabeler:
    """Relabeler stub that drops every record."""

    def process(self, labels):
        return None


@pytest.fixture
def sample_entry() -> Dict[str, Any]:
    """
    Fixture providing a realistic Cloud Logging LogEntry.

    Returns:
        Dict: LogEntry as it appears on the Pub/Sub topic, including fields
        the formatter ignores (insertId, jsonPayload)
    """
    return {
        "insertId": "1k3l2m9f4x8a",
        "logName": "projects/demo-project/logs/cloudaudit.googleapis.com%2Factivity",
        "resource": {
            "type": "gcs_bucket",
            "labels": {
                "bucket_name": "demo-bucket",
                "location": "us-central1",
                "project_id": "demo-project",
            },
        },
        "timestamp": "2025-02-07T10:30:00.123456789Z",
        "receiveTimestamp": "2025-02-07T10:30:01.5Z",
        "severity": "INFO",
        "labels": {
            "compute.googleapis.com/resource_name": "instance-1",
            "env": "prod",
        },
        "textPayload": "Bucket object created",
        "jsonPayload": {"ignored": True},
    }


@pytest.fixture
def sample_raw(sample_entry) -> bytes:
    """Fixture providing the sample entry as raw JSON bytes."""
    return json.dumps(sample_entry).encode("utf-8")


@pytest.fixture
def identity_relabeler() -> IdentityRelabeler:
    return IdentityRelabeler()


@pytest.fixture
def drop_relabeler() -> DropAllRelabeler:
    return DropAllRelabeler()


@pytest.fixture
def fixed_clock():
    """Clock returning FIXED_NOW."""
    return lambda: FIXED_NOW


def pytest_configure(config):
    """
    Pytest hook for custom configuration.

    Registers custom markers used throughout tests.
    """
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )

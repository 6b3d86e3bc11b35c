"""
Cloud Logging entry formatter.

Converts one raw LogEntry into a NormalizedRecord. The transform is pure:
apart from reading the clock once it has no side effects and keeps no state
between calls, so one formatter can be shared across worker threads.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Iterable, List, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, Field

from gcplog.core.config import TargetConfig
from gcplog.core.exceptions import GCPLogError, RelabelDrop
from gcplog.entry.decoder import decode_log_entry
from gcplog.entry.labels import assemble_internal_labels, finalize_labels
from gcplog.entry.resolver import resolve_line, resolve_timestamp
from gcplog.entry.schema import NormalizedRecord
from gcplog.relabel import RelabelConfig, Relabeler, RuleRelabeler

logger = logging.getLogger(__name__)


def parse_gcp_log_entry(
    data: Union[bytes, str],
    caller_labels: Optional[Mapping[str, str]] = None,
    base_labels: Optional[Mapping[str, str]] = None,
    use_incoming_timestamp: bool = False,
    use_full_line: bool = False,
    relabeler: Optional[Relabeler] = None,
    relabel_configs: Optional[Sequence[RelabelConfig]] = None,
    now: Optional[Callable[[], datetime]] = None,
) -> NormalizedRecord:
    """
    Format one raw log entry.

    Args:
        data: Raw JSON LogEntry
        caller_labels: Static labels; they win over pipeline labels
        base_labels: Internal labels from the outer context (e.g. push attributes)
        use_incoming_timestamp: Take the timestamp from the entry
        use_full_line: Always ship the raw entry as the line
        relabeler: Relabel engine; defaults to a RuleRelabeler over relabel_configs
        relabel_configs: Rules for the default engine (ignored if relabeler is set)
        now: Clock override

    Returns:
        NormalizedRecord

    Raises:
        DecodeError: If data is not a valid LogEntry
        RelabelDrop: If relabeling dropped the record
        TimestampParseError: If the adopted timestamp is not RFC3339
        MissingTimestampError: If no usable timestamp was found
    """
    entry = decode_log_entry(data)

    internal = assemble_internal_labels(entry, base=base_labels)

    if relabeler is None:
        relabeler = RuleRelabeler(relabel_configs)
    processed = relabeler.process(internal)
    if processed is None:
        raise RelabelDrop(f"log entry {entry.log_name!r} dropped by relabeling")

    labels = finalize_labels(processed, caller_labels)

    return NormalizedRecord(
        labels=labels,
        timestamp=resolve_timestamp(entry, use_incoming_timestamp, now=now),
        line=resolve_line(entry, data, use_full_line),
    )


class GCPLogFormatter:
    """
    Formatter bound to one target's configuration.

    Holds only read-only configuration, so a single instance can serve
    concurrent callers.
    """

    def __init__(self, target: Optional[TargetConfig] = None, relabeler: Optional[Relabeler] = None):
        """
        Initialize formatter.

        Args:
            target: Target policy; defaults to TargetConfig()
            relabeler: Custom relabel engine; defaults to the target's rules
        """
        self.target = target or TargetConfig()
        self.relabeler = relabeler or RuleRelabeler(self.target.relabel_configs)

    def format(
        self,
        data: Union[bytes, str],
        base_labels: Optional[Mapping[str, str]] = None,
        caller_labels: Optional[Mapping[str, str]] = None,
    ) -> NormalizedRecord:
        """
        Format one raw entry with the bound policy.

        caller_labels replaces the target's static labels for this call.
        """
        try:
            return parse_gcp_log_entry(
                data,
                caller_labels=self.target.labels if caller_labels is None else caller_labels,
                base_labels=base_labels,
                use_incoming_timestamp=self.target.use_incoming_timestamp,
                use_full_line=self.target.use_full_line,
                relabeler=self.relabeler,
            )
        except RelabelDrop:
            logger.debug("Log entry dropped by relabeling")
            raise
        except GCPLogError as e:
            logger.debug(f"Failed to format log entry: {e}")
            raise


class FormatResult(BaseModel):
    """
    Outcome of formatting a batch.

    Drops and failures are counted separately: a drop is a requested outcome,
    a failure is bad input.
    """

    records: List[NormalizedRecord] = Field(default_factory=list)
    dropped: int = Field(0, ge=0)
    failed: int = Field(0, ge=0)


def format_entries(
    raw_entries: Iterable[Union[bytes, str]],
    formatter: Optional[GCPLogFormatter] = None,
) -> FormatResult:
    """
    Format multiple raw entries.

    Args:
        raw_entries: Raw JSON LogEntries
        formatter: Formatter to use (default policy if omitted)

    Returns:
        FormatResult with records and drop/failure counts

    Example:
        result = format_entries(messages, GCPLogFormatter(config.target))
        logger.info(f"Formatted {len(result.records)}, dropped {result.dropped}")
    """
    formatter = formatter or GCPLogFormatter()
    result = FormatResult()

    for raw in raw_entries:
        try:
            result.records.append(formatter.format(raw))
        except RelabelDrop:
            result.dropped += 1
        except GCPLogError:
            result.failed += 1

    if result.failed:
        logger.warning(f"{result.failed} log entries failed to format")
    return result

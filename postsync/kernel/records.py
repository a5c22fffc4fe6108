"""
postsync Kernel — Record Construction

Factory functions for well-formed transition records.
Used by the action pipeline and the push-event handler before dispatching,
and by tests to build records concisely.
"""

from __future__ import annotations

from typing import Any

from postsync.kernel.types import BATCH, Record, RequestTypes


def make_record(
    type: str,
    data: Any = None,
    *,
    channel_id: str | None = None,
    error: Exception | None = None,
) -> Record:
    return Record(type=type, data=data, channel_id=channel_id, error=error)


def batch(*records: Record) -> Record:
    """
    Group records so they are folded in order within a single dispatch.
    Observers see the state after the last one, never in between.
    """
    return Record(type=BATCH, data=tuple(records))


def request_started(op: RequestTypes) -> Record:
    return Record(type=op.request)


def request_succeeded(op: RequestTypes) -> Record:
    return Record(type=op.success)


def request_failed(op: RequestTypes, error: Exception) -> Record:
    return Record(type=op.failure, error=error)


def flatten(record: Record) -> list[Record]:
    """Expand (possibly nested) batches into the records they carry, in order."""
    if record.type != BATCH:
        return [record]
    result: list[Record] = []
    for inner in record.data or ():
        result.extend(flatten(inner))
    return result

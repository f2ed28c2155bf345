"""
Anchoring of relative record clocks to wall clock time.

The devices only log a relative millisecond clock. The file's last-modified
time is taken as the moment the last record was written, and every other
record is back-dated by its clock difference to that last record.
"""

import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import List

from .errors import EmptyRecordSet, RecordOrderError, TimeRangeError
from .models import Record

logger = logging.getLogger(__name__)


def file_anchor_time(filepath: Path, local_time: bool = False) -> datetime:
    """
    Get the last-modified time of a file as an aware datetime.

    Args:
        filepath: Source file
        local_time: Use the local zone instead of UTC

    Returns:
        Modification time, truncated to millisecond resolution
    """
    mtime = Path(filepath).stat().st_mtime
    anchor = datetime.fromtimestamp(mtime, tz=timezone.utc)
    if local_time:
        anchor = anchor.astimezone()
    return anchor.replace(microsecond=anchor.microsecond // 1000 * 1000)


def check_order(records: List[Record]) -> None:
    """Raise RecordOrderError at the first decreasing relative timestamp."""
    for index in range(1, len(records)):
        previous = records[index - 1].timestamp
        current = records[index].timestamp
        if current < previous:
            raise RecordOrderError(index, previous, current)


def assign_absolute_times(
    records: List[Record],
    anchor_time: datetime,
    strict_order: bool = False,
) -> List[Record]:
    """
    Fill in absolute_time for every record.

    The last record in file order is pinned to anchor_time; the others are
    offset by ``timestamp - last.timestamp`` milliseconds. Order is trusted
    unless strict_order is set.

    Args:
        records: Raw records in source order (mutated in place)
        anchor_time: File modification time
        strict_order: Fail on decreasing relative timestamps

    Returns:
        The same list, anchored

    Raises:
        EmptyRecordSet: if records is empty
        RecordOrderError: if strict_order and the clock goes backwards
        TimeRangeError: if a record time falls outside the datetime range
    """
    if not records:
        raise EmptyRecordSet()
    if strict_order:
        check_order(records)

    last_timestamp = records[-1].timestamp
    for index, record in enumerate(records):
        try:
            record.absolute_time = anchor_time + timedelta(milliseconds=record.timestamp - last_timestamp)
        except OverflowError as e:
            raise TimeRangeError(index, record.timestamp) from e

    logger.debug(
        "Anchored %d records: %s .. %s",
        len(records), records[0].absolute_time, records[-1].absolute_time,
    )
    return records

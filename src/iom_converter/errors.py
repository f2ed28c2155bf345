"""
Exception hierarchy for the .dat to CSV converter.

Everything derived from ConversionError is scoped to a single source file:
the pipeline reports it and moves on. FatalIOError ends the run.
"""

from typing import Optional


class ConversionError(Exception):
    """Base class for errors that only affect the file being converted."""


class UnrecognizedFormat(ConversionError):
    """File content does not start with a known format tag."""

    def __init__(self, message: str = "File cannot be converted because it has an unrecognized data format."):
        super().__init__(message)


class MalformedPayload(ConversionError):
    """The [[ ... ]] data payload is missing or cannot be delimited."""


class RowShapeError(ConversionError):
    """A row has fewer fields than its format requires."""

    def __init__(self, row_index: int, expected: int, actual: int):
        self.row_index = row_index
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Row {row_index} has {actual} fields, expected at least {expected}"
        )


class FieldConversionError(ConversionError):
    """A field token could not be converted to its target type."""

    def __init__(self, field: str, token: str, row_index: int, reason: Optional[str] = None):
        self.field = field
        self.token = token
        self.row_index = row_index
        message = f"Row {row_index}: cannot convert {field} value {token!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class EmptyRecordSet(ConversionError):
    """No records to anchor."""

    def __init__(self, message: str = "File contains no records to convert."):
        super().__init__(message)


class RecordOrderError(ConversionError):
    """Relative timestamps go backwards while strict ordering is requested."""

    def __init__(self, row_index: int, previous: int, current: int):
        self.row_index = row_index
        self.previous = previous
        self.current = current
        super().__init__(
            f"Row {row_index}: time stamp {current} is earlier than previous {previous}"
        )


class FatalIOError(Exception):
    """Failure outside the per-file loop (arguments, folders). Ends the run."""


class TimeRangeError(ConversionError):
    """A record's derived absolute time falls outside the representable range."""

    def __init__(self, row_index: int, timestamp: int):
        self.row_index = row_index
        self.timestamp = timestamp
        super().__init__(
            f"Row {row_index}: time stamp {timestamp} puts the record time out of range"
        )

"""
Text parser for IOM .dat sensor files.

Both firmware generations write a tag line followed by a bracketed list of
records, e.g.::

    Grapher v1.0 Quarter Sec Linear ... [[#TS: 0, #EDR: 5, ...], [#TS: 250, ...]]
    Healing Rhythms Event Data ... [[0, 5, 1, 72.5, calm], [250, 6, 0, 73.0, calm]]

The payload is split textually, not with a general list parser: rows on
``"], ["`` and fields on ``", "``.
"""

import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Callable, Dict, List, NamedTuple, Optional, Union

from .errors import FieldConversionError, MalformedPayload, RowShapeError, UnrecognizedFormat
from .models import DataFormat, Record

logger = logging.getLogger(__name__)

# ==================== Delimiters ====================

PAYLOAD_START = "[["
PAYLOAD_END = "]]"
ROW_SEPARATOR = "], ["
FIELD_SEPARATOR = ", "

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_DECIMAL_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)")

# ==================== Field Converters ====================


def to_int(token: str) -> int:
    text = token.strip()
    if not _INTEGER_RE.fullmatch(text):
        raise ValueError("not an integer")
    return int(text)


def to_decimal(token: str) -> Decimal:
    text = token.strip()
    if not _DECIMAL_RE.fullmatch(text):
        raise ValueError("not a decimal number")
    try:
        return Decimal(text)
    except InvalidOperation as e:
        raise ValueError("not a decimal number") from e


def to_text(token: str) -> str:
    return token


class FieldSpec(NamedTuple):
    """One positional field: Record attribute, marker to remove, converter."""
    name: str
    marker: Optional[str]
    convert: Callable[[str], Union[int, Decimal, str]]


# ==================== Format Layouts ====================
# New format tokens carry a "#XX: " marker; old format tokens are bare values.

FORMAT_LAYOUTS: Dict[DataFormat, List[FieldSpec]] = {
    DataFormat.NEW: [
        FieldSpec("timestamp", "#TS: ", to_int),
        FieldSpec("electrodermal_response", "#EDR: ", to_int),
        FieldSpec("detect", "#DETECT: ", to_int),
        FieldSpec("heart_rate", "#rate: ", to_decimal),
        FieldSpec("label", "#Lable: ", to_text),  # sic, firmware spelling
        FieldSpec("coherence", "#coh: ", to_int),
    ],
    DataFormat.OLD: [
        FieldSpec("timestamp", None, to_int),
        FieldSpec("electrodermal_response", None, to_int),
        FieldSpec("detect", None, to_int),
        FieldSpec("heart_rate", None, to_decimal),
        FieldSpec("label", None, to_text),
    ],
}

# ==================== Parsing Steps ====================


def detect_format(text: str) -> DataFormat:
    """
    Classify file content by its leading tag.

    Raises:
        UnrecognizedFormat: if the text starts with neither known tag
    """
    for data_format in DataFormat:
        if text.startswith(data_format.value):
            return data_format
    raise UnrecognizedFormat()


def extract_payload(text: str) -> str:
    """
    Return the text strictly between the first "[[" and the last "]]".

    Raises:
        MalformedPayload: if either delimiter is missing or they overlap
    """
    start = text.find(PAYLOAD_START)
    end = text.rfind(PAYLOAD_END)
    if start == -1:
        raise MalformedPayload(f"Data payload start {PAYLOAD_START!r} not found")
    if end == -1:
        raise MalformedPayload(f"Data payload end {PAYLOAD_END!r} not found")
    start += len(PAYLOAD_START)
    if end < start:
        raise MalformedPayload("Data payload end appears before its start")
    return text[start:end]


def split_rows(payload: str) -> List[List[str]]:
    """
    Split a payload into rows of raw string tokens.

    An empty payload (as in "[[]]") has no rows.
    """
    if not payload.strip():
        return []
    return [row.split(FIELD_SEPARATOR) for row in payload.split(ROW_SEPARATOR)]


def decode_row(fields: List[str], data_format: DataFormat, row_index: int) -> Record:
    """
    Convert one row of raw tokens to a Record.

    New format markers are removed wherever they occur in the token; old
    format tokens are trimmed. Fields past the layout are ignored.

    Raises:
        RowShapeError: too few fields for the format
        FieldConversionError: a token does not convert to its field type
    """
    layout = FORMAT_LAYOUTS[data_format]
    if len(fields) < len(layout):
        raise RowShapeError(row_index, expected=len(layout), actual=len(fields))

    values = {}
    for spec, token in zip(layout, fields):
        raw = token.replace(spec.marker, "") if spec.marker else token.strip()
        try:
            values[spec.name] = spec.convert(raw)
        except ValueError as e:
            raise FieldConversionError(spec.name, token, row_index, str(e)) from e

    return Record(**values)


def parse(text: str) -> List[Record]:
    """
    Parse the full text of a .dat file.

    Args:
        text: File content

    Returns:
        Raw records (absolute_time unset) in source order
    """
    data_format = detect_format(text)
    payload = extract_payload(text)
    rows = split_rows(payload)
    logger.debug("Detected %s format, %d rows in payload", data_format.name, len(rows))
    return [decode_row(fields, data_format, index) for index, fields in enumerate(rows)]

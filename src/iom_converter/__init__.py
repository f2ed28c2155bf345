"""
IOM Converter - biometric sensor .dat files to CSV

Parses the two IOM firmware text formats, anchors each record's relative
clock to the file's modification time and writes one CSV per source file.
"""

from .models import (
    DataFormat,
    Record,
    ConverterSettings,
)
from .errors import (
    ConversionError,
    UnrecognizedFormat,
    MalformedPayload,
    RowShapeError,
    FieldConversionError,
    EmptyRecordSet,
    RecordOrderError,
    TimeRangeError,
    FatalIOError,
)
from .parser import parse, detect_format
from .assembler import assign_absolute_times, file_anchor_time
from .converter import convert_file, convert_folder

__version__ = "0.1.0"
__all__ = [
    "DataFormat",
    "Record",
    "ConverterSettings",
    "ConversionError",
    "UnrecognizedFormat",
    "MalformedPayload",
    "RowShapeError",
    "FieldConversionError",
    "EmptyRecordSet",
    "RecordOrderError",
    "TimeRangeError",
    "FatalIOError",
    "parse",
    "detect_format",
    "assign_absolute_times",
    "file_anchor_time",
    "convert_file",
    "convert_folder",
]

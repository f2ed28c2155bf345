"""
Pydantic models for decoded IOM sensor records and converter settings.
"""

from datetime import datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class DataFormat(str, Enum):
    """Known .dat encodings, keyed by the literal tag the file starts with."""
    NEW = "Grapher v1.0 Quarter Sec Linear"
    OLD = "Healing Rhythms Event Data"


# ==================== CSV Output Schema ====================

CSV_COLUMNS: List[str] = [
    "DateTime",
    "Time Stamp",
    "ElectroDermal Response",
    "Detect",
    "Heart Rate",
    "Label",
    "Coherence",
]

TARGET_FILENAME_FORMAT = "%Y%m%d-%H%M%S"


def format_datetime(value: datetime) -> str:
    """
    Render a datetime as ISO-8601 with millisecond precision.

    UTC values use the ``Z`` suffix, other zones keep their numeric offset.

    Examples:
        2023-12-31 23:59:59.750 UTC -> "2023-12-31T23:59:59.750Z"
    """
    text = value.isoformat(timespec="milliseconds")
    if value.utcoffset() == timedelta(0):
        text = text[: -len("+00:00")] + "Z"
    return text


# ==================== Records ====================


class Record(BaseModel):
    """
    One decoded measurement sample.

    ``absolute_time`` stays None until the record set is anchored to the
    file's modification time.
    """
    timestamp: int = Field(description="Relative clock value in milliseconds")
    electrodermal_response: int = Field(description="ElectroDermal response reading")
    detect: int = Field(description="Detect flag")
    heart_rate: Decimal = Field(description="Heart rate, exact decimal as parsed")
    label: str = Field(default="", description="Event label, may be empty")
    coherence: int = Field(default=0, description="Coherence score (0 for old format files)")
    absolute_time: Optional[datetime] = Field(
        default=None, description="Wall clock time derived from the file anchor"
    )

    @property
    def is_raw(self) -> bool:
        return self.absolute_time is None

    def to_csv_row(self) -> Dict:
        """Convert to dictionary for CSV export."""
        if self.is_raw:
            raise ValueError("Record has no absolute time; anchor the records first")
        return {
            "DateTime": format_datetime(self.absolute_time),
            "Time Stamp": self.timestamp,
            "ElectroDermal Response": self.electrodermal_response,
            "Detect": self.detect,
            "Heart Rate": str(self.heart_rate),
            "Label": self.label,
            "Coherence": self.coherence,
        }


# ==================== Settings ====================


class ConverterSettings(BaseModel):
    """Options controlling a conversion run."""
    pattern: str = Field(default="*.dat", description="Glob for source files (non-recursive)")
    local_time: bool = Field(
        default=False,
        description="Anchor and render times in the local zone instead of UTC",
    )
    strict_order: bool = Field(
        default=False,
        description="Fail a file whose relative time stamps go backwards",
    )

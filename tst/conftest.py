"""
Pytest fixtures for iom_converter tests.

Provides sample .dat content in both formats and temporary folders.
"""

import os
from datetime import datetime, timezone
from pathlib import Path

import pytest

ANCHOR = datetime(2024, 1, 1, 0, 0, 0, tzinfo=timezone.utc)

NEW_FORMAT_TEXT = (
    "Grapher v1.0 Quarter Sec Linear\r\n"
    "[[#TS: 0, #EDR: 5, #DETECT: 1, #rate: 72.5, #Lable: calm, #coh: 3], "
    "[#TS: 250, #EDR: 6, #DETECT: 0, #rate: 73.0, #Lable: calm, #coh: 4]]"
)

OLD_FORMAT_TEXT = (
    "Healing Rhythms Event Data\r\n"
    "[[1000, 12, 0, 64.25, start], [1250, 13, 1, 65.10, ], [1500, 14, 0, 66, end]]"
)


def write_dat(path: Path, text: str, mtime: datetime = ANCHOR) -> Path:
    """Write a .dat file and set its modification time."""
    path.write_text(text, encoding="utf-8")
    ts = mtime.timestamp()
    os.utime(path, (ts, ts))
    return path


@pytest.fixture
def new_format_text() -> str:
    return NEW_FORMAT_TEXT


@pytest.fixture
def old_format_text() -> str:
    return OLD_FORMAT_TEXT


@pytest.fixture
def source_directory(tmp_path):
    """Create an empty source folder."""
    source_dir = tmp_path / "source"
    source_dir.mkdir()
    return source_dir


@pytest.fixture
def output_directory(tmp_path):
    """Create an empty output folder."""
    output_dir = tmp_path / "output"
    output_dir.mkdir()
    return output_dir


@pytest.fixture
def batch_directory(source_directory):
    """Three files, the middle one malformed."""
    write_dat(source_directory / "a_session.dat", NEW_FORMAT_TEXT)
    write_dat(source_directory / "b_broken.dat", "Some Other Device\r\n[[1, 2, 3]]")
    write_dat(
        source_directory / "c_session.dat",
        OLD_FORMAT_TEXT,
        mtime=datetime(2024, 2, 1, 12, 0, 0, tzinfo=timezone.utc),
    )
    return source_directory

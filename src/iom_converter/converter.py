"""
Batch converter from IOM .dat files to CSV.

Reads every matching file in a source folder, parses it, anchors record
times to the file's modification time and writes one CSV per file named
after the first record's time.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pandas as pd

from .assembler import assign_absolute_times, file_anchor_time
from .errors import ConversionError, FatalIOError
from .models import CSV_COLUMNS, TARGET_FILENAME_FORMAT, ConverterSettings, Record
from .parser import parse
from .reporting import Reporter

logger = logging.getLogger(__name__)

# ==================== Folder Handling ====================


def find_source_files(source_dir: Path, pattern: str = "*.dat") -> List[Path]:
    """
    List files matching pattern directly inside source_dir, sorted by name.

    Raises:
        FatalIOError: if the folder is missing or cannot be listed
    """
    source_dir = Path(source_dir)
    if not source_dir.is_dir():
        raise FatalIOError(f"Source folder {source_dir} does not exist or is not a folder.")
    try:
        return sorted(p for p in source_dir.glob(pattern) if p.is_file())
    except OSError as e:
        raise FatalIOError(f"Cannot read source folder {source_dir}: {e}") from e


def prepare_target_dir(target_dir: Path) -> Path:
    """
    Make sure the target folder exists.

    Raises:
        FatalIOError: if it cannot be created
    """
    target_dir = Path(target_dir)
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FatalIOError(f"Cannot create target folder {target_dir}: {e}") from e
    return target_dir


# ==================== CSV Output ====================


def target_filename(records: List[Record]) -> str:
    """
    Name the output after the first record's absolute time.

    Examples:
        first record at 2023-12-31T23:59:59.750Z -> "20231231-235959.csv"
    """
    first = records[0]
    if first.is_raw:
        raise ValueError("Records must be anchored before naming the target file")
    return first.absolute_time.strftime(TARGET_FILENAME_FORMAT) + ".csv"


def records_to_dataframe(records: List[Record]) -> pd.DataFrame:
    """Build the output table, one row per record in source order."""
    return pd.DataFrame([r.to_csv_row() for r in records], columns=CSV_COLUMNS)


def write_csv(records: List[Record], target_dir: Path) -> Path:
    """
    Write anchored records to target_dir.

    Returns:
        Path of the written CSV file
    """
    csv_path = Path(target_dir) / target_filename(records)
    records_to_dataframe(records).to_csv(csv_path, index=False)
    return csv_path


# ==================== Main Conversion Functions ====================


def read_source_file(filepath: Path) -> str:
    # utf-8-sig so a BOM doesn't hide the format tag
    return Path(filepath).read_text(encoding="utf-8-sig", errors="replace")


def convert_file(
    source_file: Path,
    target_dir: Path,
    settings: Optional[ConverterSettings] = None,
) -> Path:
    """
    Convert a single .dat file.

    Args:
        source_file: Path to the .dat file
        target_dir: Existing folder to write the CSV to
        settings: Conversion options (defaults when None)

    Returns:
        Path of the written CSV file

    Raises:
        ConversionError: parse or anchoring failure for this file
        OSError: file could not be read or written
    """
    settings = settings or ConverterSettings()
    source_file = Path(source_file)

    records = parse(read_source_file(source_file))
    anchor = file_anchor_time(source_file, local_time=settings.local_time)
    logger.debug("%s: %d records, anchor %s", source_file.name, len(records), anchor)

    assign_absolute_times(records, anchor, strict_order=settings.strict_order)
    return write_csv(records, target_dir)


def convert_folder(
    source_dir: Path,
    target_dir: Path,
    settings: Optional[ConverterSettings] = None,
    reporter: Optional[Reporter] = None,
) -> Tuple[Dict[str, Path], Dict[str, str]]:
    """
    Convert every matching file in source_dir.

    A failing file is reported and skipped; the rest of the batch still runs.

    Args:
        source_dir: Folder containing .dat files
        target_dir: Folder to write CSV files to (created if missing)
        settings: Conversion options (defaults when None)
        reporter: Progress/error sink (silent when None)

    Returns:
        Tuple of (source name -> CSV path, source name -> error message)

    Raises:
        FatalIOError: source folder unreadable or target folder not creatable
    """
    settings = settings or ConverterSettings()
    reporter = reporter or Reporter()

    source_files = find_source_files(source_dir, settings.pattern)
    target_dir = prepare_target_dir(target_dir)

    converted: Dict[str, Path] = {}
    failed: Dict[str, str] = {}

    reporter.info(f"Converting {len(source_files)} files.")

    for source_file in source_files:
        reporter.info(f"Converting {source_file.name}")
        try:
            csv_path = convert_file(source_file, target_dir, settings)
        except (ConversionError, OSError, ValueError) as e:
            failed[source_file.name] = str(e)
            reporter.error(f"{source_file.name}: {e}")
            continue

        if csv_path in converted.values():
            reporter.warning(f"{csv_path.name} was already written in this run and has been overwritten")
        converted[source_file.name] = csv_path
        reporter.info("File has been converted.")

    reporter.info("File conversion is complete.")
    return converted, failed

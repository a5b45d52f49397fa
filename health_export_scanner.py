"""
Apple Health export scanner.
Reports the structure of an export.xml (record counts, data types, date
range) by pattern matching over the raw text. Nothing from the document is
stored or transmitted; malformed XML is tolerated as long as the markers
are present.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Union

from errors import ExportNotFoundError, ExportTooLargeError, MalformedImportError
from responses import COMMON_ACTIONS, NextAction
from settings import CLI_NAME, MAX_IMPORT_SIZE_MB

logger = logging.getLogger(__name__)

ROOT_MARKER = "<HealthData"
TYPE_SAMPLE_LIMIT = 1000  # Record openers inspected for type names
LARGE_EXPORT_RECORDS = 50000

HRV_TYPE_LABEL = "Heart Rate Variability SDNN"
SLEEP_TYPE_LABEL = "Sleep Analysis"
PRIVACY_NOTICE = "NOTE: This is a parser demo - no personal health data is stored or transmitted"

RECORD_PATTERN = re.compile(r"<Record[^>]*>")
WORKOUT_PATTERN = re.compile(r"<Workout[^>]*>")
TYPE_PATTERN = re.compile(r'type="([^"]+)"')
START_DATE_PATTERN = re.compile(r'startDate="([^"]+)"')
TYPE_PREFIX_PATTERN = re.compile(r"HK[A-Za-z]*TypeIdentifier")
# Word boundary inside CamelCase, keeping acronym runs such as "SDNN" together
WORD_BOUNDARY_PATTERN = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")

BYTES_PER_MB = 1024 * 1024


@dataclass
class ImportScanResult:
    """Structural summary of one export document."""
    records_processed: int
    data_types: List[str]
    date_range: Dict[str, str]
    warnings: List[str] = field(default_factory=list)


def simplify_type_name(type_identifier: str) -> str:
    """
    Turn a HealthKit identifier into a readable label.

    HKQuantityTypeIdentifierHeartRateVariabilitySDNN -> Heart Rate Variability SDNN
    """
    name = TYPE_PREFIX_PATTERN.sub("", type_identifier, count=1)
    return WORD_BOUNDARY_PATTERN.sub(" ", name).strip()


def scan(text: str) -> ImportScanResult:
    """
    Scan raw export text.

    Args:
        text: Full document content

    Returns:
        ImportScanResult with counts, sorted type labels, date range and warnings

    Raises:
        MalformedImportError: if the HealthData root marker is missing
    """
    if ROOT_MARKER not in text:
        raise MalformedImportError(
            "Not a valid Apple Health export - missing HealthData root element",
            next_actions=[
                COMMON_ACTIONS["ROOT"],
                NextAction(f"{CLI_NAME} status", "Use mock data instead"),
            ]
        )

    records = RECORD_PATTERN.findall(text)
    workout_count = len(WORKOUT_PATTERN.findall(text))
    record_count = len(records) + workout_count

    data_types = set()
    for record in records[:TYPE_SAMPLE_LIMIT]:
        type_match = TYPE_PATTERN.search(record)
        if type_match:
            data_types.add(simplify_type_name(type_match.group(1)))

    # ISO timestamps sort chronologically as plain strings
    start_dates = sorted(START_DATE_PATTERN.findall(text))
    date_range = {"start": "", "end": ""}
    if start_dates:
        date_range["start"] = start_dates[0].split(" ")[0]
        date_range["end"] = start_dates[-1].split(" ")[0]

    warnings = []
    if record_count == 0:
        warnings.append("No health records found in export")
    if record_count > LARGE_EXPORT_RECORDS:
        warnings.append(f"Large dataset ({record_count} records) - processing limited for demo")
    if HRV_TYPE_LABEL not in data_types:
        warnings.append("HRV data not found in export")
    if SLEEP_TYPE_LABEL not in data_types:
        warnings.append("Sleep data not found in export")
    warnings.append(PRIVACY_NOTICE)

    logger.debug("Scanned export: %d records (%d workouts), %d types",
                 record_count, workout_count, len(data_types))

    return ImportScanResult(
        records_processed=record_count,
        data_types=sorted(data_types),
        date_range=date_range,
        warnings=warnings
    )


def read_export(path: Union[str, Path], max_size_mb: float = MAX_IMPORT_SIZE_MB) -> str:
    """
    Validate and read an export file.

    Args:
        path: Path to export.xml
        max_size_mb: Largest accepted file size

    Returns:
        Document text (undecodable bytes replaced)

    Raises:
        ExportNotFoundError: if the path does not exist
        ExportTooLargeError: if the file exceeds max_size_mb
    """
    path = Path(path)
    if not path.is_file():
        raise ExportNotFoundError(
            f"File not found: {path}",
            next_actions=[
                NextAction("ls -la", "List files in current directory"),
                NextAction(CLI_NAME, "Return to main menu"),
            ]
        )

    size_mb = os.path.getsize(path) / BYTES_PER_MB
    if size_mb > max_size_mb:
        raise ExportTooLargeError(
            f"File too large: {size_mb:.1f}MB (max {max_size_mb:g}MB for demo)",
            next_actions=[
                NextAction(CLI_NAME, "Return to main menu"),
                NextAction(f"{CLI_NAME} status", "View current mock data instead"),
            ]
        )

    logger.debug("Reading export %s (%.1fMB)", path, size_mb)
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return f.read()

"""Utility usage export importer.

Reads the interval CSV downloaded from the utility's account portal. A few
metadata lines come before the real header:

    Name,JANE DOE
    Address,"123 MAIN ST, SEATTLE WA 98101"
    Account Number,123456789
    Service,Service 1

    TYPE,DATE,START TIME,END TIME,USAGE (kWh),NOTES
    Electric usage,2025-01-15,00:00,00:14,0.05
"""

import csv
import io
import logging
import math
import re
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from ..models import ELECTRIC_USAGE, UsageRecord, parse_hour

logger = logging.getLogger(__name__)

ZIP_PATTERN = re.compile(r"\b(\d{5})(?:-\d{4})?\b")


class NoUsageDataError(ValueError):
    """Raised when an export contains no electric usage rows."""


@dataclass
class UsageExport:
    records: list[UsageRecord] = field(default_factory=list)
    address: str | None = None
    zip_code: str | None = None

    @property
    def start_date(self) -> date | None:
        return min((r.date for r in self.records), default=None)

    @property
    def end_date(self) -> date | None:
        return max((r.date for r in self.records), default=None)


def extract_zip_code(address: str) -> str | None:
    """Find a 5-digit zip code (ZIP+4 allowed) in an address."""
    match = ZIP_PATTERN.search(address)
    return match.group(1) if match else None


def _find_header(lines: list[str]) -> int | None:
    for i, line in enumerate(lines):
        if line.startswith("TYPE,"):
            return i
    for i, line in enumerate(lines):
        if line.upper().startswith("TYPE,") or "TYPE,DATE," in line:
            return i
    return None


def _parse_usage(value: str | None) -> float:
    try:
        usage = float(value)
    except (TypeError, ValueError):
        logger.debug("Unparseable usage %r, treating as 0", value)
        return 0.0
    if not math.isfinite(usage):
        logger.debug("Non-finite usage %r, treating as 0", value)
        return 0.0
    return usage


def _read_metadata(lines: list[str]) -> dict[str, str]:
    metadata = {}
    for row in csv.reader(lines):
        if len(row) >= 2 and row[0].strip():
            metadata[row[0].strip()] = row[1].strip()
    return metadata


def parse_export(text: str) -> UsageExport:
    """Parse the text of a usage export."""
    lines = text.splitlines()
    header_index = _find_header(lines)
    if header_index is None:
        metadata: dict[str, str] = {}
        body = lines
    else:
        metadata = _read_metadata(lines[:header_index])
        body = lines[header_index:]

    records = []
    skipped = 0
    reader = csv.DictReader(io.StringIO("\n".join(body)))
    for row in reader:
        if (row.get("TYPE") or "").strip() != ELECTRIC_USAGE:
            continue
        try:
            record_date = date.fromisoformat(row["DATE"].strip())
            start_time = row["START TIME"].strip()
            parse_hour(start_time)
        except (KeyError, AttributeError, ValueError):
            skipped += 1
            logger.warning("Skipping row with bad date/time: %s", row)
            continue

        records.append(
            UsageRecord(
                date=record_date,
                start_time=start_time,
                end_time=(row.get("END TIME") or "").strip(),
                usage_kwh=_parse_usage(row.get("USAGE (kWh)")),
                notes=row.get("NOTES") or None,
            )
        )

    address = metadata.get("Address")
    logger.info("Parsed %d usage records (%d skipped)", len(records), skipped)
    return UsageExport(
        records=records,
        address=address,
        zip_code=extract_zip_code(address) if address else None,
    )


def load_export(csv_path: Path) -> UsageExport:
    """Read a usage export file. Raises NoUsageDataError if it has no usage rows."""
    with open(csv_path, newline="", encoding="utf-8-sig") as f:
        export = parse_export(f.read())
    if not export.records:
        raise NoUsageDataError(f"No electric usage data found in {csv_path}")
    return export

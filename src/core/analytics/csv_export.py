"""
CSV serialization of a performance series.

Every field is quoted so notes containing commas or quotes survive a
round trip through any standard CSV reader. Dates are ISO formatted so
the file reads the same regardless of the downloader's locale.
"""

import csv
import io
import re
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from .errors import EmptyExportError
from .models import PerformanceRecord


CSV_HEADER = ("Date", "Metric Name", "Value", "Unit", "Notes")
CSV_MEDIA_TYPE = "text/csv"


@dataclass(frozen=True)
class CsvExport:
    """A rendered export ready to download or archive."""
    filename: str
    content: str
    row_count: int

    @property
    def content_bytes(self) -> bytes:
        return self.content.encode("utf-8")


def format_value(value: float) -> str:
    """Integral values drop the trailing ".0"; others keep full precision."""
    if value.is_integer():
        return str(int(value))
    return repr(value)


def export_filename(athlete_name: str, on: Optional[date] = None) -> str:
    """`<athleteName>_performance_<YYYY-MM-DD>.csv`"""
    on = on or date.today()
    safe_name = re.sub(r"[\\/]+", "_", athlete_name.strip())
    return f"{safe_name}_performance_{on.isoformat()}.csv"


def render_csv(records: Sequence[PerformanceRecord]) -> str:
    """Header plus one fully quoted row per record, newline separated."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for record in records:
        writer.writerow((
            record.recorded_on.isoformat(),
            record.metric_name,
            format_value(record.metric_value),
            record.metric_unit,
            record.notes or "",
        ))
    return buffer.getvalue()


def export_series(
    records: Sequence[PerformanceRecord],
    athlete_name: str,
    on: Optional[date] = None,
) -> CsvExport:
    """
    Build a CSV export for one athlete.

    `on` sets the date used in the filename and defaults to today.

    Raises:
        EmptyExportError: if there are no records. A header-only file is
            never produced; the caller decides how to tell the user.
    """
    if not records:
        raise EmptyExportError("Nothing to export")

    return CsvExport(
        filename=export_filename(athlete_name, on),
        content=render_csv(records),
        row_count=len(records),
    )

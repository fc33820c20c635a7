"""
Unit tests for CSV export.
"""

import csv
import io
from datetime import date

import pytest

from src.core.analytics.csv_export import (
    CSV_HEADER,
    export_filename,
    export_series,
    format_value,
    render_csv,
)
from src.core.analytics.errors import EmptyExportError


EXPORT_DAY = date(2026, 10, 19)


class TestExportSeries:
    """Tests for the full export."""

    def test_two_records_give_header_plus_two_rows(self, series_factory):
        export = export_series(series_factory([11.8, 11.5]), "Priya Rawat", on=EXPORT_DAY)
        lines = export.content.splitlines()

        assert len(lines) == 3
        assert export.row_count == 2
        for line in lines:
            fields = line.split(",")
            assert all(f.startswith('"') and f.endswith('"') for f in fields)

    def test_header_row(self, series_factory):
        export = export_series(series_factory([1.0]), "Priya", on=EXPORT_DAY)
        assert export.content.splitlines()[0] == '"Date","Metric Name","Value","Unit","Notes"'

    def test_rows_follow_series_order(self, series_factory):
        export = export_series(series_factory([11.8, 11.5]), "Priya", on=EXPORT_DAY)
        rows = list(csv.reader(io.StringIO(export.content)))

        assert rows[1] == ["2026-01-01", "100m Time", "11.8", "seconds", ""]
        assert rows[2] == ["2026-01-02", "100m Time", "11.5", "seconds", ""]

    def test_notes_with_commas_quotes_and_newlines_survive(self, series_factory):
        """Reading the file back yields exactly the notes that were written."""
        notes = ['Windy, wet track', 'Coach said "great start"\nthen cramped']
        records = series_factory([11.8, 11.5], notes=notes)

        rows = list(csv.reader(io.StringIO(render_csv(records))))

        assert tuple(rows[0]) == CSV_HEADER
        assert [row[4] for row in rows[1:]] == notes

    def test_empty_series_cannot_be_exported(self):
        with pytest.raises(EmptyExportError, match="Nothing to export"):
            export_series([], "Priya", on=EXPORT_DAY)

    def test_filename_uses_athlete_name_and_date(self, series_factory):
        export = export_series(series_factory([1.0]), "Priya Rawat", on=EXPORT_DAY)
        assert export.filename == "Priya Rawat_performance_2026-10-19.csv"

    def test_content_bytes_are_utf8(self, series_factory):
        export = export_series(
            series_factory([1.0], notes=["नया रिकॉर्ड"]), "Priya", on=EXPORT_DAY
        )
        assert export.content_bytes.decode("utf-8") == export.content


class TestHelpers:

    def test_path_separators_removed_from_filename(self):
        assert export_filename("a/b\\c", EXPORT_DAY) == "a_b_c_performance_2026-10-19.csv"

    @pytest.mark.parametrize("value, expected", [
        (10.0, "10"),
        (11.8, "11.8"),
        (-3.0, "-3"),
        (0.1, "0.1"),
    ])
    def test_format_value(self, value, expected):
        assert format_value(value) == expected

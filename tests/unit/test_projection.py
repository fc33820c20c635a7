"""
Unit tests for chart projection.
"""

from datetime import date

import pytest

from src.core.analytics.errors import EmptySeriesError
from src.core.analytics.models import MetricKey
from src.core.analytics.projection import (
    ChartSeries,
    format_label,
    project_by_metric,
    project_series,
)


class TestProjectSeries:
    """Tests for the single-line projection."""

    def test_labels_and_values_line_up(self, series_factory):
        chart = project_series(series_factory([11.8, 11.5, 11.2]))

        assert chart.series_label == "100m Time (seconds)"
        assert chart.labels == ["Jan 01, 2026", "Jan 02, 2026", "Jan 03, 2026"]
        assert chart.values == [11.8, 11.5, 11.2]
        assert chart.point_count == 3

    def test_empty_series_has_no_chart_data(self):
        with pytest.raises(EmptySeriesError, match="No chart data"):
            project_series([])

    def test_label_comes_from_first_record(self, series_factory):
        """Mixed series are not rejected; the legend follows the first entry."""
        records = (
            series_factory([5.5], metric_name="Long Jump", metric_unit="m")
            + series_factory([12.0])
        )
        chart = project_series(records)
        assert chart.series_label == "Long Jump (m)"
        assert chart.point_count == 2

    def test_format_label(self):
        assert format_label(date(2026, 10, 19)) == "Oct 19, 2026"

    @pytest.mark.parametrize("day, label", [
        (date(2026, 1, 1), "Jan 01, 2026"),
        (date(2026, 5, 3), "May 03, 2026"),
        (date(2025, 9, 30), "Sep 30, 2025"),
        (date(2024, 12, 31), "Dec 31, 2024"),
    ])
    def test_format_label_months(self, day, label):
        assert format_label(day) == label

    def test_format_label_ignores_locale(self):
        """Labels never go through strftime, whose month names follow LC_TIME."""
        class NoStrftime(date):
            def strftime(self, fmt):
                raise AssertionError("locale-dependent formatting used")

        assert format_label(NoStrftime(2026, 3, 8)) == "Mar 08, 2026"


class TestChartSeries:

    def test_mismatched_lengths_rejected(self):
        with pytest.raises(ValueError, match="same length"):
            ChartSeries(series_label="x", labels=["a", "b"], values=[1.0])


class TestProjectByMetric:
    """Tests for one line per metric."""

    def test_one_series_per_metric(self, series_factory):
        records = (
            series_factory([12.0, 11.5])
            + series_factory([5.5, 5.9, 6.0], metric_name="Long Jump", metric_unit="m")
        )
        charts = project_by_metric(records)

        assert list(charts) == [
            MetricKey("100m Time", "seconds"),
            MetricKey("Long Jump", "m"),
        ]
        assert charts[MetricKey("Long Jump", "m")].values == [5.5, 5.9, 6.0]
        assert charts[MetricKey("100m Time", "seconds")].series_label == "100m Time (seconds)"

    def test_empty_series_gives_no_lines(self):
        assert project_by_metric([]) == {}

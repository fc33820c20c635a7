"""
Tests for the roster seeding script.
"""

import json
from pathlib import Path

import pytest

from scripts.seed_roster import parse_roster, seed_snowflake
from src.config.settings import get_settings


SAMPLE_ROSTER = Path(__file__).resolve().parents[2] / "data" / "sample_roster.json"


class TestParseRoster:

    def test_sample_roster(self):
        entries = parse_roster(str(SAMPLE_ROSTER))

        assert [len(records) for _, records in entries] == [3, 2, 2, 0]
        assert entries[0][0].name == "Priya Rawat"
        assert not entries[3][0].is_athlete

    def test_records_belong_to_their_profile(self):
        for profile, records in parse_roster(str(SAMPLE_ROSTER)):
            assert all(record.athlete_id == profile.id for record in records)

    def test_invalid_entries_are_skipped(self, tmp_path):
        roster_file = tmp_path / "roster.json"
        roster_file.write_text(json.dumps({"users": [
            # athlete without a sport
            {"name": "No Sport", "role": "athlete", "district": "Dehradun", "age": 15},
            {"name": "Coach", "role": "coach", "district": "Dehradun", "team": "Doon FC",
             "performances": [{"date": "2026-01-01", "metricName": "Squat",
                               "metricValue": 50, "metricUnit": "kg"}]},
            {"name": "Valid", "role": "athlete", "district": "Dehradun",
             "sport": "Football", "age": 15,
             "performances": [
                 {"date": "2026-01-01", "metricName": "Squat", "metricValue": 50, "metricUnit": "kg"},
                 {"date": "not-a-date", "metricName": "Squat", "metricValue": 55, "metricUnit": "kg"},
             ]},
        ]}), encoding="utf-8")

        entries = parse_roster(str(roster_file))

        assert [profile.name for profile, _ in entries] == ["Coach", "Valid"]
        assert [len(records) for _, records in entries] == [0, 1]


class TestSeedSnowflake:

    @pytest.fixture(autouse=True)
    def mock_database(self, monkeypatch):
        monkeypatch.setenv("SNOWFLAKE_MOCK_MODE", "true")
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()

    def test_dry_run(self):
        assert seed_snowflake(parse_roster(str(SAMPLE_ROSTER)), dry_run=True) is True

    def test_seed_into_mock_database(self):
        assert seed_snowflake(parse_roster(str(SAMPLE_ROSTER))) is True

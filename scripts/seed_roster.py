#!/usr/bin/env python3
"""
Seed Snowflake with athletes, coaches and performance history.

Reads a JSON roster file shaped like:

    {"users": [
        {"name": "...", "email": "...", "role": "athlete", "sport": "...",
         "district": "...", "age": 17,
         "performances": [
             {"date": "2026-01-10", "metricName": "100m Time",
              "metricValue": 11.8, "metricUnit": "seconds", "notes": "..."}
         ]}
    ]}

Usage:
    python scripts/seed_roster.py --file data/sample_roster.json [--dry-run]

Requires:
    - .env file with Snowflake credentials (or SNOWFLAKE_MOCK_MODE=true)
"""

import json
import sys
from datetime import date
from pathlib import Path

# Add project root to path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from src.config.settings import get_settings  # noqa: E402
from src.core.analytics.models import AthleteProfile, PerformanceRecord, Role  # noqa: E402


def parse_roster(filepath: str) -> list[tuple[AthleteProfile, list[PerformanceRecord]]]:
    """
    Parse the roster file into profiles and their records.

    Invalid entries are reported and skipped rather than aborting the
    whole import.
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        payload = json.load(f)

    entries = []

    for index, user in enumerate(payload.get('users', [])):
        try:
            role = Role(user['role'])
            profile = AthleteProfile(
                name=user['name'],
                email=user.get('email', ''),
                role=role,
                district=user['district'],
                sport=user.get('sport') if role is Role.ATHLETE else None,
                age=user.get('age') if role is Role.ATHLETE else None,
                team=user.get('team') if role is Role.COACH else None,
            )
        except (KeyError, ValueError) as e:
            print(f"[SKIP] User #{index}: {e}")
            continue

        records = []
        for perf in user.get('performances', []):
            try:
                records.append(PerformanceRecord(
                    athlete_id=profile.id,
                    recorded_on=date.fromisoformat(perf['date']),
                    metric_name=perf['metricName'],
                    metric_value=float(perf['metricValue']),
                    metric_unit=perf['metricUnit'],
                    notes=perf.get('notes'),
                ))
            except (KeyError, ValueError) as e:
                print(f"[SKIP] Performance for {profile.name}: {e}")

        if records and not profile.is_athlete:
            print(f"[SKIP] {len(records)} performances for coach {profile.name}")
            records = []

        entries.append((profile, records))

    return entries


def seed_snowflake(entries, dry_run: bool = False) -> bool:
    """Insert profiles and records through the repositories."""
    from src.api.dependencies import build_snowflake_config
    from src.infrastructure.snowflake.client import create_snowflake_connection
    from src.infrastructure.snowflake.repositories import (
        AthleteRepository,
        DuplicateProfileError,
        PerformanceRepository,
    )

    if dry_run:
        print("\n=== DRY RUN - No data will be inserted ===\n")
        for profile, records in entries:
            print(f"Would insert: {profile.role.value} {profile.name} ({len(records)} performances)")
        print(f"\nTotal: {len(entries)} users")
        return True

    settings = get_settings()
    missing = [
        field for field in settings.validate_required_fields()
        if field.startswith('SNOWFLAKE')
    ]
    if missing:
        print(f"ERROR: Missing {', '.join(missing)}")
        return False

    inserted = 0
    errors = 0

    with create_snowflake_connection(
        config=build_snowflake_config(settings),
        mock_mode=settings.snowflake_mock_mode,
    ) as conn:
        athletes = AthleteRepository(conn)
        performances = PerformanceRepository(conn)

        for profile, records in entries:
            try:
                athletes.create_profile(profile)
                for record in records:
                    performances.add_record(record)
                inserted += 1
                print(f"[OK] Inserted: {profile.name} ({len(records)} performances)")
            except DuplicateProfileError:
                errors += 1
                print(f"[ERR] {profile.email} already registered")
            except Exception as e:
                errors += 1
                print(f"[ERR] Error inserting {profile.name}: {e}")

    print(f"\n=== Seed Complete ===")
    print(f"Inserted: {inserted}")
    print(f"Errors: {errors}")

    return errors == 0


def main():
    import argparse

    parser = argparse.ArgumentParser(description='Seed athletes and performance history')
    parser.add_argument('--dry-run', action='store_true', help='Parse only, don\'t insert')
    parser.add_argument('--file', default='data/sample_roster.json', help='Roster JSON path')
    args = parser.parse_args()

    filepath = Path(args.file)
    if not filepath.exists():
        # Try relative to project root
        filepath = Path(__file__).parent.parent / args.file

    if not filepath.exists():
        print(f"ERROR: Cannot find {args.file}")
        sys.exit(1)

    print(f"Parsing roster from: {filepath}")
    entries = parse_roster(str(filepath))
    print(f"Found {len(entries)} users")

    if not entries:
        print("ERROR: No valid users found in roster file")
        sys.exit(1)

    success = seed_snowflake(entries, dry_run=args.dry_run)

    sys.exit(0 if success else 1)


if __name__ == '__main__':
    main()

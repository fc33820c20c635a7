"""
Snowflake repository for performance records.

Records are append-only: there is no update path. A series is always
read back in ascending date order, which is the order every analytics
transform expects.
"""

import logging
from uuid import UUID

from src.core.analytics.models import PerformanceRecord

from .base import RepositoryError, SnowflakeConnection


logger = logging.getLogger(__name__)


RECORD_COLUMNS = (
    "record_id, athlete_id, recorded_on, metric_name, metric_value, "
    "metric_unit, notes, created_at"
)


class RecordNotFoundError(RepositoryError):
    """Raised when a record doesn't exist (or was already deleted)."""
    pass


class PerformanceRepository:
    """
    Repository for performance records.

    - add_record: Log a new measurement
    - list_for_athlete: Load one athlete's series, oldest first
    - delete_record: Remove a record, reporting not-found on repeats
    """

    def __init__(self, connection: SnowflakeConnection) -> None:
        self._conn = connection

    def add_record(self, record: PerformanceRecord) -> PerformanceRecord:
        """Persist a new record. The caller has already checked the athlete exists."""
        cursor = self._conn.cursor()

        try:
            cursor.execute("""
                INSERT INTO performance_records (
                    record_id, athlete_id, recorded_on, metric_name,
                    metric_value, metric_unit, notes, created_at
                ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
            """, (
                str(record.id),
                str(record.athlete_id),
                record.recorded_on,
                record.metric_name,
                record.metric_value,
                record.metric_unit,
                record.notes,
                record.created_at,
            ))

            self._conn.commit()
            return record

        except Exception as e:
            logger.error(
                "Failed to save performance record",
                extra={"record_id": str(record.id), "error": str(e)}
            )
            raise
        finally:
            cursor.close()

    def list_for_athlete(self, athlete_id: UUID) -> list[PerformanceRecord]:
        """
        Load an athlete's full series in ascending date order.

        Records logged on the same day keep the order they were created in.
        An athlete with no records gets an empty list.
        """
        cursor = self._conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {RECORD_COLUMNS}
                FROM performance_records
                WHERE athlete_id = %s
                ORDER BY recorded_on, created_at
            """, (str(athlete_id),))

            rows = cursor.fetchall()
            return [self._build_record(row) for row in rows]

        finally:
            cursor.close()

    def delete_record(self, athlete_id: UUID, record_id: UUID) -> None:
        """
        Delete one of an athlete's records.

        Deleting the same record twice is safe: the second call raises
        RecordNotFoundError rather than failing in the database.

        Raises:
            RecordNotFoundError: if the athlete has no record with this ID.
        """
        cursor = self._conn.cursor()

        try:
            cursor.execute("""
                DELETE FROM performance_records
                WHERE record_id = %s AND athlete_id = %s
            """, (str(record_id), str(athlete_id)))

            deleted = cursor.rowcount
            self._conn.commit()

        finally:
            cursor.close()

        if not deleted:
            raise RecordNotFoundError(f"Performance record {record_id} not found")

        logger.info(
            "Deleted performance record",
            extra={"record_id": str(record_id), "athlete_id": str(athlete_id)}
        )

    # -----------------------------------------------------------------------
    # Private Methods
    # -----------------------------------------------------------------------

    def _build_record(self, row) -> PerformanceRecord:
        """Construct a PerformanceRecord from a RECORD_COLUMNS row."""
        return PerformanceRecord(
            id=UUID(row[0]),
            athlete_id=UUID(row[1]),
            recorded_on=row[2],
            metric_name=row[3],
            metric_value=float(row[4]),
            metric_unit=row[5],
            notes=row[6],
            created_at=row[7],
        )

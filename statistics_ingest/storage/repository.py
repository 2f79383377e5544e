"""
Series storage. Insert-if-absent per (owner, series_name, distance, timestamp).

Duplicate protection comes from the table's primary key and
INSERT ... ON CONFLICT DO NOTHING, never from a read-then-write.
"""

from datetime import datetime, timezone
from typing import Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Connection, Engine

from statistics_ingest.db.models import DataPoint
from statistics_ingest.utils.logger import logger
from statistics_model import TimeSeriesDefinition, TimeSeriesPoint

KEY_COLUMNS = ["owner", "series_name", "distance", "observation_time"]


class DataPointConflict(Exception):
    """A point with the same timestamp already exists in the series."""

    def __init__(self, definition: TimeSeriesDefinition, timestamps: List[datetime]) -> None:
        self.definition = definition
        self.timestamps = timestamps
        super().__init__(
            f"{len(timestamps)} point(s) already exist in "
            f"{definition.owner}/{definition.name}/{definition.distance.value}: "
            + ", ".join(t.isoformat() for t in timestamps)
        )


def _to_utc(timestamp: datetime) -> datetime:
    return timestamp.astimezone(timezone.utc).replace(tzinfo=None)


class SeriesRepository:

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def _insert_construct(self):
        dialect = self._engine.dialect.name
        if dialect == "postgresql":
            return postgresql.insert
        if dialect == "sqlite":
            return sqlite.insert
        raise NotImplementedError(f"Unsupported database dialect: {dialect}")

    def _insert_one(
        self,
        conn: Connection,
        definition: TimeSeriesDefinition,
        point: TimeSeriesPoint,
    ) -> bool:
        stmt = self._insert_construct()(DataPoint).values(
            owner=definition.owner,
            series_name=definition.name,
            distance=definition.distance.value,
            observation_time=_to_utc(point.timestamp),
            measurements=dict(point.measurements),
        )
        stmt = stmt.on_conflict_do_nothing(index_elements=KEY_COLUMNS)
        return conn.execute(stmt).rowcount == 1

    def insert_if_absent(
        self, definition: TimeSeriesDefinition, point: TimeSeriesPoint
    ) -> bool:
        """Store one point. Returns False when the timestamp is already taken."""
        with self._engine.begin() as conn:
            inserted = self._insert_one(conn, definition, point)

        if inserted:
            logger.info(
                f"Inserted point {point.timestamp.isoformat()} into "
                f"{definition.owner}/{definition.name}/{definition.distance.value}"
            )
        return inserted

    def insert_all_if_absent(
        self, definition: TimeSeriesDefinition, points: Iterable[TimeSeriesPoint]
    ) -> int:
        """
        Store a batch in one transaction, all or nothing.

        Identical duplicates inside the batch collapse to one point. Two batch
        points sharing a timestamp with different measurements, or any point
        whose timestamp is already stored, raise DataPointConflict and the
        whole batch is rolled back. Returns the number of points stored.
        """
        unique = {}
        for point in points:
            key = _to_utc(point.timestamp)
            seen = unique.get(key)
            if seen is None:
                unique[key] = point
            elif seen != point:
                raise DataPointConflict(definition, [point.timestamp])

        if not unique:
            logger.warning("No points to insert.")
            return 0

        # raising inside begin() rolls the transaction back
        with self._engine.begin() as conn:
            conflicts = [
                point.timestamp
                for point in unique.values()
                if not self._insert_one(conn, definition, point)
            ]
            if conflicts:
                raise DataPointConflict(definition, conflicts)

        logger.info(
            f"Inserted {len(unique)} points into "
            f"{definition.owner}/{definition.name}/{definition.distance.value}"
        )
        return len(unique)

    def latest(self, definition: TimeSeriesDefinition) -> Optional[TimeSeriesPoint]:
        stmt = (
            select(DataPoint.observation_time, DataPoint.measurements)
            .where(
                DataPoint.owner == definition.owner,
                DataPoint.series_name == definition.name,
                DataPoint.distance == definition.distance.value,
            )
            .order_by(DataPoint.observation_time.desc())
            .limit(1)
        )

        with self._engine.connect() as conn:
            row = conn.execute(stmt).first()

        if row is None:
            return None
        return TimeSeriesPoint(
            timestamp=row.observation_time.replace(tzinfo=timezone.utc),
            measurements=row.measurements,
        )

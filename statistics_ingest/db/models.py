from sqlalchemy import (
    Column,
    String,
    DateTime,
    JSON,
)
from sqlalchemy.orm import declarative_base
from datetime import datetime, timezone

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class DataPoint(Base):
    __tablename__ = "data_points"

    # (owner, series_name, distance, observation_time) is the insert-if-absent key
    owner = Column(String, primary_key=True, nullable=False)
    series_name = Column(String, primary_key=True, nullable=False)
    distance = Column(String, primary_key=True, nullable=False)

    # naive UTC
    observation_time = Column(
        DateTime,
        primary_key=True,
        nullable=False,
    )

    measurements = Column(JSON, nullable=False)
    ingestion_time = Column(DateTime, default=_utcnow)

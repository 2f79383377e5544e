from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from pydantic import (
    AwareDatetime,
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    TypeAdapter,
    field_serializer,
    field_validator,
)

# one path segment on the wire, "/" would split it
PATH_SEGMENT = r"^[^/]+$"


class MeasurementDistance(str, Enum):
    """Fixed sampling granularity of a series. The value is the URL path segment."""

    minutes = "minutes"
    hours = "hours"
    days = "days"
    months = "months"
    years = "years"


class TimeSeriesPoint(BaseModel):
    """One timestamped set of named integer measurements. Read-only once built."""

    model_config = ConfigDict(frozen=True)

    timestamp: AwareDatetime
    measurements: Dict[str, StrictInt] = Field(..., min_length=1)

    @field_validator("timestamp")
    @classmethod
    def _representable_in_utc(cls, value: datetime) -> datetime:
        try:
            value.astimezone(timezone.utc)
        except OverflowError:
            raise ValueError("timestamp is out of range when converted to UTC")
        return value

    @field_validator("measurements")
    @classmethod
    def _read_only(cls, value: Dict[str, int]) -> Mapping[str, int]:
        return MappingProxyType(dict(value))

    @field_serializer("measurements")
    def _dump_measurements(self, value: Mapping[str, int]) -> Dict[str, int]:
        return dict(value)

    def __hash__(self) -> int:
        return hash((self.timestamp, frozenset(self.measurements.items())))

    def measurement(self, name: str) -> Optional[int]:
        return self.measurements.get(name)


class TimeSeriesDefinition(BaseModel):
    """Addressing key of one series: (name, distance, owner)."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, pattern=PATH_SEGMENT)
    distance: MeasurementDistance
    owner: str = Field(..., min_length=1, pattern=PATH_SEGMENT)


_POINT_LIST = TypeAdapter(List[TimeSeriesPoint])


def dump_point(point: TimeSeriesPoint) -> bytes:
    return point.model_dump_json().encode("utf-8")


def dump_points(points: List[TimeSeriesPoint]) -> bytes:
    # list order is kept as given
    return _POINT_LIST.dump_json(list(points))


def parse_point(raw: bytes | str) -> TimeSeriesPoint:
    return TimeSeriesPoint.model_validate_json(raw)


def parse_points(raw: bytes | str) -> List[TimeSeriesPoint]:
    return _POINT_LIST.validate_json(raw)

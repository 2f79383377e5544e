# shared point/definition types - used by both the ingest service and the client

from statistics_model.schemas import (
    MeasurementDistance,
    TimeSeriesDefinition,
    TimeSeriesPoint,
    dump_point,
    dump_points,
    parse_point,
    parse_points,
)

__all__ = [
    "MeasurementDistance",
    "TimeSeriesDefinition",
    "TimeSeriesPoint",
    "dump_point",
    "dump_points",
    "parse_point",
    "parse_points",
]

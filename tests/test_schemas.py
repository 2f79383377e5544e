import json
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from statistics_model import (
    MeasurementDistance,
    TimeSeriesDefinition,
    TimeSeriesPoint,
    dump_point,
    dump_points,
    parse_point,
    parse_points,
)

UTC = timezone.utc


def a_point(**measurements):
    return TimeSeriesPoint(
        timestamp=datetime(2016, 3, 3, 20, 12, 13, tzinfo=UTC),
        measurements=measurements or {"antall": 2},
    )


def test_point_requires_zoned_timestamp():
    with pytest.raises(ValidationError):
        TimeSeriesPoint(timestamp=datetime(2016, 3, 3, 20, 12, 13), measurements={"antall": 2})


def test_point_parses_iso_timestamp_with_offset():
    point = parse_point('{"timestamp": "2016-03-03T21:12:13+01:00", "measurements": {"antall": 2}}')
    assert point == a_point()
    assert point.timestamp.utcoffset() == timedelta(hours=1)


def test_point_rejects_naive_iso_timestamp():
    with pytest.raises(ValidationError):
        parse_point('{"timestamp": "2016-03-03T20:12:13", "measurements": {"antall": 2}}')


@pytest.mark.parametrize("value", ['"2"', "2.5", "true", "null"])
def test_measurements_must_be_integers(value):
    with pytest.raises(ValidationError):
        parse_point('{"timestamp": "2016-03-03T20:12:13Z", "measurements": {"antall": %s}}' % value)


def test_point_needs_at_least_one_measurement():
    with pytest.raises(ValidationError):
        parse_point('{"timestamp": "2016-03-03T20:12:13Z", "measurements": {}}')
    with pytest.raises(ValidationError):
        parse_point('{"timestamp": "2016-03-03T20:12:13Z"}')


def test_point_is_immutable():
    point = a_point()
    with pytest.raises(ValidationError):
        point.timestamp = datetime(2017, 1, 1, tzinfo=UTC)
    with pytest.raises(TypeError):
        point.measurements["antall"] = 99
    assert point.measurement("antall") == 2


def test_point_is_hashable():
    same_instant = TimeSeriesPoint(
        timestamp=datetime(2016, 3, 3, 21, 12, 13, tzinfo=timezone(timedelta(hours=1))),
        measurements={"antall": 2},
    )
    assert hash(a_point(a=1, b=2)) == hash(a_point(b=2, a=1))
    assert len({a_point(), a_point(), same_instant, a_point(antall=3)}) == 2


def test_read_only_measurements_round_trip():
    point = a_point(zulu=1, alpha=2)
    assert parse_point(dump_point(point)) == point
    assert point.model_dump()["measurements"] == {"zulu": 1, "alpha": 2}


@pytest.mark.parametrize("timestamp", ["0001-01-01T00:00:00+01:00", "9999-12-31T23:59:59-01:00"])
def test_timestamp_must_fit_in_utc(timestamp):
    with pytest.raises(ValidationError):
        parse_point('{"timestamp": "%s", "measurements": {"antall": 2}}' % timestamp)


def test_point_equality_is_structural():
    assert a_point() == a_point()
    assert a_point(antall=2) != a_point(antall=3)
    assert a_point(a=1, b=2) == a_point(b=2, a=1)


def test_measurement_order_is_kept_on_the_wire():
    point = a_point(zulu=1, alpha=2, mike=3)
    body = json.loads(dump_point(point))
    assert list(body["measurements"]) == ["zulu", "alpha", "mike"]
    assert point.measurement("alpha") == 2
    assert point.measurement("missing") is None


def test_point_is_sent_with_zoned_iso_timestamp():
    body = json.loads(dump_point(a_point()))
    assert body["measurements"] == {"antall": 2}
    assert body["timestamp"].startswith("2016-03-03T20:12:13")
    assert parse_point(dump_point(a_point())).timestamp.tzinfo is not None


def test_point_list_keeps_order():
    later = TimeSeriesPoint(timestamp=datetime(2016, 3, 3, 21, tzinfo=UTC), measurements={"antall": 1})
    points = [later, a_point()]
    assert parse_points(dump_points(points)) == points


def test_definition_equality_uses_all_fields():
    definition = TimeSeriesDefinition(name="aTimeSeries", distance=MeasurementDistance.minutes, owner="aUser")
    assert definition == TimeSeriesDefinition(name="aTimeSeries", distance="minutes", owner="aUser")
    assert definition != TimeSeriesDefinition(name="aTimeSeries", distance="hours", owner="aUser")
    assert definition != TimeSeriesDefinition(name="aTimeSeries", distance="minutes", owner="anotherUser")
    assert len({definition, definition.model_copy()}) == 1


def test_distance_values_are_path_segments():
    assert [d.value for d in MeasurementDistance] == ["minutes", "hours", "days", "months", "years"]


@pytest.mark.parametrize("field", ["name", "owner"])
def test_definition_parts_are_single_path_segments(field):
    parts = {"name": "aTimeSeries", "distance": "minutes", "owner": "aUser"}
    parts[field] = "a/b"
    with pytest.raises(ValidationError):
        TimeSeriesDefinition(**parts)

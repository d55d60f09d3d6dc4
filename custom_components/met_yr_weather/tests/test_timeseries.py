from datetime import date, datetime, timezone

from custom_components.met_yr_weather.timeseries import (
    TimeSeriesPoint,
    bucketize,
    parse_timestamp,
    parse_timeseries,
    select_closest,
)


def _entry(time, temp=None, symbol_6h=None, precip_6h=None):
    data = {"instant": {"details": {"air_temperature": temp}}}
    if symbol_6h is not None or precip_6h is not None:
        data["next_6_hours"] = {
            "summary": {"symbol_code": symbol_6h},
            "details": {"precipitation_amount": precip_6h},
        }
    return {"time": time, "data": data}


def test_parse_timeseries_rejects_bad_shapes():
    assert parse_timeseries(None) == []
    assert parse_timeseries({"properties": None}) == []
    assert parse_timeseries({"properties": {"timeseries": "nope"}}) == []
    assert parse_timeseries({"properties": {"timeseries": [1, "x", None]}}) == []


def test_point_from_dict_tolerates_missing_and_malformed_fields():
    point = TimeSeriesPoint.from_dict(
        {
            "time": "2025-04-08T12:00:00Z",
            "data": {
                "instant": {"details": "broken"},
                "next_1_hours": {"summary": {"symbol_code": "rain"}, "details": {"precipitation_amount": "n/a"}},
                "next_6_hours": [],
            },
        }
    )
    assert point.details is None
    assert point.next_1_hours.symbol_code == "rain"
    assert point.next_1_hours.precipitation_amount is None
    assert point.next_6_hours is None
    assert point.symbol_6h is None


def test_parse_timestamp():
    assert parse_timestamp("2025-04-08T12:00:00Z") == datetime(2025, 4, 8, 12, tzinfo=timezone.utc)
    assert parse_timestamp("2025-04-08T14:00:00+02:00") == datetime(2025, 4, 8, 12, tzinfo=timezone.utc)
    assert parse_timestamp("2025-04-08T12:00:00").tzinfo is not None
    assert parse_timestamp("garbage") is None
    assert parse_timestamp(None) is None


def test_bucketize_window_and_drops():
    series = parse_timeseries(
        {
            "properties": {
                "timeseries": [
                    _entry("2025-04-08T23:00:00Z", 1.0),  # today, outside window
                    _entry("2025-04-09T00:00:00Z", 2.0),
                    _entry("not-a-time", 3.0),
                    _entry("2025-04-09T18:00:00Z", 4.0),
                    _entry("2025-04-10T06:00:00Z", 5.0),
                    _entry("2025-04-11T00:00:00Z", 6.0),  # first day past the window
                ]
            }
        }
    )
    buckets = bucketize(series, date(2025, 4, 9), 2)

    assert sorted(buckets) == [date(2025, 4, 9), date(2025, 4, 10)]
    assert [p.details.air_temperature for p in buckets[date(2025, 4, 9)]] == [2.0, 4.0]
    assert [p.details.air_temperature for p in buckets[date(2025, 4, 10)]] == [5.0]


def test_bucketize_assigns_each_point_at_most_once():
    times = [f"2025-04-{d:02d}T{h:02d}:00:00Z" for d in range(9, 14) for h in range(0, 24, 3)]
    series = [TimeSeriesPoint.from_dict(_entry(t, 0.0)) for t in times]
    buckets = bucketize(series, date(2025, 4, 9), 5)

    placed = [id(p) for points in buckets.values() for p in points]
    assert len(placed) == len(set(placed)) == len(series)
    assert all(len(points) == 8 for points in buckets.values())


def test_bucketize_skips_empty_days():
    series = [TimeSeriesPoint.from_dict(_entry("2025-04-12T00:00:00Z", 0.0))]
    assert list(bucketize(series, date(2025, 4, 9), 5)) == [date(2025, 4, 12)]


def test_select_closest():
    series = parse_timeseries(
        {
            "properties": {
                "timeseries": [
                    _entry("bad", 0.0),
                    _entry("2025-04-08T11:00:00Z", 1.0),
                    _entry("2025-04-08T12:00:00Z", 2.0),
                    _entry("2025-04-08T13:00:00Z", 3.0),
                ]
            }
        }
    )
    now = datetime(2025, 4, 8, 12, 20, tzinfo=timezone.utc)
    assert select_closest(series, now).details.air_temperature == 2.0
    assert select_closest([], now) is None

    unparsable = parse_timeseries({"properties": {"timeseries": [_entry("x", 7.0), _entry("y", 8.0)]}})
    assert select_closest(unparsable, now).details.air_temperature == 7.0

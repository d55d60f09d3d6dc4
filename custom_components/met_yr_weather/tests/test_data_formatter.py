import itertools
import logging
import random
from datetime import date, datetime, timezone

import pytest

from custom_components.met_yr_weather.data_formatter import (
    DataFormatter,
    aggregate_day,
    format_timestamp,
    representative_symbol,
    summarize_point,
)
from custom_components.met_yr_weather.timeseries import TimeSeriesPoint

DAY = date(2025, 4, 9)


def make_point(hour=0, temp=None, wind=None, direction=None, symbol_6h=None, precip_6h=None, details=True, next_1h=None):
    data = {}
    if details:
        data["instant"] = {
            "details": {
                "air_temperature": temp,
                "wind_speed": wind,
                "wind_from_direction": direction,
                "relative_humidity": 80.0,
                "air_pressure_at_sea_level": 1012.5,
                "cloud_area_fraction": 60.0,
            }
        }
    if symbol_6h is not None or precip_6h is not None:
        data["next_6_hours"] = {
            "summary": {"symbol_code": symbol_6h},
            "details": {"precipitation_amount": precip_6h},
        }
    if next_1h is not None:
        data["next_1_hours"] = next_1h
    return TimeSeriesPoint.from_dict({"time": f"2025-04-09T{hour:02d}:00:00Z", "data": data})


def test_representative_symbol_majority():
    points = [make_point(h, symbol_6h="cloudy", precip_6h=0.0) for h in range(4)]
    points += [make_point(h, symbol_6h="rain", precip_6h=3.0) for h in range(4, 6)]
    row = aggregate_day(DAY, points)
    assert row.representative_symbol == "cloudy"
    assert (row.icon_id, row.description) == ("cloudy", "Cloudy")


def test_representative_symbol_tie_breaks():
    # equal counts: larger summed precipitation wins
    points = [
        make_point(0, symbol_6h="fair_day", precip_6h=0.0),
        make_point(1, symbol_6h="lightrain", precip_6h=0.4),
    ]
    assert representative_symbol(points) == "lightrain"

    # equal counts and precipitation: lexicographically smallest wins
    points = [
        make_point(0, symbol_6h="partlycloudy_day", precip_6h=0.0),
        make_point(1, symbol_6h="fair_day", precip_6h=0.0),
    ]
    assert representative_symbol(points) == "fair_day"
    assert representative_symbol([make_point(0, temp=1.0)]) is None


def test_temperature_range():
    points = [make_point(h, temp=t) for h, t in enumerate([-1.0, 3.5, 0.2])]
    row = aggregate_day(DAY, points)
    assert row.temp_max == 3.5
    assert row.temp_min == -1.0


def test_points_without_details_do_not_contribute():
    points = [
        make_point(0, temp=5.0, wind=2.0, direction=90.0),
        make_point(6, details=False, symbol_6h="rain", precip_6h=1.0),
    ]
    row = aggregate_day(DAY, points)
    assert (row.temp_max, row.temp_min) == (5.0, 5.0)
    assert row.avg_wind_speed == 2.0
    assert row.precipitation_total == 1.0
    assert row.wind_compass_label == "E"


def test_details_missing_temperature_counts_as_zero():
    points = [make_point(0, temp=4.0), make_point(1, temp=None)]
    row = aggregate_day(DAY, points)
    assert (row.temp_max, row.temp_min) == (4.0, 0.0)


def test_empty_aggregates():
    row = aggregate_day(DAY, [make_point(0, details=False)])
    assert row.temp_max is None and row.temp_min is None
    assert row.avg_wind_speed is None and row.wind_compass_label is None
    assert row.precipitation_total == 0.0
    assert (row.icon_id, row.description) == ("cloudy", "Cloudy")


def test_precipitation_sums_every_point_and_classifies_on_max():
    points = [make_point(h, symbol_6h="rain", precip_6h=p) for h, p in enumerate([1.0, 8.0, 2.0])]
    row = aggregate_day(DAY, points)
    assert row.precipitation_total == 11.0
    assert (row.icon_id, row.description) == ("rainy-3", "Heavy Rain")


@pytest.mark.parametrize("direction,label", [(44.0, "NE"), (0.0, "N"), (359.0, "N")])
def test_wind_compass_label(direction, label):
    points = [make_point(h, wind=3.0, direction=direction) for h in range(3)]
    assert aggregate_day(DAY, points).wind_compass_label == label


def test_cancelling_wind_directions_still_get_a_label():
    points = [make_point(0, wind=4.0, direction=90.0), make_point(1, wind=4.0, direction=270.0)]
    row = aggregate_day(DAY, points)
    assert row.avg_wind_direction == pytest.approx(180.0)
    assert DataFormatter().format_forecast_row(row)["wind"] == "4.0 m/s S"


def test_aggregation_is_permutation_invariant():
    rng = random.Random(1234)
    points = [
        make_point(
            h,
            temp=rng.uniform(-10, 25),
            wind=rng.uniform(0, 20),
            direction=rng.uniform(0, 360),
            symbol_6h=rng.choice(["rain", "cloudy", "fair_day", "lightrain"]),
            precip_6h=round(rng.uniform(0, 9), 1),
        )
        for h in range(24)
    ]
    expected = aggregate_day(DAY, points)
    for _ in range(10):
        shuffled = list(points)
        rng.shuffle(shuffled)
        assert aggregate_day(DAY, shuffled) == expected
    for perm in itertools.islice(itertools.permutations(points[:5]), 30):
        assert aggregate_day(DAY, list(perm)) == aggregate_day(DAY, points[:5])


def test_build_forecast_rows_starts_tomorrow():
    series = [
        TimeSeriesPoint.from_dict({"time": "2025-04-08T12:00:00Z", "data": {"instant": {"details": {"air_temperature": 9.0}}}}),
        TimeSeriesPoint.from_dict({"time": "2025-04-09T12:00:00Z", "data": {"instant": {"details": {"air_temperature": 1.0}}}}),
        TimeSeriesPoint.from_dict({"time": "2025-04-11T12:00:00Z", "data": {"instant": {"details": {"air_temperature": 2.0}}}}),
        TimeSeriesPoint.from_dict({"time": "2025-04-12T12:00:00Z", "data": {"instant": {"details": {"air_temperature": 3.0}}}}),
    ]
    rows = DataFormatter().build_forecast_rows(series, date(2025, 4, 8), forecast_days=3)
    assert [r.date for r in rows] == [date(2025, 4, 9), date(2025, 4, 11)]


def test_format_forecast_row():
    points = [
        make_point(0, temp=t, wind=4.0, direction=45.0, symbol_6h="rain", precip_6h=1.26)
        for t in (-1.0, 3.5, 0.2)
    ]
    row = aggregate_day(DAY, points)
    out = DataFormatter().format_forecast_row(row, "%A %d %b", "C")

    assert out["date"] == "Wednesday 09 Apr"
    assert out["iso_date"] == "2025-04-09"
    assert out["weather"] == "Moderate Rain"
    assert out["temperature"] == "4°C / -1°C"
    assert out["precipitation"] == 3.8
    assert out["precipitation_unit"] == "mm"
    assert out["wind"] == "4.0 m/s NE"

    out_f = DataFormatter().format_forecast_row(row, "%d/%m", "F")
    assert out_f["temperature"] == "38°F / 30°F"
    assert out_f["date"] == "09/04"


def test_format_forecast_row_without_symbol_or_values():
    row = aggregate_day(DAY, [make_point(0, details=False)])
    out = DataFormatter().format_forecast_row(row)
    assert out["weather"] == "-"
    assert out["temperature"] == "-"
    assert out["wind"] == "-"


@pytest.mark.parametrize("bad_format", [12, None])
def test_format_forecast_row_falls_back_on_unusable_format(bad_format, caplog):
    row = aggregate_day(DAY, [make_point(0, temp=2.0)])
    with caplog.at_level(logging.WARNING):
        out = DataFormatter().format_forecast_row(row, bad_format)
    assert out["date"] == "Wednesday 09 Apr"
    assert "Invalid date format" in caplog.text


def test_format_timestamp_keeps_valid_format():
    value = datetime(2025, 4, 9, 6, 30, tzinfo=timezone.utc)
    assert format_timestamp(value, "%H:%M", "%Y") == "06:30"


def test_summarize_point_prefers_next_1_hours():
    point = make_point(
        0,
        temp=1.0,
        symbol_6h="snow",
        precip_6h=9.0,
        next_1h={"summary": {"symbol_code": "lightrain"}, "details": {"precipitation_amount": 0.3}},
    )
    assert summarize_point(point) == ("lightrain", "rainy-1", "Light Rain")
    assert summarize_point(make_point(0, temp=1.0, symbol_6h="snow", precip_6h=9.0)) == ("snow", "snowy-3", "Heavy Snow")
    assert summarize_point(make_point(0, temp=1.0)) == (None, "cloudy", "Cloudy")


def test_format_current_snapshot():
    point = make_point(
        0,
        temp=-2.0,
        wind=5.0,
        direction=359.0,
        next_1h={
            "summary": {"symbol_code": "lightsnow"},
            "details": {"precipitation_amount": 0.4, "precipitation_category": "snow"},
        },
    )
    refreshed = datetime(2025, 4, 9, 10, 30, tzinfo=timezone.utc)
    current = DataFormatter().format_current(
        point,
        name="Oslo",
        icon_url="https://example.org/snowy-1.svg",
        temperature_unit="C",
        refreshed_at=refreshed,
        date_time_format="%H:%M",
        utc_offset_hours=2.0,
    )
    assert current["name"] == "Oslo"
    assert current["condition"] == "lightsnow"
    assert current["description"] == "Light Snow"
    assert current["icon_id"] == "snowy-1"
    assert current["temperature"] == -2.0
    assert current["feels_like"] < current["temperature"]
    assert current["temperature_unit"] == "°C"
    assert current["wind_compass"] == "N"
    assert current["wind_gust"] == 5.0
    assert current["rain_rate"] == 0.4
    assert current["snow_rate"] == 0.4
    assert current["pressure"] == 1012.5
    assert current["humidity"] == 80.0
    assert current["cloud_fraction"] == 60.0
    assert current["observed_at"] == "2025-04-09T00:00:00+00:00"
    assert current["last_refreshed"] == "12:30"


def test_format_current_requires_details():
    with pytest.raises(ValueError):
        DataFormatter().format_current(make_point(0, details=False), name="x", icon_url="u")

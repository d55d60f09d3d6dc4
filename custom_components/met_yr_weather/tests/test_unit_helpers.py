import math

import pytest

from custom_components.met_yr_weather import unit_helpers


@pytest.mark.parametrize(
    "deg,label",
    [
        (44, "NE"),
        (0, "N"),
        (359, "N"),
        (360, "N"),
        (-90, "W"),
        (180, "S"),
        (22.5, "N"),
        (67.5, "E"),
        (None, None),
        ("abc", None),
    ],
)
def test_degrees_to_compass(deg, label):
    assert unit_helpers.degrees_to_compass(deg) == label


def test_circular_mean_wraps_around_north():
    mean = unit_helpers.circular_mean_degrees([350.0, 10.0])
    assert min(mean, 360.0 - mean) == pytest.approx(0.0, abs=1e-9)
    assert unit_helpers.degrees_to_compass(mean) == "N"


def test_circular_mean_empty_or_cancelling():
    assert unit_helpers.circular_mean_degrees([]) is None
    # opposite vectors cancel; the arithmetic mean still names a direction
    assert unit_helpers.circular_mean_degrees([90.0, 270.0]) == pytest.approx(180.0)
    assert unit_helpers.degrees_to_compass(unit_helpers.circular_mean_degrees([0.0, 180.0])) == "E"


def test_circular_mean_is_order_independent():
    values = [12.0, 355.0, 44.0, 300.0, 181.5, 7.25]
    expected = unit_helpers.circular_mean_degrees(values)
    assert unit_helpers.circular_mean_degrees(list(reversed(values))) == expected
    assert unit_helpers.circular_mean_degrees(sorted(values)) == expected


def test_temperature_conversion():
    assert unit_helpers.temperature_to_display(100, "F") == pytest.approx(212.0)
    assert unit_helpers.temperature_to_display(-3.5, "C") == -3.5
    assert unit_helpers.temperature_to_display(None, "F") is None
    assert unit_helpers.temperature_unit_symbol("F") == "°F"
    assert unit_helpers.temperature_unit_symbol("C") == "°C"


def test_feels_like_wind_chill_only_when_cold_and_windy():
    assert unit_helpers.feels_like_c(15.0, 10.0) == 15.0
    assert unit_helpers.feels_like_c(5.0, 1.0) == 5.0
    chilled = unit_helpers.feels_like_c(0.0, 5.0)
    k = math.pow(18.0, 0.16)
    assert chilled == pytest.approx(13.12 - 11.37 * k)
    assert chilled < 0.0


def test_to_float_rejects_non_finite_and_bool():
    assert unit_helpers._to_float(True) is None
    assert unit_helpers._to_float(float("nan")) is None
    assert unit_helpers._to_float("inf") is None
    assert unit_helpers._to_float("1.5") == 1.5

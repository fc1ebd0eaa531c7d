import pytest

from services.timeline.sun import celestial_icon, day_sun_track, is_sun_up, sky_color, sun_altitude, sun_curve_position


def test_altitude_extremes():
    assert sun_altitude(12) == pytest.approx(1.0)
    assert sun_altitude(0) == pytest.approx(-1.0)
    assert sun_altitude(6) == pytest.approx(0.0, abs=1e-9)


def test_day_and_night():
    assert is_sun_up(9)
    assert not is_sun_up(22)
    assert celestial_icon(12) == "☀️"
    assert celestial_icon(2) == "🌙"


def test_curve_position_range():
    assert sun_curve_position(12) == pytest.approx(100)
    assert sun_curve_position(0) == pytest.approx(0)


def test_sky_colors():
    assert sky_color(12) == "rgb(135, 206, 250)"
    assert sky_color(7) == "rgb(255, 218, 185)"
    assert sky_color(19) == "rgb(138, 123, 169)"
    assert sky_color(0) == "rgb(25, 25, 112)"


def test_day_track_has_24_hours():
    track = day_sun_track()
    assert [entry["hour"] for entry in track] == list(range(24))
    assert set(track[0]) == {"hour", "altitude", "icon", "curve_position", "sky_color"}

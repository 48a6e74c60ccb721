"""Tests for astronomical calculations."""

import math
from datetime import date, datetime, timedelta, timezone

import pytest

from photo_conditions.astronomy.calculator import (
    AstronomyCalculator,
    classify_time_of_day,
    compute_conditions,
    compute_sun_times,
    get_sun_altitude_time,
    get_sun_position,
    solar_date,
    validate_coordinates,
)
from photo_conditions.errors import InvalidCoordinateError, PhotoConditionsError
from photo_conditions.models.location import Coordinates
from photo_conditions.models.photography import PhotographyConditions, SunTimes, TimeOfDay

MIDSUMMER = date(2024, 6, 21)
MIDWINTER = date(2024, 12, 21)


def _utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def _midpoint(start: datetime, end: datetime) -> datetime:
    return start + (end - start) / 2


@pytest.fixture
def london_midsummer(london: Coordinates) -> SunTimes:
    return compute_sun_times(MIDSUMMER, london.latitude, london.longitude)


class TestSunPosition:
    """Tests for sun position calculations."""

    def test_sun_position_midday(self, london: Coordinates):
        """Test sun position at midday."""
        position = get_sun_position(london, _utc(2024, 6, 21, 12, 0))

        # Sun should be high in the sky, roughly south
        assert position.altitude_deg > 55
        assert 150 < position.azimuth_deg < 210
        assert position.is_day is True

    def test_sun_position_midnight(self, london: Coordinates):
        """Test sun position at midnight."""
        position = get_sun_position(london, _utc(2024, 6, 21, 0, 0))
        assert position.altitude_deg < 0
        assert position.is_day is False

    def test_sun_position_southern_hemisphere(self):
        """Test sun position in southern hemisphere."""
        # Sydney in December (summer there)
        sydney = Coordinates(latitude=-33.8688, longitude=151.2093)
        position = get_sun_position(sydney, _utc(2024, 12, 21, 2, 0))

        assert position.altitude_deg > 60
        assert position.is_day is True

    def test_azimuth_range(self, london: Coordinates):
        """Test that azimuth is always in valid range."""
        for hour in range(0, 24, 3):
            position = get_sun_position(london, _utc(2024, 6, 21, hour, 0))
            assert 0 <= position.azimuth_deg < 360

    def test_naive_time_is_utc(self, london: Coordinates):
        """Naive datetimes are interpreted as UTC."""
        aware = get_sun_position(london, _utc(2024, 6, 21, 9, 0))
        naive = get_sun_position(london, datetime(2024, 6, 21, 9, 0))
        assert naive.altitude_deg == pytest.approx(aware.altitude_deg)
        assert naive.time == aware.time


class TestSolarDay:
    """Tests for local mean solar day grouping."""

    def test_solar_date_east(self):
        """Far east of Greenwich, late UTC evening is already tomorrow."""
        assert solar_date(_utc(2024, 6, 21, 23, 50), 170.0) == date(2024, 6, 22)

    def test_solar_date_west(self):
        """Far west of Greenwich, early UTC morning is still yesterday."""
        assert solar_date(_utc(2024, 6, 21, 5, 0), -170.0) == date(2024, 6, 20)

    def test_solar_date_greenwich(self):
        """At the prime meridian the solar date is the UTC date."""
        assert solar_date(_utc(2024, 6, 21, 12, 0), 0.0) == MIDSUMMER

    def test_datetime_and_date_give_same_day(self, london: Coordinates):
        """Passing a datetime selects the solar day containing it."""
        from_date = compute_sun_times(MIDSUMMER, london.latitude, london.longitude)
        from_instant = compute_sun_times(
            _utc(2024, 6, 21, 15, 0), london.latitude, london.longitude
        )
        assert from_instant == from_date


class TestSunTimes:
    """Tests for sunrise, sunset and photography windows."""

    def test_london_midsummer_sunrise_sunset(self, london_midsummer: SunTimes):
        """Sunrise and sunset match the published times for London."""
        # Published: sunrise 04:43 BST, sunset 21:21 BST
        assert _utc(2024, 6, 21, 3, 30) < london_midsummer.sunrise < _utc(2024, 6, 21, 4, 0)
        assert _utc(2024, 6, 21, 20, 10) < london_midsummer.sunset < _utc(2024, 6, 21, 20, 35)

    def test_solar_noon(self, london_midsummer: SunTimes):
        """Solar noon is close to 12:00 UTC in London."""
        assert _utc(2024, 6, 21, 11, 50) < london_midsummer.solar_noon < _utc(2024, 6, 21, 12, 15)

    def test_event_order(self, london_midsummer: SunTimes):
        """Morning events precede noon, which precedes evening events."""
        st = london_midsummer
        events = [
            st.blue_hour_morning_start,
            st.sunrise,
            st.golden_hour_morning_end,
            st.solar_noon,
            st.golden_hour_evening_start,
            st.sunset,
            st.blue_hour_evening_end,
        ]
        assert all(event is not None for event in events)
        assert events == sorted(events)

    def test_windows_share_sunrise_and_sunset(self, london_midsummer: SunTimes):
        """Blue hour hands over to golden hour exactly at sunrise and sunset."""
        st = london_midsummer
        assert st.blue_hour_morning_end == st.sunrise
        assert st.golden_hour_morning_start == st.sunrise
        assert st.golden_hour_evening_end == st.sunset
        assert st.blue_hour_evening_start == st.sunset

    def test_golden_hour_duration(self, london_midsummer: SunTimes):
        """Both golden hours at London midsummer last roughly an hour."""
        assert 90 < london_midsummer.golden_hour_minutes < 180

    def test_polar_day(self, tromso: Coordinates):
        """Under the midnight sun there is no sunrise, sunset or golden hour."""
        st = compute_sun_times(MIDSUMMER, tromso.latitude, tromso.longitude)
        assert st.sunrise is None
        assert st.sunset is None
        assert st.solar_noon is not None
        assert st.golden_hour_morning_start is None
        assert st.golden_hour_evening_start is None
        assert st.blue_hour_morning_start is None
        assert st.golden_hour_minutes == 0

    def test_polar_night(self, tromso: Coordinates):
        """In the polar night the sun never rises, so there is no solar noon."""
        st = compute_sun_times(MIDWINTER, tromso.latitude, tromso.longitude)
        assert st.sunrise is None
        assert st.sunset is None
        assert st.solar_noon is None
        assert st.golden_hour_morning_start is None

    def test_window_contains_boundaries(self, london_midsummer: SunTimes):
        """Golden windows are closed; blue windows exclude sunrise/sunset."""
        st = london_midsummer
        assert st.window_contains(TimeOfDay.GOLDEN_HOUR_MORNING, st.sunrise)
        assert not st.window_contains(TimeOfDay.BLUE_HOUR_MORNING, st.sunrise)
        assert st.window_contains(TimeOfDay.BLUE_HOUR_MORNING, st.blue_hour_morning_start)
        assert st.window_contains(TimeOfDay.GOLDEN_HOUR_EVENING, st.sunset)
        assert not st.window_contains(TimeOfDay.BLUE_HOUR_EVENING, st.sunset)
        assert st.window_contains(TimeOfDay.BLUE_HOUR_EVENING, st.blue_hour_evening_end)
        assert not st.window_contains(TimeOfDay.DAY, st.solar_noon)


class TestClassification:
    """Tests for time-of-day classification."""

    def test_midday_is_day(self, london: Coordinates):
        """Test classification at midday."""
        conditions = compute_conditions(_utc(2024, 6, 21, 12, 0), london.latitude, london.longitude)
        assert conditions.time_of_day == TimeOfDay.DAY
        assert conditions.sun_altitude > 55
        assert conditions.is_golden_hour is False
        assert conditions.is_blue_hour is False

    def test_midday_minute_counters(self, london: Coordinates):
        """Counters point at today's evening events; sunrise has passed."""
        conditions = compute_conditions(_utc(2024, 6, 21, 12, 0), london.latitude, london.longitude)
        assert conditions.minutes_to_sunrise is None
        assert conditions.minutes_to_sunset is not None
        assert conditions.minutes_to_golden_hour is not None
        assert 0 < conditions.minutes_to_golden_hour < conditions.minutes_to_sunset

    @pytest.mark.parametrize(
        "start_attr,end_attr,expected",
        [
            ("blue_hour_morning_start", "blue_hour_morning_end", TimeOfDay.BLUE_HOUR_MORNING),
            ("golden_hour_morning_start", "golden_hour_morning_end", TimeOfDay.GOLDEN_HOUR_MORNING),
            ("golden_hour_evening_start", "golden_hour_evening_end", TimeOfDay.GOLDEN_HOUR_EVENING),
            ("blue_hour_evening_start", "blue_hour_evening_end", TimeOfDay.BLUE_HOUR_EVENING),
        ],
    )
    def test_window_midpoints(
        self,
        london: Coordinates,
        london_midsummer: SunTimes,
        start_attr: str,
        end_attr: str,
        expected: TimeOfDay,
    ):
        """The middle of each window is classified as that window."""
        instant = _midpoint(getattr(london_midsummer, start_attr), getattr(london_midsummer, end_attr))
        conditions = compute_conditions(instant, london.latitude, london.longitude)

        assert conditions.time_of_day == expected
        assert conditions.is_golden_hour == expected.is_golden_hour
        assert conditions.is_blue_hour == expected.is_blue_hour

    def test_golden_hour_has_no_countdown(self, london: Coordinates, london_midsummer: SunTimes):
        """During golden hour the golden-hour counter is not applicable."""
        instant = _midpoint(
            london_midsummer.golden_hour_evening_start, london_midsummer.golden_hour_evening_end
        )
        conditions = compute_conditions(instant, london.latitude, london.longitude)
        assert conditions.minutes_to_golden_hour is None
        assert conditions.minutes_to_sunset is not None

    def test_night(self, london: Coordinates, london_midsummer: SunTimes):
        """Before civil dawn it is night, with sunrise still to come."""
        conditions = compute_conditions(_utc(2024, 6, 21, 1, 0), london.latitude, london.longitude)
        assert conditions.time_of_day == TimeOfDay.NIGHT
        assert conditions.sun_altitude < 0
        assert conditions.minutes_to_sunrise is not None
        expected = (london_midsummer.sunrise - _utc(2024, 6, 21, 1, 0)).total_seconds() / 60
        assert conditions.minutes_to_sunrise == pytest.approx(expected, abs=1)

    def test_after_sunset_counts_to_tomorrow(self, london: Coordinates):
        """After today's golden hours, the counter points at tomorrow morning."""
        conditions = compute_conditions(_utc(2024, 6, 21, 22, 30), london.latitude, london.longitude)
        assert conditions.minutes_to_sunset is None
        assert conditions.minutes_to_golden_hour is not None
        # Tomorrow's sunrise is about five hours away
        assert 240 < conditions.minutes_to_golden_hour < 360

    def test_golden_and_blue_never_overlap(self, london: Coordinates):
        """Sampled across a whole day, golden and blue hour never coincide."""
        start = _utc(2024, 6, 21, 0, 0)
        for step in range(48):
            conditions = compute_conditions(
                start + timedelta(minutes=30 * step), london.latitude, london.longitude
            )
            assert not (conditions.is_golden_hour and conditions.is_blue_hour)

    def test_conditions_reject_both_windows(self):
        """The conditions model itself refuses golden and blue together."""
        with pytest.raises(ValueError, match="both golden hour and blue hour"):
            PhotographyConditions(
                time_of_day=TimeOfDay.GOLDEN_HOUR_MORNING,
                is_golden_hour=True,
                is_blue_hour=True,
                sun_altitude=2.0,
            )

    def test_classify_falls_back_to_altitude(self, london_midsummer: SunTimes):
        """Outside every window, classification uses the sun altitude."""
        noon = london_midsummer.solar_noon
        assert classify_time_of_day(noon, 60.0, london_midsummer) == TimeOfDay.DAY
        assert classify_time_of_day(noon, -10.0, london_midsummer) == TimeOfDay.NIGHT

    def test_polar_day_conditions(self, tromso: Coordinates):
        """Midnight sun: daytime with no golden hour ever coming."""
        conditions = compute_conditions(_utc(2024, 6, 21, 11, 0), tromso.latitude, tromso.longitude)
        assert conditions.time_of_day == TimeOfDay.DAY
        assert conditions.minutes_to_golden_hour is None
        assert conditions.minutes_to_sunrise is None
        assert conditions.minutes_to_sunset is None

    def test_polar_night_conditions(self, tromso: Coordinates):
        """Polar night at local noon is still night."""
        conditions = compute_conditions(_utc(2024, 12, 21, 11, 0), tromso.latitude, tromso.longitude)
        assert conditions.time_of_day == TimeOfDay.NIGHT
        assert conditions.minutes_to_sunrise is None

    def test_deterministic(self, london: Coordinates):
        """Same inputs give equal conditions; naive input means UTC."""
        aware = compute_conditions(_utc(2024, 6, 21, 9, 0), london.latitude, london.longitude)
        again = compute_conditions(_utc(2024, 6, 21, 9, 0), london.latitude, london.longitude)
        naive = compute_conditions(datetime(2024, 6, 21, 9, 0), london.latitude, london.longitude)
        assert aware == again == naive


class TestCoordinateValidation:
    """Tests for coordinate validation."""

    @pytest.mark.parametrize(
        "latitude,longitude",
        [(91.0, 0.0), (-90.5, 0.0), (0.0, 180.5), (0.0, -181.0), (math.nan, 0.0), (0.0, math.inf)],
    )
    def test_invalid_coordinates(self, latitude: float, longitude: float):
        """Out-of-range and non-finite values are rejected, never clamped."""
        with pytest.raises(InvalidCoordinateError):
            compute_conditions(_utc(2024, 6, 21, 12, 0), latitude, longitude)
        with pytest.raises(InvalidCoordinateError):
            compute_sun_times(MIDSUMMER, latitude, longitude)

    def test_error_hierarchy(self):
        """Invalid coordinates are both a library error and a ValueError."""
        with pytest.raises(ValueError):
            validate_coordinates(100.0, 0.0)
        with pytest.raises(PhotoConditionsError):
            validate_coordinates(100.0, 0.0)

    def test_valid_extremes(self):
        """Poles and the date line are accepted."""
        assert validate_coordinates(90.0, 180.0).latitude == 90.0
        assert validate_coordinates(-90.0, -180.0).longitude == -180.0


class TestAstronomyCalculator:
    """Tests for AstronomyCalculator class."""

    def test_calculator_init(self, london: Coordinates):
        """Test calculator initialization."""
        calc = AstronomyCalculator(london)
        assert calc.coordinates == london

    def test_sun_times_cached(self, london: Coordinates):
        """Sun times for the same day are computed once."""
        calc = AstronomyCalculator(london)
        first = calc.get_sun_times(MIDSUMMER)
        second = calc.get_sun_times(MIDSUMMER)
        assert first is second

    def test_get_conditions(self, london: Coordinates):
        """Test conditions through the calculator."""
        calc = AstronomyCalculator(london)
        conditions = calc.get_conditions(_utc(2024, 6, 21, 12, 0))
        assert conditions == compute_conditions(
            _utc(2024, 6, 21, 12, 0), london.latitude, london.longitude
        )

    def test_is_night(self, london: Coordinates):
        """Test night detection."""
        calc = AstronomyCalculator(london)
        assert calc.is_night(_utc(2024, 6, 21, 0, 0)) is True
        assert calc.is_night(_utc(2024, 6, 21, 12, 0)) is False

    def test_sun_altitude_time(self, london: Coordinates, london_midsummer: SunTimes):
        """Setting through +6° is the start of evening golden hour."""
        setting = get_sun_altitude_time(london, MIDSUMMER, 6.0, rising=False)
        assert setting == london_midsummer.golden_hour_evening_start

        calc = AstronomyCalculator(london)
        rising = calc.get_sun_altitude_time(MIDSUMMER, 6.0, rising=True)
        assert rising == london_midsummer.golden_hour_morning_end

    def test_sun_altitude_never_reached(self, london: Coordinates):
        """An altitude the sun never reaches gives None."""
        assert get_sun_altitude_time(london, MIDSUMMER, 75.0) is None

"""
Tests for calendar arithmetic
"""

import datetime
import random

import pytest

from symcalc.dates import (
    absolute_from_gregorian, absolute_from_julian, date_from_julian_day,
    date_to_gregorian, date_to_julian, day_of_year, days_in_month,
    is_leap_year, julian_day_number, make_date, weekday, year_day,
)
from symcalc.errors import MalformedInput, NotConverted
from symcalc.numbers import Date


class TestGregorian:
    """Tests for the proleptic Gregorian calendar"""

    def test_day_one(self) -> None:
        assert absolute_from_gregorian(1, 1, 1) == 1
        assert date_to_gregorian(1) == (1, 1, 1)

    def test_day_zero_is_last_day_of_1_bce(self) -> None:
        assert date_to_gregorian(0) == (-1, 12, 31)
        assert absolute_from_gregorian(-1, 12, 31) == 0

    def test_julian_epoch_in_gregorian(self) -> None:
        assert date_to_gregorian(-1721425) == (-4714, 11, 24)

    def test_year_zero_read_as_1_bce(self) -> None:
        assert absolute_from_gregorian(0, 6, 1) == absolute_from_gregorian(-1, 6, 1)

    @pytest.mark.parametrize("seed", range(3))
    def test_matches_datetime(self, seed: int) -> None:
        """Positive day counts agree with datetime's proleptic ordinals"""
        rng = random.Random(seed)
        for _ in range(200):
            n = rng.randint(1, 3652059)
            d = datetime.date.fromordinal(n)
            assert date_to_gregorian(n) == (d.year, d.month, d.day)
            assert absolute_from_gregorian(d.year, d.month, d.day) == n
            assert weekday(n) == d.isoweekday() % 7

    @pytest.mark.parametrize("absolute", [-1000000, -1721425, -366, -1, 0, 1, 59, 60, 730120])
    def test_round_trip(self, absolute: int) -> None:
        assert absolute_from_gregorian(*date_to_gregorian(absolute)) == absolute


class TestJulian:
    """Tests for the proleptic Julian calendar"""

    def test_reform_day(self) -> None:
        """Gregorian 1582-10-15 followed Julian 1582-10-04"""
        assert absolute_from_gregorian(1582, 10, 15) == 577736
        assert absolute_from_julian(1582, 10, 5) == 577736
        assert absolute_from_julian(1582, 10, 4) == 577735

    def test_day_one(self) -> None:
        assert date_to_julian(1) == (1, 1, 3)

    @pytest.mark.parametrize("absolute", [-1721425, -500000, 0, 1, 577736, 730120])
    def test_round_trip(self, absolute: int) -> None:
        assert absolute_from_julian(*date_to_julian(absolute)) == absolute


class TestJulianDayNumber:
    """Tests for astronomical Julian day numbers"""

    def test_j2000(self) -> None:
        assert julian_day_number(make_date(2000, 1, 1)) == 2451545

    def test_epoch(self) -> None:
        assert date_to_julian(date_from_julian_day(0).absolute) == (-4713, 1, 1)

    def test_inverse(self) -> None:
        assert date_from_julian_day(2451545) == make_date(2000, 1, 1)

    def test_non_integer(self) -> None:
        with pytest.raises(NotConverted):
            date_from_julian_day("2451545")


class TestCalendarHelpers:
    """Tests for leap years, month lengths and day numbers"""

    @pytest.mark.parametrize("year,leap", [(1900, False), (2000, True), (2023, False), (2024, True)])
    def test_gregorian_leap(self, year: int, leap: bool) -> None:
        assert is_leap_year(year) == leap

    def test_julian_leap(self) -> None:
        assert is_leap_year(1900, julian=True)

    def test_bce_leap(self) -> None:
        # 1 BCE is astronomical year 0
        assert is_leap_year(-1)
        assert not is_leap_year(-2)

    def test_days_in_month(self) -> None:
        assert days_in_month(2000, 2) == 29
        assert days_in_month(1900, 2) == 28
        assert days_in_month(2023, 4) == 30

    def test_bad_month(self) -> None:
        with pytest.raises(MalformedInput):
            days_in_month(2000, 13)

    def test_bad_day(self) -> None:
        with pytest.raises(MalformedInput):
            day_of_year(2023, 2, 29)

    def test_weekday_and_year_day(self) -> None:
        d = make_date(2000, 1, 1)
        assert weekday(d) == 6
        assert year_day(make_date(2000, 12, 31)) == 366

    def test_make_date(self) -> None:
        assert make_date(2000, 1, 1) == Date(730120)

"""
Calendar arithmetic on absolute day counts.

Absolute day 1 is Gregorian 0001-01-01 (Julian 0001-01-03); absolute day 0
is Gregorian Dec 31 of 1 BCE. Years are counted without a year 0: year -1
is 1 BCE, year -4714 is 4714 BCE. A year 0 passed in is read as -1.
Both calendars are proleptic.
"""

from typing import Tuple

from .errors import MalformedInput, NotConverted
from .numbers import Date, is_integer

# Julian Day Number of absolute day 0
JULIAN_DAY_OFFSET = 1721425

_MONTH_DAYS = [31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31]


def _astronomical(year: int) -> int:
    """Calendar year (no year 0) to astronomical numbering (year 0 = 1 BCE)."""
    if not is_integer(year):
        raise NotConverted(year, "year")
    if year == 0:
        year = -1
    return year + 1 if year < 0 else year


def _calendar_year(astro: int) -> int:
    return astro if astro > 0 else astro - 1


def is_leap_year(year: int, julian: bool = False) -> bool:
    a = _astronomical(year)
    if julian:
        return a % 4 == 0
    return a % 4 == 0 and (a % 100 != 0 or a % 400 == 0)


def days_in_month(year: int, month: int, julian: bool = False) -> int:
    if not 1 <= month <= 12:
        raise MalformedInput(f"month {month} outside 1..12")
    if month == 2 and is_leap_year(year, julian):
        return 29
    return _MONTH_DAYS[month - 1]


def day_of_year(year: int, month: int, day: int, julian: bool = False) -> int:
    if not 1 <= day <= days_in_month(year, month, julian):
        raise MalformedInput(f"day {day} outside month {month} of {year}")
    return sum(days_in_month(year, m, julian) for m in range(1, month)) + day


# =============================================================================
# GREGORIAN
# =============================================================================

def absolute_from_gregorian(year: int, month: int, day: int) -> int:
    """Absolute day of a proleptic Gregorian date."""
    prior = _astronomical(year) - 1
    return (day_of_year(year, month, day)
            + 365 * prior + prior // 4 - prior // 100 + prior // 400)


def date_to_gregorian(absolute: int) -> Tuple[int, int, int]:
    """Inverse of absolute_from_gregorian: (year, month, day)."""
    absolute = _day_count(absolute)
    astro = (400 * absolute) // 146097
    while _gregorian_new_year(astro + 1) <= absolute:
        astro += 1
    while _gregorian_new_year(astro) > absolute:
        astro -= 1
    return _split_year(_calendar_year(astro), absolute - _gregorian_new_year(astro) + 1, False)


def _gregorian_new_year(astro: int) -> int:
    prior = astro - 1
    return 1 + 365 * prior + prior // 4 - prior // 100 + prior // 400


# =============================================================================
# JULIAN
# =============================================================================

def absolute_from_julian(year: int, month: int, day: int) -> int:
    """Absolute day of a proleptic Julian-calendar date."""
    prior = _astronomical(year) - 1
    return day_of_year(year, month, day, julian=True) + 365 * prior + prior // 4 - 2


def date_to_julian(absolute: int) -> Tuple[int, int, int]:
    """Inverse of absolute_from_julian: (year, month, day)."""
    absolute = _day_count(absolute)
    astro = (4 * (absolute + 2)) // 1461
    while _julian_new_year(astro + 1) <= absolute:
        astro += 1
    while _julian_new_year(astro) > absolute:
        astro -= 1
    return _split_year(_calendar_year(astro), absolute - _julian_new_year(astro) + 1, True)


def _julian_new_year(astro: int) -> int:
    prior = astro - 1
    return 1 + 365 * prior + prior // 4 - 2


def _split_year(year: int, yday: int, julian: bool) -> Tuple[int, int, int]:
    month = 1
    while yday > days_in_month(year, month, julian):
        yday -= days_in_month(year, month, julian)
        month += 1
    return year, month, yday


# =============================================================================
# DATE VALUES
# =============================================================================

def _day_count(value) -> int:
    if isinstance(value, Date):
        return value.absolute
    if is_integer(value):
        return value
    raise NotConverted(value, "day count")


def make_date(year: int, month: int, day: int) -> Date:
    return Date(absolute_from_gregorian(year, month, day))


def julian_day_number(date) -> int:
    """Astronomical Julian Day Number of a Date (absolute + 1721425)."""
    return _day_count(date) + JULIAN_DAY_OFFSET


def date_from_julian_day(jdn: int) -> Date:
    if not is_integer(jdn):
        raise NotConverted(jdn, "Julian day number")
    return Date(jdn - JULIAN_DAY_OFFSET)


def weekday(date) -> int:
    """Day of week, 0 = Sunday; absolute day 1 was a Monday."""
    return _day_count(date) % 7


def year_day(date) -> int:
    year, month, day = date_to_gregorian(_day_count(date))
    return day_of_year(year, month, day)

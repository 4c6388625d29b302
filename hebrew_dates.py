# hebrew_dates.py  ← Gregorian <-> Hebrew conversion (works with convertdate)
import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from functools import lru_cache

from convertdate import hebrew

import config
from errors import InvalidArgumentError, OutOfRangeError

logger = logging.getLogger(__name__)

# convertdate numbers months from Nisan, so the year starts at month 7
NISAN = 1
TISHREI = 7
ADAR = 12
ADAR_II = 13

MONTH_NAMES = {
    1: 'Nissan',
    2: 'Iyar',
    3: 'Sivan',
    4: 'Tammuz',
    5: 'Av',
    6: 'Elul',
    7: 'Tishrei',
    8: 'Cheshvan',
    9: 'Kislev',
    10: 'Tevet',
    11: 'Shevat',
    12: 'Adar',
    13: 'Adar II',
}

# Spellings seen in stored records and typed in by users
_MONTH_ALIASES = {
    'nissan': 1, 'nisan': 1,
    'iyar': 2, 'iyyar': 2,
    'sivan': 3,
    'tammuz': 4, 'tamuz': 4,
    'av': 5, 'menachem av': 5,
    'elul': 6,
    'tishrei': 7, 'tishri': 7,
    'cheshvan': 8, 'heshvan': 8, 'marcheshvan': 8, 'marchesvan': 8,
    'kislev': 9,
    'tevet': 10, 'teves': 10, 'teveth': 10,
    'shevat': 11, 'shvat': 11, "sh'vat": 11,
    'adar': 12, 'adar i': 12, 'adar 1': 12, 'adar aleph': 12,
    'adar ii': 13, 'adar 2': 13, 'adar bet': 13, 'adar beit': 13, 'veadar': 13,
}

_ISO_DATE = re.compile(r'^(\d{4}-\d{2}-\d{2})(T.*)?$')
_HEBREW_DATE = re.compile(r"^\s*(\d{1,2})\s+([A-Za-z][A-Za-z'0-9 ]*?)\s+(\d{1,5})\s*$")


class YearType(str, Enum):
    """Classification of a Hebrew year by its length."""
    DEFICIENT = 'deficient'  # 353 / 383 days
    REGULAR = 'regular'      # 354 / 384 days
    COMPLETE = 'complete'    # 355 / 385 days


def _check_year(hebrew_year):
    if isinstance(hebrew_year, bool) or not isinstance(hebrew_year, int):
        raise InvalidArgumentError(f"Hebrew year must be an integer, got {hebrew_year!r}")
    if hebrew_year < 1:
        raise InvalidArgumentError(f"Hebrew year must be positive, got {hebrew_year}")


def as_date(value):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise InvalidArgumentError(f"Expected a date, got {value!r}")


@lru_cache(maxsize=None)
def earliest_hebrew_year():
    """Hebrew year containing config.EARLIEST_SUPPORTED_DATE."""
    g = config.EARLIEST_SUPPORTED_DATE
    return int(hebrew.from_gregorian(g.year, g.month, g.day)[0])


def is_leap_year(hebrew_year):
    """True for the 7 years of each 19-year cycle that carry Adar II."""
    _check_year(hebrew_year)
    return hebrew.leap(hebrew_year)


def months_in_year(hebrew_year):
    return 13 if is_leap_year(hebrew_year) else 12


def year_length(hebrew_year):
    """Number of days from this Rosh Hashana to the next."""
    _check_year(hebrew_year)
    return int(hebrew.year_days(hebrew_year))


def year_type(hebrew_year):
    return {
        3: YearType.DEFICIENT,
        4: YearType.REGULAR,
        5: YearType.COMPLETE,
    }[year_length(hebrew_year) % 10]


def month_length(hebrew_year, month):
    """29 or 30; Cheshvan and Kislev depend on the year type."""
    if isinstance(month, bool) or not isinstance(month, int):
        raise InvalidArgumentError(f"Hebrew month must be an integer, got {month!r}")
    if not 1 <= month <= months_in_year(hebrew_year):
        raise InvalidArgumentError(f"Month {month} does not exist in Hebrew year {hebrew_year}")
    return int(hebrew.month_length(hebrew_year, month))


def month_name(hebrew_year, month):
    if month == ADAR and is_leap_year(hebrew_year):
        return 'Adar I'
    return MONTH_NAMES[month]


@dataclass(frozen=True)
class HebrewDate:
    year: int
    month: int
    day: int

    def __post_init__(self):
        if isinstance(self.day, bool) or not isinstance(self.day, int):
            raise InvalidArgumentError(f"Hebrew day must be an integer, got {self.day!r}")
        days = month_length(self.year, self.month)
        if not 1 <= self.day <= days:
            raise InvalidArgumentError(
                f"Day {self.day} is outside {month_name(self.year, self.month)} {self.year} "
                f"({days} days)")

    @property
    def month_name(self):
        return month_name(self.year, self.month)

    def to_gregorian(self):
        return to_gregorian(self)

    def __str__(self):
        return format_hebrew_date(self)


def _to_date(ymd, what):
    gy, gm, gd = ymd
    try:
        return date(int(gy), int(gm), int(gd))
    except ValueError:
        raise OutOfRangeError(f"{what} falls outside the supported Gregorian range") from None


def to_hebrew(g):
    """Gregorian date -> HebrewDate (e.g. 2025-04-13 -> 15 Nissan 5785)"""
    g = as_date(g)
    if g < config.EARLIEST_SUPPORTED_DATE:
        raise OutOfRangeError(
            f"{g.isoformat()} is before {config.EARLIEST_SUPPORTED_DATE.isoformat()}")
    year, month, day = hebrew.from_gregorian(g.year, g.month, g.day)
    return HebrewDate(int(year), int(month), int(day))


def to_gregorian(h):
    if not isinstance(h, HebrewDate):
        raise InvalidArgumentError(f"Expected a HebrewDate, got {h!r}")
    if h.year < earliest_hebrew_year():
        raise OutOfRangeError(f"Hebrew year {h.year} is before the supported range")
    return _to_date(hebrew.to_gregorian(h.year, h.month, h.day), str(h))


@lru_cache(maxsize=None)
def _rosh_hashana(hebrew_year):
    logger.debug("Computing Rosh Hashana for Hebrew year %s", hebrew_year)
    return _to_date(hebrew.to_gregorian(hebrew_year, TISHREI, 1),
                    f"Rosh Hashana {hebrew_year}")


def rosh_hashana(hebrew_year):
    """Gregorian date of 1 Tishrei of hebrew_year (5786 -> 2025-09-23)"""
    _check_year(hebrew_year)
    if hebrew_year < earliest_hebrew_year():
        raise OutOfRangeError(f"Hebrew year {hebrew_year} is before the supported range")
    return _rosh_hashana(hebrew_year)


def erev_rosh_hashana(hebrew_year):
    """Civil day on whose evening Rosh Hashana begins."""
    return rosh_hashana(hebrew_year) - timedelta(days=1)


def format_hebrew_date(h):
    return f"{h.day} {month_name(h.year, h.month)} {h.year}"


def parse_hebrew_date(text):
    """'15 Nissan 5785' -> HebrewDate(5785, 1, 15)"""
    if not isinstance(text, str):
        raise InvalidArgumentError(f"Expected a Hebrew date string, got {text!r}")
    match = _HEBREW_DATE.match(text)
    if not match:
        raise InvalidArgumentError(f"Unrecognised Hebrew date: {text!r}")
    day, name, year = match.groups()
    month = _MONTH_ALIASES.get(' '.join(name.lower().split()))
    if month is None:
        raise InvalidArgumentError(f"Unknown Hebrew month: {name!r}")
    return HebrewDate(int(year), month, int(day))


def parse_iso_date(value):
    """Parse a YYYY-MM-DD string (or pass a date through)."""
    if isinstance(value, (date, datetime)):
        return as_date(value)
    if not isinstance(value, str):
        raise InvalidArgumentError(f"Expected an ISO date string, got {value!r}")
    match = _ISO_DATE.match(value.strip())
    if not match:
        raise InvalidArgumentError(f"Invalid ISO date: {value!r}")
    try:
        return datetime.strptime(match.group(1), '%Y-%m-%d').date()
    except ValueError:
        raise InvalidArgumentError(f"Invalid ISO date: {value!r}") from None

# fiscal_year.py
# The synagogue's fiscal year runs Rosh Hashana to Rosh Hashana.
import logging
from dataclasses import dataclass
from datetime import date, timedelta

from hebrew_dates import as_date, rosh_hashana, to_hebrew

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HebrewYearWindow:
    """Half-open Gregorian interval [start, end) covering one Hebrew year.

    end is the next year's Rosh Hashana, so a date that falls exactly on
    Rosh Hashana belongs to the year that starts there.
    """

    hebrew_year: int
    start: date
    end: date

    def __contains__(self, d):
        return self.start <= d < self.end

    @property
    def last_day(self):
        return self.end - timedelta(days=1)

    @property
    def length(self):
        return (self.end - self.start).days

    @property
    def label(self):
        """e.g. '5785 (2024-2025)'"""
        return f"{self.hebrew_year} ({self.start.year}-{self.last_day.year})"

    def next(self):
        return window_for_year(self.hebrew_year + 1)

    def previous(self):
        return window_for_year(self.hebrew_year - 1)

    def to_dict(self):
        return {
            'hebrew_year': self.hebrew_year,
            'start': self.start.isoformat(),
            'end': self.end.isoformat(),
            'label': self.label,
        }


def window_for_year(hebrew_year):
    """Returns the window from 1 Tishrei of hebrew_year to 1 Tishrei of the next year"""
    return HebrewYearWindow(
        hebrew_year=hebrew_year,
        start=rosh_hashana(hebrew_year),
        end=rosh_hashana(hebrew_year + 1),
    )


def current_window(as_of):
    """Hebrew fiscal year enclosing as_of.

    The Hebrew year number changes partway through the Gregorian year, so the
    converted year is checked against its Rosh Hashana and stepped back when
    as_of still precedes it.
    """
    as_of = as_date(as_of)
    hebrew_year = to_hebrew(as_of).year
    if as_of < rosh_hashana(hebrew_year):
        hebrew_year -= 1
    window = window_for_year(hebrew_year)
    logger.debug("%s falls in Hebrew year %s [%s, %s)",
                 as_of, window.hebrew_year, window.start, window.end)
    return window


def is_within_window(d, as_of):
    return as_date(d) in current_window(as_of)

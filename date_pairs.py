# date_pairs.py
# Gregorian/Hebrew date pairs that are stored together and never drift.
# A pair is converted once, when the record is created or when the user edits
# the date. Reading a stored pair never reconverts it.
import logging
from dataclasses import dataclass, replace
from datetime import date
from enum import Enum

from errors import InvalidArgumentError
from hebrew_dates import (HebrewDate, as_date, format_hebrew_date,
                          parse_hebrew_date, parse_iso_date, to_hebrew)

logger = logging.getLogger(__name__)


class DatePairMode(str, Enum):
    AUTO = 'auto'      # Hebrew half follows edits to the Gregorian half
    MANUAL = 'manual'  # Hebrew half was set by hand and is kept as is


def _hebrew(value):
    if isinstance(value, HebrewDate):
        return value
    return parse_hebrew_date(value)


def _mode(value):
    try:
        return DatePairMode(value)
    except ValueError:
        raise InvalidArgumentError(f"Unknown date pair mode: {value!r}") from None


@dataclass(frozen=True)
class DatePair:
    gregorian: date
    hebrew: HebrewDate
    mode: DatePairMode = DatePairMode.AUTO

    @classmethod
    def from_gregorian(cls, gregorian):
        """New record: convert the Gregorian date once."""
        gregorian = as_date(gregorian)
        return cls(gregorian, to_hebrew(gregorian), DatePairMode.AUTO)

    @classmethod
    def load(cls, gregorian, hebrew=None, mode=DatePairMode.AUTO):
        """Existing record: use the stored Hebrew date as is.

        Only a record saved before Hebrew dates were stored is converted here.
        """
        gregorian = parse_iso_date(gregorian)
        mode = _mode(mode)
        if not hebrew:
            logger.warning("No stored Hebrew date for %s, calculating it from the Gregorian date",
                           gregorian.isoformat())
            return cls(gregorian, to_hebrew(gregorian), mode)
        return cls(gregorian, _hebrew(hebrew), mode)

    def with_gregorian(self, gregorian):
        """User edited the Gregorian date."""
        gregorian = as_date(gregorian)
        if self.mode is DatePairMode.MANUAL:
            return replace(self, gregorian=gregorian)
        return DatePair.from_gregorian(gregorian)

    def override_hebrew(self, hebrew):
        """User typed the Hebrew date by hand; later Gregorian edits keep it."""
        return replace(self, hebrew=_hebrew(hebrew), mode=DatePairMode.MANUAL)

    def recompute(self):
        """Explicit user request to reconvert, clearing any manual override."""
        return DatePair.from_gregorian(self.gregorian)

    def is_drifted(self):
        """True if an automatic pair no longer matches a fresh conversion."""
        if self.mode is DatePairMode.MANUAL:
            return False
        calculated = to_hebrew(self.gregorian)
        if calculated != self.hebrew:
            logger.warning("Date pair drift for %s: stored %s, calculated %s",
                           self.gregorian.isoformat(), self.hebrew, calculated)
            return True
        return False

    def to_dict(self):
        return {
            'gregorian': self.gregorian.isoformat(),
            'hebrew': format_hebrew_date(self.hebrew),
            'mode': self.mode.value,
        }

# due_dates.py
# Pledges fall due a week before the coming Rosh Hashana.
from datetime import timedelta

import config
from errors import InvalidArgumentError
from fiscal_year import current_window
from hebrew_dates import as_date


def default_due_date(as_of, lead_days=None):
    """Next Rosh Hashana minus lead_days, always strictly after as_of.

    Once the current year's deadline has arrived the following year's is used.
    """
    as_of = as_date(as_of)
    if lead_days is None:
        lead_days = config.get_settings().DUE_DATE_LEAD_DAYS
    # shortest Hebrew year is 353 days
    if isinstance(lead_days, bool) or not isinstance(lead_days, int) or not 0 <= lead_days < 353:
        raise InvalidArgumentError(f"lead_days must be an integer in [0, 353), got {lead_days!r}")
    lead = timedelta(days=lead_days)
    window = current_window(as_of)
    due = window.end - lead
    if due <= as_of:
        due = window.next().end - lead
    return due


def days_until_due(pledge, as_of):
    """Signed days from as_of to the due date, or to the pledge date when none is set."""
    target = pledge.due_date or pledge.pledge_date
    return (target - as_date(as_of)).days

# pledge_totals.py
# Per-family pledge totals for the current Hebrew fiscal year.
import logging
from collections import defaultdict
from dataclasses import dataclass, fields
from decimal import Decimal

from fiscal_year import current_window
from pledges import CURRENCY_SYMBOLS, Currency, PledgeStatus, parse_enum

logger = logging.getLogger(__name__)

ZERO = Decimal('0')

PENDING_STATUSES = frozenset({PledgeStatus.PENDING, PledgeStatus.PARTIAL})
PAID_STATUSES = frozenset({PledgeStatus.FULFILLED})


@dataclass(frozen=True)
class PledgeTotals:
    """Sums of pledged amounts inside one Hebrew year.

    annual_total/one_time_total include overdue and cancelled pledges;
    the pending and paid buckets do not, so
    total_pending + total_paid <= grand_total.
    """

    annual_total: Decimal = ZERO
    one_time_total: Decimal = ZERO
    grand_total: Decimal = ZERO
    annual_pending: Decimal = ZERO
    annual_paid: Decimal = ZERO
    one_time_pending: Decimal = ZERO
    one_time_paid: Decimal = ZERO
    total_pending: Decimal = ZERO
    total_paid: Decimal = ZERO
    currency: Currency = Currency.NIS

    def to_dict(self):
        data = {}
        for f in fields(self):
            value = getattr(self, f.name)
            data[f.name] = value.value if isinstance(value, Currency) else str(value)
        return data


def summarize_window(pledges, window, currency=Currency.NIS):
    """Totals for pledges dated inside window; amounts are assumed to be in currency."""
    currency = parse_enum(Currency, currency, 'currency')
    sums = defaultdict(lambda: ZERO)
    counted = 0

    for pledge in pledges:
        if pledge.pledge_date not in window:
            continue
        counted += 1
        kind = 'annual' if pledge.is_annual_pledge else 'one_time'
        # full pledged amount, even for a partial pledge
        sums[f'{kind}_total'] += pledge.amount
        if pledge.status in PENDING_STATUSES:
            sums[f'{kind}_pending'] += pledge.amount
        elif pledge.status in PAID_STATUSES:
            sums[f'{kind}_paid'] += pledge.amount

    logger.debug("Summarized %d pledges in Hebrew year %s", counted, window.hebrew_year)
    return PledgeTotals(
        annual_total=sums['annual_total'],
        one_time_total=sums['one_time_total'],
        grand_total=sums['annual_total'] + sums['one_time_total'],
        annual_pending=sums['annual_pending'],
        annual_paid=sums['annual_paid'],
        one_time_pending=sums['one_time_pending'],
        one_time_paid=sums['one_time_paid'],
        total_pending=sums['annual_pending'] + sums['one_time_pending'],
        total_paid=sums['annual_paid'] + sums['one_time_paid'],
        currency=currency,
    )


def summarize(pledges, as_of, currency=Currency.NIS):
    """Totals for the Hebrew year enclosing as_of."""
    return summarize_window(pledges, current_window(as_of), currency)


def summarize_by_family(pledges, as_of, currencies=None, default_currency=Currency.NIS):
    """One PledgeTotals per family id, each in that family's declared currency."""
    window = current_window(as_of)
    currencies = currencies or {}
    by_family = defaultdict(list)
    for pledge in pledges:
        by_family[pledge.family_id].append(pledge)
    return {
        family_id: summarize_window(family_pledges, window,
                                    currencies.get(family_id, default_currency))
        for family_id, family_pledges in sorted(by_family.items())
    }


def currency_symbol(currency):
    return CURRENCY_SYMBOLS[parse_enum(Currency, currency, 'currency')]


def format_amount(amount, currency):
    return f"{currency_symbol(currency)}{amount:,.2f}"


def format_pledge_totals(totals):
    """One-line summary, e.g. '₪5,300.00 (Annual: ₪5,000.00, One-time: ₪300.00)'"""
    if totals.grand_total == 0:
        return format_amount(ZERO, totals.currency)
    total = format_amount(totals.grand_total, totals.currency)
    annual = format_amount(totals.annual_total, totals.currency)
    one_time = format_amount(totals.one_time_total, totals.currency)
    if totals.annual_total > 0 and totals.one_time_total > 0:
        return f"{total} (Annual: {annual}, One-time: {one_time})"
    if totals.annual_total > 0:
        return f"{annual} (Annual)"
    return f"{one_time} (One-time)"


def pledge_breakdown(totals):
    has_annual = totals.annual_total > 0
    has_one_time = totals.one_time_total > 0
    return {
        'total': format_amount(totals.grand_total, totals.currency),
        'annual': format_amount(totals.annual_total, totals.currency) if has_annual else None,
        'one_time': format_amount(totals.one_time_total, totals.currency) if has_one_time else None,
        'has_both': has_annual and has_one_time,
        'is_empty': totals.grand_total == 0,
    }

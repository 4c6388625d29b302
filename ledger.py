# ledger.py
# In-memory pledge ledger and the pledge status state machine.
import logging
from dataclasses import replace

from errors import (InconsistentFulfillmentError, InvalidArgumentError,
                    InvalidTransitionError, LedgerError)
from hebrew_dates import as_date, parse_iso_date
from pledges import PledgeStatus, parse_amount, parse_enum

logger = logging.getLogger(__name__)

# fulfilled and cancelled are terminal
PLEDGE_TRANSITIONS = {
    PledgeStatus.PENDING: (PledgeStatus.PARTIAL, PledgeStatus.FULFILLED,
                           PledgeStatus.OVERDUE, PledgeStatus.CANCELLED),
    PledgeStatus.PARTIAL: (PledgeStatus.PARTIAL, PledgeStatus.FULFILLED,
                           PledgeStatus.OVERDUE, PledgeStatus.CANCELLED),
    PledgeStatus.OVERDUE: (PledgeStatus.PARTIAL, PledgeStatus.FULFILLED,
                           PledgeStatus.CANCELLED),
    PledgeStatus.FULFILLED: (),
    PledgeStatus.CANCELLED: (),
}


def allowed_transitions(status):
    return PLEDGE_TRANSITIONS[parse_enum(PledgeStatus, status, 'pledge status')]


def _record_payment(pledge, status, fulfilled_amount, fulfilled_date):
    if fulfilled_amount is None or fulfilled_date is None:
        raise InvalidArgumentError(
            f"Marking a pledge {status.value} requires fulfilled_amount and fulfilled_date")
    paid = parse_amount(fulfilled_amount, 'fulfilled amount')
    paid_on = parse_iso_date(fulfilled_date)
    if paid <= 0:
        raise InvalidArgumentError(f"Fulfilled amount must be positive, got {paid}")
    if paid > pledge.amount:
        raise InconsistentFulfillmentError(
            f"Fulfilled amount {paid} exceeds pledged amount {pledge.amount}")
    if pledge.fulfilled_amount is not None and paid < pledge.fulfilled_amount:
        raise InconsistentFulfillmentError(
            f"Fulfilled amount {paid} is below the {pledge.fulfilled_amount} already recorded")

    if status is PledgeStatus.FULFILLED:
        if paid != pledge.amount:
            raise InconsistentFulfillmentError(
                f"A fulfilled pledge must be paid in full ({paid} of {pledge.amount})")
        return replace(pledge, status=status, fulfilled_amount=paid, fulfilled_date=paid_on,
                       donation_date=pledge.donation_date or paid_on)

    if paid == pledge.amount:
        raise InconsistentFulfillmentError(
            "Pledge is paid in full; mark it fulfilled instead of partial")
    return replace(pledge, status=status, fulfilled_amount=paid, fulfilled_date=paid_on)


def transition(pledge, status, fulfilled_amount=None, fulfilled_date=None):
    """Return a copy of pledge moved to status; the input is never modified.

    partial/fulfilled need the amount paid so far and the payment date.
    cancelled drops any recorded payment.
    """
    requested = parse_enum(PledgeStatus, status, 'pledge status')
    allowed = PLEDGE_TRANSITIONS[pledge.status]
    if requested not in allowed:
        raise InvalidTransitionError(pledge.status.value, requested.value,
                                     [s.value for s in allowed])

    if requested is PledgeStatus.PARTIAL or requested is PledgeStatus.FULFILLED:
        return _record_payment(pledge, requested, fulfilled_amount, fulfilled_date)
    if requested is PledgeStatus.OVERDUE:
        return replace(pledge, status=requested)
    if requested is PledgeStatus.CANCELLED:
        return replace(pledge, status=requested, fulfilled_amount=None, fulfilled_date=None)
    # pending is only ever an initial state
    raise InvalidTransitionError(pledge.status.value, requested.value,
                                 [s.value for s in allowed])


def overdue_candidates(pledges, as_of):
    """Pending/partial pledges whose due date has passed.

    Reporting only: reclassifying one as overdue stays a manual transition.
    """
    as_of = as_date(as_of)
    return [
        p for p in pledges
        if p.status in (PledgeStatus.PENDING, PledgeStatus.PARTIAL)
        and p.due_date is not None and p.due_date < as_of
    ]


class PledgeLedger:
    """Pledges loaded from the external store, keyed by pledge id."""

    def __init__(self, pledges=()):
        self._pledges = {}
        self.extend(pledges)

    def add(self, pledge):
        if pledge.id in self._pledges:
            raise InvalidArgumentError(f"Pledge {pledge.id} is already in the ledger")
        self._pledges[pledge.id] = pledge

    def extend(self, pledges):
        for pledge in pledges:
            self.add(pledge)

    def get(self, pledge_id):
        return self._pledges[pledge_id]

    def for_family(self, family_id):
        return sorted((p for p in self._pledges.values() if p.family_id == family_id),
                      key=lambda p: (p.pledge_date, p.id))

    def family_ids(self):
        return sorted({p.family_id for p in self._pledges.values()})

    def transition(self, pledge_id, status, fulfilled_amount=None, fulfilled_date=None):
        current = self.get(pledge_id)
        try:
            updated = transition(current, status, fulfilled_amount, fulfilled_date)
        except LedgerError as e:
            logger.warning("Rejected status change for pledge %s: %s", pledge_id, e)
            raise
        self._pledges[pledge_id] = updated
        logger.info("Pledge %s: %s -> %s", pledge_id, current.status.value, updated.status.value)
        return updated

    def __iter__(self):
        return iter(self._pledges.values())

    def __len__(self):
        return len(self._pledges)

    def __contains__(self, pledge_id):
        return pledge_id in self._pledges

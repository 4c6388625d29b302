# pledges.py
# Pledge records as they arrive from the ledger store (dates as YYYY-MM-DD).
import json
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum

from errors import InconsistentFulfillmentError, InvalidArgumentError
from hebrew_dates import as_date, parse_hebrew_date, parse_iso_date


class Currency(str, Enum):
    NIS = 'NIS'
    USD = 'USD'
    GBP = 'GBP'


CURRENCY_SYMBOLS = {
    Currency.NIS: '₪',
    Currency.USD: '$',
    Currency.GBP: '£',
}


class PledgeStatus(str, Enum):
    PENDING = 'pending'
    PARTIAL = 'partial'
    FULFILLED = 'fulfilled'
    OVERDUE = 'overdue'
    CANCELLED = 'cancelled'


TERMINAL_STATUSES = frozenset({PledgeStatus.FULFILLED, PledgeStatus.CANCELLED})


class EventType(str, Enum):
    YAHRZEIT = 'yahrzeit'
    BIRTHDAY = 'birthday'
    ANNIVERSARY = 'anniversary'
    SIYUM = 'siyum'
    OTHER = 'other'


class EventDateType(str, Enum):
    GREGORIAN = 'gregorian'
    HEBREW = 'hebrew'
    FAMILY_EVENT = 'family_event'


def parse_enum(enum_cls, value, what):
    """Map a raw store value onto a closed enum, rejecting anything unknown."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        choices = ', '.join(m.value for m in enum_cls)
        raise InvalidArgumentError(f"Unknown {what} {value!r} (expected one of: {choices})") from None


def parse_amount(value, what='amount'):
    if isinstance(value, bool) or value is None:
        raise InvalidArgumentError(f"Invalid {what}: {value!r}")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation:
        raise InvalidArgumentError(f"Invalid {what}: {value!r}") from None
    if not amount.is_finite():
        raise InvalidArgumentError(f"Invalid {what}: {value!r}")
    return amount


def _as_bool(value):
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes', 't')
    return bool(value)


def _optional_date(value):
    if value in (None, ''):
        return None
    return parse_iso_date(value)


@dataclass(frozen=True)
class EventLink:
    """Loose cross-reference from a pledge to a family/member event.

    familyEventId/memberId are not checked against the family store.
    """

    type: EventType
    description: str = ''
    event_date: date | None = None
    date_type: EventDateType = EventDateType.GREGORIAN
    hebrew_date: str | None = None
    family_event_id: str | None = None
    member_id: str | None = None

    def __post_init__(self):
        object.__setattr__(self, 'type', parse_enum(EventType, self.type, 'event type'))
        object.__setattr__(self, 'date_type',
                           parse_enum(EventDateType, self.date_type, 'event date type'))
        if self.event_date is not None:
            object.__setattr__(self, 'event_date', as_date(self.event_date))

    @property
    def hebrew(self):
        """The free-text Hebrew date parsed into a HebrewDate, if present."""
        if not self.hebrew_date:
            return None
        return parse_hebrew_date(self.hebrew_date)

    def to_dict(self):
        return {
            'type': self.type.value,
            'description': self.description,
            'date': self.event_date.isoformat() if self.event_date else None,
            'dateType': self.date_type.value,
            'hebrewDate': self.hebrew_date,
            'familyEventId': self.family_event_id,
            'memberId': self.member_id,
        }


@dataclass(frozen=True)
class Pledge:
    id: str
    family_id: str
    amount: Decimal
    pledge_date: date
    currency: Currency = Currency.NIS
    description: str = ''
    is_annual_pledge: bool = False
    status: PledgeStatus = PledgeStatus.PENDING
    due_date: date | None = None
    donation_date: date | None = None
    fulfilled_amount: Decimal | None = None
    fulfilled_date: date | None = None
    connected_events: tuple = ()
    is_anonymous: bool = False
    notes: str = ''
    family_member_id: str | None = None

    def __post_init__(self):
        set_ = object.__setattr__
        amount = parse_amount(self.amount)
        if amount <= 0:
            raise InvalidArgumentError(f"Pledge amount must be positive, got {amount}")
        set_(self, 'amount', amount)
        set_(self, 'currency', parse_enum(Currency, self.currency, 'currency'))
        set_(self, 'status', parse_enum(PledgeStatus, self.status, 'pledge status'))
        set_(self, 'pledge_date', as_date(self.pledge_date))
        for name in ('due_date', 'donation_date', 'fulfilled_date'):
            value = getattr(self, name)
            if value is not None:
                set_(self, name, as_date(value))
        if self.fulfilled_amount is not None:
            paid = parse_amount(self.fulfilled_amount, 'fulfilled amount')
            if paid < 0:
                raise InvalidArgumentError(f"Fulfilled amount cannot be negative, got {paid}")
            if paid > amount:
                raise InconsistentFulfillmentError(
                    f"Fulfilled amount {paid} exceeds pledged amount {amount}")
            set_(self, 'fulfilled_amount', paid)
        set_(self, 'connected_events', tuple(self.connected_events))

    @property
    def is_fulfilled(self):
        return self.status is PledgeStatus.FULFILLED

    @property
    def is_pending(self):
        return self.status is PledgeStatus.PENDING

    @property
    def is_terminal(self):
        return self.status in TERMINAL_STATUSES

    @property
    def remaining(self):
        """Amount still owed, counting any partial payment."""
        if self.status is PledgeStatus.CANCELLED:
            return Decimal('0')
        return self.amount - (self.fulfilled_amount or Decimal('0'))

    @property
    def display_amount(self):
        return f"{CURRENCY_SYMBOLS[self.currency]}{self.amount:.2f}"

    def to_dict(self):
        def iso(d):
            return d.isoformat() if d else None

        return {
            'id': self.id,
            'familyId': self.family_id,
            'familyMemberId': self.family_member_id,
            'amount': str(self.amount),
            'currency': self.currency.value,
            'description': self.description,
            'date': iso(self.pledge_date),
            'dueDate': iso(self.due_date),
            'donationDate': iso(self.donation_date),
            'isAnnualPledge': self.is_annual_pledge,
            'status': self.status.value,
            'fulfilledAmount': str(self.fulfilled_amount) if self.fulfilled_amount is not None else None,
            'fulfilledDate': iso(self.fulfilled_date),
            'connectedEvents': [e.to_dict() for e in self.connected_events],
            'isAnonymous': self.is_anonymous,
            'notes': self.notes,
        }


def _pick(record, *keys):
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


def event_link_from_record(record):
    if not isinstance(record, dict):
        raise InvalidArgumentError(f"Connected event must be an object, got {record!r}")
    return EventLink(
        type=_pick(record, 'type') or EventType.OTHER,
        description=_pick(record, 'description') or '',
        event_date=_optional_date(_pick(record, 'date', 'event_date')),
        date_type=_pick(record, 'dateType', 'date_type') or EventDateType.GREGORIAN,
        hebrew_date=_pick(record, 'hebrewDate', 'hebrew_date'),
        family_event_id=_pick(record, 'familyEventId', 'family_event_id'),
        member_id=_pick(record, 'memberId', 'member_id'),
    )


def pledge_from_record(record):
    """Build a Pledge from a store row or API payload.

    Store rows use snake_case columns (pledge_date, family_id, ...); API
    payloads use the camelCase keys of the pledge entity (date, familyId, ...).
    """
    record = dict(record)
    events = _pick(record, 'connectedEvents', 'connected_events') or []
    if isinstance(events, str):
        try:
            events = json.loads(events)
        except ValueError:
            raise InvalidArgumentError(f"connected_events is not valid JSON: {events!r}") from None
        events = events or []
    if not isinstance(events, list):
        raise InvalidArgumentError("connected_events must be a list")

    pledge_id = _pick(record, 'id')
    family_id = _pick(record, 'family_id', 'familyId')
    if pledge_id is None or family_id is None:
        raise InvalidArgumentError("Pledge record needs both an id and a family id")
    pledge_date = _pick(record, 'pledge_date', 'pledgeDate', 'date')
    if pledge_date is None:
        raise InvalidArgumentError("Pledge record has no pledge date")
    fulfilled_amount = _pick(record, 'fulfilled_amount', 'fulfilledAmount')

    return Pledge(
        id=str(pledge_id),
        family_id=str(family_id),
        family_member_id=_pick(record, 'family_member_id', 'familyMemberId'),
        amount=parse_amount(_pick(record, 'amount')),
        currency=_pick(record, 'currency') or Currency.NIS,
        description=_pick(record, 'description') or '',
        pledge_date=parse_iso_date(pledge_date),
        due_date=_optional_date(_pick(record, 'due_date', 'dueDate')),
        donation_date=_optional_date(_pick(record, 'donation_date', 'donationDate')),
        is_annual_pledge=_as_bool(_pick(record, 'is_annual_pledge', 'isAnnualPledge') or False),
        status=_pick(record, 'status') or PledgeStatus.PENDING,
        fulfilled_amount=(parse_amount(fulfilled_amount, 'fulfilled amount')
                          if fulfilled_amount not in (None, '') else None),
        fulfilled_date=_optional_date(_pick(record, 'fulfilled_date', 'fulfilledDate')),
        connected_events=[event_link_from_record(e) for e in events],
        is_anonymous=_as_bool(_pick(record, 'is_anonymous', 'isAnonymous') or False),
        notes=_pick(record, 'notes') or '',
    )

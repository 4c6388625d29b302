# errors.py
# Validation errors raised by the calendar and pledge modules.


class LedgerError(Exception):
    """Base class for every error this package raises."""


class OutOfRangeError(LedgerError):
    """Date conversion requested outside the supported span."""


class InvalidArgumentError(LedgerError, ValueError):
    """Malformed date, unknown enum value or non-positive amount."""


class InvalidTransitionError(LedgerError):
    """Illegal pledge status change."""

    def __init__(self, current, requested, allowed=()):
        self.current = current
        self.requested = requested
        self.allowed = tuple(allowed)
        super().__init__(f"Cannot transition pledge from '{current}' to '{requested}'")


class InconsistentFulfillmentError(LedgerError):
    """fulfilled_amount exceeds amount, or fulfilled without paying in full."""

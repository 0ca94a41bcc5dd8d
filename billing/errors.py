"""
Typed errors for billing rule violations.

All of these are recoverable: the caller decides whether a failure becomes
an inline field error, a toast, or a refused submission. They subclass
ValueError so code that already treats bad input as ValueError keeps working.
"""

from enum import Enum


class FailureReason(str, Enum):
    """Machine-readable tag for each billing failure."""

    INVALID_INPUT = "INVALID_INPUT"
    INVALID_STATE = "INVALID_STATE"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    EXCEEDS_BALANCE = "EXCEEDS_BALANCE"
    INVALID_DATE = "INVALID_DATE"
    INVALID_INVOICE_STATE = "INVALID_INVOICE_STATE"
    INCONSISTENCY = "INCONSISTENCY"


class BillingError(ValueError):
    """Base class for billing rule violations."""

    code: FailureReason


class InvalidInputError(BillingError):
    """Malformed line item (quantity below 1, negative price, blank description)."""

    code = FailureReason.INVALID_INPUT


class InvalidStateError(BillingError):
    """Mutation attempted while the invoice is in a state that forbids it."""

    code = FailureReason.INVALID_STATE


class InvalidAmountError(BillingError):
    """Payment amount is not strictly positive."""

    code = FailureReason.INVALID_AMOUNT


class ExceedsBalanceError(BillingError):
    """Payment amount is larger than the invoice's outstanding balance."""

    code = FailureReason.EXCEEDS_BALANCE


class InvalidDateError(BillingError):
    """Payment date lies in the future."""

    code = FailureReason.INVALID_DATE


class InvalidInvoiceStateError(BillingError):
    """Payment attempted against an invoice that is still a draft."""

    code = FailureReason.INVALID_INVOICE_STATE


class InconsistencyError(BillingError):
    """
    Payments add up to more than the invoice total.

    The snapshot is stale or corrupted. Re-fetch before doing anything else.
    """

    code = FailureReason.INCONSISTENCY


class PaymentRejectedError(BillingError):
    """
    A payment was refused locally and never sent to the API.

    Carries the full PaymentValidation so the caller can show every failed
    field, not just the first.
    """

    def __init__(self, validation):
        self.validation = validation
        self.code = validation.reason
        super().__init__("; ".join(f.message for f in validation.failures))


ERRORS_BY_REASON: dict[FailureReason, type[BillingError]] = {
    cls.code: cls
    for cls in (
        InvalidInputError,
        InvalidStateError,
        InvalidAmountError,
        ExceedsBalanceError,
        InvalidDateError,
        InvalidInvoiceStateError,
        InconsistencyError,
    )
}

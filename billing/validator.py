"""
Payment validator.

Checks a proposed payment against an invoice snapshot before it is sent to
the API. The check is advisory: the server re-validates and has the final
say. It exists to give immediate feedback and to avoid round trips that are
certain to fail.

Callers must validate against a freshly fetched snapshot. Validating against
an invoice fetched before another payment was recorded will overstate the
balance.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable

from billing.balance import balance_snapshot
from billing.errors import (
    ERRORS_BY_REASON,
    BillingError,
    FailureReason,
)
from billing.models import Invoice, InvoiceStatus, Payment, PaymentCreate
from billing.money import MoneyInput, ZERO, format_currency, round2, to_decimal
from utils.timezone import parse_date, today_utc

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaymentFailure:
    """One reason a payment was rejected."""

    reason: FailureReason
    message: str
    field: str

    def to_error(self) -> BillingError:
        return ERRORS_BY_REASON[self.reason](self.message)


@dataclass(frozen=True)
class PaymentValidation:
    """
    Outcome of validate_payment().

    Exactly one of ``candidate`` and ``failures`` is set. When several checks
    fail they are all reported, in check order, so a form can flag every
    field at once; ``reason`` is the first.
    """

    candidate: PaymentCreate | None = None
    failures: tuple[PaymentFailure, ...] = ()

    @property
    def ok(self) -> bool:
        return self.candidate is not None

    @property
    def reason(self) -> FailureReason | None:
        return self.failures[0].reason if self.failures else None

    def field_errors(self) -> dict[str, str]:
        """First message per form field, e.g. {"amount": "..."}."""
        errors: dict[str, str] = {}
        for failure in self.failures:
            errors.setdefault(failure.field, failure.message)
        return errors

    def raise_for_failure(self) -> PaymentCreate:
        """
        Return the candidate, or raise the error for the first failure.

        Raises:
            BillingError: Subclass matching ``reason``
        """
        if self.failures:
            raise self.failures[0].to_error()
        return self.candidate


def validate_payment(
    amount: MoneyInput,
    invoice: Invoice,
    existing_payments: Iterable[Payment],
    payment_date: date | datetime | str | None = None,
    today: date | None = None,
) -> PaymentValidation:
    """
    Validate a proposed payment against an invoice snapshot.

    Args:
        amount: Proposed amount, any form to_decimal() accepts, with at
            most two decimal places
        invoice: Freshly fetched invoice
        existing_payments: Payments recorded so far; payments belonging to
            other invoices are ignored
        payment_date: Date of payment, defaults to ``today``
        today: The client's current date, defaults to today in UTC

    Returns:
        PaymentValidation holding either a PaymentCreate ready for submission
        or the reasons it was rejected
    """
    today = today or today_utc()
    failures: list[PaymentFailure] = []

    # Checks run on the amount as entered; it is never rounded into range.
    try:
        value = to_decimal(amount)
    except ValueError:
        value = None

    if value is None or value <= ZERO:
        failures.append(PaymentFailure(
            FailureReason.INVALID_AMOUNT,
            "Amount must be greater than 0",
            "amount",
        ))

    snapshot = balance_snapshot(invoice, existing_payments)

    if not snapshot.is_consistent:
        failures.append(PaymentFailure(
            FailureReason.INCONSISTENCY,
            str(snapshot.inconsistency) + "; refresh the invoice and try again",
            "invoiceId",
        ))
    elif value is not None and value > snapshot.balance:
        failures.append(PaymentFailure(
            FailureReason.EXCEEDS_BALANCE,
            f"Amount cannot exceed invoice balance ({format_currency(snapshot.balance)})",
            "amount",
        ))

    if value is not None and value > ZERO and value != round2(value):
        failures.append(PaymentFailure(
            FailureReason.INVALID_AMOUNT,
            "Amount cannot have more than 2 decimal places",
            "amount",
        ))

    try:
        when = parse_date(payment_date) if payment_date is not None else today
    except (ValueError, TypeError):
        when = None

    if when is None:
        failures.append(PaymentFailure(
            FailureReason.INVALID_DATE,
            f"Payment date is not a valid date: {payment_date!r}",
            "paymentDate",
        ))
    elif when > today:
        failures.append(PaymentFailure(
            FailureReason.INVALID_DATE,
            "Payment date cannot be in the future",
            "paymentDate",
        ))

    if invoice.status == InvoiceStatus.DRAFT:
        failures.append(PaymentFailure(
            FailureReason.INVALID_INVOICE_STATE,
            f"Invoice {invoice.invoice_number} is a draft; send it before recording payments",
            "invoiceId",
        ))

    if failures:
        logger.debug(
            "Payment of %s on invoice %s rejected: %s",
            amount, invoice.id, ", ".join(f.reason.value for f in failures),
        )
        return PaymentValidation(failures=tuple(failures))

    return PaymentValidation(candidate=PaymentCreate(
        invoice_id=invoice.id,
        amount=value,
        payment_date=when,
    ))


def remaining_balance_message(balance: Decimal) -> str:
    """Hint shown beside the amount field while a payment is being typed."""
    if balance < ZERO:
        return f"Exceeds balance by {format_currency(-balance)}"
    if balance == ZERO:
        return "Invoice will be paid in full"
    return f"Remaining balance: {format_currency(balance)}"

"""
Invoice balance model.

Pure functions over an invoice snapshot (an Invoice plus the Payments fetched
with it). Nothing here talks to the API or mutates its inputs: transitions
return new Invoice objects, which are previews until the server confirms them.

Lifecycle:
    DRAFT --send--> SENT --balance reaches 0--> PAID

Line items can only change in DRAFT. Nothing moves back to DRAFT. The SENT to
PAID step happens on the server when a payment is recorded; the client can
only preview it.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, Sequence

from pydantic import BaseModel, ValidationError

from billing.calculator import invoice_total
from billing.errors import InconsistencyError, InvalidInputError, InvalidStateError
from billing.models import Invoice, InvoiceStatus, LineItem, LineItemCreate, Payment
from billing.money import ZERO, MoneyInput, round2

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BalanceSnapshot:
    """
    Balance figures computed from an invoice's line items and payments.

    ``balance`` is never negative. When payments exceed the total, the excess
    is kept in ``shortfall`` and the snapshot is inconsistent.
    """

    total: Decimal
    paid: Decimal
    balance: Decimal
    shortfall: Decimal = ZERO
    is_stale: bool = False

    @property
    def is_consistent(self) -> bool:
        return self.shortfall == ZERO

    @property
    def inconsistency(self) -> InconsistencyError | None:
        """The error describing an overpaid snapshot, or None."""
        if self.is_consistent:
            return None
        return InconsistencyError(
            f"Payments ({self.paid}) exceed invoice total ({self.total}) by {self.shortfall}"
        )


def _payments_for(invoice: Invoice, payments: Iterable[Payment]) -> list[Payment]:
    return [p for p in payments if p.invoice_id == invoice.id]


def amount_paid(invoice: Invoice, payments: Iterable[Payment]) -> Decimal:
    """Sum of payments that reference this invoice. Others are ignored."""
    return round2(sum((p.amount for p in _payments_for(invoice, payments)), ZERO))


def balance_snapshot(invoice: Invoice, payments: Iterable[Payment]) -> BalanceSnapshot:
    """
    Compute total, paid and balance for an invoice snapshot.

    Logs a warning when payments exceed the total, and when the server's
    reported total or balance disagrees with the computed one. Both mean the
    snapshot should be re-fetched.
    """
    total = invoice_total(invoice.line_items)
    paid = amount_paid(invoice, payments)
    raw_balance = total - paid

    shortfall = ZERO
    balance = raw_balance
    if raw_balance < ZERO:
        shortfall = -raw_balance
        balance = ZERO
        logger.warning(
            "Invoice %s is overpaid: payments %s exceed total %s",
            invoice.id, paid, total,
        )

    is_stale = invoice.total_amount != total or invoice.balance != balance
    if is_stale:
        logger.warning(
            "Invoice %s snapshot disagrees with computed values "
            "(reported total=%s balance=%s, computed total=%s balance=%s)",
            invoice.id, invoice.total_amount, invoice.balance, total, balance,
        )

    return BalanceSnapshot(
        total=total,
        paid=paid,
        balance=balance,
        shortfall=shortfall,
        is_stale=is_stale,
    )


def current_balance(invoice: Invoice, payments: Iterable[Payment]) -> Decimal:
    """
    Outstanding balance: total of line items minus this invoice's payments.

    Never reports a negative number. Use balance_snapshot() to find out
    whether the figure had to be clamped.
    """
    return balance_snapshot(invoice, payments).balance


def can_edit_line_items(invoice: Invoice) -> bool:
    return invoice.status == InvoiceStatus.DRAFT


def ensure_editable(invoice: Invoice) -> None:
    """
    Raises:
        InvalidStateError: If the invoice is no longer a draft
    """
    if not can_edit_line_items(invoice):
        raise InvalidStateError(
            f"Invoice {invoice.invoice_number} is {invoice.status.value}; "
            "line items can only be edited on a DRAFT invoice"
        )


def can_send(invoice: Invoice) -> bool:
    """A draft can be sent once it has at least one line item and a positive total."""
    if invoice.status != InvoiceStatus.DRAFT:
        return False
    if not invoice.line_items:
        return False
    return invoice_total(invoice.line_items) > ZERO


def can_record_payment(invoice: Invoice, payments: Iterable[Payment]) -> bool:
    """Payments are accepted on sent invoices that still have something owing."""
    if invoice.status == InvoiceStatus.DRAFT:
        return False
    return current_balance(invoice, payments) > ZERO


def mark_as_sent(invoice: Invoice) -> Invoice:
    """
    Preview the DRAFT -> SENT transition.

    Returns:
        A copy of the invoice in SENT status

    Raises:
        InvalidStateError: If the invoice is not a draft, has no line items,
            or totals zero
    """
    if invoice.status != InvoiceStatus.DRAFT:
        raise InvalidStateError(
            f"Invoice {invoice.invoice_number} is already {invoice.status.value}"
        )
    if not can_send(invoice):
        raise InvalidStateError(
            f"Invoice {invoice.invoice_number} cannot be sent: it needs at least "
            "one line item and a total greater than 0"
        )
    return invoice.model_copy(update={"status": InvoiceStatus.SENT})


def _as_line_item(item: Any) -> LineItem:
    # New rows get the same checks as a create request, blank descriptions included.
    if isinstance(item, BaseModel):
        item = item.model_dump()
    try:
        row = LineItemCreate.model_validate(item)
    except ValidationError as e:
        raise InvalidInputError(f"Malformed line item: {e}")
    return LineItem(**row.model_dump())


def replace_line_items(invoice: Invoice, line_items: Sequence[Any]) -> Invoice:
    """
    Preview a draft with new line items, total and balance recomputed.

    Raises:
        InvalidStateError: If the invoice is not a draft
        InvalidInputError: If no line items are given or one is malformed
    """
    ensure_editable(invoice)

    if not line_items:
        raise InvalidInputError("Invoice must have at least one line item")

    items = tuple(_as_line_item(item) for item in line_items)
    total = invoice_total(items)

    # A draft cannot have payments, so its balance is its total.
    return invoice.model_copy(update={
        "line_items": items,
        "total_amount": total,
        "balance": total,
    })


def preview_balance_after(
    invoice: Invoice,
    payments: Iterable[Payment],
    amount: MoneyInput,
) -> Decimal:
    """
    Balance the invoice would have after a proposed payment.

    Unlike current_balance() this may be negative, so a form can show by how
    much a proposed amount overshoots.
    """
    return round2(current_balance(invoice, payments) - round2(amount))


def status_after_payment(
    invoice: Invoice,
    payments: Iterable[Payment],
    amount: MoneyInput,
) -> InvoiceStatus:
    """
    Status the server is expected to give the invoice after a payment.

    PAID when the payment brings the balance to exactly zero, otherwise the
    current status.
    """
    if invoice.status == InvoiceStatus.SENT and preview_balance_after(invoice, payments, amount) == ZERO:
        return InvoiceStatus.PAID
    return invoice.status

"""
Billing domain: line item calculator, invoice balance model and payment
validator, plus the services that put them in front of the billing API.

Everything importable from this package directly is pure (no I/O).
"""

from billing.errors import (
    FailureReason,
    BillingError,
    InvalidInputError,
    InvalidStateError,
    InvalidAmountError,
    ExceedsBalanceError,
    InvalidDateError,
    InvalidInvoiceStateError,
    InconsistencyError,
    PaymentRejectedError,
)
from billing.money import round2, format_currency
from billing.calculator import subtotal, invoice_total
from billing.balance import (
    BalanceSnapshot,
    balance_snapshot,
    current_balance,
    amount_paid,
    can_edit_line_items,
    ensure_editable,
    can_send,
    can_record_payment,
    mark_as_sent,
    replace_line_items,
    preview_balance_after,
    status_after_payment,
)
from billing.validator import PaymentFailure, PaymentValidation, validate_payment

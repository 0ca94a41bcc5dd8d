"""Tests for billing/balance.py - invoice balance model and lifecycle guards."""

import logging
from decimal import Decimal
from uuid import uuid4

import pytest

from billing import balance
from billing.errors import FailureReason, InconsistencyError, InvalidInputError, InvalidStateError
from billing.models import InvoiceStatus, LineItemCreate


# =============================================================================
# CURRENT BALANCE
# =============================================================================


class TestCurrentBalance:
    """Tests for current_balance() and balance_snapshot()."""

    def test_no_payments_is_total(self, hundred_dollar_invoice):
        assert balance.current_balance(hundred_dollar_invoice, []) == Decimal("100.00")

    def test_partial_payments_scenario(self, hundred_dollar_invoice, make_payment):
        """100.00 total, 40.00 + 35.00 paid -> 25.00 owing."""
        payments = [
            make_payment(hundred_dollar_invoice, "40.00"),
            make_payment(hundred_dollar_invoice, "35.00"),
        ]
        assert balance.current_balance(hundred_dollar_invoice, payments) == Decimal("25.00")

    def test_ignores_payments_for_other_invoices(self, hundred_dollar_invoice, make_invoice, make_payment):
        other = make_invoice()
        payments = [
            make_payment(hundred_dollar_invoice, "10.00"),
            make_payment(other, "50.00"),
        ]
        assert balance.current_balance(hundred_dollar_invoice, payments) == Decimal("90.00")
        assert balance.amount_paid(hundred_dollar_invoice, payments) == Decimal("10.00")

    @pytest.mark.parametrize("amounts", [
        [],
        ["0.01"],
        ["33.33", "33.33", "33.34"],
        ["99.99"],
        ["12.50", "0.50", "7.00", "80.00"],
    ])
    def test_balance_plus_payments_equals_total(self, make_invoice, make_line_item, make_payment, amounts):
        invoice = make_invoice(line_items=[
            make_line_item(quantity=3, unit_price="19.99"),
            make_line_item(quantity=1, unit_price="40.03"),
        ])
        payments = [make_payment(invoice, a) for a in amounts]

        snapshot = balance.balance_snapshot(invoice, payments)

        assert snapshot.total == Decimal("100.00")
        assert snapshot.balance + sum((p.amount for p in payments), Decimal("0")) == snapshot.total
        assert snapshot.is_consistent

    def test_full_payment_reaches_zero(self, hundred_dollar_invoice, make_payment):
        payments = [make_payment(hundred_dollar_invoice, "100.00")]
        assert balance.current_balance(hundred_dollar_invoice, payments) == Decimal("0.00")

    def test_overpayment_is_clamped_but_flagged(self, hundred_dollar_invoice, make_payment, caplog):
        payments = [
            make_payment(hundred_dollar_invoice, "80.00"),
            make_payment(hundred_dollar_invoice, "30.00"),
        ]

        with caplog.at_level(logging.WARNING, logger="billing.balance"):
            snapshot = balance.balance_snapshot(hundred_dollar_invoice, payments)

        assert snapshot.balance == Decimal("0.00")
        assert snapshot.shortfall == Decimal("10.00")
        assert not snapshot.is_consistent
        assert isinstance(snapshot.inconsistency, InconsistencyError)
        assert snapshot.inconsistency.code == FailureReason.INCONSISTENCY
        assert "overpaid" in caplog.text
        assert balance.current_balance(hundred_dollar_invoice, payments) == Decimal("0.00")

    def test_consistent_snapshot_has_no_inconsistency(self, hundred_dollar_invoice):
        assert balance.balance_snapshot(hundred_dollar_invoice, []).inconsistency is None

    def test_flags_stale_reported_balance(self, hundred_dollar_invoice, make_payment, caplog):
        """Server says 100.00 owing, but a payment exists: snapshot is out of date."""
        payments = [make_payment(hundred_dollar_invoice, "25.00")]

        with caplog.at_level(logging.WARNING, logger="billing.balance"):
            snapshot = balance.balance_snapshot(hundred_dollar_invoice, payments)

        assert snapshot.is_stale
        assert snapshot.balance == Decimal("75.00")
        assert "disagrees" in caplog.text

    def test_matching_reported_values_are_not_stale(self, make_invoice, make_payment):
        invoice = make_invoice(paid="25.00")
        payments = [make_payment(invoice, "25.00")]
        assert not balance.balance_snapshot(invoice, payments).is_stale

    def test_accepts_generator_of_payments(self, hundred_dollar_invoice, make_payment):
        payments = (make_payment(hundred_dollar_invoice, a) for a in ("10.00", "20.00"))
        assert balance.current_balance(hundred_dollar_invoice, payments) == Decimal("70.00")


# =============================================================================
# LIFECYCLE GUARDS
# =============================================================================


class TestEditLineItems:
    """Line items are only editable in DRAFT."""

    def test_draft_is_editable(self, make_invoice):
        assert balance.can_edit_line_items(make_invoice(status=InvoiceStatus.DRAFT))

    @pytest.mark.parametrize("status", [InvoiceStatus.SENT, InvoiceStatus.PAID])
    def test_sent_and_paid_are_locked(self, make_invoice, status):
        invoice = make_invoice(status=status)
        assert not balance.can_edit_line_items(invoice)
        with pytest.raises(InvalidStateError, match="DRAFT") as exc:
            balance.ensure_editable(invoice)
        assert exc.value.code == FailureReason.INVALID_STATE

    def test_replace_line_items_on_sent_invoice_fails(self, make_invoice, make_line_item):
        invoice = make_invoice(status=InvoiceStatus.SENT)
        with pytest.raises(InvalidStateError):
            balance.replace_line_items(invoice, [make_line_item()])

    def test_replace_line_items_recomputes_total(self, make_invoice, make_line_item):
        draft = make_invoice(status=InvoiceStatus.DRAFT)

        updated = balance.replace_line_items(draft, [
            make_line_item(quantity=2, unit_price="10.00"),
            LineItemCreate(description="Setup", quantity=1, unit_price="5.50"),
        ])

        assert updated.total_amount == Decimal("25.50")
        assert updated.balance == Decimal("25.50")
        assert updated.status == InvoiceStatus.DRAFT
        assert len(updated.line_items) == 2
        # Input snapshot is untouched
        assert draft.total_amount == Decimal("100.00")
        assert len(draft.line_items) == 1

    def test_replace_line_items_accepts_form_rows(self, make_invoice):
        draft = make_invoice(status=InvoiceStatus.DRAFT)
        updated = balance.replace_line_items(draft, [
            {"description": "Hours", "quantity": 3, "unitPrice": "12.25"},
        ])
        assert updated.total_amount == Decimal("36.75")

    def test_replace_with_nothing_fails(self, make_invoice):
        with pytest.raises(InvalidInputError, match="at least one"):
            balance.replace_line_items(make_invoice(status=InvoiceStatus.DRAFT), [])

    def test_replace_with_malformed_row_fails(self, make_invoice):
        with pytest.raises(InvalidInputError):
            balance.replace_line_items(
                make_invoice(status=InvoiceStatus.DRAFT),
                [{"description": "Bad", "quantity": 0, "unit_price": "1.00"}],
            )

    @pytest.mark.parametrize("description", ["", "   ", "\t\n"])
    def test_replace_with_blank_description_fails(self, make_invoice, description):
        with pytest.raises(InvalidInputError, match="Description is required|at least 1 character"):
            balance.replace_line_items(
                make_invoice(status=InvoiceStatus.DRAFT),
                [{"description": description, "quantity": 1, "unitPrice": "5.00"}],
            )

    def test_replace_rechecks_line_item_instances(self, make_invoice, make_line_item):
        """Rows built as LineItem skip request validation, so they are checked here."""
        with pytest.raises(InvalidInputError, match="Description is required"):
            balance.replace_line_items(
                make_invoice(status=InvoiceStatus.DRAFT),
                [make_line_item(description="  ")],
            )

    def test_replace_with_incomplete_row_fails(self, make_invoice):
        with pytest.raises(InvalidInputError, match="Malformed"):
            balance.replace_line_items(
                make_invoice(status=InvoiceStatus.DRAFT),
                [{"quantity": 1}],
            )


class TestSend:
    """DRAFT -> SENT."""

    def test_draft_with_items_can_be_sent(self, make_invoice):
        draft = make_invoice(status=InvoiceStatus.DRAFT)
        assert balance.can_send(draft)

        sent = balance.mark_as_sent(draft)

        assert sent.status == InvoiceStatus.SENT
        assert draft.status == InvoiceStatus.DRAFT

    def test_draft_without_items_cannot_be_sent(self, make_invoice):
        draft = make_invoice(status=InvoiceStatus.DRAFT).model_copy(update={"line_items": ()})
        assert not balance.can_send(draft)
        with pytest.raises(InvalidStateError, match="at least one line item"):
            balance.mark_as_sent(draft)

    def test_zero_total_draft_cannot_be_sent(self, make_invoice, make_line_item):
        draft = make_invoice(status=InvoiceStatus.DRAFT, line_items=[make_line_item(unit_price="0.00")])
        assert not balance.can_send(draft)

    @pytest.mark.parametrize("status", [InvoiceStatus.SENT, InvoiceStatus.PAID])
    def test_cannot_send_twice_or_after_payment(self, make_invoice, status):
        invoice = make_invoice(status=status)
        assert not balance.can_send(invoice)
        with pytest.raises(InvalidStateError, match="already"):
            balance.mark_as_sent(invoice)


class TestCanRecordPayment:
    """Payments need a sent invoice with a positive balance."""

    def test_sent_with_balance(self, hundred_dollar_invoice):
        assert balance.can_record_payment(hundred_dollar_invoice, [])

    def test_draft_refused(self, make_invoice):
        assert not balance.can_record_payment(make_invoice(status=InvoiceStatus.DRAFT), [])

    def test_fully_paid_refused(self, make_invoice, make_payment):
        invoice = make_invoice(status=InvoiceStatus.PAID, paid="100.00")
        payments = [make_payment(invoice, "100.00")]
        assert not balance.can_record_payment(invoice, payments)


# =============================================================================
# PREVIEWS
# =============================================================================


class TestPreviews:
    """Tests for preview_balance_after() and status_after_payment()."""

    def test_preview_balance_after(self, hundred_dollar_invoice, make_payment):
        payments = [make_payment(hundred_dollar_invoice, "40.00")]
        assert balance.preview_balance_after(hundred_dollar_invoice, payments, "15.50") == Decimal("44.50")

    def test_preview_may_go_negative(self, hundred_dollar_invoice):
        assert balance.preview_balance_after(hundred_dollar_invoice, [], 120) == Decimal("-20.00")

    def test_exact_payment_previews_paid(self, hundred_dollar_invoice, make_payment):
        payments = [make_payment(hundred_dollar_invoice, "75.00")]
        assert balance.status_after_payment(hundred_dollar_invoice, payments, "25.00") == InvoiceStatus.PAID

    def test_partial_payment_keeps_status(self, hundred_dollar_invoice):
        assert balance.status_after_payment(hundred_dollar_invoice, [], "25.00") == InvoiceStatus.SENT

    def test_draft_never_previews_paid(self, make_invoice):
        draft = make_invoice(status=InvoiceStatus.DRAFT)
        assert balance.status_after_payment(draft, [], "100.00") == InvoiceStatus.DRAFT

    def test_invoice_ids_are_respected(self, hundred_dollar_invoice, make_payment, make_invoice):
        stranger = make_payment(make_invoice(invoice_id=uuid4()), "100.00")
        assert balance.preview_balance_after(hundred_dollar_invoice, [stranger], "0") == Decimal("100.00")

"""
Payment service: preview, validate and record payments.

record_payment() always re-fetches the invoice and its payments immediately
before validating, so a payment recorded elsewhere a moment ago is taken into
account. Only payments that pass validation are sent to the API; the API
re-validates and its answer is final.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID

from billing import balance
from billing.config import BillingConfig
from billing.errors import PaymentRejectedError
from billing.event_bus import EventBus
from billing.events import PaymentRecorded
from billing.models import Invoice, InvoiceStatus, Page, Payment
from billing.money import MoneyInput
from billing.validator import PaymentValidation, remaining_balance_message, validate_payment
from clients.billing_api_client import BillingAPIClient, NotFoundError
from utils.timezone import today_in

logger = logging.getLogger(__name__)

_SNAPSHOT_PAGE_SIZE = 100


@dataclass(frozen=True)
class InvoiceSnapshot:
    """An invoice and all of its payments, fetched together."""

    invoice: Invoice
    payments: tuple[Payment, ...]

    @property
    def balance(self) -> Decimal:
        return balance.current_balance(self.invoice, self.payments)


@dataclass(frozen=True)
class PaymentPreview:
    """What the payment form shows while an amount is being typed."""

    balance_before: Decimal
    balance_after: Decimal
    status_after: InvoiceStatus
    message: str


class PaymentService:
    """Service for payment operations."""

    def __init__(
        self,
        client: BillingAPIClient,
        event_bus: EventBus,
        config: BillingConfig | None = None,
    ):
        self.client = client
        self.event_bus = event_bus
        self.timezone = config.timezone if config else "UTC"
        self.page_size = config.page_size if config else 20

    def _today(self) -> date:
        return today_in(self.timezone)

    def fetch_snapshot(self, invoice_id: UUID) -> InvoiceSnapshot:
        """
        Fetch an invoice and every payment recorded against it.

        Raises:
            ValueError: If invoice not found
        """
        try:
            invoice = self.client.get_invoice(invoice_id)
        except NotFoundError:
            raise ValueError(f"Invoice {invoice_id} not found")

        payments: list[Payment] = []
        page_number = 0
        while True:
            page = self.client.list_payments(
                page=page_number, size=_SNAPSHOT_PAGE_SIZE, invoice_id=invoice_id
            )
            payments.extend(page.content)
            if page.last or not page.content or page_number + 1 >= page.total_pages:
                break
            page_number += 1

        return InvoiceSnapshot(invoice=invoice, payments=tuple(payments))

    def check(
        self,
        invoice_id: UUID,
        amount: MoneyInput,
        payment_date: date | str | None = None,
    ) -> PaymentValidation:
        """
        Validate a proposed payment against a fresh snapshot without recording it.

        Raises:
            ValueError: If invoice not found
        """
        snapshot = self.fetch_snapshot(invoice_id)
        return validate_payment(
            amount,
            snapshot.invoice,
            snapshot.payments,
            payment_date=payment_date,
            today=self._today(),
        )

    def preview(self, invoice_id: UUID, amount: MoneyInput) -> PaymentPreview:
        """
        Preview the effect of a payment on the invoice balance.

        Raises:
            ValueError: If invoice not found or amount is not a number
        """
        snapshot = self.fetch_snapshot(invoice_id)
        after = balance.preview_balance_after(snapshot.invoice, snapshot.payments, amount)
        return PaymentPreview(
            balance_before=snapshot.balance,
            balance_after=after,
            status_after=balance.status_after_payment(snapshot.invoice, snapshot.payments, amount),
            message=remaining_balance_message(after),
        )

    def record_payment(
        self,
        invoice_id: UUID,
        amount: MoneyInput,
        payment_date: date | str | None = None,
    ) -> Payment:
        """
        Validate and record a payment.

        Args:
            invoice_id: Invoice being paid
            amount: Payment amount
            payment_date: Date of payment, defaults to today

        Returns:
            Payment as stored by the server

        Raises:
            ValueError: If invoice not found
            PaymentRejectedError: If local validation fails; nothing is sent
            BillingAPIError: If the server refuses the payment
        """
        validation = self.check(invoice_id, amount, payment_date)
        if not validation.ok:
            logger.info(
                f"Payment of {amount} on invoice {invoice_id} rejected locally: "
                f"{validation.reason.value}"
            )
            raise PaymentRejectedError(validation)

        payment = self.client.create_payment(validation.candidate)
        logger.info(f"Recorded payment {payment.id} of {payment.amount} on invoice {invoice_id}")

        self.event_bus.publish(PaymentRecorded.create(payment=payment))
        return payment

    def get_by_id(self, payment_id: UUID) -> Payment | None:
        try:
            return self.client.get_payment(payment_id)
        except NotFoundError:
            return None

    def list_all(self, page: int = 0, size: int | None = None) -> Page[Payment]:
        return self.client.list_payments(page=page, size=size or self.page_size)

    def list_for_invoice(self, invoice_id: UUID) -> list[Payment]:
        return list(self.fetch_snapshot(invoice_id).payments)

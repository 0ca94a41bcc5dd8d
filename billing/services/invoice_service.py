"""
Invoice service for drafting, editing and sending invoices.

Every mutation is previewed through the balance model first, so requests the
server would refuse (editing a sent invoice, sending an empty draft) fail
locally with the same error type the core uses. The server's response then
replaces the preview.
"""

import logging
from decimal import Decimal
from typing import Iterable
from uuid import UUID

from billing import balance
from billing.calculator import invoice_total
from billing.config import BillingConfig
from billing.event_bus import EventBus
from billing.events import InvoiceCreated, InvoiceSent, InvoiceUpdated
from billing.models import (
    Invoice,
    InvoiceCreate,
    InvoiceStatus,
    InvoiceUpdate,
    LineItemCreate,
    Page,
)
from billing.money import ZERO
from clients.billing_api_client import BillingAPIClient, NotFoundError

logger = logging.getLogger(__name__)


class InvoiceService:
    """Service for invoice operations."""

    def __init__(
        self,
        client: BillingAPIClient,
        event_bus: EventBus,
        config: BillingConfig | None = None,
    ):
        self.client = client
        self.event_bus = event_bus
        self.page_size = config.page_size if config else 20

    def preview_total(self, line_items: Iterable[LineItemCreate]) -> Decimal:
        """Total a draft would have with these line items, for live display."""
        return invoice_total(line_items)

    def create(self, data: InvoiceCreate) -> Invoice:
        """
        Create a draft invoice.

        Args:
            data: Customer and at least one line item

        Returns:
            Created invoice in DRAFT status

        Raises:
            InvalidInputError: If a line item is malformed
        """
        expected_total = invoice_total(data.line_items)

        invoice = self.client.create_invoice(data)

        if invoice.total_amount != expected_total:
            logger.warning(
                f"Invoice {invoice.id} created with total {invoice.total_amount}, "
                f"expected {expected_total}"
            )
        logger.info(f"Created invoice {invoice.invoice_number} for customer {data.customer_id}")

        self.event_bus.publish(InvoiceCreated.create(invoice=invoice))
        return invoice

    def get_by_id(self, invoice_id: UUID) -> Invoice | None:
        """
        Get invoice by ID.

        Returns:
            Invoice if found, None otherwise.
        """
        try:
            return self.client.get_invoice(invoice_id)
        except NotFoundError:
            return None

    def _require(self, invoice_id: UUID) -> Invoice:
        invoice = self.get_by_id(invoice_id)
        if invoice is None:
            raise ValueError(f"Invoice {invoice_id} not found")
        return invoice

    def update_line_items(self, invoice_id: UUID, line_items: Iterable[LineItemCreate]) -> Invoice:
        """
        Replace a draft's line items.

        Args:
            invoice_id: Invoice UUID
            line_items: New line items, at least one

        Returns:
            Updated invoice as stored by the server

        Raises:
            ValueError: If invoice not found
            InvalidStateError: If the invoice has left DRAFT
            InvalidInputError: If no line items are given
        """
        line_items = tuple(line_items)
        current = self._require(invoice_id)

        preview = balance.replace_line_items(current, line_items)

        updated = self.client.update_invoice(invoice_id, InvoiceUpdate(line_items=line_items))

        logger.info(
            f"Updated line items on invoice {updated.invoice_number}: "
            f"total {current.total_amount} -> {updated.total_amount}"
        )
        if updated.total_amount != preview.total_amount:
            logger.warning(
                f"Invoice {invoice_id} total from server {updated.total_amount} "
                f"differs from preview {preview.total_amount}"
            )

        self.event_bus.publish(InvoiceUpdated.create(invoice=updated))
        return updated

    def send(self, invoice_id: UUID) -> Invoice:
        """
        Send an invoice, locking its line items.

        Returns:
            Updated invoice with SENT status

        Raises:
            ValueError: If invoice not found
            InvalidStateError: If the invoice is not a draft, has no line
                items, or totals zero
        """
        current = self._require(invoice_id)
        balance.mark_as_sent(current)

        updated = self.client.send_invoice(invoice_id)
        logger.info(f"Sent invoice {updated.invoice_number}")

        self.event_bus.publish(InvoiceSent.create(invoice=updated))
        return updated

    def list_all(
        self,
        page: int = 0,
        size: int | None = None,
        status: InvoiceStatus | None = None,
    ) -> Page[Invoice]:
        return self.client.list_invoices(page=page, size=size or self.page_size, status=status)

    def list_for_customer(self, customer_id: UUID, page: int = 0, size: int | None = None) -> Page[Invoice]:
        return self.client.list_invoices(
            page=page, size=size or self.page_size, customer_id=customer_id
        )

    def list_payable(self, size: int = 100) -> list[Invoice]:
        """
        Invoices a payment can be recorded against: sent and with a balance.

        Uses the server's reported balances.
        """
        invoices = self.client.list_invoices(page=0, size=size).content
        return [
            invoice for invoice in invoices
            if invoice.status != InvoiceStatus.DRAFT and invoice.balance > ZERO
        ]

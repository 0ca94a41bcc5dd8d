"""
Domain events for billing.

Immutable event objects published by the billing services after the API has
accepted a mutation. Subscribers use them to drop cached lists and re-fetch,
since the server's response is the only source of truth for balances and
statuses.

Event Categories:
- InvoiceEvent: Invoice lifecycle (create, update line items, send)
- PaymentEvent: Payment recorded
- CustomerEvent: Customer lifecycle (create, update, delete)

Events carry the server's returned object so handlers don't need to re-fetch
the entity that changed.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from utils.timezone import now_utc


@dataclass(frozen=True, kw_only=True)
class BillingEvent:
    """Base class for all billing domain events."""
    event_id: str = field(default_factory=lambda: str(uuid4()))
    occurred_at: datetime = field(default_factory=now_utc)


# =============================================================================
# INVOICE EVENTS
# =============================================================================


@dataclass(frozen=True)
class InvoiceEvent(BillingEvent):
    """Events related to invoice lifecycle."""
    invoice: Any = None  # Invoice


@dataclass(frozen=True)
class InvoiceCreated(InvoiceEvent):
    """A new draft invoice was created."""

    @classmethod
    def create(cls, invoice: Any) -> "InvoiceCreated":
        return cls(invoice=invoice)


@dataclass(frozen=True)
class InvoiceUpdated(InvoiceEvent):
    """A draft invoice's line items were replaced."""

    @classmethod
    def create(cls, invoice: Any) -> "InvoiceUpdated":
        return cls(invoice=invoice)


@dataclass(frozen=True)
class InvoiceSent(InvoiceEvent):
    """Invoice moved from DRAFT to SENT; line items are now locked."""

    @classmethod
    def create(cls, invoice: Any) -> "InvoiceSent":
        return cls(invoice=invoice)


# =============================================================================
# PAYMENT EVENTS
# =============================================================================


@dataclass(frozen=True)
class PaymentRecorded(BillingEvent):
    """
    A payment was accepted by the server.

    The invoice it belongs to has a new balance, and possibly a new status,
    that only a re-fetch will show.
    """
    payment: Any = None  # Payment

    @property
    def invoice_id(self) -> UUID:
        return self.payment.invoice_id

    @classmethod
    def create(cls, payment: Any) -> "PaymentRecorded":
        return cls(payment=payment)


# =============================================================================
# CUSTOMER EVENTS
# =============================================================================


@dataclass(frozen=True)
class CustomerEvent(BillingEvent):
    """Events related to customer lifecycle."""
    pass


@dataclass(frozen=True)
class CustomerCreated(CustomerEvent):
    """A new customer was created."""
    customer: Any = None

    @classmethod
    def create(cls, customer: Any) -> "CustomerCreated":
        return cls(customer=customer)


@dataclass(frozen=True)
class CustomerUpdated(CustomerEvent):
    """Customer details changed."""
    customer: Any = None

    @classmethod
    def create(cls, customer: Any) -> "CustomerUpdated":
        return cls(customer=customer)


@dataclass(frozen=True)
class CustomerDeleted(CustomerEvent):
    """Customer was deleted on the server."""
    customer_id: UUID | None = None

    @classmethod
    def create(cls, customer_id: UUID) -> "CustomerDeleted":
        return cls(customer_id=customer_id)

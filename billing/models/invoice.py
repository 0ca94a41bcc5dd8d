"""Invoice domain models.

Amounts are Decimal with two places. total_amount and balance on an Invoice
are the server's authoritative values; billing.balance recomputes them from
line items and payments when a preview is needed.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from billing.models.base import Money, WIRE_CONFIG
from billing.models.line_item import LineItem, LineItemCreate
from billing.money import ZERO
from utils.timezone import assume_utc


class InvoiceStatus(str, Enum):
    """Invoice lifecycle status. Only ever moves forward."""

    DRAFT = "DRAFT"
    SENT = "SENT"
    PAID = "PAID"


class InvoiceCreate(BaseModel):
    """Data required to create an invoice."""

    customer_id: UUID
    line_items: tuple[LineItemCreate, ...] = Field(..., min_length=1)

    model_config = WIRE_CONFIG


class InvoiceUpdate(BaseModel):
    """Replacement line items for a draft invoice."""

    line_items: tuple[LineItemCreate, ...] = Field(..., min_length=1)

    model_config = WIRE_CONFIG


class Invoice(BaseModel):
    """Invoice snapshot as returned by the API."""

    id: UUID
    customer_id: UUID
    customer_name: str | None = None
    status: InvoiceStatus = InvoiceStatus.DRAFT
    line_items: tuple[LineItem, ...] = ()
    total_amount: Money = ZERO
    balance: Money = ZERO
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = WIRE_CONFIG

    @field_validator("created_at", "updated_at")
    @classmethod
    def normalize_timestamps(cls, value: datetime | None) -> datetime | None:
        return assume_utc(value) if value is not None else None

    @property
    def invoice_number(self) -> str:
        """Short human-readable number, e.g. INV-1A2B3C4D."""
        return f"INV-{str(self.id)[:8].upper()}"

    @property
    def amount_paid(self) -> Decimal:
        """Amount paid so far according to the server."""
        return self.total_amount - self.balance

    @property
    def is_paid(self) -> bool:
        return self.status == InvoiceStatus.PAID

"""Billing domain models."""

from billing.models.base import Money
from billing.models.customer import Customer, CustomerCreate, CustomerUpdate
from billing.models.line_item import LineItem, LineItemCreate
from billing.models.invoice import Invoice, InvoiceCreate, InvoiceUpdate, InvoiceStatus
from billing.models.payment import Payment, PaymentCreate
from billing.models.page import Page

__all__ = [
    "Money",
    # Customer
    "Customer", "CustomerCreate", "CustomerUpdate",
    # LineItem
    "LineItem", "LineItemCreate",
    # Invoice
    "Invoice", "InvoiceCreate", "InvoiceUpdate", "InvoiceStatus",
    # Payment
    "Payment", "PaymentCreate",
    # Pagination
    "Page",
]

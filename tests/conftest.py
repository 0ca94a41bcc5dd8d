"""Shared test fixtures for the billing test suite."""

from datetime import date, timedelta
from decimal import Decimal
from uuid import UUID, uuid4

import pytest

from billing.calculator import invoice_total
from billing.event_bus import EventBus
from billing.events import BillingEvent
from billing.models import Invoice, InvoiceStatus, LineItem, Payment
from utils.timezone import now_utc


# =============================================================================
# TEST CONSTANTS
# =============================================================================

API_URL = "https://billing.example.com/api"

TEST_CUSTOMER_ID = UUID("00000000-0000-0000-0000-0000000000c1")

# A fixed "today" so date checks don't depend on when the suite runs
TODAY = date(2025, 3, 14)
YESTERDAY = TODAY - timedelta(days=1)
TOMORROW = TODAY + timedelta(days=1)


# =============================================================================
# DOMAIN OBJECT BUILDERS
# =============================================================================


def _make_line_item(quantity: int = 1, unit_price: str = "10.00", description: str = "Consulting") -> LineItem:
    return LineItem(description=description, quantity=quantity, unit_price=Decimal(unit_price))


def _make_invoice(
    line_items: list[LineItem] | None = None,
    status: InvoiceStatus = InvoiceStatus.SENT,
    paid: str = "0.00",
    invoice_id: UUID | None = None,
) -> Invoice:
    """
    Build an invoice whose reported total and balance match its line items.

    ``paid`` is what the server believes has been paid so far.
    """
    if line_items is None:
        line_items = [_make_line_item(quantity=1, unit_price="100.00")]
    total = invoice_total(line_items)
    now = now_utc()
    return Invoice(
        id=invoice_id or uuid4(),
        customer_id=TEST_CUSTOMER_ID,
        status=status,
        line_items=line_items,
        total_amount=total,
        balance=total - Decimal(paid),
        created_at=now,
        updated_at=now,
    )


def _make_payment(invoice: Invoice, amount: str, payment_date: date = YESTERDAY) -> Payment:
    return Payment(
        id=uuid4(),
        invoice_id=invoice.id,
        amount=Decimal(amount),
        payment_date=payment_date,
        created_at=now_utc(),
    )


# =============================================================================
# WIRE (camelCase JSON) BUILDERS
# =============================================================================


def _invoice_json(
    invoice_id: UUID,
    status: str = "SENT",
    line_items: list[dict] | None = None,
    total: str = "100.00",
    balance: str | None = None,
    customer_id: UUID = TEST_CUSTOMER_ID,
) -> dict:
    """Invoice as the billing API returns it."""
    if line_items is None:
        line_items = [{"description": "Consulting", "quantity": 1, "unitPrice": 100.0, "subtotal": 100.0}]
    return {
        "id": str(invoice_id),
        "customerId": str(customer_id),
        "customerName": "Acme Corp",
        "status": status,
        "lineItems": line_items,
        "totalAmount": float(total),
        "balance": float(balance if balance is not None else total),
        "createdAt": "2025-03-01T09:30:00",
        "updatedAt": "2025-03-01T09:30:00",
    }


def _payment_json(invoice_id: UUID, amount: str, payment_id: UUID | None = None, payment_date: str = "2025-03-10T00:00:00") -> dict:
    """Payment as the billing API returns it."""
    return {
        "id": str(payment_id or uuid4()),
        "invoiceId": str(invoice_id),
        "invoiceNumber": f"INV-{str(invoice_id)[:8].upper()}",
        "customerName": "Acme Corp",
        "amount": float(amount),
        "paymentDate": payment_date,
        "createdAt": "2025-03-10T12:00:00",
    }


def _page_json(content: list[dict], number: int = 0, total_pages: int = 1, size: int = 100) -> dict:
    """Spring-style page envelope."""
    return {
        "content": content,
        "totalElements": len(content),
        "totalPages": total_pages,
        "size": size,
        "number": number,
        "first": number == 0,
        "last": number + 1 >= total_pages,
        "empty": not content,
    }


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def event_bus():
    """Fresh EventBus per test."""
    return EventBus()


@pytest.fixture
def published(event_bus):
    """Every event published on the test bus, in order."""
    received = []
    event_bus.subscribe(BillingEvent, received.append)
    return received


@pytest.fixture
def api_client():
    """BillingAPIClient pointed at the mocked API URL."""
    from clients.billing_api_client import BillingAPIClient

    client = BillingAPIClient(base_url=API_URL, token="test-token", timeout=5)
    yield client
    client.close()


@pytest.fixture
def hundred_dollar_invoice():
    """SENT invoice with a single $100.00 line item and nothing paid."""
    return _make_invoice()


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def make_line_item():
    return _make_line_item


@pytest.fixture
def make_invoice():
    return _make_invoice


@pytest.fixture
def make_payment():
    return _make_payment


@pytest.fixture
def invoice_json():
    return _invoice_json


@pytest.fixture
def payment_json():
    return _payment_json


@pytest.fixture
def page_json():
    return _page_json


@pytest.fixture
def api_url():
    return API_URL

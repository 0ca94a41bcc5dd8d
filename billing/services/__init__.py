"""Application services: billing rules in front of the billing API."""

from billing.config import BillingConfig
from billing.event_bus import EventBus
from billing.services.customer_service import CustomerService
from billing.services.invoice_service import InvoiceService
from billing.services.payment_service import (
    InvoiceSnapshot,
    PaymentPreview,
    PaymentService,
)
from clients.billing_api_client import BillingAPIClient


def build_services(config: BillingConfig, event_bus: EventBus | None = None) -> dict:
    """
    Wire up one API client and the three services around it.

    Returns:
        Dict with keys "customer", "invoice", "payment" and "event_bus"
    """
    client = BillingAPIClient.from_config(config)
    event_bus = event_bus or EventBus()
    return {
        "customer": CustomerService(client, event_bus, config),
        "invoice": InvoiceService(client, event_bus, config),
        "payment": PaymentService(client, event_bus, config),
        "event_bus": event_bus,
    }

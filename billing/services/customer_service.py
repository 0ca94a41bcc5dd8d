"""Customer service: create, edit and delete customers through the billing API."""

import logging
from uuid import UUID

from billing.config import BillingConfig
from billing.event_bus import EventBus
from billing.events import CustomerCreated, CustomerDeleted, CustomerUpdated
from billing.models import Customer, CustomerCreate, CustomerUpdate, Page
from clients.billing_api_client import BillingAPIClient, NotFoundError

logger = logging.getLogger(__name__)


class CustomerService:
    """Service for customer operations."""

    def __init__(
        self,
        client: BillingAPIClient,
        event_bus: EventBus,
        config: BillingConfig | None = None,
    ):
        self.client = client
        self.event_bus = event_bus
        self.page_size = config.page_size if config else 20

    def create(self, data: CustomerCreate) -> Customer:
        """
        Create a new customer.

        Args:
            data: Validated customer data (name of 2+ characters, valid email)

        Returns:
            Customer as stored by the server
        """
        customer = self.client.create_customer(data)
        logger.info(f"Created customer {customer.id}")
        self.event_bus.publish(CustomerCreated.create(customer=customer))
        return customer

    def get_by_id(self, customer_id: UUID) -> Customer | None:
        """
        Get customer by ID.

        Returns:
            Customer if found, None otherwise.
        """
        try:
            return self.client.get_customer(customer_id)
        except NotFoundError:
            return None

    def update(self, customer_id: UUID, data: CustomerUpdate) -> Customer:
        """
        Update customer fields. Fields left as None are not changed.

        Raises:
            ValueError: If customer not found
        """
        current = self.get_by_id(customer_id)
        if current is None:
            raise ValueError(f"Customer {customer_id} not found")

        if not data.model_dump(exclude_none=True):
            return current

        updated = self.client.update_customer(customer_id, data)
        logger.info(f"Updated customer {customer_id}")
        self.event_bus.publish(CustomerUpdated.create(customer=updated))
        return updated

    def delete(self, customer_id: UUID) -> bool:
        """
        Delete a customer.

        Whether a customer with invoices may be deleted is the server's call;
        a refusal surfaces as BillingAPIError.

        Returns:
            True if deleted, False if not found
        """
        try:
            self.client.delete_customer(customer_id)
        except NotFoundError:
            return False

        logger.info(f"Deleted customer {customer_id}")
        self.event_bus.publish(CustomerDeleted.create(customer_id=customer_id))
        return True

    def list_all(self, page: int = 0, size: int | None = None) -> Page[Customer]:
        return self.client.list_customers(page=page, size=size or self.page_size)

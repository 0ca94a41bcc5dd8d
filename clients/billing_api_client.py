"""
HTTP client for the remote billing API.

Thin wrapper: one method per endpoint, JSON in and out, responses parsed into
billing models. No retries and no caching; the services layer decides when to
re-fetch.
"""

import logging
from typing import Any, TypeVar
from uuid import UUID

import requests
from pydantic import BaseModel

from billing.config import BillingConfig
from billing.models import (
    Customer,
    CustomerCreate,
    CustomerUpdate,
    Invoice,
    InvoiceCreate,
    InvoiceStatus,
    InvoiceUpdate,
    Page,
    Payment,
    PaymentCreate,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class BillingAPIError(Exception):
    """
    Raised when a billing API request fails.

    ``status_code`` is 0 when no response was received. ``validation_errors``
    carries the server's per-field messages for 400 responses, if any.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 0,
        validation_errors: dict[str, str] | None = None,
    ):
        self.status_code = status_code
        self.validation_errors = validation_errors or {}
        super().__init__(message)


class NotFoundError(BillingAPIError):
    """The requested customer, invoice or payment does not exist."""


class BillingAPIClient:
    """Call the billing API over JSON/HTTPS."""

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ):
        """
        Initialize with the API location.

        Args:
            base_url: API root, e.g. https://billing.example.com/api
            token: Optional bearer token
            timeout: Per-request timeout in seconds
            session: Optional requests session to reuse

        Raises:
            ValueError: If base_url is empty
        """
        if not base_url:
            raise ValueError("base_url is required")

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Content-Type": "application/json",
            "Accept": "application/json",
        })
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    @classmethod
    def from_config(cls, config: BillingConfig) -> "BillingAPIClient":
        return cls(
            base_url=config.api_base_url,
            token=config.api_token,
            timeout=config.request_timeout_seconds,
        )

    def close(self) -> None:
        self.session.close()

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: BaseModel | None = None,
    ) -> Any:
        """
        Send a request and return the decoded JSON body (None for 204).

        Raises:
            NotFoundError: On 404
            BillingAPIError: On connection failure, any other non-2xx status,
                or a body that is not JSON
        """
        url = f"{self.base_url}{path}"
        data = None
        if body is not None:
            data = body.model_dump_json(by_alias=True, exclude_none=True)
        if params:
            params = {k: str(v) for k, v in params.items() if v is not None}

        try:
            response = self.session.request(
                method,
                url,
                params=params,
                data=data,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Billing API connection failed: {method} {path}: {e}")
            raise BillingAPIError(f"Connection failed: {e}")

        if response.ok and (response.status_code == 204 or not response.content):
            return None

        try:
            payload = response.json()
        except ValueError:
            if response.ok:
                logger.error(f"Billing API returned invalid JSON: {response.text[:200]}")
                raise BillingAPIError(
                    "Invalid response from billing API",
                    status_code=response.status_code,
                )
            payload = None

        if response.ok:
            return payload

        error_body = payload if isinstance(payload, dict) else {}
        message = error_body.get("message") or (
            f"{method} {path} failed with status {response.status_code}"
        )
        validation_errors = error_body.get("validationErrors")

        if response.status_code == 404:
            raise NotFoundError(message, status_code=404)

        logger.warning(f"Billing API error {response.status_code} on {method} {path}: {message}")
        raise BillingAPIError(
            message,
            status_code=response.status_code,
            validation_errors=validation_errors,
        )

    def _get_page(self, path: str, model: type[M], params: dict[str, Any]) -> Page[M]:
        return Page[model].model_validate(self._request("GET", path, params=params))

    # -------------------------------------------------------------------------
    # Customers
    # -------------------------------------------------------------------------

    def list_customers(self, page: int = 0, size: int = 20) -> Page[Customer]:
        return self._get_page("/customers", Customer, {"page": page, "size": size})

    def get_customer(self, customer_id: UUID) -> Customer:
        return Customer.model_validate(self._request("GET", f"/customers/{customer_id}"))

    def create_customer(self, data: CustomerCreate) -> Customer:
        return Customer.model_validate(self._request("POST", "/customers", body=data))

    def update_customer(self, customer_id: UUID, data: CustomerUpdate) -> Customer:
        return Customer.model_validate(
            self._request("PUT", f"/customers/{customer_id}", body=data)
        )

    def delete_customer(self, customer_id: UUID) -> None:
        self._request("DELETE", f"/customers/{customer_id}")

    # -------------------------------------------------------------------------
    # Invoices
    # -------------------------------------------------------------------------

    def list_invoices(
        self,
        page: int = 0,
        size: int = 20,
        customer_id: UUID | None = None,
        status: InvoiceStatus | None = None,
    ) -> Page[Invoice]:
        params = {
            "page": page,
            "size": size,
            "customerId": customer_id,
            "status": status.value if status else None,
        }
        return self._get_page("/invoices", Invoice, params)

    def get_invoice(self, invoice_id: UUID) -> Invoice:
        return Invoice.model_validate(self._request("GET", f"/invoices/{invoice_id}"))

    def create_invoice(self, data: InvoiceCreate) -> Invoice:
        return Invoice.model_validate(self._request("POST", "/invoices", body=data))

    def update_invoice(self, invoice_id: UUID, data: InvoiceUpdate) -> Invoice:
        return Invoice.model_validate(
            self._request("PUT", f"/invoices/{invoice_id}", body=data)
        )

    def send_invoice(self, invoice_id: UUID) -> Invoice:
        return Invoice.model_validate(self._request("POST", f"/invoices/{invoice_id}/send"))

    # -------------------------------------------------------------------------
    # Payments
    # -------------------------------------------------------------------------

    def list_payments(
        self,
        page: int = 0,
        size: int = 20,
        invoice_id: UUID | None = None,
    ) -> Page[Payment]:
        params = {"page": page, "size": size, "invoiceId": invoice_id}
        return self._get_page("/payments", Payment, params)

    def get_payment(self, payment_id: UUID) -> Payment:
        return Payment.model_validate(self._request("GET", f"/payments/{payment_id}"))

    def create_payment(self, data: PaymentCreate) -> Payment:
        return Payment.model_validate(self._request("POST", "/payments", body=data))

"""Billing client configuration."""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from utils.timezone import today_in


class BillingConfig(BaseModel):
    """
    Billing client configuration.

    Durations are in seconds. Everything except the API URL has a default.
    """

    # Remote API
    api_base_url: str = Field(
        ...,
        description="Base URL of the billing API, e.g. https://billing.example.com/api",
        min_length=1,
    )
    api_token: str | None = Field(
        default=None,
        description="Bearer token sent with every request, if set",
    )
    request_timeout_seconds: float = Field(
        default=10.0,
        description="Per-request timeout for API calls",
        gt=0,
        le=120,
    )

    # Lists
    page_size: int = Field(
        default=20,
        description="Default page size for list calls",
        ge=1,
        le=500,
    )

    # Payments
    timezone: str = Field(
        default="UTC",
        description="IANA timezone used to decide what 'today' is for payment dates",
    )

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, value: str) -> str:
        today_in(value)  # raises ValueError for unknown zones
        return value

    @classmethod
    def from_env(cls) -> "BillingConfig":
        """
        Build configuration from environment variables (and a .env file).

        Reads BILLING_API_URL (required), BILLING_API_TOKEN,
        BILLING_API_TIMEOUT, BILLING_PAGE_SIZE and BILLING_TIMEZONE.

        Raises:
            ValueError: If BILLING_API_URL is not set
        """
        load_dotenv()

        api_base_url = os.getenv("BILLING_API_URL")
        if not api_base_url:
            raise ValueError("BILLING_API_URL environment variable is required")

        values = {"api_base_url": api_base_url}
        optional = {
            "api_token": "BILLING_API_TOKEN",
            "request_timeout_seconds": "BILLING_API_TIMEOUT",
            "page_size": "BILLING_PAGE_SIZE",
            "timezone": "BILLING_TIMEZONE",
        }
        for field_name, env_name in optional.items():
            value = os.getenv(env_name)
            if value:
                values[field_name] = value

        return cls(**values)

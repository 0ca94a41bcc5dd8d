"""Payment domain models."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from billing.models.base import Money, WIRE_CONFIG
from utils.timezone import assume_utc, parse_date


class PaymentCreate(BaseModel):
    """
    A payment ready for submission.

    Instances come out of billing.validator.validate_payment; building one
    by hand skips the balance and date checks.
    """

    invoice_id: UUID
    amount: Money = Field(..., gt=0)
    payment_date: date

    model_config = WIRE_CONFIG

    @field_validator("payment_date", mode="before")
    @classmethod
    def coerce_payment_date(cls, value):
        return parse_date(value) if isinstance(value, (str, datetime)) else value


class Payment(BaseModel):
    """Recorded payment as returned by the API. Immutable once created."""

    id: UUID
    invoice_id: UUID
    invoice_number: str | None = None
    customer_name: str | None = None
    amount: Money
    payment_date: date
    created_at: datetime | None = None

    model_config = WIRE_CONFIG

    @field_validator("payment_date", mode="before")
    @classmethod
    def coerce_payment_date(cls, value):
        # The server stores payment dates as timestamps.
        return parse_date(value) if isinstance(value, (str, datetime)) else value

    @field_validator("created_at")
    @classmethod
    def normalize_created_at(cls, value: datetime | None) -> datetime | None:
        return assume_utc(value) if value is not None else None

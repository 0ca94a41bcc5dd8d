"""Line item domain models.

Prices are Decimal with two places. $10.00 = Decimal("10.00").
"""

from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from billing.calculator import subtotal
from billing.models.base import Money, WIRE_CONFIG


class LineItemCreate(BaseModel):
    """A line item row as entered on an invoice draft."""

    description: str = Field(..., min_length=1, max_length=500)
    quantity: int = Field(1, ge=1)
    unit_price: Money = Field(..., ge=0)

    model_config = WIRE_CONFIG

    @field_validator("description")
    @classmethod
    def reject_blank_description(cls, value: str) -> str:
        """Description must contain more than whitespace."""
        if not value.strip():
            raise ValueError("Description is required")
        return value


class LineItem(BaseModel):
    """Line item as returned by the API on an invoice."""

    description: str
    quantity: int
    unit_price: Money
    subtotal: Money | None = None

    model_config = WIRE_CONFIG

    @property
    def line_total(self) -> Decimal:
        """Subtotal computed locally; never trusts the server-provided one."""
        return subtotal(self)

"""Customer domain models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, EmailStr, field_validator

from billing.models.base import WIRE_CONFIG
from utils.timezone import assume_utc

MIN_NAME_LENGTH = 2


def _check_name(value: str) -> str:
    value = value.strip()
    if len(value) < MIN_NAME_LENGTH:
        raise ValueError(f"Name must be at least {MIN_NAME_LENGTH} characters")
    return value


class CustomerCreate(BaseModel):
    """Data required to create a customer."""

    name: str = Field(..., max_length=255)
    email: EmailStr
    address: str | None = Field(None, max_length=2000)
    phone: str | None = Field(None, max_length=50)

    model_config = WIRE_CONFIG

    @field_validator("name")
    @classmethod
    def require_meaningful_name(cls, value: str) -> str:
        return _check_name(value)


class CustomerUpdate(BaseModel):
    """Data that can be updated on a customer. All fields optional."""

    name: str | None = Field(None, max_length=255)
    email: EmailStr | None = None
    address: str | None = Field(None, max_length=2000)
    phone: str | None = Field(None, max_length=50)

    model_config = WIRE_CONFIG

    @field_validator("name")
    @classmethod
    def require_meaningful_name(cls, value: str | None) -> str | None:
        return _check_name(value) if value is not None else None


class Customer(BaseModel):
    """Customer as returned by the API."""

    id: UUID
    name: str
    email: str
    address: str | None = None
    phone: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = WIRE_CONFIG

    @field_validator("created_at", "updated_at")
    @classmethod
    def normalize_timestamps(cls, value: datetime | None) -> datetime | None:
        return assume_utc(value) if value is not None else None

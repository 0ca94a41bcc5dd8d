"""Paginated list envelope used by every list endpoint of the billing API."""

from typing import Generic, TypeVar

from pydantic import BaseModel

from billing.models.base import WIRE_CONFIG

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """One page of results. ``number`` is 0-indexed."""

    content: list[T] = []
    total_elements: int = 0
    total_pages: int = 0
    size: int = 20
    number: int = 0
    first: bool | None = None
    last: bool | None = None
    empty: bool | None = None

    model_config = WIRE_CONFIG

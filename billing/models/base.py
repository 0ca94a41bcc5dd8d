"""Shared pieces for models that travel over the billing API."""

from decimal import Decimal
from typing import Annotated

from pydantic import BeforeValidator
from pydantic.alias_generators import to_camel

from billing.money import round2

# Any incoming amount is rounded to cents before constraints are checked.
Money = Annotated[Decimal, BeforeValidator(round2)]

# The API speaks camelCase; Python code uses snake_case. Both are accepted on
# input, and requests are dumped with by_alias=True.
WIRE_CONFIG = {
    "alias_generator": to_camel,
    "populate_by_name": True,
    "frozen": True,
    "from_attributes": True,
}

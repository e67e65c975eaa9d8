"""
Shared response shapes for money-bearing entities.

Amounts are returned twice: as a decimal string in major units and as
integer cents.
"""
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from crewcost.domain.money import Money, format_money


class MoneyOut(BaseModel):
    amount: Decimal
    cents: int
    currency: str
    display: str


def money_out(value: Optional[Money]) -> Optional[MoneyOut]:
    if value is None:
        return None
    return MoneyOut(
        amount=value.to_decimal(),
        cents=value.cents,
        currency=value.currency,
        display=format_money(value),
    )


def money_in(amount: Decimal, currency: str) -> Money:
    """Convert a request amount in major units into Money."""
    return Money.from_decimal(amount, currency)

"""
Money Primitive Type

Immutable currency value that stores integer minor units (cents) and a
currency code. Prevents floating-point drift in sums and splits.

Precision policy: every currency uses two decimal places and any value
with more precision is rounded half-up to the minor unit. Magnitudes
beyond MAX_CENTS (the signed 64-bit range of the storage columns) are
rejected with InvalidAmountError.
"""
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Iterable, Union

from crewcost.domain.exceptions import CurrencyMismatchError, InvalidAmountError

SCALE = 2
MINOR_UNITS = 10 ** SCALE
_QUANTUM = Decimal(1).scaleb(-SCALE)
MAX_CENTS = 2 ** 63 - 1
_MAX_AMOUNT = Decimal(MAX_CENTS).scaleb(-SCALE)


@dataclass(frozen=True)
class Money:
    """
    Immutable money value in minor units.

    Examples:
        >>> Money.from_decimal("12.345", "USD")
        Money(cents=1235, currency='USD')
        >>> add(Money(1000, "USD"), Money(250, "USD"))
        Money(cents=1250, currency='USD')
    """

    cents: int
    currency: str = "USD"

    def __post_init__(self):
        if isinstance(self.cents, bool) or not isinstance(self.cents, int):
            raise InvalidAmountError(f"Money must hold integer minor units, got {self.cents!r}")
        if abs(self.cents) > MAX_CENTS:
            raise InvalidAmountError(f"Amount out of range: {self.cents} minor units")

    @classmethod
    def zero(cls, currency: str) -> "Money":
        return cls(0, currency)

    @classmethod
    def from_decimal(cls, value: Union[Decimal, str, int, float], currency: str) -> "Money":
        """
        Parse an amount in major units (e.g. "12.34") into Money.

        Floats are converted through their string form so that 0.1 stays 0.1.
        """
        try:
            amount = Decimal(str(value)) if not isinstance(value, Decimal) else value
        except (InvalidOperation, ValueError):
            raise InvalidAmountError(f"Malformed amount: {value!r}")
        if not amount.is_finite():
            raise InvalidAmountError(f"Malformed amount: {value!r}")
        # Checked before quantize, which fails on very large exponents
        if abs(amount) > _MAX_AMOUNT:
            raise InvalidAmountError(f"Amount out of range: {value!r}")
        cents = (amount * MINOR_UNITS).quantize(Decimal(1), rounding=ROUND_HALF_UP)
        return cls(int(cents), currency)

    def to_decimal(self) -> Decimal:
        """Value in major units with exactly two decimal places."""
        return (Decimal(self.cents) / MINOR_UNITS).quantize(_QUANTUM)

    def is_negative(self) -> bool:
        return self.cents < 0

    def is_positive(self) -> bool:
        return self.cents > 0

    def __add__(self, other: "Money") -> "Money":
        return add(self, other)

    def __sub__(self, other: "Money") -> "Money":
        return subtract(self, other)

    def __lt__(self, other: "Money") -> bool:
        _require_same_currency(self, other)
        return self.cents < other.cents

    def __le__(self, other: "Money") -> bool:
        _require_same_currency(self, other)
        return self.cents <= other.cents

    def __gt__(self, other: "Money") -> bool:
        _require_same_currency(self, other)
        return self.cents > other.cents

    def __ge__(self, other: "Money") -> bool:
        _require_same_currency(self, other)
        return self.cents >= other.cents

    def __str__(self) -> str:
        return format_money(self)


def _require_same_currency(a: Money, b: Money) -> None:
    if a.currency != b.currency:
        raise CurrencyMismatchError(a.currency, b.currency)


def add(a: Money, b: Money) -> Money:
    """Add two amounts of the same currency."""
    _require_same_currency(a, b)
    return Money(a.cents + b.cents, a.currency)


def subtract(a: Money, b: Money) -> Money:
    """Subtract b from a; both must share a currency."""
    _require_same_currency(a, b)
    return Money(a.cents - b.cents, a.currency)


def multiply_by_ratio(amount: Money, ratio: Union[Decimal, int, str]) -> Money:
    """Scale an amount by a ratio, rounding half-up to the minor unit."""
    ratio = ratio if isinstance(ratio, Decimal) else Decimal(str(ratio))
    scaled = (Decimal(amount.cents) * ratio).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return Money(int(scaled), amount.currency)


def sum_of(amounts: Iterable[Money], currency: str) -> Money:
    """Sum a collection of amounts; an empty collection sums to zero."""
    total = Money.zero(currency)
    for amount in amounts:
        total = add(total, amount)
    return total


def format_money(amount: Money) -> str:
    """
    Render an amount for display, e.g. "$1,234.50" or "1,234.50 CHF".

    Presentation only; uses the currency symbols from configuration.
    """
    from crewcost.config import get_config

    sign = "-" if amount.cents < 0 else ""
    body = f"{abs(amount.to_decimal()):,.2f}"
    symbol = get_config().get_currency_symbol(amount.currency)
    if symbol:
        return f"{sign}{symbol}{body}"
    return f"{sign}{body} {amount.currency}"

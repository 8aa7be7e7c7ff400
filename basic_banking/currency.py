"""
Money Module

Dollar amounts with proper Decimal precision for balance arithmetic.
NEVER uses float for monetary values.
"""

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation, getcontext
from dataclasses import dataclass
from typing import Union
import re

# Set global decimal context for financial precision
getcontext().prec = 28

CENTS = Decimal('0.01')


@dataclass(frozen=True)
class Money:
    """
    Immutable dollar amount rounded to cents.
    Signed values are allowed; accounts enforce their own non-negative balance.
    """
    amount: Decimal

    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            # str() first so floats like 0.1 do not carry binary error
            try:
                object.__setattr__(self, 'amount', Decimal(str(self.amount)))
            except InvalidOperation:
                raise ValueError(f"Invalid monetary amount: {self.amount!r}")

        if not self.amount.is_finite():
            raise ValueError(f"Monetary amount must be finite: {self.amount}")

        try:
            rounded = self.amount.quantize(CENTS, rounding=ROUND_HALF_UP)
        except InvalidOperation:
            raise ValueError(f"Monetary amount out of range: {self.amount}")
        object.__setattr__(self, 'amount', rounded)

    @classmethod
    def zero(cls) -> 'Money':
        return cls(Decimal('0'))

    def __add__(self, other: 'Money') -> 'Money':
        return Money(self.amount + other.amount)

    def __sub__(self, other: 'Money') -> 'Money':
        return Money(self.amount - other.amount)

    def __mul__(self, multiplier: Decimal) -> 'Money':
        if not isinstance(multiplier, Decimal):
            multiplier = Decimal(str(multiplier))
        return Money(self.amount * multiplier)

    def __neg__(self) -> 'Money':
        return Money(-self.amount)

    def __abs__(self) -> 'Money':
        return Money(abs(self.amount))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Money):
            return False
        return self.amount == other.amount

    def __hash__(self) -> int:
        return hash(self.amount)

    def __lt__(self, other: 'Money') -> bool:
        return self.amount < other.amount

    def __le__(self, other: 'Money') -> bool:
        return self.amount <= other.amount

    def __gt__(self, other: 'Money') -> bool:
        return self.amount > other.amount

    def __ge__(self, other: 'Money') -> bool:
        return self.amount >= other.amount

    def is_zero(self) -> bool:
        """Check if amount is exactly zero"""
        return self.amount == Decimal('0')

    def is_positive(self) -> bool:
        """Check if amount is positive"""
        return self.amount > Decimal('0')

    def is_negative(self) -> bool:
        """Check if amount is negative"""
        return self.amount < Decimal('0')

    def to_string(self, symbol: str = "$") -> str:
        """Format for display, e.g. $1,234.50"""
        sign = "-" if self.is_negative() else ""
        return f"{sign}{symbol}{abs(self.amount):,.2f}"

    def __str__(self) -> str:
        return self.to_string()


def decimal_from_string(value: str) -> Decimal:
    """
    Safely convert string to Decimal, handling "$1,234.50" style input

    Args:
        value: String representation of number

    Returns:
        Decimal value

    Raises:
        ValueError: If string cannot be converted to valid Decimal
    """
    if not value or not isinstance(value, str):
        raise ValueError("Value must be a non-empty string")

    # Remove currency symbols, whitespace and thousands separators
    clean_value = re.sub(r'[\s,$€£¥]', '', value)

    try:
        result = Decimal(clean_value)
    except InvalidOperation:
        raise ValueError(f"Cannot convert '{value}' to Decimal")

    if not result.is_finite():
        raise ValueError(f"Amount must be finite: '{value}'")
    return result


def to_money(value: Union[Money, Decimal, int, float, str]) -> Money:
    """Coerce caller input into Money"""
    if isinstance(value, Money):
        return value
    if isinstance(value, bool):
        raise ValueError("Boolean is not a monetary amount")
    if isinstance(value, str):
        return Money(decimal_from_string(value))
    if isinstance(value, (Decimal, int, float)):
        return Money(value)
    raise ValueError(f"Cannot convert {type(value).__name__} to Money")

"""
moneykit

Money as currency-scaled Decimal amounts in the minor unit, with exact
arithmetic, loss-free allocation, four rounding modes and locale-aware
formatting over an ISO 4217 currency table.
"""

from .currency import Currency
from .exceptions import (
    CurrencyMismatch, CurrencyNotFound, DivisionByZero,
    InvalidRoundingMode, MoneyError, UnexpectedAmount
)
from .money import Money, MutableMoney
from .rounding import RoundingMode

__version__ = "1.0.0"

__all__ = [
    "Currency",
    "CurrencyMismatch",
    "CurrencyNotFound",
    "DivisionByZero",
    "InvalidRoundingMode",
    "Money",
    "MoneyError",
    "MutableMoney",
    "RoundingMode",
    "UnexpectedAmount",
]

"""
Amount Input Parsing

Classifies the raw values accepted by Money construction (integers,
fractions, other Money instances, zero-argument producers and text) into
tagged input variants, and resolves each variant to a Decimal amount in the
currency's minor unit.
"""

import logging
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from functools import singledispatch
from typing import Any, Callable, Union

from .exceptions import UnexpectedAmount

logger = logging.getLogger(__name__)

_INTEGER_PATTERN = re.compile(r'^[+-]?[0-9]+$')
_FRACTION_PATTERN = re.compile(r'^[+-]?[0-9]+\.[0-9]+$')


def to_decimal(value: Union[int, float, Decimal]) -> Decimal:
    """
    Convert a numeric operand to Decimal without binary float error.
    
    Raises:
        TypeError: If value is not an int, float or Decimal (bool is rejected)
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"Expected a number, got {type(value).__name__}")
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


@dataclass(frozen=True)
class FromInteger:
    """Whole number of minor units"""
    value: int
    
    def resolve(self, currency) -> Decimal:
        return Decimal(self.value)


@dataclass(frozen=True)
class FromFraction:
    """Fractional number of minor units"""
    value: Decimal
    
    def resolve(self, currency) -> Decimal:
        return self.value


@dataclass(frozen=True)
class FromInstance:
    """Amount reused from another Money instance"""
    amount: Decimal
    
    def resolve(self, currency) -> Decimal:
        return self.amount


@dataclass(frozen=True)
class FromProducer:
    """Zero-argument callable producing one of the other inputs"""
    producer: Callable[[], Any]
    
    def resolve(self, currency) -> Decimal:
        produced = amount_input(self.producer())
        if isinstance(produced, FromProducer):
            raise UnexpectedAmount("Amount producer must not return another producer")
        return produced.resolve(currency)


@dataclass(frozen=True)
class FromText:
    """Textual amount, parsed with the currency's symbol and separators"""
    text: str
    
    def resolve(self, currency) -> Decimal:
        return parse_amount_text(self.text, currency)


AmountInput = Union[FromInteger, FromFraction, FromInstance, FromProducer, FromText]


@singledispatch
def amount_input(raw: Any) -> AmountInput:
    """
    Classify a raw construction value into its input variant.
    
    Raises:
        UnexpectedAmount: If the value is none of the accepted kinds
    """
    if callable(raw):
        return FromProducer(raw)
    
    logger.debug(f"Rejected amount of type {type(raw).__name__}")
    raise UnexpectedAmount(f'Invalid amount "{raw}"')


@amount_input.register(bool)
def _from_bool(raw: bool) -> AmountInput:
    raise UnexpectedAmount(f'Invalid amount "{raw}"')


@amount_input.register(int)
def _from_int(raw: int) -> AmountInput:
    return FromInteger(raw)


@amount_input.register(float)
@amount_input.register(Decimal)
def _from_fraction(raw) -> AmountInput:
    value = to_decimal(raw)
    if not value.is_finite():
        raise UnexpectedAmount(f'Invalid amount "{raw}"')
    return FromFraction(value)


@amount_input.register(str)
def _from_text(raw: str) -> AmountInput:
    return FromText(raw)


def parse_amount_text(text: str, currency) -> Decimal:
    """
    Parse a textual amount using the currency's formatting conventions.
    
    The currency symbol is removed, then every character other than digits,
    the thousands separator, the decimal mark and signs. Thousands separators
    are dropped and the decimal mark becomes '.'.
    
    Args:
        text: Text such as "$1,234.56" or "1.234,56"
        currency: Currency whose symbol and separators apply
        
    Returns:
        Parsed Decimal
        
    Raises:
        UnexpectedAmount: If what remains is neither an integer nor a fraction
    """
    thousands = currency.thousands_separator
    decimal_mark = currency.decimal_mark
    
    cleaned = text.replace(currency.symbol, '') if currency.symbol else text
    allowed = re.escape(thousands + decimal_mark)
    cleaned = re.sub(rf'[^0-9{allowed}+\-]', '', cleaned)
    
    if thousands:
        cleaned = cleaned.replace(thousands, '')
    if decimal_mark:
        cleaned = cleaned.replace(decimal_mark, '.')
    
    try:
        if _INTEGER_PATTERN.match(cleaned):
            return Decimal(int(cleaned))
        if _FRACTION_PATTERN.match(cleaned):
            return Decimal(cleaned)
    except (ValueError, InvalidOperation) as e:
        raise UnexpectedAmount(f'Invalid amount "{text}"') from e
    
    logger.debug(f"Rejected amount text '{text}' for {currency.code}")
    raise UnexpectedAmount(f'Invalid amount "{text}"')

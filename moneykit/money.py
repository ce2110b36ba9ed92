"""
Money Module

Monetary amounts held as Decimal counts of a currency's minor unit (cents
for USD) with exact arithmetic, comparison, allocation, rounding and
formatting.

Money is the immutable value type. MutableMoney is an explicit handle for
callers that want in-place arithmetic; it is not safe to share across
threads without external locking.
"""

import json
from dataclasses import dataclass
from decimal import Decimal, ROUND_FLOOR
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from . import formatting
from .amounts import FromInstance, amount_input, to_decimal
from .config import get_config
from .currency import Currency
from .exceptions import CurrencyMismatch, DivisionByZero
from .logging_config import get_logger, log_operation
from .rounding import RoundingMode, RoundingModeLike, round_decimal

Number = Union[int, float, Decimal]

logger = get_logger(__name__)


def _resolve_currency(currency: Union[Currency, str]) -> Currency:
    if isinstance(currency, Currency):
        return currency
    if isinstance(currency, str):
        return Currency.lookup(currency)
    raise TypeError(f"currency must be a Currency or ISO code, got {type(currency).__name__}")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


class _MoneyOperations:
    """Queries and arithmetic shared by Money and MutableMoney"""
    
    amount: Decimal
    currency: Currency
    
    def _initialize(self, amount: Any, currency: Union[Currency, str], convert: bool) -> None:
        currency = _resolve_currency(currency)
        resolved = amount_input(amount).resolve(currency)
        if convert:
            resolved = resolved * currency.subunit
        
        object.__setattr__(self, 'currency', currency)
        object.__setattr__(self, 'amount', resolved)
    
    def _with(self, amount: Decimal, currency: Optional[Currency] = None):
        raise NotImplementedError
    
    # Variants
    
    def is_mutable(self) -> bool:
        raise NotImplementedError
    
    def mutable(self) -> 'MutableMoney':
        raise NotImplementedError
    
    def immutable(self) -> 'Money':
        raise NotImplementedError
    
    # Accessors
    
    def get_amount(self, rounded: bool = False) -> Decimal:
        """Get the amount in minor units, optionally rounded to currency precision"""
        return self.amount_rounded() if rounded else self.amount
    
    def amount_rounded(self) -> Decimal:
        return self.round(self.amount, RoundingMode.HALF_UP)
    
    def value(self) -> Decimal:
        """Get the amount in major units (amount / subunit) rounded half-up to currency precision"""
        return self.round(self.amount / self.currency.subunit, RoundingMode.HALF_UP)
    
    def round(self, amount: Number, mode: Optional[RoundingModeLike] = None) -> Decimal:
        """
        Round an amount to the currency precision.
        
        Args:
            amount: Number to round
            mode: RoundingMode, its value or name; configured default when None
            
        Raises:
            InvalidRoundingMode: If mode is not one of the four rounding modes
        """
        if mode is None:
            mode = get_config().default_rounding_mode
        return round_decimal(to_decimal(amount), self.currency.precision, mode)
    
    # Arithmetic
    
    def add(self, addend: Union[Number, '_MoneyOperations'],
            rounding_mode: Optional[RoundingModeLike] = None):
        """
        Add a number of minor units or a Money of the same currency.
        
        Raises:
            CurrencyMismatch: If addend is Money in a different currency
        """
        addend = self._operand_amount(addend)
        return self._with(self.round(self.amount + addend, rounding_mode))
    
    def subtract(self, subtrahend: Union[Number, '_MoneyOperations'],
                 rounding_mode: Optional[RoundingModeLike] = None):
        """
        Subtract a number of minor units or a Money of the same currency.
        
        Raises:
            CurrencyMismatch: If subtrahend is Money in a different currency
        """
        subtrahend = self._operand_amount(subtrahend)
        return self._with(self.round(self.amount - subtrahend, rounding_mode))
    
    def multiply(self, multiplier: Number, rounding_mode: Optional[RoundingModeLike] = None):
        multiplier = to_decimal(multiplier)
        return self._with(self.round(self.amount * multiplier, rounding_mode))
    
    def divide(self, divisor: Number, rounding_mode: Optional[RoundingModeLike] = None):
        """
        Divide the amount.
        
        Raises:
            DivisionByZero: If divisor is zero
        """
        divisor = to_decimal(divisor)
        if divisor == 0:
            raise DivisionByZero("Division by zero")
        return self._with(self.round(self.amount / divisor, rounding_mode))
    
    def convert(self, currency: Union[Currency, str], ratio: Number,
                rounding_mode: Optional[RoundingModeLike] = None):
        """
        Relabel to another currency, scaling the amount by ratio.
        
        No exchange rate is looked up: ratio is the caller's conversion factor.
        """
        currency = _resolve_currency(currency)
        ratio = to_decimal(ratio)
        if rounding_mode is None:
            rounding_mode = get_config().default_rounding_mode
        amount = round_decimal(self.amount * ratio, currency.precision, rounding_mode)

        log_operation(
            logger, "debug", f"Converted {self.currency.code} to {currency.code}",
            currency=currency.code, operation="convert",
            details={"from": self.currency.code, "ratio": ratio, "amount": amount}
        )
        return self._with(amount, currency)
    
    def negative(self):
        return self._with(-self.amount)
    
    def absolute(self):
        return self._with(abs(self.amount))
    
    # Allocation
    
    def allocate(self, ratios: Sequence[Number]) -> List['Money']:
        """
        Split the amount proportionally without losing or gaining a unit.
        
        Each part first gets floor(amount * ratio / total); the remainder is
        then handed out one minor unit at a time in the order of the ratios,
        so allocate([3, 7]) on 5 gives [2, 3] but allocate([7, 3]) gives [4, 1].
        
        Args:
            ratios: Non-negative weights, in order
            
        Returns:
            Immutable Money parts, one per ratio, summing to the amount
            
        Raises:
            ValueError: If ratios is empty or contains a negative weight
            DivisionByZero: If the ratios sum to zero
        """
        weights = [to_decimal(ratio) for ratio in ratios]
        if not weights:
            raise ValueError("Cannot allocate to an empty list of ratios")
        if any(weight < 0 for weight in weights):
            raise ValueError(f"Allocation ratios must not be negative: {list(ratios)}")
        
        total = sum(weights, Decimal('0'))
        if total == 0:
            raise DivisionByZero("Allocation ratios sum to zero")
        
        shares = [
            (self.amount * weight / total).to_integral_value(rounding=ROUND_FLOOR)
            for weight in weights
        ]
        remainder = self.amount - sum(shares, Decimal('0'))
        
        index = 0
        while remainder >= 1:
            shares[index % len(shares)] += 1
            remainder -= 1
            index += 1
        
        # Fractional amounts leave less than one unit over
        if remainder:
            shares[index % len(shares)] += remainder

        log_operation(
            logger, "debug", f"Allocated {self.amount} into {len(shares)} parts",
            currency=self.currency.code, operation="allocate",
            details={"ratios": [str(weight) for weight in weights]}
        )
        return [Money(share, self.currency) for share in shares]
    
    def allocate_to(self, count: int) -> List['Money']:
        """Split the amount into `count` equal parts (earlier parts get the remainder)"""
        if isinstance(count, bool) or not isinstance(count, int) or count < 1:
            raise ValueError(f"Cannot allocate to {count!r} parts")
        return self.allocate([1] * count)
    
    # Comparison
    
    def is_same_currency(self, other: '_MoneyOperations') -> bool:
        return self.currency.equals(other.currency)
    
    def compare(self, other: '_MoneyOperations') -> int:
        """
        Compare amounts.
        
        Returns:
            -1, 0 or 1 when this amount is lower, equal or higher
            
        Raises:
            CurrencyMismatch: If the currencies differ
        """
        self._assert_same_currency(other)
        
        if self.amount < other.amount:
            return -1
        if self.amount > other.amount:
            return 1
        return 0
    
    def equals(self, other: '_MoneyOperations') -> bool:
        return self.compare(other) == 0
    
    def greater_than(self, other: '_MoneyOperations') -> bool:
        return self.compare(other) == 1
    
    def greater_than_or_equal(self, other: '_MoneyOperations') -> bool:
        return self.compare(other) >= 0
    
    def less_than(self, other: '_MoneyOperations') -> bool:
        return self.compare(other) == -1
    
    def less_than_or_equal(self, other: '_MoneyOperations') -> bool:
        return self.compare(other) <= 0
    
    def is_zero(self) -> bool:
        return self.amount == 0
    
    def is_positive(self) -> bool:
        return self.amount > 0
    
    def is_negative(self) -> bool:
        return self.amount < 0
    
    # Formatting
    
    def format(self) -> str:
        """Format with currency symbol, e.g. "$1,548.48" or "₺1.548,48" """
        return formatting.format_money(self)
    
    def format_simple(self) -> str:
        return formatting.format_simple(self)
    
    def format_without_zeroes(self) -> str:
        return formatting.format_without_zeroes(self)
    
    def format_locale(self, locale: Optional[str] = None,
                      customize: Optional[Callable[[formatting.NumberFormatter], None]] = None) -> str:
        return formatting.format_locale(self, locale, customize)
    
    def format_for_humans(self, locale: Optional[str] = None,
                          customize: Optional[Callable[[formatting.NumberFormatter], None]] = None) -> str:
        return formatting.format_for_humans(self, locale, customize)
    
    # Serialization
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            'amount': self.amount,
            'value': self.value(),
            'currency': self.currency.to_dict(),
        }
    
    def to_json(self, **kwargs) -> str:
        """Convert to JSON; Decimal values are written as strings"""
        kwargs.setdefault('ensure_ascii', False)
        return json.dumps(self.to_dict(), default=str, **kwargs)
    
    # Helpers
    
    def _assert_same_currency(self, other: '_MoneyOperations') -> None:
        if not self.is_same_currency(other):
            raise CurrencyMismatch(f'Different currencies "{self.currency}" and "{other.currency}"')
    
    def _operand_amount(self, operand: Union[Number, '_MoneyOperations']) -> Decimal:
        if isinstance(operand, _MoneyOperations):
            self._assert_same_currency(operand)
            return operand.amount
        return to_decimal(operand)
    
    # Operators always produce a new Money
    
    def __eq__(self, other) -> bool:
        if not isinstance(other, _MoneyOperations):
            return False
        return self.currency == other.currency and self.amount == other.amount
    
    def __lt__(self, other) -> bool:
        if not isinstance(other, _MoneyOperations):
            return NotImplemented
        return self.compare(other) < 0
    
    def __le__(self, other) -> bool:
        if not isinstance(other, _MoneyOperations):
            return NotImplemented
        return self.compare(other) <= 0
    
    def __gt__(self, other) -> bool:
        if not isinstance(other, _MoneyOperations):
            return NotImplemented
        return self.compare(other) > 0
    
    def __ge__(self, other) -> bool:
        if not isinstance(other, _MoneyOperations):
            return NotImplemented
        return self.compare(other) >= 0
    
    def __add__(self, other) -> 'Money':
        if not (_is_number(other) or isinstance(other, _MoneyOperations)):
            return NotImplemented
        return self.immutable().add(other)
    
    def __radd__(self, other) -> 'Money':
        # Lets sum() start from 0
        return self.__add__(other)
    
    def __sub__(self, other) -> 'Money':
        if not (_is_number(other) or isinstance(other, _MoneyOperations)):
            return NotImplemented
        return self.immutable().subtract(other)
    
    def __rsub__(self, other) -> 'Money':
        if not _is_number(other):
            return NotImplemented
        return self.immutable().negative().add(other)
    
    def __mul__(self, other) -> 'Money':
        if not _is_number(other):
            return NotImplemented
        return self.immutable().multiply(other)
    
    def __rmul__(self, other) -> 'Money':
        return self.__mul__(other)
    
    def __truediv__(self, other) -> 'Money':
        if not _is_number(other):
            return NotImplemented
        return self.immutable().divide(other)
    
    def __neg__(self) -> 'Money':
        return self.immutable().negative()
    
    def __abs__(self) -> 'Money':
        return self.immutable().absolute()
    
    def __str__(self) -> str:
        return self.format()
    
    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.amount}, {self.currency.code})"


@dataclass(frozen=True, eq=False, repr=False, init=False)
class Money(_MoneyOperations):
    """
    Immutable money value.
    
    Args:
        amount: Minor units as int, float, Decimal, numeric text ("1,234.56"
            with the currency's separators), another Money, or a zero-argument
            callable returning one of these
        currency: Currency or ISO code
        convert: Treat amount as major units and multiply by the subunit
    """
    amount: Decimal
    currency: Currency
    
    def __init__(self, amount: Any, currency: Union[Currency, str], convert: bool = False):
        self._initialize(amount, currency, convert)
    
    def _with(self, amount: Decimal, currency: Optional[Currency] = None) -> 'Money':
        return Money(amount, currency or self.currency)
    
    def is_mutable(self) -> bool:
        return False
    
    def mutable(self) -> 'MutableMoney':
        """Get a mutable handle starting from this value"""
        return MutableMoney(self.amount, self.currency)
    
    def immutable(self) -> 'Money':
        return self
    
    def __hash__(self) -> int:
        return hash((self.currency.code, self.amount))


@dataclass(eq=False, repr=False, init=False)
class MutableMoney(_MoneyOperations):
    """
    Mutable money handle: arithmetic updates this instance and returns it.
    Comparisons, allocation and formatting behave exactly as on Money.
    """
    amount: Decimal
    currency: Currency
    
    __hash__ = None
    
    def __init__(self, amount: Any, currency: Union[Currency, str], convert: bool = False):
        self._initialize(amount, currency, convert)
    
    def _with(self, amount: Decimal, currency: Optional[Currency] = None) -> 'MutableMoney':
        self.amount = amount
        if currency is not None:
            self.currency = currency
        return self
    
    def is_mutable(self) -> bool:
        return True
    
    def mutable(self) -> 'MutableMoney':
        return self
    
    def immutable(self) -> Money:
        """Get an immutable snapshot of the current value"""
        return Money(self.amount, self.currency)


@amount_input.register(_MoneyOperations)
def _from_money(raw: _MoneyOperations):
    return FromInstance(raw.amount)

"""
Currency Module

ISO 4217 currency metadata: display parameters (symbol, separators) and
arithmetic parameters (precision, subunit scale) for one currency, looked up
by alphabetic code from the static currency table.
"""

import json
import logging
from dataclasses import dataclass
from decimal import Decimal
from functools import lru_cache
from typing import Any, Dict, Optional

from .config import get_config
from .currency_table import CurrencyRecord, load_currency_table
from .exceptions import CurrencyNotFound

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class Currency:
    """
    Immutable currency record. Equality and hashing use the ISO code only;
    every other attribute is a deterministic function of it.
    """
    code: str
    name: str
    iso_code: int
    precision: int
    subunit: int
    symbol: str
    symbol_first: bool
    decimal_mark: str
    thousands_separator: str
    rate: Decimal = Decimal('1')
    
    def __post_init__(self):
        if self.precision < 0:
            raise ValueError(f"Currency precision must be non-negative, got {self.precision}")
        
        if self.subunit != 10 ** self.precision:
            raise ValueError(
                f"Currency {self.code} subunit {self.subunit} must equal 10 ** {self.precision}"
            )
        
        if not isinstance(self.rate, Decimal):
            object.__setattr__(self, 'rate', Decimal(str(self.rate)))
    
    @classmethod
    def from_record(cls, code: str, record: CurrencyRecord) -> 'Currency':
        """Build a Currency from a validated table row"""
        return cls(
            code=code,
            name=record.name,
            iso_code=record.iso_code,
            precision=record.precision,
            subunit=record.subunit,
            symbol=record.symbol,
            symbol_first=record.symbol_first,
            decimal_mark=record.decimal_mark,
            thousands_separator=record.thousands_separator,
            rate=record.rate
        )
    
    @classmethod
    def lookup(cls, code: str) -> 'Currency':
        """
        Get the currency for an ISO alphabetic code.
        
        Args:
            code: ISO 4217 code, case-insensitive, surrounding whitespace ignored
            
        Returns:
            Shared Currency instance for the code
            
        Raises:
            CurrencyNotFound: If the code is not in the currency table
        """
        if not isinstance(code, str):
            raise TypeError(f"Currency code must be a string, got {type(code).__name__}")
        
        return _lookup(code.strip().upper(), get_config().currency_table)
    
    @classmethod
    def all(cls) -> Dict[str, 'Currency']:
        """Get every currency in the table keyed by ISO code"""
        table_path = get_config().currency_table
        return {code: _lookup(code, table_path) for code in load_currency_table(table_path)}
    
    @property
    def prefix(self) -> str:
        """Symbol printed before the amount, empty when the symbol goes last"""
        if not self.symbol_first:
            return ''
        return self.symbol
    
    @property
    def suffix(self) -> str:
        """Symbol printed after the amount, empty when the symbol goes first"""
        if self.symbol_first:
            return ''
        return ' ' + self.symbol
    
    def equals(self, other: 'Currency') -> bool:
        return self.code == other.code
    
    def __eq__(self, other) -> bool:
        if not isinstance(other, Currency):
            return False
        return self.code == other.code
    
    def __hash__(self) -> int:
        return hash(self.code)
    
    def __str__(self) -> str:
        return f"{self.code} ({self.name})"
    
    def __repr__(self) -> str:
        return f"Currency('{self.code}')"
    
    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        """Convert to a single-key record keyed by ISO code"""
        return {self.code: {
            'name': self.name,
            'iso_code': self.iso_code,
            'rate': self.rate,
            'precision': self.precision,
            'subunit': self.subunit,
            'symbol': self.symbol,
            'symbol_first': self.symbol_first,
            'decimal_mark': self.decimal_mark,
            'thousands_separator': self.thousands_separator,
            'prefix': self.prefix,
            'suffix': self.suffix,
        }}
    
    def to_json(self, **kwargs) -> str:
        """Convert to JSON; Decimal values are written as strings"""
        kwargs.setdefault('ensure_ascii', False)
        return json.dumps(self.to_dict(), default=str, **kwargs)


@lru_cache(maxsize=None)
def _lookup(code: str, table_path: Optional[str]) -> Currency:
    table = load_currency_table(table_path)
    
    record = table.get(code)
    if record is None:
        logger.debug(f"Currency lookup failed for '{code}'")
        raise CurrencyNotFound(code)
    
    return Currency.from_record(code, record)

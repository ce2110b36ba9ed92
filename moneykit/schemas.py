"""
Pydantic schemas for Money and Currency payloads
"""

from decimal import Decimal, InvalidOperation
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from .currency import Currency
from .money import Money


class MoneyModel(BaseModel):
    amount: str = Field(..., description="Decimal amount in minor units as string")
    currency: str = Field(..., description="Currency code (USD, EUR, etc.)")
    
    @field_validator("amount")
    @classmethod
    def _check_amount(cls, value: str) -> str:
        try:
            amount = Decimal(value)
        except InvalidOperation:
            raise ValueError(f"Invalid amount: {value}")
        if not amount.is_finite():
            raise ValueError(f"Invalid amount: {value}")
        return value
    
    def to_money(self) -> Money:
        return Money(Decimal(self.amount), Currency.lookup(self.currency))
    
    @classmethod
    def from_money(cls, money: Money) -> 'MoneyModel':
        return cls(amount=str(money.amount), currency=money.currency.code)


class CurrencyModel(BaseModel):
    code: str = Field(..., description="ISO 4217 alphabetic code")
    name: str
    iso_code: int = Field(..., description="ISO 4217 numeric code")
    rate: str = Field("1", description="Decimal rate as string")
    precision: int
    subunit: int
    symbol: str
    symbol_first: bool
    decimal_mark: str
    thousands_separator: str
    prefix: Optional[str] = None
    suffix: Optional[str] = None
    
    @classmethod
    def from_currency(cls, currency: Currency) -> 'CurrencyModel':
        attributes = dict(currency.to_dict()[currency.code])
        attributes['rate'] = str(attributes['rate'])
        return cls(code=currency.code, **attributes)
    
    def to_currency(self) -> Currency:
        return Currency.lookup(self.code)

"""
Money Formatting

Pure functions rendering a Money value as display text, either with the
currency record's own symbol and separators or through Babel's CLDR locale
data for locale-aware and compact ("1.55K") output.
"""

import copy
import re
from decimal import Decimal
from enum import Enum
from typing import Callable, Dict, Optional

from babel import Locale
from babel.numbers import format_compact_decimal, get_decimal_symbol, get_group_symbol

from .config import get_config
from .rounding import RoundingMode, round_decimal


def format_number(value: Decimal, places: int, decimal_mark: str = '.',
                  thousands_separator: str = ',') -> str:
    """
    Format a number with fixed decimals and grouped thousands.
    
    Args:
        value: Number to format, rounded half-up to `places`
        places: Number of fractional digits
        decimal_mark: Character between integer and fractional part
        thousands_separator: Character between groups of three digits
        
    Returns:
        Formatted number, with a leading '-' for negative values
    """
    rounded = round_decimal(value, places, RoundingMode.HALF_UP)
    sign = '-' if rounded < 0 else ''
    
    digits = f"{abs(rounded):,.{places}f}"
    integral, _, fraction = digits.partition('.')
    integral = integral.replace(',', thousands_separator)
    
    if not fraction:
        return sign + integral
    return sign + integral + decimal_mark + fraction


def format_money(money, places: Optional[int] = None) -> str:
    """Format with sign, currency prefix/suffix and the currency's separators"""
    currency = money.currency
    if places is None:
        places = currency.precision
    
    number = format_number(
        abs(money.value()), places, currency.decimal_mark, currency.thousands_separator
    )
    sign = '-' if money.is_negative() else ''
    return f"{sign}{currency.prefix}{number}{currency.suffix}"


def format_simple(money) -> str:
    """Format the number only, without currency symbol"""
    currency = money.currency
    return format_number(
        money.value(), currency.precision, currency.decimal_mark, currency.thousands_separator
    )


def format_without_zeroes(money) -> str:
    """Format like format_money, dropping the decimals when they are all zero"""
    value = money.value()
    if value != value.to_integral_value():
        return format_money(money)
    return format_money(money, places=0)


class FormatterStyle(Enum):
    """Output styles of NumberFormatter"""
    CURRENCY = "currency"  # Locale currency pattern, e.g. "$1,548.48"
    COMPACT = "compact"    # Short compact decimal, e.g. "1.55K"


def resolve_locale(locale: Optional[str] = None) -> str:
    """Use the given locale or the configured default, normalised to ll_CC"""
    if not locale:
        locale = get_config().default_locale
    return locale.strip().replace('-', '_')


class NumberFormatter:
    """
    Locale-aware number formatter backed by Babel.
    
    The symbol attributes default to the locale's own CLDR symbols and may be
    overridden before calling format(); overrides replace the locale's
    symbols in the rendered output.
    """
    
    def __init__(self, locale: str, style: FormatterStyle = FormatterStyle.CURRENCY):
        self.locale = Locale.parse(locale)
        self.style = style
        self.decimal_symbol = get_decimal_symbol(self.locale)
        self.group_symbol = get_group_symbol(self.locale)
        self.currency_symbol: Optional[str] = None
        self.min_fraction_digits: Optional[int] = None
        self.max_fraction_digits: Optional[int] = None
    
    def format(self, value: Decimal, currency_code: Optional[str] = None) -> str:
        """Render value in the formatter's style"""
        if self.style is FormatterStyle.COMPACT:
            return self._format_compact(value)
        return self._format_currency(value, currency_code)
    
    def _format_currency(self, value: Decimal, currency_code: Optional[str]) -> str:
        pattern = copy.copy(self.locale.currency_formats['standard'])
        pattern.frac_prec = self._fraction_digits(pattern.frac_prec)
        
        text = pattern.apply(
            value, self.locale,
            currency=None if self.currency_symbol is not None else currency_code,
            currency_digits=False
        )
        text = self._swap_symbols(text)
        
        if self.currency_symbol is not None:
            text = re.sub('¤+', lambda m: self.currency_symbol, text)
        return text
    
    def _format_compact(self, value: Decimal) -> str:
        digits = self.max_fraction_digits if self.max_fraction_digits is not None else 0
        text = format_compact_decimal(
            value, format_type='short', locale=self.locale, fraction_digits=digits
        )
        return self._swap_symbols(text)
    
    def _fraction_digits(self, default):
        minimum, maximum = default
        if self.max_fraction_digits is not None:
            maximum = self.max_fraction_digits
        if self.min_fraction_digits is not None:
            minimum = self.min_fraction_digits
        return (min(minimum, maximum), maximum)
    
    def _swap_symbols(self, text: str) -> str:
        replacements: Dict[str, str] = {}
        locale_decimal = get_decimal_symbol(self.locale)
        locale_group = get_group_symbol(self.locale)
        
        if locale_decimal != self.decimal_symbol:
            replacements[locale_decimal] = self.decimal_symbol
        if locale_group != self.group_symbol:
            replacements[locale_group] = self.group_symbol
        if not replacements:
            return text
        
        # Single pass so a swapped decimal mark is not swapped back as a group mark
        pattern = re.compile('|'.join(re.escape(symbol) for symbol in replacements))
        return pattern.sub(lambda m: replacements[m.group(0)], text)


def seeded_formatter(currency, locale: Optional[str] = None,
                     style: FormatterStyle = FormatterStyle.CURRENCY) -> NumberFormatter:
    """Build a NumberFormatter carrying the currency's separators, symbol and precision"""
    formatter = NumberFormatter(resolve_locale(locale), style)
    formatter.decimal_symbol = currency.decimal_mark
    formatter.group_symbol = currency.thousands_separator
    formatter.currency_symbol = currency.symbol
    formatter.min_fraction_digits = currency.precision
    formatter.max_fraction_digits = currency.precision
    return formatter


def format_locale(money, locale: Optional[str] = None,
                  customize: Optional[Callable[[NumberFormatter], None]] = None) -> str:
    """
    Format with the locale's currency pattern.
    
    Args:
        money: Money to format
        locale: Locale identifier such as "en_US" or "tr-TR"; configured default when None
        customize: Called with the seeded formatter before rendering
    """
    formatter = seeded_formatter(money.currency, locale, FormatterStyle.CURRENCY)
    if customize is not None:
        customize(formatter)
    return formatter.format(money.value(), money.currency.code)


def format_for_humans(money, locale: Optional[str] = None,
                      customize: Optional[Callable[[NumberFormatter], None]] = None) -> str:
    """
    Format as an abbreviated amount such as "$1.55K".
    
    The sign is emitted once before the currency prefix.
    """
    currency = money.currency
    formatter = seeded_formatter(currency, locale, FormatterStyle.COMPACT)
    if customize is not None:
        customize(formatter)
    
    sign = '-' if money.is_negative() else ''
    return f"{sign}{currency.prefix}{formatter.format(abs(money.value()))}{currency.suffix}"

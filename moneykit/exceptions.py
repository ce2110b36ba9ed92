"""
Money Exceptions

Errors raised by the money and currency types. Every error is raised at the
call that detects it and is never recovered internally.
"""


class MoneyError(Exception):
    """Base class for all moneykit errors"""
    pass


class CurrencyNotFound(MoneyError, LookupError):
    """Raised when an ISO currency code is not present in the currency table."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f'Currency "{code}" does not exist.')


class UnexpectedAmount(MoneyError, ValueError):
    """Raised when a Money amount cannot be interpreted."""
    pass


class CurrencyMismatch(MoneyError, ValueError):
    """Raised when attempting operations between different currencies."""
    pass


class DivisionByZero(MoneyError, ZeroDivisionError):
    """Raised when dividing a Money amount by zero."""
    pass


class InvalidRoundingMode(MoneyError, ValueError):
    """Raised when a rounding mode is not one of the supported modes."""
    pass

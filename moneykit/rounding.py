"""
Rounding Modes

Rounds Decimal amounts to a fixed number of fractional digits using one of
the four tie-breaking rules supported by Money arithmetic.
"""

from decimal import (
    Decimal, ROUND_DOWN, ROUND_HALF_DOWN, ROUND_HALF_EVEN, ROUND_HALF_UP, ROUND_UP, localcontext
)
from enum import IntEnum
from typing import Union

from .exceptions import InvalidRoundingMode, UnexpectedAmount


class RoundingMode(IntEnum):
    """Tie-breaking rules for values exactly between two representable values"""
    HALF_UP = 1    # Ties away from zero
    HALF_DOWN = 2  # Ties toward zero
    HALF_EVEN = 3  # Ties to the even neighbour (banker's rounding)
    HALF_ODD = 4   # Ties to the odd neighbour


_DECIMAL_ROUNDING = {
    RoundingMode.HALF_UP: ROUND_HALF_UP,
    RoundingMode.HALF_DOWN: ROUND_HALF_DOWN,
    RoundingMode.HALF_EVEN: ROUND_HALF_EVEN,
}

RoundingModeLike = Union[RoundingMode, int, str]


def coerce_rounding_mode(mode: RoundingModeLike) -> RoundingMode:
    """
    Resolve a rounding mode given as enum member, integer value or name.

    Args:
        mode: RoundingMode, its integer value (1-4) or its name ("half_even")

    Returns:
        The matching RoundingMode

    Raises:
        InvalidRoundingMode: If mode does not name one of the four modes
    """
    if isinstance(mode, RoundingMode):
        return mode

    if isinstance(mode, str):
        name = mode.strip().upper().replace('-', '_')
        if name in RoundingMode.__members__:
            return RoundingMode[name]
    elif isinstance(mode, int) and not isinstance(mode, bool):
        if mode in RoundingMode._value2member_map_:
            return RoundingMode(mode)

    allowed = ' | '.join(str(member.value) for member in RoundingMode)
    raise InvalidRoundingMode(f"Rounding mode should be {allowed}, got {mode!r}")


def round_decimal(value: Decimal, precision: int,
                  mode: RoundingModeLike = RoundingMode.HALF_UP) -> Decimal:
    """
    Round value to the given number of fractional digits.

    Args:
        value: Decimal to round
        precision: Number of fractional digits to keep
        mode: Tie-breaking rule

    Returns:
        Rounded Decimal with exactly `precision` fractional digits

    Raises:
        UnexpectedAmount: If value is NaN or infinite
    """
    mode = coerce_rounding_mode(mode)
    if not value.is_finite():
        raise UnexpectedAmount(f'Invalid amount "{value}"')

    # Context precision must hold every integral digit plus the fraction
    with localcontext() as context:
        exponent_digits = min(value.as_tuple().exponent, -precision)
        context.prec = max(context.prec, value.adjusted() - exponent_digits + 2)
        exponent = Decimal('0.1') ** precision

        if mode is RoundingMode.HALF_ODD:
            return _round_half_odd(value, exponent)

        return value.quantize(exponent, rounding=_DECIMAL_ROUNDING[mode])


def _round_half_odd(value: Decimal, exponent: Decimal) -> Decimal:
    truncated = value.quantize(exponent, rounding=ROUND_DOWN)

    # Not a tie: nearest neighbour wins
    if abs(value - truncated) * 2 != exponent:
        return value.quantize(exponent, rounding=ROUND_HALF_UP)

    if (truncated / exponent) % 2:
        return truncated
    return value.quantize(exponent, rounding=ROUND_UP)

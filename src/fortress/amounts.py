"""Conversion between human-scale amounts and on-chain integer mantissas.

All scaling is done with ``Decimal``; floats are converted through ``str()`` so
``0.1`` becomes ``Decimal("0.1")`` and not its binary expansion.
"""

import logging
from decimal import Decimal, InvalidOperation, Overflow, ROUND_HALF_EVEN, localcontext
from typing import Union

from fortress.constants import MAX_UINT256
from fortress.errors import InvalidAmount

logger = logging.getLogger(__name__)

Amount = Union[str, int, float, Decimal]

# Enough digits for uint256 values scaled by up to 18 decimals
_PRECISION = 100


def _to_decimal(value: Amount) -> Decimal:
    """Parse a supported amount type into a finite Decimal."""
    # bool is an int subclass but never a meaningful amount
    if isinstance(value, bool):
        raise InvalidAmount("Amount must be a string, number or Decimal, got bool.")

    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, int):
        number = Decimal(value)
    elif isinstance(value, float):
        number = Decimal(repr(value))
    elif isinstance(value, str):
        text = value.strip().replace("_", "")
        if not text:
            raise InvalidAmount("Amount string is empty.")
        try:
            number = Decimal(text)
        except InvalidOperation:
            raise InvalidAmount(f"Amount {value!r} is not a number.") from None
    else:
        raise InvalidAmount(
            f"Amount must be a string, number or Decimal, got {type(value).__name__}."
        )

    if not number.is_finite():
        raise InvalidAmount(f"Amount {value!r} is not finite.")
    if number < 0:
        raise InvalidAmount(f"Amount {value!r} is negative.")

    return number


def normalize(value: Amount, decimals: int, mantissa: bool = False) -> int:
    """Convert an amount into an integer mantissa.

    Args:
        value: Amount as string, int, float or Decimal
        decimals: Token decimal count (0-18)
        mantissa: True if ``value`` is already scaled up by ``decimals``

    Returns:
        Integer mantissa

    Raises:
        InvalidAmount: If the amount is not a finite non-negative number, does
            not fit in uint256, or is fractional while ``mantissa`` is set
    """
    if not 0 <= decimals <= 18:
        raise InvalidAmount(f"Unsupported decimal count: {decimals}")

    number = _to_decimal(value)

    with localcontext() as ctx:
        ctx.prec = _PRECISION

        if mantissa:
            if number != number.to_integral_value():
                raise InvalidAmount(f"Mantissa amount {value!r} must be an integer.")
            scaled = number
        else:
            try:
                scaled = number.scaleb(decimals)
            except (Overflow, InvalidOperation):
                raise InvalidAmount(f"Amount {value!r} is out of range.") from None

        if scaled > MAX_UINT256:
            raise InvalidAmount(f"Amount {value!r} does not fit in uint256.")
        result = int(scaled.to_integral_value(rounding=ROUND_HALF_EVEN))

    logger.debug(f"Normalized {value!r} with {decimals} decimals to {result}")
    return result


def to_human(mantissa: int, decimals: int) -> Decimal:
    """Scale an integer mantissa back down to a human-scale Decimal."""
    if isinstance(mantissa, bool) or not isinstance(mantissa, int):
        raise InvalidAmount(f"Mantissa must be an integer, got {type(mantissa).__name__}.")

    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return Decimal(mantissa).scaleb(-decimals)

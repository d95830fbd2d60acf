"""Finite-number guards shared by every engine module.

Every value that leaves a pipeline step or a valuation metric passes through
``finite`` so that no output field is ever NaN or Infinity.
"""

import functools
import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
ONE = Decimal("1")
TWELVE = Decimal("12")
HUNDRED = Decimal("100")

WHOLE = Decimal("1")
TWO_PLACES = Decimal("0.01")
FOUR_PLACES = Decimal("0.0001")


def to_decimal(value, default: Decimal = ZERO) -> Decimal:
    """Convert int/float/str/Decimal to a finite Decimal, else ``default``."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError, TypeError):
            return default
    if not result.is_finite():
        return default
    return result


def finite(value, places: Decimal | None = None) -> Decimal:
    """Coerce ``value`` to a finite Decimal (0 otherwise), optionally rounded."""
    result = to_decimal(value)
    if places is None:
        return result
    try:
        return result.quantize(places, ROUND_HALF_UP)
    except InvalidOperation:
        # Too many digits for the context precision; keep it unrounded
        return result


def safe_div(numerator: Decimal, denominator: Decimal) -> Decimal:
    """numerator / denominator, or 0 when the denominator is zero."""
    denominator = to_decimal(denominator)
    if denominator == 0:
        return ZERO
    return finite(to_decimal(numerator) / denominator)


def finite_result(func):
    """Decorator: a metric that hits an arithmetic fault reports 0 instead."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            value = func(*args, **kwargs)
        except ArithmeticError as e:
            logger.debug("%s degenerate input, reporting 0: %s", func.__name__, e)
            return ZERO
        return finite(value)

    return wrapper

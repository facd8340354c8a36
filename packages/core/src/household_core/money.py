"""Numeric coercion, rounding and formatting for statement figures.

Every aggregator funnels raw form values through ``to_safe_number`` and
every derived figure through ``round_to_two``. Arithmetic is carried out in
``Decimal`` so cent rounding is exact (0.1 + 0.2 rounds to 0.30, 1.005 to
1.01). Nothing in this module raises.
"""

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Any, Union

Number = Union[Decimal, int, float]

ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENTS = Decimal("0.01")
TENTHS = Decimal("0.1")

# Largest amount a single form field can carry
MAX_AMOUNT = Decimal("1e15")
# Magnitude bound for any figure, so derived values always fit a float
_LIMIT = Decimal("1e100")

# Leading numeric literal, the way a lenient form parser reads "12.50abc"
_NUMERIC_PREFIX = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _to_decimal(value: Any) -> Decimal:
    """Convert a value to a finite Decimal, or 0 when it has no numeric reading."""
    if value is None or isinstance(value, bool):
        return ZERO

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        # str() keeps the shortest repr, so 0.1 stays 0.1 rather than its binary expansion
        result = Decimal(str(value))
    elif isinstance(value, str):
        clean = re.sub(r"[$,\s]", "", value)
        match = _NUMERIC_PREFIX.match(clean)
        if not match:
            return ZERO
        try:
            result = Decimal(match.group(0))
        except InvalidOperation:
            return ZERO
    else:
        return ZERO

    if not result.is_finite():
        return ZERO
    return max(-_LIMIT, min(result, _LIMIT))


def _quantize(value: Decimal, exponent: Decimal) -> Decimal:
    """Half-up quantize with enough precision for the value's integer digits."""
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() - exponent.adjusted() + 2)
        return value.quantize(exponent, rounding=ROUND_HALF_UP)


def to_safe_number(value: Any) -> Decimal:
    """Coerce a raw form value into a non-negative Decimal.

    Args:
        value: A numeric string, number, empty string or None.

    Returns:
        The parsed value clamped at zero. ``None``, ``""``, non-numeric
        strings and non-finite numbers all yield 0. Values above
        ``MAX_AMOUNT`` are capped there.

    Example:
        >>> to_safe_number("1,500.25")
        Decimal('1500.25')
        >>> to_safe_number("-40")
        Decimal('0')
    """
    return min(max(ZERO, _to_decimal(value)), MAX_AMOUNT)


def round_to_two(value: Number) -> Decimal:
    """Round to cents, half-up."""
    return _quantize(_to_decimal(value), CENTS)


def round_to_whole(value: Number) -> int:
    """Round to the nearest whole number, half-up."""
    return int(_quantize(_to_decimal(value), Decimal("1")))


def format_currency(value: Number) -> str:
    """Render a value as en-US dollars with two fraction digits.

    Example:
        >>> format_currency(Decimal("-1234.5"))
        '-$1,234.50'
    """
    amount = round_to_two(value)
    if amount == 0:
        # Avoid rendering "-$0.00"
        amount = abs(amount)
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_percent(value: Number) -> str:
    """Render a percentage with one decimal place and a ``%`` suffix."""
    return f"{_quantize(_to_decimal(value), TENTHS)}%"


def safe_percentage(part: Number, whole: Number) -> Decimal:
    """Return ``part / whole * 100``, or 0 when ``whole`` is not positive."""
    denominator = _to_decimal(whole)
    if denominator <= 0:
        return ZERO
    return _to_decimal(part) / denominator * HUNDRED


def percent_of_income(part: Number, net_revenue: Number) -> str:
    """Format ``part`` as a share of net revenue, ``"0%"`` when there is none."""
    if _to_decimal(net_revenue) <= 0:
        return "0%"
    return format_percent(safe_percentage(part, net_revenue))

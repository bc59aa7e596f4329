from typing import Dict, Optional, Tuple

from recipe_utils.exceptions import InternalConsistencyError
from recipe_utils.ingredients.models import (
    Amount,
    Constant,
    ConstantAmount,
    Float,
    Fraction,
    RangeAmount,
)

# Unicode vulgar fraction glyphs -> (numerator, denominator)
VULGAR_FRACTIONS: Dict[str, Tuple[int, int]] = {
    "¼": (1, 4),
    "½": (1, 2),
    "¾": (3, 4),
    "⅐": (1, 7),
    "⅑": (1, 9),
    "⅒": (1, 10),
    "⅓": (1, 3),
    "⅔": (2, 3),
    "⅕": (1, 5),
    "⅖": (2, 5),
    "⅗": (3, 5),
    "⅘": (4, 5),
    "⅙": (1, 6),
    "⅚": (5, 6),
    "⅛": (1, 8),
    "⅜": (3, 8),
    "⅝": (5, 8),
    "⅞": (7, 8),
}


def look_up_vulgar_fraction(glyph: str) -> Tuple[int, int]:
    """Return ``(numerator, denominator)`` for a vulgar fraction glyph."""
    try:
        return VULGAR_FRACTIONS[glyph]
    except KeyError:
        raise InternalConsistencyError(
            f"Grammar matched {glyph!r} as a vulgar fraction but it is not in the table"
        ) from None


def mixed_fraction(integer: int, numerator: int, denominator: int) -> Fraction:
    """Combine a whole number and a fraction without reducing.

    Examples:
        >>> mixed_fraction(1, 1, 2)
        Fraction(numerator=3, denominator=2)
        >>> mixed_fraction(2, 2, 4)
        Fraction(numerator=10, denominator=4)
    """
    return Fraction(integer * denominator + numerator, denominator)


def parse_decimal(text: str) -> Float:
    """Parse a decimal number written with ``.`` or ``,`` as the separator.

    Raises:
        ValueError: If the number is too large to be a finite float.
    """
    return Float(float(text.replace(",", ".")))


def constant_to_float(constant: Constant) -> float:
    """Numeric value of a constant.

    Raises:
        OverflowError: If a fraction is too large for a float.
    """
    if isinstance(constant, Fraction):
        return constant.numerator / constant.denominator
    return constant.value


def amount_bounds(amount: Optional[Amount]) -> Tuple[Optional[float], Optional[float]]:
    """Return ``(low, high)`` for an amount; ``high`` is None unless it is a range.

    Range bounds are returned in the order they were written.
    """
    if amount is None:
        return None, None
    if isinstance(amount, ConstantAmount):
        return constant_to_float(amount.value), None
    if isinstance(amount, RangeAmount):
        return constant_to_float(amount.value_from), constant_to_float(amount.value_to)
    raise TypeError(f"Not an amount: {amount!r}")

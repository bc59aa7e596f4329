"""Ingredient line grammar, parsing and tabulation."""

from .grammar import build_grammar, build_grammar_text
from .models import (
    Amount,
    Constant,
    ConstantAmount,
    Float,
    Fraction,
    IngredientInfo,
    RangeAmount,
    Span,
    ValueWithSpan,
)
from .number_utils import (
    VULGAR_FRACTIONS,
    amount_bounds,
    constant_to_float,
    look_up_vulgar_fraction,
)
from .parsing import (
    IngredientLineParser,
    default_parser,
    parse,
    parse_with_fallback,
)
from .tables import parse_ingredient_lines
from .units import Unit, normalize_unit

__all__ = [
    "parse",
    "parse_with_fallback",
    "parse_ingredient_lines",
    "normalize_unit",
    "default_parser",
    "build_grammar",
    "build_grammar_text",
    "IngredientLineParser",
    "IngredientInfo",
    "Unit",
    "Amount",
    "Constant",
    "ConstantAmount",
    "RangeAmount",
    "Fraction",
    "Float",
    "Span",
    "ValueWithSpan",
    "VULGAR_FRACTIONS",
    "amount_bounds",
    "constant_to_float",
    "look_up_vulgar_fraction",
]

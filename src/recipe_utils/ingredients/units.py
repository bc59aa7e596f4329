"""Canonical units of the bundled English dictionary."""

from typing import Optional

from recipe_utils.dictionary import default_dictionary

# Compiled at import so every caller shares one Unit enumeration
DICTIONARY = default_dictionary()

Unit = DICTIONARY.unit


def normalize_unit(text: str) -> Optional[Unit]:
    """Return the canonical unit for a unit expression.

    Matching is exact apart from case; surrounding whitespace is ignored.

    Args:
        text: A unit expression such as "Ounces" or "tbsp.".

    Returns:
        The matching Unit member, or None if the expression is unknown.

    Examples:
        >>> normalize_unit("Ounces")
        <Unit.Ounce: 'ounce'>
        >>> normalize_unit("TBSP.")
        <Unit.Tablespoon: 'tablespoon'>
        >>> normalize_unit("splash") is None
        True
    """
    return DICTIONARY.lookup_unit(text.strip())

"""Compile a language dictionary into lookup tables and PEG literal rules."""

import dataclasses
import enum
import hashlib
import json
import logging
import re
import types
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Type

from recipe_utils.exceptions import DictionaryCompileError

logger = logging.getLogger(__name__)

# --- Constants ---

UNITS = "units"
NUMBERS = "numbers"
PREPOSITIONS = "prepositions"
RANGE_WORDS = "range_words"

# Names of the generated grammar rules
UNIT_LITERAL_RULE = "unit_literal"
WORD_DIGIT_LITERAL_RULE = "word_digit_literal"
PREPOSITION_LITERAL_RULE = "preposition_literal"
RANGE_WORD_LITERAL_RULE = "range_word_literal"

_CANONICAL_NAME = re.compile(r"^[a-z][a-z0-9]*(?:_[a-z0-9]+)*$")

# --- Classes ---


@dataclasses.dataclass(frozen=True)
class CompiledDictionary:
    """Immutable output of the dictionary compiler.

    Attributes:
        unit: Closed enumeration of canonical units for this dictionary.
        unit_table: Casefolded expression -> unit member.
        number_table: Casefolded expression -> integer value.
        unit_literals: Unit expressions, longest first.
        number_literals: Number-word expressions, longest first.
        preposition_literals: Preposition expressions, longest first.
        range_word_literals: Words joining the two ends of a range, longest first.
        fingerprint: SHA-256 of the canonical JSON of the source document.
    """

    unit: Type[enum.Enum]
    unit_table: Mapping[str, enum.Enum]
    number_table: Mapping[str, int]
    unit_literals: Tuple[str, ...]
    number_literals: Tuple[str, ...]
    preposition_literals: Tuple[str, ...]
    range_word_literals: Tuple[str, ...]
    fingerprint: str

    def lookup_unit(self, expression: str) -> Optional[enum.Enum]:
        """Return the canonical unit for an expression, ignoring case."""
        return self.unit_table.get(expression.casefold())

    def lookup_number(self, expression: str) -> Optional[int]:
        """Return the integer value of a number word, ignoring case."""
        return self.number_table.get(expression.casefold())

    def grammar_rules(self) -> str:
        """Render the literal alternations as parsimonious grammar rules."""
        return "\n".join(
            [
                alternation_rule(UNIT_LITERAL_RULE, self.unit_literals),
                alternation_rule(WORD_DIGIT_LITERAL_RULE, self.number_literals),
                alternation_rule(PREPOSITION_LITERAL_RULE, self.preposition_literals),
                alternation_rule(RANGE_WORD_LITERAL_RULE, self.range_word_literals),
            ]
        )


# --- Functions ---


def load_dictionary(path: str) -> Dict[str, Any]:
    """Load a dictionary document from a JSON file.

    Duplicate object keys are rejected instead of letting the last one win,
    so a repeated number word or unit name cannot hide in the file.

    Args:
        path: Path to the dictionary JSON file.

    Returns:
        The parsed dictionary document.

    Raises:
        DictionaryCompileError: If the file repeats an object key.
    """
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f, object_pairs_hook=_reject_duplicate_keys)


def compile_dictionary(document: Mapping[str, Any]) -> CompiledDictionary:
    """Compile a dictionary document into lookup tables and literal sets.

    Args:
        document: Mapping with ``units`` (canonical name -> expressions),
            ``numbers`` (expression -> integer), ``prepositions`` and
            ``range_words`` (lists of expressions).

    Returns:
        The compiled, immutable dictionary.

    Raises:
        DictionaryCompileError: On any malformed, ambiguous or duplicate entry.

    Examples:
        >>> compiled = compile_dictionary(
        ...     {"units": {"ounce": ["oz", "ounces", "ounce"]},
        ...      "numbers": {"one": 1}, "prepositions": ["of"],
        ...      "range_words": ["to"]})
        >>> compiled.unit_literals
        ('ounces', 'ounce', 'oz')
        >>> compiled.lookup_unit("OZ").name
        'Ounce'
    """
    if not isinstance(document, Mapping):
        raise DictionaryCompileError("<document>", "expected a mapping of groups")
    for group in (UNITS, NUMBERS, PREPOSITIONS, RANGE_WORDS):
        if group not in document:
            raise DictionaryCompileError(group, "group is missing")

    unit_enum, unit_entries = _compile_units(document[UNITS])
    number_entries = _compile_numbers(document[NUMBERS])
    prepositions = _compile_word_list(PREPOSITIONS, document[PREPOSITIONS])
    range_words = _compile_word_list(RANGE_WORDS, document[RANGE_WORDS])

    compiled = CompiledDictionary(
        unit=unit_enum,
        unit_table=types.MappingProxyType(
            {expr.casefold(): unit for expr, unit in unit_entries}
        ),
        number_table=types.MappingProxyType(
            {expr.casefold(): value for expr, value in number_entries}
        ),
        unit_literals=longest_first(expr for expr, _ in unit_entries),
        number_literals=longest_first(expr for expr, _ in number_entries),
        preposition_literals=longest_first(prepositions),
        range_word_literals=longest_first(range_words),
        fingerprint=_fingerprint(document),
    )
    logger.debug(
        f"Compiled dictionary {compiled.fingerprint[:12]}: "
        f"{len(compiled.unit)} units, {len(compiled.unit_literals)} unit expressions, "
        f"{len(compiled.number_literals)} number words, "
        f"{len(compiled.preposition_literals)} prepositions, "
        f"{len(compiled.range_word_literals)} range words"
    )
    return compiled


def longest_first(expressions) -> Tuple[str, ...]:
    """Sort expressions by descending length, keeping input order for ties.

    A PEG ordered choice commits to the first alternative that matches, so a
    shorter expression listed before a longer one sharing its prefix would
    always win ("ounce" before "ounces").
    """
    return tuple(sorted(expressions, key=len, reverse=True))


def peg_literal(expression: str, ignore_case: bool = True) -> str:
    """Quote an expression as a parsimonious regex literal matching it exactly.

    The expression is regex-escaped and then written as a Python string
    literal, which is how parsimonious reads the body of a ``~"..."`` term.
    For example ``fl. oz`` becomes ``~'fl\\.\\ oz'i``.
    """
    flags = "i" if ignore_case else ""
    return f"~{re.escape(expression)!r}{flags}"


def alternation_rule(
    name: str, expressions: Sequence[str], ignore_case: bool = True
) -> str:
    """Render an ordered alternation of literals as a grammar rule."""
    if not expressions:
        raise DictionaryCompileError(name, "cannot build a rule with no alternatives")
    alternatives = " / ".join(peg_literal(expr, ignore_case) for expr in expressions)
    return f"{name} = {alternatives}"


def to_camel_case(name: str) -> str:
    """Convert a snake_case canonical name to a CamelCase enum member name."""
    return "".join(part.capitalize() for part in name.split("_"))


def _compile_units(units: Any) -> Tuple[Type[enum.Enum], List[Tuple[str, enum.Enum]]]:
    if not isinstance(units, Mapping) or not units:
        raise DictionaryCompileError(UNITS, "expected a non-empty mapping")

    members = []
    member_names = {}
    for canonical, expressions in units.items():
        if not isinstance(canonical, str) or not _CANONICAL_NAME.match(canonical):
            raise DictionaryCompileError(
                UNITS, "canonical unit names must be snake_case", str(canonical)
            )
        member = to_camel_case(canonical)
        if member in member_names:
            raise DictionaryCompileError(
                UNITS,
                f"canonical name collides with '{member_names[member]}'",
                canonical,
            )
        if not isinstance(expressions, list) or not expressions:
            raise DictionaryCompileError(
                UNITS, "canonical unit has no expressions", canonical
            )
        member_names[member] = canonical
        members.append((member, canonical))

    unit_enum = enum.Enum("Unit", members, module=__name__)

    entries = []
    seen = {}
    for canonical, expressions in units.items():
        unit = unit_enum[to_camel_case(canonical)]
        for expr in expressions:
            _check_expression(UNITS, expr, seen, owner=canonical)
            entries.append((expr, unit))
    return unit_enum, entries


def _compile_numbers(numbers: Any) -> List[Tuple[str, int]]:
    if not isinstance(numbers, Mapping) or not numbers:
        raise DictionaryCompileError(NUMBERS, "expected a non-empty mapping")

    entries = []
    seen = {}
    for expr, value in numbers.items():
        _check_expression(NUMBERS, expr, seen, owner=expr)
        # bool is an int subclass; JSON true/false is not a number word value
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise DictionaryCompileError(
                NUMBERS, f"value must be a non-negative integer, got {value!r}", expr
            )
        entries.append((expr, value))
    return entries


def _compile_word_list(group: str, words: Any) -> List[str]:
    if not isinstance(words, list) or not words:
        raise DictionaryCompileError(group, "expected a non-empty list")

    seen = {}
    for expr in words:
        _check_expression(group, expr, seen, owner=expr)
    return list(words)


def _check_expression(group: str, expr: Any, seen: Dict[str, str], owner: str) -> None:
    if not isinstance(expr, str) or not expr:
        raise DictionaryCompileError(group, "expression must be a non-empty string", repr(expr))
    if expr != expr.strip():
        raise DictionaryCompileError(
            group, "expression has leading or trailing whitespace", expr
        )
    key = expr.casefold()
    if key in seen:
        raise DictionaryCompileError(
            group, f"duplicate expression (already listed for '{seen[key]}')", expr
        )
    seen[key] = owner


def _reject_duplicate_keys(pairs: List[Tuple[str, Any]]) -> Dict[str, Any]:
    result = {}
    for key, value in pairs:
        if key in result:
            raise DictionaryCompileError("<document>", "duplicate key", key)
        result[key] = value
    return result


def _fingerprint(document: Mapping[str, Any]) -> str:
    canonical = json.dumps(document, sort_keys=True, ensure_ascii=False)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()

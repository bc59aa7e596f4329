"""Parse ingredient lines into amount, unit and ingredient with byte spans."""

import dataclasses
import functools
import logging
from typing import Any, Iterator, List, Optional, Sequence

from parsimonious import Grammar, NodeVisitor
from parsimonious.exceptions import ParseError
from parsimonious.expressions import OneOf
from parsimonious.nodes import Node

from recipe_utils.dictionary import (
    CompiledDictionary,
    compile_dictionary,
    default_dictionary,
    load_dictionary,
)
from recipe_utils.exceptions import GrammarParseError, InternalConsistencyError
from recipe_utils.ingredients.grammar import build_grammar
from recipe_utils.ingredients.models import (
    ConstantAmount,
    Fraction,
    IngredientInfo,
    RangeAmount,
    Span,
    ValueWithSpan,
)
from recipe_utils.ingredients.number_utils import (
    look_up_vulgar_fraction,
    mixed_fraction,
    parse_decimal,
)

logger = logging.getLogger(__name__)

# --- Constants ---

# Rules whose nodes only carry their children up to the enclosing rule
PASS_THROUGH_RULES = frozenset(
    {
        "line_body",
        "forward_line",
        "leading_quantity",
        "range_separator",
        "range_word",
        "unit_literal",
        "word_digit_literal",
        "preposition_literal",
        "range_word_literal",
        "text_char",
        "tail_separator",
        "word_char",
        "end",
        "_",
        "__",
    }
)

# --- Classes ---


@dataclasses.dataclass(frozen=True)
class _Field:
    """One IngredientInfo field found somewhere in the tree."""

    name: str
    value: ValueWithSpan


class IngredientLineVisitor(NodeVisitor):
    """Reduce an ``ingredient_line`` parse tree to an :class:`IngredientInfo`.

    Create one visitor per line; it holds the byte offset table for that
    line and the line itself.
    """

    unwrapped_exceptions = (InternalConsistencyError, GrammarParseError)

    def __init__(self, dictionary: CompiledDictionary, text: str):
        self.dictionary = dictionary
        self.text = text
        self._offsets = byte_offsets(text)

    def span(self, node: Node) -> Span:
        return Span(self._offsets[node.start], self._offsets[node.end])

    def reject(self, node: Node) -> GrammarParseError:
        """A line whose grammar match holds a value that cannot be represented."""
        return GrammarParseError(self.text, self._offsets[node.start])

    def generic_visit(self, node, visited_children):
        if node.expr_name and node.expr_name not in PASS_THROUGH_RULES:
            raise InternalConsistencyError(f"No reduction for rule '{node.expr_name}'")
        return visited_children or node

    # Line structure

    def visit_ingredient_line(self, node, visited_children) -> IngredientInfo:
        fields = {}
        for field in _collect_fields(visited_children):
            if field.name in fields:
                raise InternalConsistencyError(
                    f"Line {node.text!r} produced more than one '{field.name}'"
                )
            fields[field.name] = field.value
        return IngredientInfo(**fields)

    def visit_forward_amount(self, node, visited_children):
        amount, _ = visited_children
        return _Field("amount", amount)

    def visit_forward_container(self, node, visited_children):
        container, _ = visited_children
        return container

    def visit_forward_unit(self, node, visited_children):
        unit, _ = visited_children
        return _Field("unit", unit)

    def visit_forward_preposition(self, node, visited_children):
        return None

    def visit_reverse_line(self, node, visited_children):
        _, ingredient, _, tail = visited_children
        return [ingredient, tail]

    def visit_reverse_tail(self, node, visited_children):
        (child,) = node.children
        (value,) = visited_children
        if child.expr_name == "amount_and_unit":
            return value
        if child.expr_name == "amount":
            return _Field("amount", value)
        if child.expr_name == "unit":
            return _Field("unit", value)
        raise _unexpected(node, child)

    def visit_amount_and_unit(self, node, visited_children):
        amount, _, unit = visited_children
        return [_Field("amount", amount), _Field("unit", unit)]

    def visit_container_size(self, node, visited_children):
        _, _, amount, _, unit, _, _ = visited_children
        return [_Field("container_amount", amount), _Field("container_unit", unit)]

    def visit_ingredient(self, node, visited_children):
        return _Field("ingredient", ValueWithSpan(node.text, self.span(node)))

    visit_ingredient_alt = visit_ingredient

    def visit_preposition(self, node, visited_children):
        return None

    # Quantities

    def visit_amount(self, node, visited_children) -> ValueWithSpan:
        (child,) = node.children
        (value,) = visited_children
        if child.expr_name == "range":
            amount = value
        elif child.expr_name == "constant":
            amount = ConstantAmount(value)
        else:
            raise _unexpected(node, child)
        return ValueWithSpan(amount, self.span(node))

    def visit_range(self, node, visited_children) -> RangeAmount:
        value_from, _, _, _, value_to = visited_children
        return RangeAmount(value_from, value_to)

    def visit_constant(self, node, visited_children):
        (child,) = node.children
        (value,) = visited_children
        if child.expr_name in ("float", "fraction"):
            return value
        if child.expr_name in ("integer", "word_digit"):
            return Fraction(value, 1)
        raise _unexpected(node, child)

    def visit_fraction(self, node, visited_children) -> Fraction:
        (child,) = node.children
        (value,) = visited_children
        if child.expr_name == "mixed_fraction":
            return value
        if child.expr_name in ("simple_fraction", "vulgar_fraction"):
            return Fraction(*value)
        raise _unexpected(node, child)

    def visit_mixed_fraction(self, node, visited_children) -> Fraction:
        integer, _, (fraction,) = visited_children
        return mixed_fraction(integer, *fraction)

    def visit_simple_fraction(self, node, visited_children):
        numerator, _, _, _, denominator = visited_children
        return numerator, denominator

    def visit_vulgar_fraction(self, node, visited_children):
        return look_up_vulgar_fraction(node.text)

    def visit_float(self, node, visited_children):
        try:
            return parse_decimal(node.text)
        except ValueError:
            raise self.reject(node) from None

    def visit_integer(self, node, visited_children) -> int:
        try:
            return int(node.text)
        except ValueError:
            # Past the interpreter's int string conversion limit
            raise self.reject(node) from None

    visit_denominator = visit_integer

    # Dictionary words

    # Regex case folding and str.casefold() disagree on letters such as "İ",
    # so words are resolved from the alternative that matched, not its text.

    def visit_word_digit(self, node, visited_children) -> int:
        literal, _ = node.children
        expression = matched_expression(literal, self.dictionary.number_literals)
        value = self.dictionary.lookup_number(expression)
        if value is None:
            raise InternalConsistencyError(
                f"Grammar matched number word {expression!r} missing from the number table"
            )
        return value

    def visit_unit(self, node, visited_children) -> ValueWithSpan:
        literal, _ = node.children
        expression = matched_expression(literal, self.dictionary.unit_literals)
        unit = self.dictionary.lookup_unit(expression)
        if unit is None:
            raise InternalConsistencyError(
                f"Grammar matched unit {expression!r} missing from the unit table"
            )
        return ValueWithSpan(unit, self.span(node))


class IngredientLineParser:
    """Parser for single recipe ingredient lines.

    The dictionary and grammar are compiled once when the parser is created
    and never change afterwards, so one instance can be shared freely
    between threads.

    Attributes:
        dictionary (CompiledDictionary): Unit, number and preposition tables.
        grammar (parsimonious.Grammar): Grammar built from the dictionary.
    """

    def __init__(self, dictionary: Optional[CompiledDictionary] = None):
        """Initialize the parser.

        Args:
            dictionary: Compiled dictionary to parse with. Defaults to the
                bundled English dictionary.
        """
        self.dictionary = dictionary or default_dictionary()
        self.grammar: Grammar = build_grammar(self.dictionary)

    @classmethod
    def from_file(cls, dictionary_file: str) -> "IngredientLineParser":
        """Create a parser from a dictionary JSON file."""
        return cls(compile_dictionary(load_dictionary(dictionary_file)))

    def parse(self, text: str) -> IngredientInfo:
        """Parse one ingredient line.

        Args:
            text: The ingredient line, e.g. "1 1/2 kg potatoes".

        Returns:
            The amount, unit, container size and ingredient found in the line.
            Spans are UTF-8 byte offsets into ``text``.

        Raises:
            GrammarParseError: If the line matches no grammar alternative.

        Examples:
            >>> info = IngredientLineParser().parse("2-3 lb potatoes")
            >>> info.unit.value.name, info.unit.span
            ('Pound', Span(start=4, end=6))
        """
        try:
            tree = self.grammar.parse(text)
        except ParseError as e:
            position = len(text[: max(e.pos, 0)].encode("utf-8"))
            logger.debug(f"No parse for {text!r} at byte {position}")
            raise GrammarParseError(text, position) from e
        return IngredientLineVisitor(self.dictionary, text).visit(tree)

    def parse_with_fallback(self, text: str) -> IngredientInfo:
        """Parse a line, treating the whole line as the ingredient on failure."""
        try:
            return self.parse(text)
        except GrammarParseError:
            span = Span(0, len(text.encode("utf-8")))
            return IngredientInfo(ingredient=ValueWithSpan(text, span))


# --- Functions ---


@functools.lru_cache(maxsize=None)
def default_parser() -> IngredientLineParser:
    """Shared parser for the bundled English dictionary."""
    return IngredientLineParser()


def parse(text: str) -> IngredientInfo:
    """Parse an ingredient line with the bundled English dictionary.

    Examples:
        >>> parse("400 ml milk").to_dict()["unit"]
        {'value': 'Milliliter', 'span': {'from': 4, 'to': 6}}
    """
    return default_parser().parse(text)


def parse_with_fallback(text: str) -> IngredientInfo:
    """Like :func:`parse`, but unparseable lines become ingredient-only results."""
    return default_parser().parse_with_fallback(text)


def byte_offsets(text: str) -> List[int]:
    """UTF-8 byte offset of every code point boundary in ``text``.

    ``byte_offsets(text)[i]`` is the byte offset of ``text[i]``; the last
    entry is the encoded length.
    """
    offsets = [0]
    for char in text:
        offsets.append(offsets[-1] + len(char.encode("utf-8")))
    return offsets


def matched_expression(node: Node, literals: Sequence[str]) -> str:
    """Dictionary expression behind a generated literal rule's match.

    The rule's alternatives are emitted in the order of ``literals``; a rule
    with a single literal is a bare regex rather than a choice.
    """
    if not isinstance(node.expr, OneOf):
        if len(literals) != 1:
            raise InternalConsistencyError(
                f"Rule '{node.expr_name}' has one alternative, expected {len(literals)}"
            )
        return literals[0]

    members = node.expr.members
    if len(members) != len(literals):
        raise InternalConsistencyError(
            f"Rule '{node.expr_name}' has {len(members)} alternatives, "
            f"expected {len(literals)}"
        )
    (child,) = node.children
    for member, expression in zip(members, literals):
        if member is child.expr:
            return expression
    raise _unexpected(node, child)


def _collect_fields(value: Any) -> Iterator[_Field]:
    if isinstance(value, _Field):
        yield value
    elif isinstance(value, list):
        for item in value:
            yield from _collect_fields(item)
    elif value is not None and not isinstance(value, Node):
        raise InternalConsistencyError(f"Stray value in line structure: {value!r}")


def _unexpected(node: Node, child: Node) -> InternalConsistencyError:
    return InternalConsistencyError(
        f"Rule '{node.expr_name}' matched unexpected child '{child.expr_name}'"
    )

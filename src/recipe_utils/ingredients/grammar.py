"""Assemble the ingredient line grammar from the base rules and a dictionary."""

import logging
import os

from parsimonious import Grammar

from recipe_utils.dictionary import CompiledDictionary, alternation_rule
from recipe_utils.exceptions import InternalConsistencyError
from recipe_utils.ingredients.number_utils import VULGAR_FRACTIONS

logger = logging.getLogger(__name__)

BASE_GRAMMAR_FILE = os.path.join(
    os.path.dirname(__file__), "data", "ingredient_grammar.peg"
)
DEFAULT_RULE = "ingredient_line"


def build_grammar_text(dictionary: CompiledDictionary) -> str:
    """Return the full grammar text for a compiled dictionary.

    The result is the compiled grammar artifact: the hand-written base rules
    followed by the generated literal rules, headed by the dictionary
    fingerprint so a cached copy can be checked against its source.
    """
    with open(BASE_GRAMMAR_FILE, "r", encoding="utf-8") as f:
        base = f.read()

    return "\n".join(
        [
            f"# Compiled from dictionary {dictionary.fingerprint}",
            base.rstrip("\n"),
            "",
            "# --- generated ---",
            dictionary.grammar_rules(),
            alternation_rule(
                "vulgar_fraction", list(VULGAR_FRACTIONS), ignore_case=False
            ),
            "",
        ]
    )


def build_grammar(dictionary: CompiledDictionary) -> Grammar:
    """Build the parsimonious grammar for a compiled dictionary."""
    grammar = Grammar(build_grammar_text(dictionary))
    if grammar.default_rule.name != DEFAULT_RULE:
        raise InternalConsistencyError(
            f"Grammar default rule is '{grammar.default_rule.name}', "
            f"expected '{DEFAULT_RULE}'"
        )
    logger.debug(f"Built ingredient grammar for dictionary {dictionary.fingerprint[:12]}")
    return grammar

"""Dictionary compiler for unit, number-word and preposition catalogues."""

import functools
import os

from .compiler import (
    CompiledDictionary,
    alternation_rule,
    compile_dictionary,
    load_dictionary,
    longest_first,
    peg_literal,
    to_camel_case,
)

DEFAULT_DICTIONARY_FILE = os.path.join(os.path.dirname(__file__), "data", "en.json")


@functools.lru_cache(maxsize=None)
def default_dictionary() -> CompiledDictionary:
    """Compile the bundled English dictionary once per process."""
    return compile_dictionary(load_dictionary(DEFAULT_DICTIONARY_FILE))


__all__ = [
    "DEFAULT_DICTIONARY_FILE",
    "CompiledDictionary",
    "alternation_rule",
    "compile_dictionary",
    "default_dictionary",
    "load_dictionary",
    "longest_first",
    "peg_literal",
    "to_camel_case",
]

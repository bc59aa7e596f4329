#!/usr/bin/env python3
"""
Compile an ingredient dictionary into the grammar artifact used by the parser.
The output is headed by the dictionary fingerprint so stale copies are easy to spot.
"""

import argparse
import logging
import pathlib

from recipe_utils.dictionary import (
    DEFAULT_DICTIONARY_FILE,
    compile_dictionary,
    load_dictionary,
)
from recipe_utils.exceptions import DictionaryCompileError
from recipe_utils.ingredients import build_grammar, build_grammar_text

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def main():
    """Main function to compile a dictionary into grammar text."""
    parser = argparse.ArgumentParser(
        description="Compile an ingredient dictionary into PEG grammar text"
    )
    parser.add_argument(
        "--dictionary",
        type=str,
        default=DEFAULT_DICTIONARY_FILE,
        help="Path to the dictionary JSON file",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="data/ingredient_grammar.compiled.peg",
        help="Path of the grammar file to write",
    )
    args = parser.parse_args()

    try:
        compiled = compile_dictionary(load_dictionary(args.dictionary))
    except DictionaryCompileError as e:
        logger.error(f"Dictionary {args.dictionary} did not compile: {e}")
        raise SystemExit(1)

    grammar_text = build_grammar_text(compiled)
    # Fail here rather than at parse time if the generated rules are invalid
    build_grammar(compiled)

    output = pathlib.Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(grammar_text, encoding="utf-8")

    logger.info(f"Wrote grammar for dictionary {compiled.fingerprint[:12]} to {output}")
    logger.info(
        f"  - {len(compiled.unit)} units from {len(compiled.unit_literals)} expressions"
    )
    logger.info(f"  - {len(compiled.number_literals)} number words")
    logger.info(f"  - {len(compiled.preposition_literals)} prepositions")


if __name__ == "__main__":
    main()

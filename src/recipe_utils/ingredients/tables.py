"""Parse batches of ingredient lines into pandas tables."""

import logging
from typing import Iterable, Optional

import numpy as np
import pandas as pd
from tqdm import tqdm

from recipe_utils.exceptions import GrammarParseError
from recipe_utils.ingredients.number_utils import amount_bounds
from recipe_utils.ingredients.parsing import IngredientLineParser, default_parser

logger = logging.getLogger(__name__)

COLUMNS = [
    "text",
    "amount",
    "range_from",
    "range_to",
    "unit",
    "container_amount",
    "container_unit",
    "ingredient",
    "error",
]


def parse_ingredient_lines(
    lines: Iterable[str],
    parser: Optional[IngredientLineParser] = None,
    progress: bool = False,
) -> pd.DataFrame:
    """Parse ingredient lines into a table with one row per line.

    Lines that fail to parse, or whose amounts do not fit in a float, do not
    stop the batch: their row has only ``text`` and ``error`` filled in.

    Args:
        lines: Ingredient lines, e.g. read from a recipe file.
        parser: Parser to use. Defaults to the bundled English parser.
        progress: Show a tqdm progress bar.

    Returns:
        DataFrame with the columns in ``COLUMNS``. ``amount`` is the
        constant value, or the midpoint for a range whose bounds are in
        ``range_from`` and ``range_to``. Missing numbers are NaN and missing
        units or ingredients are None. Units are enum member names.
    """
    parser = parser or default_parser()
    if progress:
        lines = tqdm(lines, desc="Parsing ingredient lines")

    rows = []
    failures = 0
    for text in lines:
        try:
            rows.append(_parsed_row(parser, text))
        except GrammarParseError as e:
            logger.warning(f"Skipping unparseable ingredient line: {e}")
            failures += 1
            rows.append(_empty_row(text, error=str(e)))
        except OverflowError as e:
            logger.warning(f"Amount out of range in ingredient line {text!r}: {e}")
            failures += 1
            rows.append(_empty_row(text, error=f"Amount out of range: {e}"))

    if failures:
        logger.warning(f"{failures} of {len(rows)} ingredient lines failed to parse")
    return pd.DataFrame(rows, columns=COLUMNS)


def _empty_row(text: str, error: Optional[str] = None) -> dict:
    return {
        "text": text,
        "amount": np.nan,
        "range_from": np.nan,
        "range_to": np.nan,
        "unit": None,
        "container_amount": np.nan,
        "container_unit": None,
        "ingredient": None,
        "error": error,
    }


def _parsed_row(parser: IngredientLineParser, text: str) -> dict:
    info = parser.parse(text)
    row = _empty_row(text)
    low, high = amount_bounds(info.amount.value if info.amount else None)
    if high is None:
        row["amount"] = np.nan if low is None else low
    else:
        row["amount"] = (low + high) / 2
        row["range_from"] = low
        row["range_to"] = high
    container_low, container_high = amount_bounds(
        info.container_amount.value if info.container_amount else None
    )
    if container_low is not None:
        row["container_amount"] = (
            container_low
            if container_high is None
            else (container_low + container_high) / 2
        )
    row["unit"] = info.unit.value.name if info.unit else None
    row["container_unit"] = (
        info.container_unit.value.name if info.container_unit else None
    )
    row["ingredient"] = info.ingredient.value if info.ingredient else None
    return row

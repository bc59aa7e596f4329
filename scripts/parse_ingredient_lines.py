#!/usr/bin/env python3
"""
Parse a text file of ingredient lines (one per line) into a table of
amount, unit and ingredient.
"""

import argparse
import datetime
import logging
import pathlib

from recipe_utils.ingredients import IngredientLineParser, parse_ingredient_lines

logging.basicConfig(
    level=logging.WARNING, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def main():
    """Main function to parse ingredient lines into a table."""
    parser = argparse.ArgumentParser(
        description="Parse ingredient lines into an amount/unit/ingredient table"
    )
    parser.add_argument(
        "--input",
        type=str,
        required=True,
        help="Text file with one ingredient line per line",
    )
    parser.add_argument(
        "--dictionary",
        type=str,
        default=None,
        help="Dictionary JSON file (defaults to the bundled English dictionary)",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default="data",
        help="Output directory for table file",
    )
    parser.add_argument(
        "--output-format",
        type=str,
        choices=["csv", "parquet"],
        default="csv",
        help="Output file format (csv or parquet)",
    )
    args = parser.parse_args()

    ingredient_parser = (
        IngredientLineParser.from_file(args.dictionary)
        if args.dictionary
        else IngredientLineParser()
    )

    with open(args.input, "r", encoding="utf-8") as f:
        lines = [line.rstrip("\r\n") for line in f if line.strip()]

    df = parse_ingredient_lines(lines, parser=ingredient_parser, progress=True)

    timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
    output_dir = pathlib.Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    if args.output_format == "parquet":
        output_file = output_dir / f"parsed_ingredients_{timestamp}.parquet"
        df.to_parquet(output_file, index=False)
    else:  # csv
        output_file = output_dir / f"parsed_ingredients_{timestamp}.csv"
        df.to_csv(output_file, index=False)

    print("Successfully parsed ingredient lines:")
    print(f"  - File: {output_file}")
    print(f"  - Lines: {len(df)}")
    print(f"  - Failed: {df['error'].notna().sum()}")
    print(f"  - With amount: {df['amount'].notna().sum()}")
    print(f"  - With unit: {df['unit'].notna().sum()}")


if __name__ == "__main__":
    main()

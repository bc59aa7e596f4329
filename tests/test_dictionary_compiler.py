import json

import pytest

from recipe_utils.dictionary import (
    alternation_rule,
    compile_dictionary,
    default_dictionary,
    load_dictionary,
    longest_first,
    peg_literal,
    to_camel_case,
)
from recipe_utils.exceptions import DictionaryCompileError
from recipe_utils.ingredients import IngredientLineParser, Unit


@pytest.fixture
def document():
    return {
        "units": {
            "ounce": ["oz", "ounce", "ounces"],
            "fluid_ounce": ["fl. oz", "fl.oz"],
            "to_taste": ["to taste"],
        },
        "numbers": {"a": 1, "one": 1, "two": 2},
        "prepositions": ["of", "of the"],
        "range_words": ["to", "or"],
    }


def test_literals_are_sorted_longest_first(document):
    compiled = compile_dictionary(document)

    assert compiled.unit_literals == (
        "to taste",
        "ounces",
        "fl. oz",
        "ounce",
        "fl.oz",
        "oz",
    )
    assert compiled.number_literals == ("one", "two", "a")
    assert compiled.preposition_literals == ("of the", "of")


@pytest.mark.parametrize(
    "expressions, expected",
    [
        (["a", "bbb", "cc"], ("bbb", "cc", "a")),
        (["xy", "ab", "z"], ("xy", "ab", "z")),
        ([], ()),
    ],
)
def test_longest_first_is_stable(expressions, expected):
    assert longest_first(expressions) == expected


def test_unit_enum_is_built_from_canonical_names(document):
    unit = compile_dictionary(document).unit

    assert [member.name for member in unit] == ["Ounce", "FluidOunce", "ToTaste"]
    assert unit.ToTaste.value == "to_taste"


@pytest.mark.parametrize(
    "expression, expected_name",
    [
        ("oz", "Ounce"),
        ("OUNCES", "Ounce"),
        ("Fl.Oz", "FluidOunce"),
        ("to taste", "ToTaste"),
    ],
)
def test_lookup_unit_ignores_case(document, expression, expected_name):
    assert compile_dictionary(document).lookup_unit(expression).name == expected_name


@pytest.mark.parametrize("expression", ["o", "ozs", " oz", "taste"])
def test_lookup_unit_is_exact(document, expression):
    assert compile_dictionary(document).lookup_unit(expression) is None


def test_lookup_number(document):
    compiled = compile_dictionary(document)

    assert compiled.lookup_number("Two") == 2
    assert compiled.lookup_number("A") == 1
    assert compiled.lookup_number("three") is None


def test_tables_are_read_only(document):
    compiled = compile_dictionary(document)

    with pytest.raises(TypeError):
        compiled.unit_table["lb"] = compiled.unit.Ounce
    with pytest.raises(TypeError):
        compiled.number_table["three"] = 3


def test_fingerprint_tracks_content(document):
    first = compile_dictionary(document).fingerprint
    assert compile_dictionary(document).fingerprint == first

    document["numbers"]["three"] = 3
    assert compile_dictionary(document).fingerprint != first


def test_grammar_rules(document):
    rules = compile_dictionary(document).grammar_rules().splitlines()

    assert rules[0].startswith("unit_literal = ~'to\\\\ taste'i / ~'ounces'i")
    assert rules[1] == "word_digit_literal = ~'one'i / ~'two'i / ~'a'i"
    assert rules[2] == "preposition_literal = ~'of\\\\ the'i / ~'of'i"
    assert rules[3] == "range_word_literal = ~'to'i / ~'or'i"


@pytest.mark.parametrize(
    "expression, ignore_case, expected",
    [
        ("kg", True, "~'kg'i"),
        ("½", False, "~'½'"),
        ("lb.", True, "~'lb\\\\.'i"),
        ("it's", True, '~"it\'s"i'),
    ],
)
def test_peg_literal(expression, ignore_case, expected):
    assert peg_literal(expression, ignore_case) == expected


def test_alternation_rule_needs_alternatives():
    with pytest.raises(DictionaryCompileError):
        alternation_rule("unit_literal", [])


@pytest.mark.parametrize(
    "name, expected",
    [("kilogram", "Kilogram"), ("to_taste", "ToTaste"), ("fluid_ounce", "FluidOunce")],
)
def test_to_camel_case(name, expected):
    assert to_camel_case(name) == expected


def test_special_characters_are_escaped_in_grammar():
    """Regex metacharacters and quotes in expressions must match literally."""
    compiled = compile_dictionary(
        {
            "units": {
                "fluid_ounce": ["fl.oz"],
                "scoop": ['sc"p', "sc'p", "s(c)?"],
            },
            "numbers": {"one": 1},
            "prepositions": ["of"],
            "range_words": ["to"],
        }
    )
    parser = IngredientLineParser(compiled)

    assert parser.parse("1 fl.oz rum").unit.value == compiled.unit.FluidOunce
    assert parser.parse("1 flxoz rum").unit is None
    assert parser.parse('1 sc"p ice').unit.value == compiled.unit.Scoop
    assert parser.parse("1 sc'p ice").unit.value == compiled.unit.Scoop
    assert parser.parse("1 s(c)? ice").unit.value == compiled.unit.Scoop
    assert parser.parse("1 sc ice").unit is None


@pytest.mark.parametrize(
    "mutate",
    [
        pytest.param(lambda d: d.pop("units"), id="missing-units"),
        pytest.param(lambda d: d.pop("numbers"), id="missing-numbers"),
        pytest.param(lambda d: d.pop("prepositions"), id="missing-prepositions"),
        pytest.param(lambda d: d.update(units={}), id="empty-units"),
        pytest.param(lambda d: d.update(prepositions=[]), id="empty-prepositions"),
        pytest.param(lambda d: d["units"].update(pound=[]), id="unit-without-expressions"),
        pytest.param(lambda d: d["units"].update(Pound=["lb"]), id="canonical-not-snake-case"),
        pytest.param(lambda d: d["units"].update(oz_2=["a"], oz2=["b"]), id="canonical-collision"),
        pytest.param(lambda d: d["units"].update(weight_ounce=["oz"]), id="duplicate-unit-expression"),
        pytest.param(lambda d: d["units"].update(ounce2=["OZ"]), id="duplicate-ignoring-case"),
        pytest.param(lambda d: d["units"].update(pound=["lb "]), id="padded-expression"),
        pytest.param(lambda d: d["units"].update(pound=[""]), id="empty-expression"),
        pytest.param(lambda d: d["units"].update(pound=[3]), id="non-string-expression"),
        pytest.param(lambda d: d["numbers"].update(three=3.5), id="float-number"),
        pytest.param(lambda d: d["numbers"].update(three=True), id="bool-number"),
        pytest.param(lambda d: d["numbers"].update(three=-3), id="negative-number"),
        pytest.param(lambda d: d["numbers"].update(ONE=1), id="duplicate-number-word"),
        pytest.param(lambda d: d["prepositions"].append("Of"), id="duplicate-preposition"),
        pytest.param(lambda d: d.pop("range_words"), id="missing-range-words"),
        pytest.param(lambda d: d.update(range_words="to"), id="range-words-not-a-list"),
        pytest.param(lambda d: d["range_words"].append("TO"), id="duplicate-range-word"),
    ],
)
def test_compile_rejects_bad_dictionaries(document, mutate):
    mutate(document)

    with pytest.raises(DictionaryCompileError):
        compile_dictionary(document)


def test_compile_error_names_the_entry(document):
    document["units"]["weight_ounce"] = ["oz"]

    with pytest.raises(DictionaryCompileError) as excinfo:
        compile_dictionary(document)

    assert excinfo.value.group == "units"
    assert excinfo.value.expression == "oz"
    assert "ounce" in str(excinfo.value)


def test_load_dictionary_round_trip(tmp_path, document):
    path = tmp_path / "dictionary.json"
    path.write_text(json.dumps(document), encoding="utf-8")

    assert load_dictionary(str(path)) == document


def test_load_dictionary_rejects_duplicate_keys(tmp_path):
    path = tmp_path / "dictionary.json"
    path.write_text(
        '{"units": {"ounce": ["oz"]},'
        ' "numbers": {"one": 1, "one": 2},'
        ' "prepositions": ["of"]}',
        encoding="utf-8",
    )

    with pytest.raises(DictionaryCompileError):
        load_dictionary(str(path))


def test_default_dictionary_is_shared():
    assert default_dictionary() is default_dictionary()
    assert default_dictionary().unit is Unit


@pytest.mark.parametrize(
    "name",
    ["Kilogram", "Pound", "Ounce", "Cup", "Milliliter", "Handful", "ToTaste"],
)
def test_bundled_dictionary_units(name):
    assert Unit[name].name == name

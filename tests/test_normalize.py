from __future__ import annotations

import pytest

from layered_dotenv.normalize import coerce_value, normalize_value, to_env_string


def test_normalize_value_strips_wrappers() -> None:
    assert normalize_value('"""triple"""') == "triple"
    assert normalize_value('"double"') == "double"
    assert normalize_value('""') == ""
    assert normalize_value("  bare  ") == "bare"


def test_normalize_value_unescapes_quotes_only_inside_wrappers() -> None:
    assert normalize_value('"a \\"quoted\\" word"') == 'a "quoted" word'
    assert normalize_value('plain \\"kept\\"') == 'plain \\"kept\\"'


def test_normalize_value_leaves_lone_quote() -> None:
    assert normalize_value('"') == '"'
    assert normalize_value('"unbalanced') == '"unbalanced'


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("3000", 3000),
        ("-5", -5),
        ("+7", 7),
        ("  42  ", 42),
        ("3.14", 3.14),
        ("1e3", 1000.0),
        (".5", 0.5),
        ("true", True),
        ("False", False),
        ("NULL", None),
        ('{"a": 1}', {"a": 1}),
        ("[]", []),
    ],
)
def test_coerce_value_sniffs_types(raw: str, expected: object) -> None:
    assert coerce_value(raw) == expected
    assert type(coerce_value(raw)) is type(expected)


@pytest.mark.parametrize(
    "raw",
    ["hello", "", "1e400", "NaN", "Infinity", "0x10", "1_000", "12abc", "{broken", "yes"],
)
def test_coerce_value_returns_original_string(raw: str) -> None:
    assert coerce_value(raw) == raw


def test_coerce_value_keeps_untrimmed_string_when_nothing_matches() -> None:
    assert coerce_value("  spaced  ") == "  spaced  "


def test_to_env_string_renders_typed_values() -> None:
    assert to_env_string("text") == "text"
    assert to_env_string(True) == "true"
    assert to_env_string(False) == "false"
    assert to_env_string(None) == "null"
    assert to_env_string(3000) == "3000"
    assert to_env_string(0.5) == "0.5"
    assert to_env_string(1000.0) == "1000"
    assert to_env_string(-2.0) == "-2"
    assert to_env_string({"a": [1, 2]}) == '{"a":[1,2]}'

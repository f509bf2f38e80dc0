"""Tests for the positioned JSON parser."""

import json

import pytest

from theme_lens.core.errors import JSONParseError
from theme_lens.core.json_ast import JSONArray, JSONLiteral, JSONObject, parse_json, to_value

# Deeper than the recursion a naive descent parser could afford.
DEEP = 600


def _error(source: str) -> JSONParseError:
    with pytest.raises(JSONParseError) as exc_info:
        parse_json(source)
    return exc_info.value


class TestParseJson:
    def test_parses_nested_values_with_positions(self) -> None:
        source = '{"a": [1, true, null], "b": {"c": "d"}}'
        node = parse_json(source)

        assert isinstance(node, JSONObject)
        assert [prop.key.value for prop in node.children] == ["a", "b"]
        array = node.children[0].value
        assert isinstance(array, JSONArray)
        assert source[array.start : array.end] == "[1, true, null]"
        literal = node.children[1].value.children[0].value  # type: ignore[union-attr]
        assert isinstance(literal, JSONLiteral)
        assert literal.raw == '"d"'
        assert source[literal.start : literal.end] == '"d"'

    def test_to_value_matches_plain_data(self) -> None:
        source = '{"a": [1, 2.5, false], "b": {"c": null}, "e": "\\u00e9"}'
        assert to_value(parse_json(source)) == {"a": [1, 2.5, False], "b": {"c": None}, "e": "é"}

    def test_get_returns_last_duplicate(self) -> None:
        node = parse_json('{"a": 1, "a": 2}')
        assert isinstance(node, JSONObject)
        prop = node.get("a")
        assert prop is not None
        assert to_value(prop.value) == 2
        assert node.get("missing") is None

    def test_empty_containers(self) -> None:
        assert to_value(parse_json("{}")) == {}
        assert to_value(parse_json("[]")) == []

    def test_deep_nesting_does_not_exhaust_the_stack(self) -> None:
        source = "[" * DEEP + "]" * DEEP
        node = parse_json(source)
        assert (node.start, node.end) == (0, len(source))
        assert to_value(node) == json.loads(source)

    def test_deeply_nested_objects(self) -> None:
        source = '{"a": ' * DEEP + "1" + "}" * DEEP
        assert to_value(parse_json(source)) == json.loads(source)

    def test_duplicate_container_keys_keep_the_last(self) -> None:
        assert to_value(parse_json('{"a": {"x": 1}, "a": [2]}')) == {"a": [2]}


class TestParseErrors:
    def test_stray_comma_is_an_unexpected_token(self) -> None:
        source = '{\n  "key1": "value1",\n  "key2": "value2",,\n}'
        error = _error(source)
        assert error.message == "Unexpected token <,>"
        assert source[error.start : error.end] == ","
        assert error.start == source.rindex(",")

    def test_unterminated_object_points_at_trailing_newline(self) -> None:
        source = '{\n  "key1": "value1",\n  "key2": "value2"\n    '
        error = _error(source)
        assert error.message == "Unexpected end of input"
        assert source[error.start : error.end] == "\n"

    def test_single_quotes_are_an_unexpected_symbol(self) -> None:
        source = "{\n  'key1': \"value1\"\n}"
        error = _error(source)
        assert error.message == "Unexpected symbol <'>"
        assert source[error.start : error.end] == "'"

    def test_trailing_content_after_value(self) -> None:
        error = _error("{} []")
        assert error.message == "Unexpected token <[>"

    def test_unterminated_string(self) -> None:
        error = _error('{"a": "b\n}')
        assert error.message == 'Unexpected symbol <">'
        assert error.start == 6

    def test_end_of_input_without_trailing_character_points_at_last_character(self) -> None:
        source = '{"a": 1'
        error = _error(source)
        assert error.message == "Unexpected end of input"
        assert (error.start, error.end) == (len(source) - 1, len(source))

    def test_deep_nesting_error_is_reported(self) -> None:
        error = _error("[" * DEEP + "]" * (DEEP - 1))
        assert error.message == "Unexpected end of input"

    def test_empty_source(self) -> None:
        error = _error("")
        assert error.message == "Unexpected end of input"
        assert (error.start, error.end) == (0, 0)

    @pytest.mark.parametrize(
        "source",
        ['{"a": 1}', "[1, 2, 3]", '"text"', "  {\n}\n", '{"nested": {"deep": [{"x": -1.5e3}]}}'],
    )
    def test_valid_json_never_fails(self, source: str) -> None:
        parse_json(source)

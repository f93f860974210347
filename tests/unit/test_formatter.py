"""Tests for per-target value formatting."""

import pytest

from tokensmith.core.errors import TypeMismatchError
from tokensmith.core.formatter import (
    format_color,
    format_native_value,
    format_number,
    format_web_value,
    shape_error,
)
from tokensmith.core.ir import ColorComponents, ResolvedToken, Theme, TokenType
from tokensmith.core.manifest import WebConfig


def _token(token_type: TokenType, value, path=("Tokens", "a")) -> ResolvedToken:
    return ResolvedToken(
        path=path,
        theme=Theme.LIGHT,
        type=token_type,
        value=value,
        chain=(".".join(path),),
    )


class TestColors:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("#0ea5e9", "#0EA5E9"),
            ("#fff", "#FFFFFF"),
            ("#0EA5E980", "rgba(14, 165, 233, 0.502)"),
            ("rgba(255, 0, 0, 1)", "#FF0000"),
            ("rgb(1, 2, 3)", "#010203"),
            ("rgba(0, 0, 0, 0.25)", "rgba(0, 0, 0, 0.25)"),
        ],
    )
    def test_string_forms(self, value, expected):
        assert format_color(value) == expected

    def test_components(self):
        assert format_color(ColorComponents(components=(1.0, 0.5, 0.0))) == "#FF8000"

    def test_components_with_alpha(self):
        assert format_color(ColorComponents(components=(0, 0, 0), alpha=0.5)) == "rgba(0, 0, 0, 0.5)"

    def test_hex_wins_over_components(self):
        value = ColorComponents(components=(0.937, 0.267, 0.267), hex="#ef4444")

        assert format_color(value) == "#EF4444"

    def test_same_literal_for_both_targets(self):
        token = _token(TokenType.COLOR, "#0ea5e9")

        assert format_web_value(token, WebConfig()) == "#0EA5E9"
        assert format_native_value(token) == "#0EA5E9"


class TestNumbers:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (4, "4"),
            (4.0, "4"),
            (0.125, "0.125"),
            (0.12345, "0.12345"),
            (1 / 3, "0.3333333333333333"),
            (-2.5, "-2.5"),
        ],
    )
    def test_format_number(self, value, expected):
        assert format_number(value) == expected

    def test_dimension_is_scaled_for_web(self):
        token = _token(TokenType.DIMENSION, 3.5)

        assert format_web_value(token, WebConfig()) == "14px"
        assert format_web_value(token, WebConfig(dimension_multiplier=1, dimension_unit="rem")) == "3.5rem"

    def test_dimension_is_raw_for_native(self):
        assert format_native_value(_token(TokenType.DIMENSION, 3.5)) == 3.5
        assert format_native_value(_token(TokenType.DIMENSION, 4.0)) == 4

    def test_number(self):
        token = _token(TokenType.NUMBER, 0.4)

        assert format_web_value(token, WebConfig()) == "0.4"
        assert format_native_value(token) == 0.4

    def test_number_keeps_every_digit(self):
        token = _token(TokenType.NUMBER, 0.12345, path=("Opacity", "x"))

        assert format_web_value(token, WebConfig()) == "0.12345"
        assert format_native_value(token) == 0.12345

    def test_scaled_dimension_drops_float_noise(self):
        assert format_web_value(_token(TokenType.DIMENSION, 0.1), WebConfig()) == "0.4px"
        tripled = WebConfig(dimension_multiplier=3)
        assert format_web_value(_token(TokenType.DIMENSION, 0.1), tripled) == "0.3px"


class TestStrings:
    def test_passthrough(self):
        token = _token(TokenType.STRING, "Inter, system-ui, sans-serif")

        assert format_web_value(token, WebConfig()) == "Inter, system-ui, sans-serif"
        assert format_native_value(token) == "Inter, system-ui, sans-serif"

    def test_unsafe_for_css(self):
        token = _token(TokenType.STRING, "red; background: url(x)")

        with pytest.raises(TypeMismatchError, match="break a declaration"):
            format_web_value(token, WebConfig())

        assert format_native_value(token) == "red; background: url(x)"


class TestShapeError:
    @pytest.mark.parametrize(
        "token_type,value",
        [
            (TokenType.COLOR, "#0EA5E9"),
            (TokenType.COLOR, ColorComponents(hex="#000000")),
            (TokenType.DIMENSION, 4),
            (TokenType.NUMBER, 0.5),
            (TokenType.STRING, "Inter"),
        ],
    )
    def test_accepts(self, token_type, value):
        assert shape_error(token_type, value) is None

    @pytest.mark.parametrize(
        "token_type,value",
        [
            (TokenType.COLOR, 4),
            (TokenType.COLOR, "#12345"),
            (TokenType.COLOR, "rgb(300, 0, 0)"),
            (TokenType.DIMENSION, "4px"),
            (TokenType.NUMBER, ColorComponents(hex="#000000")),
            (TokenType.STRING, 4),
        ],
    )
    def test_rejects(self, token_type, value):
        assert shape_error(token_type, value) is not None

    def test_formatting_a_mismatched_value_raises(self):
        token = _token(TokenType.NUMBER, "wide")

        with pytest.raises(TypeMismatchError, match="declared as number"):
            format_native_value(token)

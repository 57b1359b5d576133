"""Tests for the foldexpr expression language front end.

Covers:
- Classifier: character classes, priority order, operator lookup
- Parser: literals, operator chains, left-to-right order, error reporting
- Round trip: render output re-parses to the same value
"""

from __future__ import annotations

import pytest

from foldexpr.core.errors import (
    EmptyBufferError,
    ExpressionContractError,
    InvalidCharacterError,
    ParsingError,
)
from foldexpr.core.expression_lang import (
    CharClass,
    OperatorKind,
    classify,
    operator_kind,
    parse,
)
from foldexpr.core.ir import (
    Addition,
    Division,
    Environment,
    Multiplication,
    ScalarValue,
    Subtraction,
)

# ============================================================================
# Classifier tests
# ============================================================================


class TestClassifier:
    """Characters map to the right coarse class."""

    def test_digits(self) -> None:
        for c in "0123456789":
            assert classify(c) == CharClass.NUMBER

    def test_operators(self) -> None:
        for c in "+-*/^":
            assert classify(c) == CharClass.OPERATOR

    def test_letters(self) -> None:
        for c in "aZxé":
            assert classify(c) == CharClass.LETTER

    def test_point(self) -> None:
        assert classify(".") == CharClass.POINT

    def test_whitespace(self) -> None:
        for c in " \t\n\r":
            assert classify(c) == CharClass.WHITESPACE

    def test_brackets(self) -> None:
        for c in "(){}[]":
            assert classify(c) == CharClass.BRACKET

    def test_unknown(self) -> None:
        for c in "%$#,_=!":
            assert classify(c) == CharClass.UNKNOWN

    def test_unicode_digit_is_number(self) -> None:
        assert classify("٣") == CharClass.NUMBER

    def test_operator_kind(self) -> None:
        assert operator_kind("+") == OperatorKind.ADD
        assert operator_kind("-") == OperatorKind.SUBTRACT
        assert operator_kind("*") == OperatorKind.MULTIPLY
        assert operator_kind("/") == OperatorKind.DIVIDE
        assert operator_kind("^") == OperatorKind.POWER

    def test_operator_kind_on_non_operator_is_contract_violation(self) -> None:
        with pytest.raises(ExpressionContractError):
            operator_kind("7")
        with pytest.raises(AssertionError):
            operator_kind("(")


# ============================================================================
# Parser tests: literals
# ============================================================================


class TestParseLiterals:
    """Single literals parse to scalars and render unchanged."""

    @pytest.mark.parametrize(
        "source,expected",
        [
            ("21", 21.0),
            ("-21", -21.0),
            ("21.25", 21.25),
            ("-21.25", -21.25),
            ("0", 0.0),
            ("0.5", 0.5),
        ],
    )
    def test_literal_value_and_render(
        self, env: Environment, source: str, expected: float
    ) -> None:
        expr = parse(source)
        assert isinstance(expr, ScalarValue)
        assert expr.evaluate(env) == expected
        assert expr.render() == source

    def test_surrounding_whitespace_ignored(self, env: Environment) -> None:
        expr = parse("   42  ")
        assert expr == ScalarValue(value=42.0)

    def test_large_literal_renders_without_exponent(self) -> None:
        assert parse("1000000000000000000000").render() == "1000000000000000000000"

    def test_trailing_point_accepted(self, env: Environment) -> None:
        expr = parse("5.")
        assert expr.evaluate(env) == 5.0
        assert expr.render() == "5"

    def test_point_after_sign_accepted(self, env: Environment) -> None:
        # The sign opens the literal, so the point is no longer at its start
        expr = parse("-.5")
        assert expr == ScalarValue(value=-0.5)
        assert expr.evaluate(env) == -0.5
        assert expr.render() == "-0.5"

    @pytest.mark.parametrize("source,index", [(".5", 0), ("1 + .5", 4)])
    def test_bare_point_still_rejected(self, source: str, index: int) -> None:
        with pytest.raises(InvalidCharacterError) as exc_info:
            parse(source)
        assert exc_info.value.index == index
        assert exc_info.value.message == "Point at the start of a block"


# ============================================================================
# Parser tests: operators
# ============================================================================


class TestParseOperators:
    """Binary operators, chains and strict left-to-right folding."""

    @pytest.mark.parametrize(
        "source,expected",
        [
            ("1 + 2", 3.0),
            ("-1 + 2", 1.0),
            ("1.03 + 2.07", 3.1),
            ("4 - 3", 1.0),
            ("4.17 - 2.08", 2.09),
            ("1 + 2 + 3", 6.0),
            ("1.03 + 2.07 + 3.05", 6.15),
            ("4 - 2 - 1", 1.0),
            ("4.17 - 2.08 - 1.03", 1.06),
            ("4 + 3 - 5", 2.0),
            ("4 - 3 + 5", 6.0),
            ("4.11 + 3.06 - 5.08", 2.09),
            ("4.04 - 3.01 + 5.09", 6.12),
            ("4 * 3", 12.0),
            ("4.17 * 2.08", 8.6736),
            ("4 / 2", 2.0),
            ("5 / 2", 2.5),
            ("4.2 / 2.2", 1.90909090909),
        ],
    )
    def test_value_and_render(self, env: Environment, source: str, expected: float) -> None:
        expr = parse(source)
        assert expr.render() == source
        assert expr.evaluate(env) == pytest.approx(expected, rel=1e-9)

    def test_left_to_right_order(self, env: Environment) -> None:
        expr = parse("4 - 3 + 5")
        assert isinstance(expr, Addition)
        assert isinstance(expr.left, Subtraction)
        assert expr.right == ScalarValue(value=5.0)
        assert expr.evaluate(env) == 6.0

    def test_no_precedence_between_operators(self, env: Environment) -> None:
        # (2 + 3) * 4, not 2 + (3 * 4)
        expr = parse("2 + 3 * 4")
        assert isinstance(expr, Multiplication)
        assert expr.evaluate(env) == 20.0

    def test_operators_without_spaces(self, env: Environment) -> None:
        expr = parse("4-3+5")
        assert expr.render() == "4 - 3 + 5"
        assert expr.evaluate(env) == 6.0

    def test_extra_spacing_normalised(self) -> None:
        assert parse("  1   *\t2 ").render() == "1 * 2"

    def test_negative_right_operand(self, env: Environment) -> None:
        expr = parse("1 - -2")
        assert expr.render() == "1 - -2"
        assert expr.evaluate(env) == 3.0

    def test_division_node(self) -> None:
        expr = parse("8 / 4 / 2")
        assert isinstance(expr, Division)
        assert isinstance(expr.left, Division)

    def test_result_is_complete(self) -> None:
        assert parse("1 + 2 * 3").is_complete


# ============================================================================
# Parser tests: errors
# ============================================================================


class TestParseErrors:
    """Malformed input fails fast with positioned errors."""

    @pytest.mark.parametrize("source", ["", "   ", "\t\n"])
    def test_empty_input(self, source: str) -> None:
        with pytest.raises(EmptyBufferError) as exc_info:
            parse(source)
        assert str(exc_info.value) == "Empty buffer!"

    def test_point_at_start(self) -> None:
        with pytest.raises(InvalidCharacterError) as exc_info:
            parse(".64")
        err = exc_info.value
        assert err.index == 0
        assert err.character == "."
        assert err.message == "Point at the start of a block"
        assert str(err) == "Error at char '.' at index 0 (Point at the start of a block)"

    def test_operator_at_start(self) -> None:
        with pytest.raises(InvalidCharacterError) as exc_info:
            parse("*765")
        assert str(exc_info.value) == (
            "Error at char '*' at index 0 (Operator at the start of a block)"
        )

    def test_operator_after_operator(self) -> None:
        with pytest.raises(InvalidCharacterError) as exc_info:
            parse("1 + * 2")
        assert exc_info.value.index == 4
        assert exc_info.value.message == "Operator at the start of a block"

    def test_letter_inside_number(self) -> None:
        with pytest.raises(InvalidCharacterError) as exc_info:
            parse("12x")
        assert exc_info.value.index == 2
        assert exc_info.value.message == "Letter inside number"

    def test_unknown_symbol(self) -> None:
        with pytest.raises(InvalidCharacterError) as exc_info:
            parse("1 % 2")
        assert exc_info.value.index == 2
        assert exc_info.value.message == "Unknown symbol"

    def test_unknown_symbol_inside_number(self) -> None:
        with pytest.raises(InvalidCharacterError) as exc_info:
            parse("1,5")
        assert exc_info.value.message == "Unknown symbol"

    def test_missing_operator_between_literals(self) -> None:
        with pytest.raises(InvalidCharacterError) as exc_info:
            parse("1 2")
        assert exc_info.value.index == 2
        assert exc_info.value.message == "Expected operator after previous expression"

    def test_brackets_rejected(self) -> None:
        with pytest.raises(InvalidCharacterError) as exc_info:
            parse("(1 + 2)")
        assert exc_info.value.index == 0
        assert exc_info.value.message == "Brackets are not supported"

    def test_power_rejected(self) -> None:
        with pytest.raises(InvalidCharacterError) as exc_info:
            parse("2 ^ 3")
        assert exc_info.value.index == 2
        assert exc_info.value.message == "Unsupported operator"

    def test_index_counts_characters_not_bytes(self) -> None:
        # "٣" is two bytes in UTF-8
        with pytest.raises(InvalidCharacterError) as exc_info:
            parse("٣ + 1 % 2")
        assert exc_info.value.index == 6

    def test_multiple_points_fail_at_conversion(self) -> None:
        with pytest.raises(ParsingError):
            parse("1.2.3")

    def test_lone_minus(self) -> None:
        with pytest.raises(ParsingError):
            parse("-")

    def test_trailing_operator(self) -> None:
        with pytest.raises(ParsingError) as exc_info:
            parse("1 +")
        assert exc_info.value.message == "Missing right operand"

    def test_names_not_supported(self) -> None:
        with pytest.raises(ParsingError) as exc_info:
            parse("abc")
        assert "Names are not supported" in str(exc_info.value)

    def test_point_inside_name(self) -> None:
        with pytest.raises(InvalidCharacterError) as exc_info:
            parse("ab.c")
        assert exc_info.value.index == 2
        assert exc_info.value.message == "Point inside name"

    def test_overflowing_literal(self) -> None:
        with pytest.raises(ParsingError):
            parse("9" * 400)


# ============================================================================
# Round trip
# ============================================================================


class TestRoundTrip:
    """render() output parses back to an equivalent tree."""

    @pytest.mark.parametrize(
        "source",
        ["21", "-0.125", "1+2", "4-3+5", "  7 *  -2 / 4 ", "0.1 + 0.2 - 0.3", "123456789.5 * 3"],
    )
    def test_reparse_same_value(self, env: Environment, source: str) -> None:
        expr = parse(source)
        again = parse(expr.render())
        assert again.evaluate(env) == expr.evaluate(env)
        assert again.render() == expr.render()

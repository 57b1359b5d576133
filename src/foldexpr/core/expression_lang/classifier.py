"""
Character classifier for the foldexpr expression language.

Maps single characters to coarse classes the parser dispatches on.
"""

from __future__ import annotations

from enum import StrEnum, auto

from foldexpr.core.errors import ExpressionContractError


class CharClass(StrEnum):
    """Coarse character classes."""

    NUMBER = auto()
    LETTER = auto()
    OPERATOR = auto()
    WHITESPACE = auto()
    BRACKET = auto()
    POINT = auto()
    UNKNOWN = auto()


class OperatorKind(StrEnum):
    """Operator symbols recognised by the classifier."""

    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    POWER = "^"


_OPERATOR_CHARS = frozenset(kind.value for kind in OperatorKind)
_BRACKET_CHARS = frozenset("(){}[]")


def classify(char: str) -> CharClass:
    """Classify one character. Total: anything unrecognised is UNKNOWN.

    First match wins: digit, operator, letter, point, whitespace, bracket.
    """
    if char.isnumeric():
        return CharClass.NUMBER
    if char in _OPERATOR_CHARS:
        return CharClass.OPERATOR
    if char.isalpha():
        return CharClass.LETTER
    if char == ".":
        return CharClass.POINT
    if char.isspace():
        return CharClass.WHITESPACE
    if char in _BRACKET_CHARS:
        return CharClass.BRACKET
    return CharClass.UNKNOWN


def operator_kind(char: str) -> OperatorKind:
    """Map an OPERATOR-class character to its operator.

    Raises:
        ExpressionContractError: If ``char`` is not an operator. Callers
            must classify first.
    """
    if char not in _OPERATOR_CHARS:
        raise ExpressionContractError(f"Not an operator character: {char!r}")
    return OperatorKind(char)

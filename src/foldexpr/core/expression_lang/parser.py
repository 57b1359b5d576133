"""
Single-pass parser for the foldexpr expression language.

There is no separate token stream: each character is classified and fed to
a small state machine that buffers literal text and folds every completed
literal straight into the expression tree.

States:
    EMPTY           nothing buffered; a literal (or a leading "-") may start
    NUMBER          buffering a numeric literal
    NAME            buffering an identifier (reserved, never evaluable)
    EXP_TERMINATED  a literal was just folded in; an operator must follow
    BRACKET         reserved for grouping, never entered

Operators are applied strictly left to right: "4 - 3 + 5" is (4 - 3) + 5.
"""

from __future__ import annotations

import logging
import math
from enum import StrEnum, auto

from foldexpr.core.errors import (
    EmptyBufferError,
    ExpressionContractError,
    InvalidCharacterError,
    ParsingError,
)
from foldexpr.core.expression_lang.classifier import (
    CharClass,
    OperatorKind,
    classify,
    operator_kind,
)
from foldexpr.core.ir.expressions import (
    Addition,
    BinaryNode,
    Division,
    Expr,
    Multiplication,
    ScalarValue,
    Subtraction,
)

logger = logging.getLogger(__name__)


class BufferState(StrEnum):
    """What the parser buffer currently holds."""

    EMPTY = auto()
    NUMBER = auto()
    NAME = auto()
    EXP_TERMINATED = auto()
    BRACKET = auto()


_BINARY_NODES: dict[OperatorKind, type[BinaryNode]] = {
    OperatorKind.ADD: Addition,
    OperatorKind.SUBTRACT: Subtraction,
    OperatorKind.MULTIPLY: Multiplication,
    OperatorKind.DIVIDE: Division,
}

OPERATOR_AT_START = "Operator at the start of a block"
POINT_AT_START = "Point at the start of a block"
LETTER_INSIDE_NUMBER = "Letter inside number"
POINT_INSIDE_NAME = "Point inside name"
EXPECTED_OPERATOR = "Expected operator after previous expression"
UNSUPPORTED_OPERATOR = "Unsupported operator"
BRACKETS_UNSUPPORTED = "Brackets are not supported"
UNKNOWN_SYMBOL = "Unknown symbol"


class _ParserContext:
    """Buffer, state and partially built tree for one parse call."""

    def __init__(self) -> None:
        self.buffer: list[str] = []
        self.state = BufferState.EMPTY
        self.expression: Expr | None = None

    def feed(self, char: str, index: int) -> None:
        char_class = classify(char)
        if self.state == BufferState.EMPTY:
            self._feed_empty(char, char_class, index)
        elif self.state == BufferState.EXP_TERMINATED:
            self._feed_exp_terminated(char, char_class, index)
        elif self.state == BufferState.NUMBER:
            self._feed_number(char, char_class, index)
        elif self.state == BufferState.NAME:
            self._feed_name(char, char_class, index)
        else:
            raise ExpressionContractError(f"Parser entered unsupported state {self.state}")

    def finish(self) -> Expr:
        if self.buffer:
            self._flush()
        if self.expression is None:
            raise EmptyBufferError()
        if not self.expression.is_complete:
            raise ParsingError("Missing right operand")
        return self.expression

    # -- Per-state handlers --

    def _feed_empty(self, char: str, char_class: CharClass, index: int) -> None:
        if char_class == CharClass.NUMBER:
            self._start(BufferState.NUMBER, char)
        elif char_class == CharClass.LETTER:
            self._start(BufferState.NAME, char)
        elif char_class == CharClass.OPERATOR:
            # Only a sign may open a literal
            if operator_kind(char) != OperatorKind.SUBTRACT:
                raise InvalidCharacterError(char, index, OPERATOR_AT_START)
            self._start(BufferState.NUMBER, char)
        elif char_class == CharClass.WHITESPACE:
            return
        elif char_class == CharClass.POINT:
            raise InvalidCharacterError(char, index, POINT_AT_START)
        elif char_class == CharClass.BRACKET:
            raise InvalidCharacterError(char, index, BRACKETS_UNSUPPORTED)
        else:
            raise InvalidCharacterError(char, index, UNKNOWN_SYMBOL)

    def _feed_exp_terminated(self, char: str, char_class: CharClass, index: int) -> None:
        if char_class == CharClass.OPERATOR:
            self._wrap(char, index)
        elif char_class == CharClass.WHITESPACE:
            return
        elif char_class == CharClass.BRACKET:
            raise InvalidCharacterError(char, index, BRACKETS_UNSUPPORTED)
        elif char_class == CharClass.UNKNOWN:
            raise InvalidCharacterError(char, index, UNKNOWN_SYMBOL)
        else:
            raise InvalidCharacterError(char, index, EXPECTED_OPERATOR)

    def _feed_number(self, char: str, char_class: CharClass, index: int) -> None:
        # A second point is left for float() to reject at flush time
        if char_class in (CharClass.NUMBER, CharClass.POINT):
            self.buffer.append(char)
        elif char_class == CharClass.LETTER:
            raise InvalidCharacterError(char, index, LETTER_INSIDE_NUMBER)
        elif char_class == CharClass.OPERATOR:
            self._flush()
            self._feed_exp_terminated(char, char_class, index)
        elif char_class == CharClass.WHITESPACE:
            self._flush()
        elif char_class == CharClass.BRACKET:
            raise InvalidCharacterError(char, index, BRACKETS_UNSUPPORTED)
        else:
            raise InvalidCharacterError(char, index, UNKNOWN_SYMBOL)

    def _feed_name(self, char: str, char_class: CharClass, index: int) -> None:
        if char_class in (CharClass.NUMBER, CharClass.LETTER):
            self.buffer.append(char)
        elif char_class == CharClass.OPERATOR:
            self._flush()
            self._feed_exp_terminated(char, char_class, index)
        elif char_class == CharClass.WHITESPACE:
            self._flush()
        elif char_class == CharClass.POINT:
            raise InvalidCharacterError(char, index, POINT_INSIDE_NAME)
        elif char_class == CharClass.BRACKET:
            raise InvalidCharacterError(char, index, BRACKETS_UNSUPPORTED)
        else:
            raise InvalidCharacterError(char, index, UNKNOWN_SYMBOL)

    # -- Buffer and tree helpers --

    def _start(self, state: BufferState, char: str) -> None:
        self.state = state
        self.buffer.append(char)

    def _wrap(self, char: str, index: int) -> None:
        """Open a new binary node with the whole current tree on its left."""
        node_type = _BINARY_NODES.get(operator_kind(char))
        if node_type is None:
            raise InvalidCharacterError(char, index, UNSUPPORTED_OPERATOR)
        if self.expression is None:
            raise ExpressionContractError("Operator after terminated expression, but no expression")
        self.expression = node_type(left=self.expression)
        self.state = BufferState.EMPTY
        logger.debug("Wrapped tree in %s at index %d", node_type.kind, index)

    def _flush(self) -> None:
        node = self._parse_buffer()
        if self.expression is None:
            self.expression = node
        else:
            self.expression = self.expression.attach_after(node)
        logger.debug("Flushed %r into %s", "".join(self.buffer), self.expression.kind)
        self.buffer.clear()
        self.state = BufferState.EXP_TERMINATED

    def _parse_buffer(self) -> Expr:
        text = "".join(self.buffer)
        if self.state == BufferState.NUMBER:
            try:
                value = float(text)
            except ValueError as e:
                raise ParsingError(f"Error while parsing number: {text!r}") from e
            if not math.isfinite(value):
                raise ParsingError(f"Number out of range: {text!r}")
            return ScalarValue(value=value)
        if self.state == BufferState.NAME:
            raise ParsingError(f"Names are not supported: {text!r}")
        raise ParsingError(f"Attempt to parse buffer in {self.state} state")


def parse(source: str) -> Expr:
    """Parse an expression string into a tree.

    Args:
        source: Expression string (e.g., "4 - 3 + 5"). Indices in errors
            count characters, not bytes.

    Returns:
        The root of a complete expression tree.

    Raises:
        EmptyBufferError: If the input holds no expression.
        InvalidCharacterError: On the first character invalid in context.
        ParsingError: If a literal cannot be converted, or the input ends
            after an operator.
    """
    context = _ParserContext()
    for index, char in enumerate(source):
        context.feed(char, index)
    return context.finish()

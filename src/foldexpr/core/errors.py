"""
Error types for foldexpr parsing and evaluation.

Recoverable failures derive from ``ExpressionError``. Misuse of the tree
API by the parser itself (evaluating a half-built node, asking for the
operator kind of a non-operator character) raises
``ExpressionContractError`` instead, which is an ``AssertionError`` and
must never be caught as an ordinary parse failure.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from foldexpr.core.ir.expressions import ExprKind


class ExpressionError(Exception):
    """Base exception for all recoverable foldexpr errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Parse-time errors
# ---------------------------------------------------------------------------


class ExpressionParseError(ExpressionError):
    """
    Raised when an expression string cannot be turned into a tree.

    Examples:
    - Empty or whitespace-only input
    - A character that is invalid in the current parser state
    - A malformed numeric literal
    - An attach between incompatible node shapes
    """


class EmptyBufferError(ExpressionParseError):
    """Parsing finished without producing any expression."""

    def __init__(self) -> None:
        super().__init__("Empty buffer!")


class InvalidCharacterError(ExpressionParseError):
    """A character is not allowed in the parser's current state."""

    def __init__(self, character: str, index: int, message: str) -> None:
        self.character = character
        self.index = index
        super().__init__(message)

    def _format_message(self) -> str:
        return f"Error at char '{self.character}' at index {self.index} ({self.message})"


class ParsingError(ExpressionParseError):
    """Buffered text could not be converted into an expression node."""


class AttachImpossibleError(ExpressionParseError):
    """attach_after was called on an incompatible pair of node shapes."""

    def __init__(self, target_kind: ExprKind, attach_kind: ExprKind) -> None:
        self.target_kind = target_kind
        self.attach_kind = attach_kind
        super().__init__(f"Cannot attach {attach_kind} after {target_kind}")


# ---------------------------------------------------------------------------
# Evaluation errors
# ---------------------------------------------------------------------------


class ExpressionEvalError(ExpressionError):
    """Error during expression evaluation."""


class DivisionByZeroError(ExpressionEvalError):
    """Divisor magnitude fell within the configured tolerance of zero."""

    def __init__(self, divisor: float, tolerance: float) -> None:
        self.divisor = divisor
        self.tolerance = tolerance
        super().__init__(f"Division by {divisor!r} (tolerance {tolerance!r})")


# ---------------------------------------------------------------------------
# Contract violations
# ---------------------------------------------------------------------------


class ExpressionContractError(AssertionError):
    """Internal misuse of the expression API; indicates a bug, not bad input."""

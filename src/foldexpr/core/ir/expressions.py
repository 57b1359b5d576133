"""
Expression tree types for foldexpr.

A closed set of node shapes:
- ScalarValue: a floating-point literal
- Addition, Subtraction, Multiplication, Division: binary operators

Binary nodes start out *incomplete* (``right is None``) and are completed
exactly once by ``attach_after``. Nodes are frozen; every tree operation
returns a new node and shares untouched children instead of copying them.
"""

from __future__ import annotations

import math
from decimal import Decimal
from enum import StrEnum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from foldexpr.core.errors import (
    AttachImpossibleError,
    DivisionByZeroError,
    ExpressionContractError,
)
from foldexpr.core.ir.environment import Environment


class ExprKind(StrEnum):
    """Node shapes an expression tree can contain."""

    SCALAR = "scalar"
    ADDITION = "addition"
    SUBTRACTION = "subtraction"
    MULTIPLICATION = "multiplication"
    DIVISION = "division"


def format_number(value: float) -> str:
    """Render a float as a plain decimal: no exponent, no trailing ``.0``.

    Examples:
        21.0 -> "21", -21.25 -> "-21.25", 1e21 -> "1000000000000000000000"
    """
    if not math.isfinite(value):
        return repr(value)
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


# ---------------------------------------------------------------------------
# Leaf
# ---------------------------------------------------------------------------


class ScalarValue(BaseModel):
    """A numeric literal."""

    value: float = Field(description="The literal value")

    model_config = ConfigDict(frozen=True)

    kind: ClassVar[ExprKind] = ExprKind.SCALAR

    @property
    def is_complete(self) -> bool:
        return True

    def evaluate(self, env: Environment) -> float:
        return self.value

    def can_evaluate(self, env: Environment) -> bool:
        return True

    def render(self) -> str:
        return format_number(self.value)

    def __str__(self) -> str:
        return self.render()

    def attach_after(self, node: Expr) -> Expr:
        """Start a binary node of ``node``'s shape with this value on the left.

        Only binary nodes can follow a scalar; the operand carried by
        ``node`` is ignored and the result is incomplete.
        """
        if isinstance(node, BinaryNode):
            return type(node)(left=self)
        raise AttachImpossibleError(self.kind, node.kind)


# ---------------------------------------------------------------------------
# Binary operators
# ---------------------------------------------------------------------------


class BinaryNode(BaseModel):
    """Shared behaviour of the four arithmetic operators: left op right."""

    left: Expr
    right: Expr | None = None

    model_config = ConfigDict(frozen=True)

    kind: ClassVar[ExprKind]
    symbol: ClassVar[str]

    @property
    def is_complete(self) -> bool:
        return self.right is not None

    def _require_right(self, action: str) -> Expr:
        if self.right is None:
            raise ExpressionContractError(
                f"Attempt to {action} {self.kind} with missing right side"
            )
        return self.right

    def _combine(self, left: float, right: float, env: Environment) -> float:
        raise NotImplementedError

    def _right_is_safe(self, right: Expr, env: Environment) -> bool:
        return True

    def _left_spine(self, action: str) -> tuple[Expr, list[tuple[BinaryNode, Expr]]]:
        """Flatten the left-deep chain into its innermost operand and the
        (operator, right operand) pairs in evaluation order.

        Iterative: chains of thousands of operators stay off the call stack.
        """
        steps: list[tuple[BinaryNode, Expr]] = []
        node: Expr | BinaryNode = self
        while isinstance(node, BinaryNode):
            steps.append((node, node._require_right(action)))
            node = node.left
        steps.reverse()
        return node, steps

    def evaluate(self, env: Environment) -> float:
        first, steps = self._left_spine("evaluate")
        # Left operand always first so host lookups see a fixed order
        value = first.evaluate(env)
        for node, right in steps:
            value = node._combine(value, right.evaluate(env), env)
        return value

    def can_evaluate(self, env: Environment) -> bool:
        first, steps = self._left_spine("check")
        if not first.can_evaluate(env):
            return False
        return all(
            right.can_evaluate(env) and node._right_is_safe(right, env) for node, right in steps
        )

    def render(self) -> str:
        first, steps = self._left_spine("render")
        parts = [first.render()]
        for node, right in steps:
            parts.append(node.symbol)
            parts.append(right.render())
        return " ".join(parts)

    def __str__(self) -> str:
        return self.render()

    def attach_after(self, node: Expr) -> Expr:
        """Fill the open right slot with ``node``.

        Raises:
            AttachImpossibleError: If the right slot is already filled.
        """
        if self.right is not None:
            raise AttachImpossibleError(self.kind, node.kind)
        return self.model_copy(update={"right": node})


class Addition(BinaryNode):
    kind: ClassVar[ExprKind] = ExprKind.ADDITION
    symbol: ClassVar[str] = "+"

    def _combine(self, left: float, right: float, env: Environment) -> float:
        return left + right


class Subtraction(BinaryNode):
    kind: ClassVar[ExprKind] = ExprKind.SUBTRACTION
    symbol: ClassVar[str] = "-"

    def _combine(self, left: float, right: float, env: Environment) -> float:
        return left - right


class Multiplication(BinaryNode):
    kind: ClassVar[ExprKind] = ExprKind.MULTIPLICATION
    symbol: ClassVar[str] = "*"

    def _combine(self, left: float, right: float, env: Environment) -> float:
        return left * right


class Division(BinaryNode):
    """Division guarded by ``env.settings.division_tolerance``."""

    kind: ClassVar[ExprKind] = ExprKind.DIVISION
    symbol: ClassVar[str] = "/"

    def _combine(self, left: float, right: float, env: Environment) -> float:
        tolerance = env.settings.division_tolerance
        if not _is_safe_divisor(right, tolerance):
            raise DivisionByZeroError(right, tolerance)
        return left / right

    def _right_is_safe(self, right: Expr, env: Environment) -> bool:
        return _is_safe_divisor(right.evaluate(env), env.settings.division_tolerance)


def _is_safe_divisor(value: float, tolerance: float) -> bool:
    # Exact zero is rejected even with a zero tolerance
    return value != 0 and abs(value) >= tolerance


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

Expr = ScalarValue | Addition | Subtraction | Multiplication | Division

# Rebuild models for recursive forward references
BinaryNode.model_rebuild()
Addition.model_rebuild()
Subtraction.model_rebuild()
Multiplication.model_rebuild()
Division.model_rebuild()

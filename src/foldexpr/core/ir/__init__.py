"""
Intermediate representation for foldexpr: expression trees and the
environment they are evaluated against.
"""

from foldexpr.core.ir.environment import Environment
from foldexpr.core.ir.expressions import (
    Addition,
    BinaryNode,
    Division,
    Expr,
    ExprKind,
    Multiplication,
    ScalarValue,
    Subtraction,
    format_number,
)

__all__ = [
    "Addition",
    "BinaryNode",
    "Division",
    "Environment",
    "Expr",
    "ExprKind",
    "Multiplication",
    "ScalarValue",
    "Subtraction",
    "format_number",
]

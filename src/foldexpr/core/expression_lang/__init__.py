"""
foldexpr expression language front end.

Character classifier and the single-pass parser that folds characters
directly into an expression tree.

Usage:
    from foldexpr.core.expression_lang import parse
    from foldexpr.core.ir import Environment

    expr = parse("4 - 3 + 5")
    expr.evaluate(Environment())  # 6.0
    expr.render()                 # "4 - 3 + 5"
"""

from foldexpr.core.expression_lang.classifier import (
    CharClass,
    OperatorKind,
    classify,
    operator_kind,
)
from foldexpr.core.expression_lang.parser import BufferState, parse

__all__ = [
    "BufferState",
    "CharClass",
    "OperatorKind",
    "classify",
    "operator_kind",
    "parse",
]

"""
foldexpr - a tiny arithmetic expression front end for host applications.

Parses "+ - * /" expressions over decimal literals in a single pass,
folding characters straight into an evaluable, renderable tree.

Usage:
    from foldexpr import Environment, parse

    expr = parse("1.03 + 2.07")
    expr.evaluate(Environment())  # 3.1
"""

from __future__ import annotations

from ._version import get_version
from .core.errors import (
    AttachImpossibleError,
    DivisionByZeroError,
    EmptyBufferError,
    ExpressionContractError,
    ExpressionError,
    ExpressionEvalError,
    ExpressionParseError,
    InvalidCharacterError,
    ParsingError,
)
from .core.expression_lang import parse
from .core.ir import Environment, Expr
from .core.settings import ExpressionSettings, load_settings

__version__ = get_version()

__all__ = [
    "__version__",
    "parse",
    "Environment",
    "Expr",
    "ExpressionSettings",
    "load_settings",
    # Errors
    "ExpressionError",
    "ExpressionParseError",
    "EmptyBufferError",
    "InvalidCharacterError",
    "ParsingError",
    "AttachImpossibleError",
    "ExpressionEvalError",
    "DivisionByZeroError",
    "ExpressionContractError",
]

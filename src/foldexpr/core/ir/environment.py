"""
Evaluation environment for foldexpr expression trees.

The parser never produces variable or function nodes, but every
``evaluate`` call takes an environment so named lookups can be added to
the tree without changing the call contract.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from foldexpr.core.settings import ExpressionSettings


@dataclass(frozen=True)
class Environment:
    """Host-supplied lookups and numeric settings used during evaluation.

    Attributes:
        functions: Name -> unary numeric function.
        variables: Name -> numeric value.
        settings: Tolerances applied by the tree (e.g. division guard).
    """

    functions: dict[str, Callable[[float], float]] = field(default_factory=dict)
    variables: dict[str, float] = field(default_factory=dict)
    settings: ExpressionSettings = field(default_factory=ExpressionSettings)

    @classmethod
    def with_tolerance(cls, tolerance: float) -> Environment:
        """Empty environment with a custom division tolerance."""
        return cls(settings=ExpressionSettings(division_tolerance=tolerance))

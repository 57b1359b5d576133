"""
Evaluation settings for foldexpr.

Settings are an explicit value carried by the evaluation ``Environment``
rather than process-wide constants, so callers (and tests) can evaluate
the same tree under different tolerances side by side.

Sources, lowest to highest precedence:
    1. Built-in defaults
    2. ``[expression]`` table of a TOML file passed to ``load_settings``
    3. ``FOLDEXPR_DIVISION_TOLERANCE`` environment variable

Usage:
    from foldexpr.core.settings import load_settings

    settings = load_settings(Path("foldexpr.toml"))
    settings.division_tolerance  # 1e-10 unless overridden
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

DEFAULT_DIVISION_TOLERANCE = 1e-10

# Environment variable overriding the division tolerance
TOLERANCE_ENV_VAR = "FOLDEXPR_DIVISION_TOLERANCE"


class ExpressionSettings(BaseModel):
    """Numeric settings consulted while evaluating an expression tree."""

    division_tolerance: float = Field(
        default=DEFAULT_DIVISION_TOLERANCE,
        ge=0.0,
        description="Divisors with a smaller magnitude are treated as zero",
    )

    model_config = ConfigDict(frozen=True, extra="forbid")


def load_settings(path: Path | None = None) -> ExpressionSettings:
    """Build settings from an optional TOML file and the environment.

    Args:
        path: TOML file with an ``[expression]`` table. Missing keys keep
            their defaults. ``None`` skips the file entirely.

    Returns:
        The resolved settings.

    Raises:
        FileNotFoundError: If ``path`` is given but does not exist.
        tomllib.TOMLDecodeError: If the file is not valid TOML.
        pydantic.ValidationError: If a configured value is out of range.
    """
    data: dict[str, Any] = {}

    if path is not None:
        raw = tomllib.loads(path.read_text(encoding="utf-8"))
        data.update(raw.get("expression", {}))

    env_value = os.environ.get(TOLERANCE_ENV_VAR, "").strip()
    if env_value:
        try:
            data["division_tolerance"] = float(env_value)
        except ValueError:
            logger.warning(
                "Ignoring %s=%r: not a number. Using %s.",
                TOLERANCE_ENV_VAR,
                env_value,
                data.get("division_tolerance", DEFAULT_DIVISION_TOLERANCE),
            )

    return ExpressionSettings(**data)

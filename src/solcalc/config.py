"""Solver configuration for sunlight transition searches."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal, InvalidOperation


@dataclass(frozen=True)
class SolverConfig:
    """Precision and iteration limits for the transition finder."""

    # degrees
    elevation_precision: Decimal = Decimal("0.0001")
    max_iterations: int = 50
    padding: timedelta = timedelta(minutes=1)
    max_polar_skips: int = 1000
    strict_convergence: bool = False

    def __post_init__(self) -> None:
        """Validate limits."""
        if not self.elevation_precision.is_finite() or self.elevation_precision <= 0:
            raise ValueError("elevation_precision must be positive")
        if self.max_iterations <= 0:
            raise ValueError("max_iterations must be positive")
        if self.padding <= timedelta(0):
            raise ValueError("padding must be positive")
        if self.max_polar_skips < 0:
            raise ValueError("max_polar_skips must not be negative")


DEFAULT_CONFIG = SolverConfig()


def _decimal_env(name: str, default: Decimal) -> Decimal:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return Decimal(raw.strip())
    except InvalidOperation as exc:
        raise ValueError(f"{name} must be a decimal number") from exc


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer") from exc


def config_from_env() -> SolverConfig:
    """
    Build SolverConfig from environment variables.

    Optional:
      - SOLCALC_ELEVATION_PRECISION (degrees, default 0.0001)
      - SOLCALC_MAX_ITERATIONS (default 50)
      - SOLCALC_MAX_POLAR_SKIPS (default 1000)
      - SOLCALC_STRICT_CONVERGENCE ("1" raises when Newton refinement does not converge)
    """
    return SolverConfig(
        elevation_precision=_decimal_env(
            "SOLCALC_ELEVATION_PRECISION", DEFAULT_CONFIG.elevation_precision
        ),
        max_iterations=_int_env("SOLCALC_MAX_ITERATIONS", DEFAULT_CONFIG.max_iterations),
        max_polar_skips=_int_env("SOLCALC_MAX_POLAR_SKIPS", DEFAULT_CONFIG.max_polar_skips),
        strict_convergence=os.getenv("SOLCALC_STRICT_CONVERGENCE", "0").strip() == "1",
    )

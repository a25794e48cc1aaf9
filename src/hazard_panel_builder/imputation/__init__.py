"""Covariate imputation strategies and engine."""

from .engine import ImputationEngine
from .strategies import (
    AbsenceToZeroCoalesce,
    CovariateSpec,
    ImputationStrategy,
    LinearTrendExtrapolation,
    MovingAverageBackfill,
    StaticReplication,
    resolve_strategy,
)

__all__ = [
    "ImputationEngine",
    "ImputationStrategy",
    "LinearTrendExtrapolation",
    "MovingAverageBackfill",
    "StaticReplication",
    "AbsenceToZeroCoalesce",
    "CovariateSpec",
    "resolve_strategy",
]

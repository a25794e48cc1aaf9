"""hazard-panel-builder: Build risk-set panels for discrete-time hazard models."""

from ._types import PanelConfig, RiskWindow
from .events import EventHarmonizer, SpellTruncator
from .exceptions import (
    EmptyWindowError,
    HazardPanelError,
    IncompleteImputationError,
    InsufficientHistoryError,
    MissingReferenceValueError,
    NonAbsorbingEventError,
    UnitMismatchError,
)
from .imputation import (
    AbsenceToZeroCoalesce,
    CovariateSpec,
    ImputationEngine,
    LinearTrendExtrapolation,
    MovingAverageBackfill,
    StaticReplication,
    resolve_strategy,
)
from .panels import RiskSetAssembler, RiskSetPanel
from .window import TimeWindowFilter

__all__ = [
    "PanelConfig",
    "RiskWindow",
    "TimeWindowFilter",
    "EventHarmonizer",
    "ImputationEngine",
    "LinearTrendExtrapolation",
    "MovingAverageBackfill",
    "StaticReplication",
    "AbsenceToZeroCoalesce",
    "CovariateSpec",
    "resolve_strategy",
    "RiskSetAssembler",
    "SpellTruncator",
    "RiskSetPanel",
    "HazardPanelError",
    "EmptyWindowError",
    "InsufficientHistoryError",
    "MissingReferenceValueError",
    "IncompleteImputationError",
    "UnitMismatchError",
    "NonAbsorbingEventError",
]

__version__ = "0.1.0"

"""Exception hierarchy for hazard-panel-builder.

Every error is fatal to a pipeline run: the risk set is either built
completely or not at all. Errors name the offending unit, TimePoint and
covariate where one exists so the upstream data problem can be located.
"""

from __future__ import annotations


class HazardPanelError(ValueError):
    """Base class for all hazard-panel-builder errors.

    Subclasses ``ValueError`` so callers that already guard input
    validation with ``except ValueError`` keep working.
    """

    def __init__(
        self,
        message: str,
        unit: str | None = None,
        time_point: int | None = None,
        covariate: str | None = None,
    ) -> None:
        super().__init__(message)
        self.unit = unit
        self.time_point = time_point
        self.covariate = covariate


class EmptyWindowError(HazardPanelError):
    """No observation survives the risk-window and unit-exclusion filter."""


class InsufficientHistoryError(HazardPanelError):
    """A unit has too few observations for the requested imputation strategy.

    Raised by linear trend extrapolation with fewer than two observed points
    and by moving-average backfill when the lookback holds fewer prior
    values than required.
    """


class MissingReferenceValueError(HazardPanelError):
    """The reference-period value of a static covariate is missing."""


class IncompleteImputationError(HazardPanelError):
    """A covariate still has a missing value after imputation."""


class UnitMismatchError(HazardPanelError):
    """A covariate table lacks an entry for a (unit, TimePoint) of the base table."""


class NonAbsorbingEventError(HazardPanelError):
    """An event indicator returns to 0 after having been 1."""

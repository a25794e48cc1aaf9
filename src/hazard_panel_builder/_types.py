"""Shared types and configuration for hazard-panel-builder."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PanelConfig:
    """Column name mapping for panel data.

    Every pipeline stage takes this as its configuration argument.
    Create one and pass it to all builders and diagnostics.

    Parameters
    ----------
    unit_col : str
        Column name for the unit identifier (e.g., state).
    time_col : str
        Column name for the calendar period (e.g., year).
    event_col : str
        Column name for the outcome indicator. Holds the raw multi-category
        outcome on input and the harmonized 0/1 event on output.
    nyear_col : str
        Column name for the TimePoint offset ``time - window start``.

    Example
    -------
    >>> config = PanelConfig(unit_col="state", time_col="year", event_col="rps")
    """

    unit_col: str = "unit_id"
    time_col: str = "year"
    event_col: str = "event"
    nyear_col: str = "nyear"

    @property
    def key(self) -> list[str]:
        """Columns identifying one row of the risk set."""
        return [self.unit_col, self.nyear_col]


@dataclass(frozen=True)
class RiskWindow:
    """Closed time range ``[start, end]`` during which units are at risk.

    Parameters
    ----------
    start : int
        First calendar period of the window; maps to TimePoint 0.
    end : int
        Last calendar period of the window (inclusive).
    exclude : frozenset[str]
        Unit keys that never enter the pipeline (e.g., units missing key
        indicators).
    """

    start: int
    end: int
    exclude: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"start ({self.start}) must be <= end ({self.end})")
        # Accept any iterable of keys, store as strings like the unit column.
        object.__setattr__(self, "exclude", frozenset(str(u) for u in self.exclude))

    @property
    def n_periods(self) -> int:
        return self.end - self.start + 1

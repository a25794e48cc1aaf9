"""Per-unit imputation strategies for covariate time series.

Each strategy fills the missing cells of ONE unit's series, indexed by
TimePoint, using only that unit's own observations. Strategies never
overwrite an observed value. The strategy for a covariate is declared once,
at configuration time, through ``resolve_strategy``:

>>> resolve_strategy("moving_average", window=3)
MovingAverageBackfill(window=3, min_periods=None)
>>> resolve_strategy({"strategy": "static", "absence_means_zero": True})
StaticReplication(reference=None, absence_means_zero=True)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar

import numpy as np
import pandas as pd

from ..exceptions import InsufficientHistoryError, MissingReferenceValueError


def _where(unit: Any, covariate: str | None) -> str:
    return f"unit {unit!r}" + (f", covariate {covariate!r}" if covariate else "")


class ImputationStrategy(ABC):
    """Common ``impute`` contract shared by all strategies."""

    kind: ClassVar[str]

    def impute(
        self,
        series: pd.Series,
        unit: Any = None,
        covariate: str | None = None,
    ) -> pd.Series:
        """Fill the missing values of one unit's series.

        Parameters
        ----------
        series : pd.Series
            Values indexed by TimePoint. Missing cells are NaN.
        unit : hashable, optional
            Unit key, used in error messages.
        covariate : str, optional
            Covariate name, used in error messages.

        Returns
        -------
        pd.Series
            New float series sorted by TimePoint. A series without missing
            values keeps its values; no strategy rule is applied to it.
        """
        series = series.sort_index().astype(float)
        if not series.isna().any():
            return series
        return self._fill(series, unit, covariate)

    @abstractmethod
    def _fill(self, series: pd.Series, unit: Any, covariate: str | None) -> pd.Series:
        ...


@dataclass(frozen=True)
class LinearTrendExtrapolation(ImputationStrategy):
    """Fill from an OLS line of value on TimePoint fit to the unit's observations.

    Suited to covariates with a secular trend (e.g., income). Requires at
    least two observed points per unit.
    """

    kind: ClassVar[str] = "linear_trend"

    def _fill(self, series: pd.Series, unit: Any, covariate: str | None) -> pd.Series:
        observed = series.dropna()
        if len(observed) < 2:
            raise InsufficientHistoryError(
                f"Linear trend needs at least 2 observed points, found "
                f"{len(observed)} for {_where(unit, covariate)}",
                unit=unit,
                covariate=covariate,
            )

        slope, intercept = np.polyfit(
            observed.index.to_numpy(dtype=float), observed.to_numpy(dtype=float), 1
        )
        out = series.copy()
        gaps = out.index[out.isna()]
        out.loc[gaps] = intercept + slope * gaps.to_numpy(dtype=float)
        return out


@dataclass(frozen=True)
class MovingAverageBackfill(ImputationStrategy):
    """Fill each gap with the mean of the preceding ``window`` periods.

    Gaps are processed in ascending TimePoint order, so a filled value
    feeds the lookback of later gaps.

    Parameters
    ----------
    window : int
        Lookback length *k* (default 5).
    min_periods : int, optional
        Minimum number of prior periods the lookback must contain.
        Defaults to ``window``; set to 1 to average over whatever shorter
        history exists at the start of a series.
    """

    kind: ClassVar[str] = "moving_average"

    window: int = 5
    min_periods: int | None = None

    def __post_init__(self) -> None:
        if self.window < 1:
            raise ValueError(f"window must be >= 1, got {self.window}")
        if self.min_periods is not None and not 1 <= self.min_periods <= self.window:
            raise ValueError(
                f"min_periods must be in [1, {self.window}], got {self.min_periods}"
            )

    @property
    def required_periods(self) -> int:
        return self.window if self.min_periods is None else self.min_periods

    def _fill(self, series: pd.Series, unit: Any, covariate: str | None) -> pd.Series:
        out = series.copy()
        for t in out.index[out.isna()]:
            prior = out.loc[t - self.window : t - 1].dropna()
            if len(prior) < self.required_periods:
                raise InsufficientHistoryError(
                    f"Moving average at TimePoint {t} needs {self.required_periods} "
                    f"prior periods, found {len(prior)} for {_where(unit, covariate)}",
                    unit=unit,
                    time_point=int(t),
                    covariate=covariate,
                )
            out.loc[t] = prior.mean()
        return out


@dataclass(frozen=True)
class StaticReplication(ImputationStrategy):
    """Replicate a unit's single reference value across all its TimePoints.

    For time-invariant covariates collected once (e.g., production
    potential).

    Parameters
    ----------
    reference : int, optional
        TimePoint holding the reference value. If None, the unit's single
        distinct observed value is used.
    absence_means_zero : bool
        Coalesce a missing reference to 0 (see ``AbsenceToZeroCoalesce``)
        instead of failing. Only for covariates where no record means no
        activity.

    Notes
    -----
    Time invariance is checked only when the series has a gap to fill:
    conflicting observations then raise ``ValueError``. A complete series
    is returned as is, even if its values vary over time.
    """

    kind: ClassVar[str] = "static"

    reference: int | None = None
    absence_means_zero: bool = False

    def _fill(self, series: pd.Series, unit: Any, covariate: str | None) -> pd.Series:
        observed = series.dropna()

        if self.reference is not None:
            value = series.get(self.reference, np.nan)
            where = f"reference TimePoint {self.reference}"
        else:
            distinct = observed.unique()
            if len(distinct) > 1:
                raise ValueError(
                    f"Static covariate has {len(distinct)} distinct values "
                    f"for {_where(unit, covariate)}; set a reference TimePoint"
                )
            value = distinct[0] if len(distinct) else np.nan
            where = "any TimePoint"

        if pd.isna(value):
            if not self.absence_means_zero:
                raise MissingReferenceValueError(
                    f"No observed value at {where} for {_where(unit, covariate)}",
                    unit=unit,
                    time_point=self.reference,
                    covariate=covariate,
                )
            value = AbsenceToZeroCoalesce.FILL_VALUE

        conflicting = observed[observed != value]
        if not conflicting.empty:
            raise ValueError(
                f"Static covariate is not time-invariant for {_where(unit, covariate)}: "
                f"{conflicting.to_dict()} differ from reference value {value}"
            )

        return pd.Series(float(value), index=series.index, name=series.name)


@dataclass(frozen=True)
class AbsenceToZeroCoalesce(ImputationStrategy):
    """Replace missing with 0 for covariates where absence means no activity.

    Never use as a generic fallback: on any other covariate it masks
    genuine data gaps.
    """

    kind: ClassVar[str] = "absence_to_zero"

    FILL_VALUE: ClassVar[float] = 0.0

    def _fill(self, series: pd.Series, unit: Any, covariate: str | None) -> pd.Series:
        return series.fillna(self.FILL_VALUE)


STRATEGIES: dict[str, type[ImputationStrategy]] = {
    cls.kind: cls
    for cls in (
        LinearTrendExtrapolation,
        MovingAverageBackfill,
        StaticReplication,
        AbsenceToZeroCoalesce,
    )
}


def resolve_strategy(
    spec: ImputationStrategy | str | Mapping[str, Any], **params: Any
) -> ImputationStrategy:
    """Turn a strategy declaration into a strategy instance.

    Parameters
    ----------
    spec : ImputationStrategy, str or mapping
        An instance (returned as is), a strategy kind such as
        ``"moving_average"``, or a mapping with a ``"strategy"`` key plus
        strategy parameters.
    **params
        Strategy parameters when ``spec`` is a kind string.

    Raises
    ------
    ValueError
        Unknown strategy kind or invalid parameters.
    """
    if isinstance(spec, ImputationStrategy):
        if params:
            raise ValueError("Parameters cannot be combined with a strategy instance")
        return spec

    if isinstance(spec, Mapping):
        params = {**spec, **params}
        kind = params.pop("strategy", None)
    else:
        kind = spec

    cls = STRATEGIES.get(kind)
    if cls is None:
        raise ValueError(f"Unknown imputation strategy {kind!r}. Available: {sorted(STRATEGIES)}")
    try:
        return cls(**params)
    except TypeError as exc:
        raise ValueError(f"Invalid parameters for strategy {kind!r}: {exc}") from exc


@dataclass(frozen=True)
class CovariateSpec:
    """A covariate and its declared imputation strategy."""

    name: str
    strategy: ImputationStrategy | str | Mapping[str, Any] = field(
        default_factory=LinearTrendExtrapolation
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "strategy", resolve_strategy(self.strategy))

"""Risk-set panel builder for discrete-time hazard models.

Turns a raw, sparsely populated unit-year panel into one row per
(unit, TimePoint) still at risk: covariates imputed, outcome reduced to a
binary absorbing event, left-truncated units removed, and every period
after a unit's first event dropped.

Pipeline::

    raw panel -> TimeWindowFilter -> EventHarmonizer -> ImputationEngine
              -> RiskSetAssembler -> SpellTruncator -> risk set
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

import numpy as np
import pandas as pd

from .._types import PanelConfig, RiskWindow
from ..diagnostics.coverage import CoverageAnalyzer
from ..events import EventHarmonizer, SpellTruncator
from ..imputation import CovariateSpec, ImputationEngine
from ..imputation.engine import StrategyLike
from ..window import TimeWindowFilter
from ._base import BasePanelBuilder
from .assembler import RiskSetAssembler

logger = logging.getLogger(__name__)


class RiskSetPanel(BasePanelBuilder):
    """Build the risk set consumed by a discrete-time hazard model.

    Parameters
    ----------
    df : pd.DataFrame
        Raw panel, one row per (unit, year), with the raw outcome in
        ``event_col`` and one column per covariate.
    window : RiskWindow
        Risk-window bounds and excluded units.
    covariates : mapping or iterable of CovariateSpec
        Covariate name -> imputation strategy declaration (instance, kind
        string, or mapping with a ``"strategy"`` key), or ``CovariateSpec``
        objects.
    config : PanelConfig, optional
        Column name mapping.
    harmonizer : EventHarmonizer, optional
        Outcome mapping. Defaults to baseline ``0`` -> 0, everything else -> 1.

    Example
    -------
    >>> panel = RiskSetPanel(
    ...     df_raw,
    ...     window=RiskWindow(start=1990, end=2010, exclude={"DC"}),
    ...     covariates={
    ...         "income": "linear_trend",
    ...         "debt_ratio": {"strategy": "moving_average", "window": 5},
    ...         "coal_production": {"strategy": "static", "absence_means_zero": True},
    ...     },
    ...     config=PanelConfig(unit_col="state", event_col="rps"),
    ... )
    >>> df_risk = panel.build()
    """

    def __init__(
        self,
        df: pd.DataFrame,
        window: RiskWindow,
        covariates: Mapping[str, StrategyLike] | Iterable[CovariateSpec],
        config: PanelConfig | None = None,
        harmonizer: EventHarmonizer | None = None,
    ):
        if isinstance(covariates, Mapping):
            specs = [CovariateSpec(name, strategy) for name, strategy in covariates.items()]
        else:
            specs = list(covariates)
        names = [s.name for s in specs]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate covariate declarations: {names}")

        self.window = window
        self.covariate_specs = specs
        self.harmonizer = harmonizer or EventHarmonizer()
        super().__init__(df, config=config, covariates=names)

    def build(self) -> pd.DataFrame:
        """Run the full pipeline.

        Returns
        -------
        pd.DataFrame
            Risk set sorted by (unit, TimePoint) with columns ``unit_col``,
            ``time_col``, ``nyear_col``, ``event_col`` (0/1) and one column
            per covariate, in declaration order. No covariate is missing.
        """
        c = self.config

        df = TimeWindowFilter(self.window, config=c).apply(self._df)
        df = self.harmonizer.apply(df, config=c)
        CoverageAnalyzer(config=c).assert_contiguous(df)

        base = (
            df[[c.unit_col, c.time_col, c.nyear_col, c.event_col]]
            .sort_values(c.key, kind="mergesort")
            .reset_index(drop=True)
        )

        engine = ImputationEngine(config=c)
        tables = engine.impute_all(df, {s.name: s.strategy for s in self.covariate_specs})

        df_risk = RiskSetAssembler(config=c).assemble(base, tables)
        df_risk = SpellTruncator(config=c).truncate(df_risk)

        self._panel = df_risk
        self._log_summary(df_risk)
        return df_risk

    def add_duration_terms(
        self,
        df: pd.DataFrame | None = None,
        terms: Iterable[str] | None = None,
    ) -> pd.DataFrame:
        """Append duration-dependence terms of the TimePoint.

        Parameters
        ----------
        df : pd.DataFrame, optional
            Risk set from ``build()``. If None, uses cached panel.
        terms : iterable of str, optional
            Columns to add, named after ``nyear_col``: ``"nyear_sq"``
            (nyear squared) and/or ``"log_nyear"`` (log(1 + nyear)).
            Defaults to ``("nyear_sq",)``.

        Returns
        -------
        pd.DataFrame
            Copy with the requested columns appended.
        """
        c = self.config
        if df is None:
            df = self.panel

        nyear = df[c.nyear_col].astype(float)
        builders = {
            f"{c.nyear_col}_sq": lambda: nyear**2,
            f"log_{c.nyear_col}": lambda: np.log1p(nyear),
        }

        terms = [f"{c.nyear_col}_sq"] if terms is None else list(terms)
        unknown = [t for t in terms if t not in builders]
        if unknown:
            raise ValueError(f"Unknown duration terms: {unknown}. Available: {list(builders)}")

        df = df.copy()
        for term in terms:
            df[term] = builders[term]()
        return df

    def _log_summary(self, df: pd.DataFrame) -> None:
        s = self.summary().iloc[0]
        logger.info("Risk set built")
        logger.info("  observations: %s", f"{s['n_obs']:,}")
        logger.info("  units: %s", f"{s['n_units']:,}")
        logger.info("  failures: %s", f"{s['n_events']:,}")
        logger.info("  right-censored: %s", f"{s['n_censored']:,}")

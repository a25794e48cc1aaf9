"""Apply declared imputation strategies to covariate time series."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import numpy as np
import pandas as pd

from .._types import PanelConfig
from ..exceptions import IncompleteImputationError
from .strategies import ImputationStrategy, resolve_strategy

logger = logging.getLogger(__name__)

StrategyLike = ImputationStrategy | str | Mapping[str, Any]


class ImputationEngine:
    """Fill missing covariate values unit by unit.

    Works either on a wide unit x TimePoint matrix (``impute``) or directly
    on the long panel (``impute_long``), where each unit's series is built
    from that unit's own rows. Both guarantee that no missing value remains
    and that observed values are left untouched.

    Parameters
    ----------
    config : PanelConfig, optional
        Column name mapping.

    Example
    -------
    >>> engine = ImputationEngine(config=config)
    >>> income = engine.impute_long(df_window, "income", "linear_trend")
    """

    def __init__(self, config: PanelConfig | None = None):
        self.config = config or PanelConfig()

    def pivot(self, df: pd.DataFrame, covariate: str) -> pd.DataFrame:
        """Long panel -> unit x TimePoint matrix for one covariate."""
        c = self.config
        return (
            df.pivot(index=c.unit_col, columns=c.nyear_col, values=covariate)
            .sort_index(axis=0)
            .sort_index(axis=1)
        )

    def melt(self, matrix: pd.DataFrame, covariate: str) -> pd.DataFrame:
        """Unit x TimePoint matrix -> long table ``(unit, nyear, covariate)``."""
        c = self.config
        long = (
            matrix.rename_axis(index=c.unit_col, columns=c.nyear_col)
            .reset_index()
            .melt(id_vars=c.unit_col, var_name=c.nyear_col, value_name=covariate)
        )
        long[c.nyear_col] = long[c.nyear_col].astype(int)
        return long.sort_values(c.key, kind="mergesort").reset_index(drop=True)

    def impute(
        self,
        matrix: pd.DataFrame,
        strategy: StrategyLike,
        covariate: str | None = None,
    ) -> pd.DataFrame:
        """Impute every row (unit) of a unit x TimePoint matrix.

        A matrix without missing cells is returned unchanged.

        Raises
        ------
        IncompleteImputationError
            If a missing cell remains after imputation.
        """
        strategy = resolve_strategy(strategy)
        if not matrix.isna().to_numpy().any():
            return matrix.copy()

        rows = {
            unit: strategy.impute(row, unit=unit, covariate=covariate)
            for unit, row in matrix.iterrows()
        }
        out = pd.DataFrame.from_dict(rows, orient="index")
        out = out.reindex(index=matrix.index, columns=matrix.columns)
        out = out.rename_axis(index=matrix.index.name, columns=matrix.columns.name)

        gaps = np.argwhere(out.isna().to_numpy())
        if len(gaps):
            i, j = gaps[0]
            self._raise_incomplete(out.index[i], out.columns[j], covariate)
        return out

    def impute_long(
        self,
        df: pd.DataFrame,
        covariate: str,
        strategy: StrategyLike,
    ) -> pd.DataFrame:
        """Impute one covariate of a long panel.

        Parameters
        ----------
        df : pd.DataFrame
            Long panel with ``unit_col``, ``nyear_col`` and ``covariate``.
        covariate : str
            Column to impute.
        strategy : ImputationStrategy, str or mapping
            Strategy declaration, see ``resolve_strategy``.

        Returns
        -------
        pd.DataFrame
            Columns ``unit_col``, ``nyear_col``, ``covariate``; one row per
            input row, sorted by (unit, TimePoint).
        """
        c = self.config
        strategy = resolve_strategy(strategy)

        parts = []
        for unit, grp in df.groupby(c.unit_col, sort=True):
            series = grp.set_index(c.nyear_col)[covariate].sort_index()
            filled = strategy.impute(series, unit=unit, covariate=covariate)
            parts.append(
                pd.DataFrame({
                    c.unit_col: unit,
                    c.nyear_col: filled.index.to_numpy(),
                    covariate: filled.to_numpy(),
                })
            )
        out = pd.concat(parts, ignore_index=True)

        gaps = out[out[covariate].isna()]
        if not gaps.empty:
            row = gaps.iloc[0]
            self._raise_incomplete(row[c.unit_col], row[c.nyear_col], covariate)

        n_filled = int(df[covariate].isna().sum())
        logger.info(
            "Imputed %s with %s: %s of %s cells filled",
            covariate,
            strategy.kind,
            f"{n_filled:,}",
            f"{len(out):,}",
        )
        return out

    def impute_all(
        self,
        df: pd.DataFrame,
        strategies: Mapping[str, StrategyLike],
    ) -> dict[str, pd.DataFrame]:
        """Impute several covariates independently; returns one long table each."""
        return {
            covariate: self.impute_long(df, covariate, strategy)
            for covariate, strategy in strategies.items()
        }

    @staticmethod
    def _raise_incomplete(unit: Any, time_point: Any, covariate: str | None) -> None:
        raise IncompleteImputationError(
            f"Missing value remains after imputation for unit {unit!r} "
            f"at TimePoint {time_point}" + (f" in {covariate!r}" if covariate else ""),
            unit=unit,
            time_point=int(time_point),
            covariate=covariate,
        )

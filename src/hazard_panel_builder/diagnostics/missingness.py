"""Covariate missingness before imputation."""

from __future__ import annotations

import pandas as pd

from .._types import PanelConfig


class MissingnessAnalyzer:
    """Count missing covariate cells, to check strategy choices before imputing.

    Parameters
    ----------
    config : PanelConfig, optional
        Column name mapping.
    """

    def __init__(self, config: PanelConfig | None = None):
        self.config = config or PanelConfig()

    def analyze(self, df: pd.DataFrame, covariates: list[str]) -> pd.DataFrame:
        """Compute per-covariate missingness.

        Returns
        -------
        pd.DataFrame
            One row per covariate with columns: n_missing, pct_missing,
            n_units_all_missing, n_units_single_obs.
        """
        c = self.config
        rows = []
        for col in covariates:
            observed = df[col].notna().groupby(df[c.unit_col]).sum()
            n_missing = int(df[col].isna().sum())
            rows.append({
                "covariate": col,
                "n_missing": n_missing,
                "pct_missing": round(100 * n_missing / len(df), 1) if len(df) else 0.0,
                # Units that fail linear trend / need a domain rule for static fills.
                "n_units_all_missing": int((observed == 0).sum()),
                "n_units_single_obs": int((observed == 1).sum()),
            })
        return pd.DataFrame(rows)

    def by_unit(self, df: pd.DataFrame, covariate: str) -> pd.DataFrame:
        """Missing cells of one covariate per unit, with the first and last gap."""
        c = self.config
        gaps = df[df[covariate].isna()]
        return (
            gaps.groupby(c.unit_col)
            .agg(
                n_missing=(c.nyear_col, "count"),
                first_missing=(c.nyear_col, "min"),
                last_missing=(c.nyear_col, "max"),
            )
            .reset_index()
        )

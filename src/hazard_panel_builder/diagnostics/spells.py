"""Spell statistics of a built risk set."""

from __future__ import annotations

import pandas as pd

from .._types import PanelConfig


class SpellAnalyzer:
    """Describe each unit's spell: length, exit TimePoint, failure or censoring.

    Parameters
    ----------
    config : PanelConfig, optional
        Column name mapping.
    """

    def __init__(self, config: PanelConfig | None = None):
        self.config = config or PanelConfig()

    def compute(self, df: pd.DataFrame) -> pd.DataFrame:
        """Compute unit-level spell statistics.

        Parameters
        ----------
        df : pd.DataFrame
            Risk set from ``RiskSetPanel.build()``.

        Returns
        -------
        pd.DataFrame
            One row per unit with columns: n_periods, entry_nyear,
            exit_nyear, failed, censored.
        """
        c = self.config
        grouped = df.groupby(c.unit_col)

        stats = grouped.agg(
            n_periods=(c.nyear_col, "count"),
            entry_nyear=(c.nyear_col, "min"),
            exit_nyear=(c.nyear_col, "max"),
            failed=(c.event_col, "max"),
        )
        stats["failed"] = stats["failed"].astype(int)
        stats["censored"] = 1 - stats["failed"]
        return stats.reset_index()

    def summary(self, df: pd.DataFrame) -> pd.DataFrame:
        """Aggregate spell statistics.

        Returns
        -------
        pd.DataFrame
            One-row DataFrame with n_units, n_failed, n_censored,
            pct_failed and mean/median spell length.
        """
        spells = self.compute(df)
        n_units = len(spells)
        n_failed = int(spells["failed"].sum())
        return pd.DataFrame([{
            "n_units": n_units,
            "n_failed": n_failed,
            "n_censored": n_units - n_failed,
            "pct_failed": round(100 * n_failed / n_units, 1) if n_units else 0.0,
            "spell_length_mean": spells["n_periods"].mean(),
            "spell_length_median": spells["n_periods"].median(),
        }])

    def hazard_by_nyear(self, df: pd.DataFrame) -> pd.DataFrame:
        """Empirical discrete-time hazard: failures / units at risk per TimePoint."""
        c = self.config
        return (
            df.groupby(c.nyear_col)
            .agg(n_at_risk=(c.unit_col, "nunique"), n_events=(c.event_col, "sum"))
            .assign(hazard=lambda x: x["n_events"] / x["n_at_risk"])
            .reset_index()
        )

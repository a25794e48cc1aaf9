"""TimePoint coverage: gaps, duplicates, contiguity per unit."""

from __future__ import annotations

import numpy as np
import pandas as pd

from .._types import PanelConfig


class CoverageAnalyzer:
    """Analyze how completely each unit covers its TimePoints.

    Parameters
    ----------
    config : PanelConfig, optional
        Column name mapping.
    """

    def __init__(self, config: PanelConfig | None = None):
        self.config = config or PanelConfig()

    def compute(self, df: pd.DataFrame) -> pd.DataFrame:
        """Compute unit-level coverage statistics on the ``nyear_col`` axis.

        Returns
        -------
        pd.DataFrame
            One row per unit with columns: n_periods, n_duplicates, n_gaps,
            coverage_rate, min_nyear, max_nyear, contiguous.
        """
        c = self.config
        rows = []
        for unit, grp in df.groupby(c.unit_col, sort=True):
            times = np.sort(grp[c.nyear_col].dropna().to_numpy())
            unique = np.unique(times)
            span = int(unique[-1] - unique[0]) + 1 if len(unique) else 0
            n_gaps = int(np.sum(np.diff(unique) > 1))
            n_dupes = len(times) - len(unique)
            rows.append({
                c.unit_col: unit,
                "n_periods": len(unique),
                "n_duplicates": n_dupes,
                "n_gaps": n_gaps,
                "coverage_rate": round(len(unique) / span, 4) if span else 0.0,
                "min_nyear": unique[0] if len(unique) else np.nan,
                "max_nyear": unique[-1] if len(unique) else np.nan,
                "contiguous": bool(len(unique)) and n_gaps == 0 and n_dupes == 0,
            })
        columns = [
            c.unit_col, "n_periods", "n_duplicates", "n_gaps",
            "coverage_rate", "min_nyear", "max_nyear", "contiguous",
        ]
        return pd.DataFrame(rows, columns=columns)

    def assert_contiguous(self, df: pd.DataFrame) -> None:
        """Raise ``ValueError`` unless every unit has unique, gap-free TimePoints."""
        coverage = self.compute(df)
        bad = coverage[~coverage["contiguous"].astype(bool)]
        if not bad.empty:
            c = self.config
            detail = bad[[c.unit_col, "n_gaps", "n_duplicates"]].head(5).to_dict("records")
            raise ValueError(
                f"{len(bad)} units have non-contiguous or duplicate {c.nyear_col} values: "
                f"{detail}"
            )

    def summary(self, df: pd.DataFrame) -> pd.DataFrame:
        """Aggregate coverage statistics across all units.

        Returns
        -------
        pd.DataFrame
            One-row DataFrame with n_units, n_contiguous, pct_contiguous,
            and mean/min/max of n_periods and coverage_rate.
        """
        coverage = self.compute(df)
        stats = {}
        for col in ("n_periods", "coverage_rate"):
            stats[f"{col}_mean"] = coverage[col].mean()
            stats[f"{col}_min"] = coverage[col].min()
            stats[f"{col}_max"] = coverage[col].max()

        stats["n_units"] = len(coverage)
        stats["n_contiguous"] = int(coverage["contiguous"].sum())
        stats["pct_contiguous"] = (
            round(stats["n_contiguous"] / stats["n_units"] * 100, 1) if len(coverage) else 0.0
        )
        return pd.DataFrame([stats])

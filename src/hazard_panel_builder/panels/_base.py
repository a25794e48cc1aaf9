"""Base class for panel builders."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import pandas as pd

from .._types import PanelConfig

logger = logging.getLogger(__name__)


class BasePanelBuilder(ABC):
    """Abstract base for panel construction.

    Subclasses implement ``build()``. Shared logic for input validation,
    caching and summary statistics lives here.

    Parameters
    ----------
    df : pd.DataFrame
        Raw panel with at least ``unit_col``, ``time_col`` and ``event_col``.
    config : PanelConfig, optional
        Column name mapping. Uses defaults if not provided.
    covariates : list[str], optional
        Covariate columns that must be present and numeric.
    """

    def __init__(
        self,
        df: pd.DataFrame,
        config: PanelConfig | None = None,
        covariates: list[str] | None = None,
    ):
        self.config = config or PanelConfig()
        self.covariates = list(covariates or [])
        self._df = df.copy()
        self._validate_input()
        self._panel: pd.DataFrame | None = None

    def _validate_input(self) -> None:
        """Check required columns exist, coerce types, reject duplicate keys."""
        c = self.config
        required = [c.unit_col, c.time_col, c.event_col] + self.covariates
        missing = [col for col in required if col not in self._df.columns]
        if missing:
            raise ValueError(
                f"Missing required columns: {missing}. "
                f"Available: {sorted(self._df.columns.tolist())}"
            )

        if self._df[c.unit_col].isna().any() or self._df[c.time_col].isna().any():
            raise ValueError(f"{c.unit_col!r} and {c.time_col!r} must not contain missing values")

        self._df[c.unit_col] = self._df[c.unit_col].astype(str)
        self._df[c.time_col] = pd.to_numeric(self._df[c.time_col], errors="raise")
        for col in self.covariates:
            self._df[col] = pd.to_numeric(self._df[col], errors="raise")

        dupes = self._df.duplicated([c.unit_col, c.time_col], keep=False)
        if dupes.any():
            sample = self._df.loc[dupes, [c.unit_col, c.time_col]].head(3).values.tolist()
            raise ValueError(
                f"Duplicate ({c.unit_col}, {c.time_col}) rows: {int(dupes.sum())}, "
                f"e.g. {sample}"
            )

        n_obs = len(self._df)
        n_units = self._df[c.unit_col].nunique()
        logger.info(
            "%s initialized: %s observations, %s units",
            type(self).__name__,
            f"{n_obs:,}",
            f"{n_units:,}",
        )

    @abstractmethod
    def build(self) -> pd.DataFrame:
        """Construct the panel."""
        ...

    @property
    def panel(self) -> pd.DataFrame:
        """Lazily build and cache the panel."""
        if self._panel is None:
            self._panel = self.build()
        return self._panel

    def summary(self) -> pd.DataFrame:
        """Return panel summary statistics.

        Returns
        -------
        pd.DataFrame
            One-row DataFrame with n_obs, n_units, n_events, n_censored,
            time_min and time_max.
        """
        c = self.config
        df = self.panel

        n_units = df[c.unit_col].nunique()
        failed_units = df.loc[df[c.event_col] == 1, c.unit_col].nunique()
        stats = {
            "n_obs": len(df),
            "n_units": n_units,
            "n_events": int((df[c.event_col] == 1).sum()),
            "n_censored": n_units - failed_units,
            "time_min": df[c.time_col].min(),
            "time_max": df[c.time_col].max(),
        }
        return pd.DataFrame([stats])

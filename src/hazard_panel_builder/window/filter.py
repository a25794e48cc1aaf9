"""Risk-window filtering of the raw panel."""

from __future__ import annotations

import logging

import pandas as pd

from .._types import PanelConfig, RiskWindow
from ..exceptions import EmptyWindowError

logger = logging.getLogger(__name__)


class TimeWindowFilter:
    """Restrict a raw panel to eligible units and the risk-window range.

    Parameters
    ----------
    window : RiskWindow
        Time range and excluded unit keys.
    config : PanelConfig, optional
        Column name mapping. Uses defaults if not provided.

    Example
    -------
    >>> window = RiskWindow(start=1990, end=2010, exclude={"DC"})
    >>> df_window = TimeWindowFilter(window, config=config).apply(df_raw)
    """

    def __init__(self, window: RiskWindow, config: PanelConfig | None = None):
        self.window = window
        self.config = config or PanelConfig()

    def apply(self, df: pd.DataFrame) -> pd.DataFrame:
        """Filter rows to the window and add the TimePoint column.

        Parameters
        ----------
        df : pd.DataFrame
            Raw panel with at least ``unit_col`` and ``time_col``.

        Returns
        -------
        pd.DataFrame
            Rows with ``start <= time <= end`` whose unit is not excluded,
            with ``nyear_col = time - start`` added.

        Raises
        ------
        EmptyWindowError
            If no row survives the filter.
        """
        c = self.config
        w = self.window

        units = df[c.unit_col].astype(str)
        times = pd.to_numeric(df[c.time_col], errors="coerce")
        mask = times.between(w.start, w.end) & ~units.isin(w.exclude)

        out = df.loc[mask].copy()
        if out.empty:
            raise EmptyWindowError(
                f"No observations in window [{w.start}, {w.end}] "
                f"after excluding {len(w.exclude)} units"
            )

        out[c.unit_col] = out[c.unit_col].astype(str)
        out[c.time_col] = times[mask].astype(int)
        out[c.nyear_col] = out[c.time_col] - w.start

        logger.info(
            "Window [%s, %s]: %s -> %s rows, %s units",
            w.start,
            w.end,
            f"{len(df):,}",
            f"{len(out):,}",
            f"{out[c.unit_col].nunique():,}",
        )
        return out

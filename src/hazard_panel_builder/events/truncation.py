"""Spell truncation enforcing absorbing-event survival semantics.

Each retained unit contributes a spell of at-risk periods ending either
at the window end (right-censored) or at its first event period (failure).
Units already failed at TimePoint 0 (the window start) are left-truncated
and removed entirely. A unit entering the panel later keeps its first row,
which is a failure period when its event is already 1.
"""

from __future__ import annotations

import logging

import pandas as pd

from .._types import PanelConfig
from ..exceptions import NonAbsorbingEventError

logger = logging.getLogger(__name__)


class SpellTruncator:
    """Drop left-truncated units and every period after a unit's first event.

    Parameters
    ----------
    config : PanelConfig, optional
        Column name mapping.
    """

    def __init__(self, config: PanelConfig | None = None):
        self.config = config or PanelConfig()

    def truncate(self, df: pd.DataFrame) -> pd.DataFrame:
        """Apply left truncation and post-event truncation.

        Parameters
        ----------
        df : pd.DataFrame
            Long table with ``unit_col``, ``nyear_col`` and a harmonized 0/1
            ``event_col``.

        Returns
        -------
        pd.DataFrame
            Copy sorted by (unit, TimePoint) with the event column as ``int``.

        Raises
        ------
        ValueError
            If the event indicator is missing on any row.
        NonAbsorbingEventError
            If a unit's event indicator returns to 0 after a 1.
        """
        c = self.config
        df = df.sort_values(c.key, kind="mergesort").reset_index(drop=True)

        missing = df[c.event_col].isna()
        if missing.any():
            row = df.loc[missing].iloc[0]
            raise ValueError(
                f"Event indicator missing for unit {row[c.unit_col]!r} "
                f"at {c.nyear_col}={row[c.nyear_col]} ({int(missing.sum())} rows)"
            )

        events = df[c.event_col].astype(int)
        self._check_absorbing(df, events)

        grouped = events.groupby(df[c.unit_col], sort=False)
        failed_at_start = df.loc[(df[c.nyear_col] == 0) & (events == 1), c.unit_col]
        left_truncated = df[c.unit_col].isin(failed_at_start)
        after_event = (grouped.shift(1, fill_value=0) == 1) & (events == 1)

        out = df.loc[~left_truncated & ~after_event].copy()
        out[c.event_col] = events.loc[out.index]
        out = out.reset_index(drop=True)

        n_left = df.loc[left_truncated, c.unit_col].nunique()
        logger.info(
            "Truncated spells: %s -> %s rows; %s units left-truncated, "
            "%s rows after first event dropped, %s failures",
            f"{len(df):,}",
            f"{len(out):,}",
            f"{n_left:,}",
            f"{int((after_event & ~left_truncated).sum()):,}",
            f"{int(out[c.event_col].sum()):,}",
        )
        return out

    def _check_absorbing(self, df: pd.DataFrame, events: pd.Series) -> None:
        c = self.config
        reverted = events.groupby(df[c.unit_col], sort=False).cummax() > events
        if reverted.any():
            row = df.loc[reverted].iloc[0]
            raise NonAbsorbingEventError(
                f"Event indicator for unit {row[c.unit_col]!r} returns to 0 "
                f"at {c.nyear_col}={row[c.nyear_col]} after an event",
                unit=row[c.unit_col],
                time_point=int(row[c.nyear_col]),
            )

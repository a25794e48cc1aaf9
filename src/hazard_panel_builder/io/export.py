"""Tabular read/write for raw panels and risk sets."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

import pandas as pd

from .._types import PanelConfig

logger = logging.getLogger(__name__)

# Fixed .dta header timestamp; the pandas default is the current time.
STATA_TIME_STAMP = datetime(2000, 1, 1)

_READERS = {
    ".csv": pd.read_csv,
    ".parquet": pd.read_parquet,
    ".dta": pd.read_stata,
}


def read_panel(path: str | Path, **kwargs) -> pd.DataFrame:
    """Read a raw panel from CSV, parquet or Stata, chosen by file suffix.

    Parameters
    ----------
    path : str or Path
        Input file path.
    **kwargs
        Passed to the pandas reader.
    """
    path = Path(path)
    reader = _READERS.get(path.suffix.lower())
    if reader is None:
        raise ValueError(f"Unsupported panel format {path.suffix!r}. Supported: {sorted(_READERS)}")
    df = reader(path, **kwargs)
    logger.info("Read %s rows from %s", f"{len(df):,}", path)
    return df


def _sorted(df: pd.DataFrame, config: PanelConfig | None) -> pd.DataFrame:
    """Sort by (unit, TimePoint) so repeated exports are byte-identical."""
    c = config or PanelConfig()
    key = [col for col in c.key if col in df.columns]
    if key:
        df = df.sort_values(key, kind="mergesort")
    return df.reset_index(drop=True)


def to_parquet(
    df: pd.DataFrame, path: str | Path, config: PanelConfig | None = None, **kwargs
) -> None:
    """Export a panel to parquet.

    Parameters
    ----------
    df : pd.DataFrame
        Panel data.
    path : str or Path
        Output file path.
    config : PanelConfig, optional
        Column name mapping used for the row order.
    **kwargs
        Passed to ``DataFrame.to_parquet()``.
    """
    df_out = _sorted(df, config)
    df_out.to_parquet(path, index=False, **kwargs)
    logger.info("Exported %s rows to %s", f"{len(df_out):,}", path)


def to_csv(
    df: pd.DataFrame, path: str | Path, config: PanelConfig | None = None, **kwargs
) -> None:
    """Export a panel to CSV, sorted by (unit, TimePoint)."""
    df_out = _sorted(df, config)
    df_out.to_csv(path, index=False, **kwargs)
    logger.info("Exported %s rows to %s", f"{len(df_out):,}", path)


def to_stata(
    df: pd.DataFrame, path: str | Path, config: PanelConfig | None = None, **kwargs
) -> None:
    """Export a panel to Stata .dta.

    Column names longer than Stata's 32-character limit are truncated. The
    header timestamp is fixed unless ``time_stamp`` is passed.
    """
    df_out = _sorted(df, config)

    rename = {col: col[:32] for col in df_out.columns if len(col) > 32}
    if rename:
        logger.info("Truncating column names for Stata: %s", rename)
        df_out = df_out.rename(columns=rename)

    kwargs.setdefault("time_stamp", STATA_TIME_STAMP)
    df_out.to_stata(path, write_index=False, **kwargs)
    logger.info("Exported %s rows to %s", f"{len(df_out):,}", path)

"""Collapse a multi-category outcome into a binary event indicator."""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable, Mapping

import pandas as pd

from .._types import PanelConfig

logger = logging.getLogger(__name__)


class EventHarmonizer:
    """Map a raw outcome variable to ``{0, 1, <NA>}``.

    By default every baseline category maps to 0, every other observed
    category ("some form of the event") maps to 1, and missing stays
    missing. An explicit ``mapping`` can be declared instead; categories
    absent from it are rejected rather than guessed.

    Parameters
    ----------
    baseline : iterable of hashable
        Raw categories meaning "no event" (default ``(0,)``).
    mapping : mapping, optional
        Explicit raw category -> 0/1 mapping. Overrides ``baseline``.

    Example
    -------
    >>> harmonizer = EventHarmonizer(baseline=(0,))
    >>> harmonizer.harmonize(pd.Series([0, 2, 1, None])).tolist()
    [0, 1, 1, <NA>]
    """

    def __init__(
        self,
        baseline: Iterable[Hashable] = (0,),
        mapping: Mapping[Hashable, int] | None = None,
    ) -> None:
        self.baseline = tuple(baseline)
        self.mapping = dict(mapping) if mapping is not None else None

        if self.mapping is not None:
            bad = {k: v for k, v in self.mapping.items() if v not in (0, 1)}
            if bad:
                raise ValueError(f"Event mapping targets must be 0 or 1, got: {bad}")

    def harmonize(self, values: pd.Series) -> pd.Series:
        """Return the binary event indicator for ``values``.

        Returns
        -------
        pd.Series
            Nullable ``Int64`` series aligned with ``values``.
        """
        missing = values.isna().to_numpy()
        observed = values[~missing]

        result = pd.Series(pd.NA, index=values.index, dtype="Int64", name=values.name)
        if self.mapping is not None:
            unknown = sorted({v for v in observed.unique() if v not in self.mapping}, key=str)
            if unknown:
                raise ValueError(
                    f"Unmapped outcome categories in {values.name!r}: {unknown}. "
                    f"Mapped: {sorted(self.mapping, key=str)}"
                )
            result[~missing] = observed.map(self.mapping).astype(int).to_numpy()
        else:
            result[~missing] = (~observed.isin(self.baseline)).astype(int).to_numpy()

        return result

    def apply(self, df: pd.DataFrame, config: PanelConfig | None = None) -> pd.DataFrame:
        """Harmonize the event column of a long panel (returns a copy)."""
        c = config or PanelConfig()
        df = df.copy()
        df[c.event_col] = self.harmonize(df[c.event_col])

        counts = df[c.event_col].value_counts(dropna=False)
        logger.info(
            "Harmonized %s: %s event rows, %s non-event rows, %s missing",
            c.event_col,
            f"{int(counts.get(1, 0)):,}",
            f"{int(counts.get(0, 0)):,}",
            f"{int(df[c.event_col].isna().sum()):,}",
        )
        return df

"""Join imputed covariates onto the base (unit, TimePoint, event) table."""

from __future__ import annotations

import logging
from collections.abc import Mapping

import pandas as pd

from .._types import PanelConfig
from ..exceptions import UnitMismatchError

logger = logging.getLogger(__name__)


class RiskSetAssembler:
    """Fold per-covariate long tables back into one wide risk-set table.

    Parameters
    ----------
    config : PanelConfig, optional
        Column name mapping.
    """

    def __init__(self, config: PanelConfig | None = None):
        self.config = config or PanelConfig()

    def assemble(
        self,
        base: pd.DataFrame,
        covariate_tables: Mapping[str, pd.DataFrame],
    ) -> pd.DataFrame:
        """Left join every covariate table onto ``base`` by (unit, TimePoint).

        Parameters
        ----------
        base : pd.DataFrame
            Table keyed by ``unit_col`` and ``nyear_col``, typically holding
            ``time_col`` and ``event_col``.
        covariate_tables : mapping of str to pd.DataFrame
            Covariate name -> long table with ``unit_col``, ``nyear_col`` and
            a column named after the covariate.

        Returns
        -------
        pd.DataFrame
            ``base`` with one column appended per covariate, same row count
            and order.

        Raises
        ------
        UnitMismatchError
            If a covariate table has no value for a (unit, TimePoint) of ``base``.
        ValueError
            If a covariate table has duplicate keys or lacks its column.
        """
        c = self.config
        merged = base.reset_index(drop=True)

        for covariate, table in covariate_tables.items():
            missing = [col for col in c.key + [covariate] if col not in table.columns]
            if missing:
                raise ValueError(f"Covariate table {covariate!r} lacks columns: {missing}")
            if covariate in merged.columns:
                raise ValueError(f"Covariate {covariate!r} already present in base table")

            right = table[c.key + [covariate]]
            if right.duplicated(c.key).any():
                raise ValueError(f"Covariate table {covariate!r} has duplicate {c.key} rows")

            merged = merged.merge(right, on=c.key, how="left", validate="many_to_one")

            gaps = merged[merged[covariate].isna()]
            if not gaps.empty:
                row = gaps.iloc[0]
                raise UnitMismatchError(
                    f"Covariate {covariate!r} has no value for unit {row[c.unit_col]!r} "
                    f"at {c.nyear_col}={row[c.nyear_col]} ({len(gaps)} rows uncovered)",
                    unit=row[c.unit_col],
                    time_point=int(row[c.nyear_col]),
                    covariate=covariate,
                )

        logger.info(
            "Assembled risk set: %s rows, %s covariates",
            f"{len(merged):,}",
            len(covariate_tables),
        )
        return merged

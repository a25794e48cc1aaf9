"""Shared fixtures for hazard-panel-builder tests."""

import numpy as np
import pandas as pd
import pytest

from hazard_panel_builder import PanelConfig, RiskWindow


@pytest.fixture
def config() -> PanelConfig:
    return PanelConfig(unit_col="state", time_col="year", event_col="rps", nyear_col="nyear")


@pytest.fixture
def window() -> RiskWindow:
    return RiskWindow(start=2000, end=2005, exclude={"DC"})


@pytest.fixture
def raw_panel() -> pd.DataFrame:
    """Raw state-year panel, 1998-2007.

    - AL: never adopts (rps 0 throughout)
    - CA: adopts in 2002 with category 2, stays adopted
    - TX: adopts in 1999, before the window (left-truncated)
    - NY: adopts in 2005 (last window year) with category 1
    - DC: excluded unit

    Covariates, all sparse:
    - income: trending, missing 2004-2007
    - debt_ratio: missing from 2004 onwards
    - coal: recorded once (2000) except NY, which has no record
    """
    rng = np.random.default_rng(7)
    adoption = {"AL": None, "CA": 2002, "TX": 1999, "NY": 2005, "DC": 2001}
    category = {"CA": 2, "TX": 1, "NY": 1, "DC": 3}

    rows = []
    for i, (state, adopted) in enumerate(adoption.items()):
        for year in range(1998, 2008):
            rows.append({
                "state": state,
                "year": year,
                "rps": category[state] if adopted is not None and year >= adopted else 0,
                "income": 100 + 10 * i + 2 * (year - 1998) if year < 2004 else np.nan,
                "debt_ratio": rng.uniform(0.1, 0.5) if year < 2004 else np.nan,
                "coal": (50.0 + i) if (year == 2000 and state != "NY") else np.nan,
            })
    return pd.DataFrame(rows)


@pytest.fixture
def covariate_strategies() -> dict:
    return {
        "income": "linear_trend",
        "debt_ratio": {"strategy": "moving_average", "window": 2},
        "coal": {"strategy": "static", "absence_means_zero": True},
    }


@pytest.fixture
def scenario_base() -> pd.DataFrame:
    """Units A, B over TimePoints 0..3 with events [0,0,1,1] and [0,1,1,1]."""
    return pd.DataFrame({
        "state": ["A"] * 4 + ["B"] * 4,
        "year": [2000, 2001, 2002, 2003] * 2,
        "nyear": [0, 1, 2, 3] * 2,
        "rps": [0, 0, 1, 1, 0, 1, 1, 1],
    })

"""Tests for RiskSetPanel, the end-to-end pipeline."""

import numpy as np
import pandas as pd
import pytest

from hazard_panel_builder import (
    CovariateSpec,
    EventHarmonizer,
    InsufficientHistoryError,
    MissingReferenceValueError,
    MovingAverageBackfill,
    PanelConfig,
    RiskSetPanel,
    RiskWindow,
)


@pytest.fixture
def panel(raw_panel, window, covariate_strategies, config):
    return RiskSetPanel(raw_panel, window=window, covariates=covariate_strategies, config=config)


class TestRiskSetPanelBuild:
    def test_output_columns(self, panel):
        df = panel.build()
        assert list(df.columns) == ["state", "year", "nyear", "rps", "income", "debt_ratio", "coal"]

    def test_expected_spells(self, panel):
        df = panel.build()
        assert df[df["state"] == "AL"]["nyear"].tolist() == [0, 1, 2, 3, 4, 5]
        assert df[df["state"] == "CA"]["nyear"].tolist() == [0, 1, 2]
        assert df[df["state"] == "NY"]["nyear"].tolist() == [0, 1, 2, 3, 4, 5]
        assert len(df) == 15

    def test_left_truncated_unit_excluded(self, panel):
        df = panel.build()
        assert "TX" not in set(df["state"])

    def test_excluded_unit_absent(self, panel):
        df = panel.build()
        assert "DC" not in set(df["state"])

    def test_event_binary_and_terminal(self, panel):
        df = panel.build()
        assert set(df["rps"].unique()) <= {0, 1}
        ca = df[df["state"] == "CA"]
        assert ca["rps"].tolist() == [0, 0, 1]

    def test_no_missing_covariates(self, panel):
        df = panel.build()
        assert not df[["income", "debt_ratio", "coal"]].isna().any().any()

    def test_trend_extrapolated(self, panel):
        df = panel.build()
        # AL income: 104 + 2 * nyear observed for nyear 0..3
        al = df[df["state"] == "AL"].set_index("nyear")["income"]
        assert al[5] == pytest.approx(114)

    def test_static_covariate_one_value_per_unit(self, panel):
        df = panel.build()
        assert (df.groupby("state")["coal"].nunique() == 1).all()
        assert (df.loc[df["state"] == "NY", "coal"] == 0).all()

    def test_no_row_after_event(self, panel):
        df = panel.build()
        prev = df.groupby("state")["rps"].shift(1, fill_value=0)
        assert not (prev == 1).any()

    def test_deterministic(self, raw_panel, window, covariate_strategies, config):
        first = RiskSetPanel(raw_panel, window, covariate_strategies, config=config).build()
        second = RiskSetPanel(
            raw_panel.sample(frac=1, random_state=5), window, covariate_strategies, config=config
        ).build()
        pd.testing.assert_frame_equal(first, second)

    def test_input_not_mutated(self, raw_panel, window, covariate_strategies, config):
        before = raw_panel.copy()
        RiskSetPanel(raw_panel, window, covariate_strategies, config=config).build()
        pd.testing.assert_frame_equal(raw_panel, before)

    def test_panel_property_caches(self, panel):
        assert panel.panel is panel.panel

    def test_covariate_specs(self, raw_panel, window, config):
        specs = [
            CovariateSpec("income", "linear_trend"),
            CovariateSpec("debt_ratio", MovingAverageBackfill(window=2)),
        ]
        df = RiskSetPanel(raw_panel, window, specs, config=config).build()
        assert list(df.columns[-2:]) == ["income", "debt_ratio"]

    def test_custom_harmonizer(self, raw_panel, window, config):
        # Only category 2 counts as the event: NY (category 1) never fails.
        harmonizer = EventHarmonizer(mapping={0: 0, 1: 0, 2: 1, 3: 1})
        df = RiskSetPanel(
            raw_panel, window, {"income": "linear_trend"}, config=config, harmonizer=harmonizer
        ).build()
        assert "TX" in set(df["state"])
        assert df.loc[df["state"] == "NY", "rps"].sum() == 0


class TestRiskSetPanelErrors:
    def test_missing_column_raises(self, raw_panel, window, config):
        with pytest.raises(ValueError, match="Missing required columns"):
            RiskSetPanel(raw_panel, window, {"gdp": "linear_trend"}, config=config)

    def test_duplicate_rows_raise(self, raw_panel, window, config):
        df = pd.concat([raw_panel, raw_panel.head(1)], ignore_index=True)
        with pytest.raises(ValueError, match="Duplicate"):
            RiskSetPanel(df, window, {"income": "linear_trend"}, config=config)

    def test_gap_in_timepoints_raises(self, raw_panel, window, config):
        df = raw_panel[~((raw_panel["state"] == "AL") & (raw_panel["year"] == 2002))]
        with pytest.raises(ValueError, match="non-contiguous"):
            RiskSetPanel(df, window, {"income": "linear_trend"}, config=config).build()

    def test_strategy_failure_aborts_build(self, raw_panel, window, config):
        with pytest.raises(InsufficientHistoryError):
            RiskSetPanel(
                raw_panel, window, {"debt_ratio": {"strategy": "moving_average"}}, config=config
            ).build()

    def test_static_without_domain_rule_aborts(self, raw_panel, window, config):
        with pytest.raises(MissingReferenceValueError):
            RiskSetPanel(raw_panel, window, {"coal": "static"}, config=config).build()

    def test_unknown_strategy_raises(self, raw_panel, window, config):
        with pytest.raises(ValueError, match="Unknown imputation strategy"):
            RiskSetPanel(raw_panel, window, {"income": "spline"}, config=config)


class TestRiskSetPanelExtras:
    def test_summary(self, panel):
        s = panel.summary().iloc[0]
        assert s["n_obs"] == 15
        assert s["n_units"] == 3
        assert s["n_events"] == 2
        assert s["n_censored"] == 1

    def test_duration_terms(self, panel):
        df = panel.add_duration_terms(terms=("nyear_sq", "log_nyear"))
        assert (df["nyear_sq"] == df["nyear"] ** 2).all()
        assert df["log_nyear"].tolist() == pytest.approx(np.log1p(df["nyear"]).tolist())

    def test_unknown_duration_term_raises(self, panel):
        with pytest.raises(ValueError, match="Unknown duration terms"):
            panel.add_duration_terms(terms=("cubic",))

    def test_default_duration_term(self, panel):
        df = panel.add_duration_terms()
        assert "nyear_sq" in df.columns
        assert "log_nyear" not in df.columns

    def test_duration_terms_follow_nyear_col(self):
        config = PanelConfig(nyear_col="t")
        df = pd.DataFrame({
            "unit_id": ["A", "A"],
            "year": [2000, 2001],
            "event": [0, 1],
            "x": [1.0, 2.0],
        })
        panel = RiskSetPanel(df, RiskWindow(2000, 2001), {"x": "linear_trend"}, config=config)
        out = panel.add_duration_terms(terms=["t_sq", "log_t"])
        assert out["t_sq"].tolist() == [0, 1]

    def test_default_config(self):
        df = pd.DataFrame({
            "unit_id": ["A", "A", "A"],
            "year": [2000, 2001, 2002],
            "event": [0, 0, 1],
            "x": [1.0, np.nan, 3.0],
        })
        out = RiskSetPanel(df, RiskWindow(2000, 2002), {"x": "linear_trend"}).build()
        assert out["x"].tolist() == pytest.approx([1, 2, 3])
        assert PanelConfig().event_col in out.columns

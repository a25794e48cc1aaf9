"""Tests for EventHarmonizer."""

import numpy as np
import pandas as pd
import pytest

from hazard_panel_builder import EventHarmonizer


class TestEventHarmonizerDefault:
    def test_non_baseline_categories_map_to_one(self):
        out = EventHarmonizer().harmonize(pd.Series([0, 1, 2, 3]))
        assert out.tolist() == [0, 1, 1, 1]

    def test_missing_stays_missing(self):
        out = EventHarmonizer().harmonize(pd.Series([0, np.nan, 2.0]))
        assert out.isna().tolist() == [False, True, False]
        assert out.dropna().tolist() == [0, 1]

    def test_output_domain(self):
        raw = pd.Series([0, 5, None, 2, 0, 1])
        out = EventHarmonizer().harmonize(raw)
        assert set(out.dropna().unique()) <= {0, 1}
        assert str(out.dtype) == "Int64"

    def test_custom_baseline(self):
        out = EventHarmonizer(baseline=("none", "repealed")).harmonize(
            pd.Series(["none", "voluntary", "mandatory", "repealed"])
        )
        assert out.tolist() == [0, 1, 1, 0]

    def test_preserves_index(self):
        raw = pd.Series([0, 2], index=[10, 20])
        out = EventHarmonizer().harmonize(raw)
        assert out.index.tolist() == [10, 20]


class TestEventHarmonizerMapping:
    def test_explicit_mapping(self):
        harmonizer = EventHarmonizer(mapping={"none": 0, "goal": 0, "standard": 1})
        out = harmonizer.harmonize(pd.Series(["none", "goal", "standard"]))
        assert out.tolist() == [0, 0, 1]

    def test_unmapped_category_raises(self):
        harmonizer = EventHarmonizer(mapping={0: 0, 1: 1})
        with pytest.raises(ValueError, match="Unmapped outcome categories"):
            harmonizer.harmonize(pd.Series([0, 1, 2]))

    def test_invalid_mapping_target_raises(self):
        with pytest.raises(ValueError, match="must be 0 or 1"):
            EventHarmonizer(mapping={0: 0, 1: 2})


class TestEventHarmonizerApply:
    def test_apply_rewrites_event_column(self, raw_panel, config):
        out = EventHarmonizer().apply(raw_panel, config=config)
        assert set(out["rps"].dropna().unique()) <= {0, 1}
        assert (raw_panel["rps"] == 2).any()  # input untouched

import pytest
import pandas as pd
import numpy as np
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from fraudsim.engine import aggregate, compute_metrics, evaluate
from fraudsim.evaluation import (
    SWEEP_COLUMNS, best_threshold, compare_with_summary, default_thresholds,
    score_auc, threshold_sweep,
)
from fraudsim.params import EconomicParameters
from fraudsim.records import EconomicSummary, TransactionRecord

@pytest.fixture
def separable_records():
    """Fraud always scores above 0.5, legit always below"""
    probs = [0.1, 0.2, 0.3, 0.4, 0.6, 0.7, 0.8, 0.9]
    labels = [0, 0, 0, 0, 1, 1, 1, 1]
    return [TransactionRecord(amount=1000, actual_class=y, fraud_probability=p) for p, y in zip(probs, labels)]


class TestParameters:
    """Test the parameter owner's clamping"""

    def test_clamps_threshold(self):
        assert EconomicParameters.from_inputs(threshold=0).threshold == 0.01
        assert EconomicParameters.from_inputs(threshold=1).threshold == 0.99
        assert EconomicParameters.from_inputs(threshold=0.3).threshold == 0.3

    def test_clamps_economics(self):
        p = EconomicParameters.from_inputs(0.5, investigation_cost_per_case=-10, recovery_rate_percent=150)
        assert p.investigation_cost_per_case == 0
        assert p.recovery_rate_percent == 100
        assert EconomicParameters.from_inputs(0.5, 10, -5).recovery_rate_percent == 0

    def test_hashable(self):
        assert hash(EconomicParameters(0.5, 10, 100)) == hash(EconomicParameters(0.5, 10, 100))


class TestThresholdSweep:
    def test_default_grid(self):
        grid = default_thresholds()
        assert len(grid) == 99
        assert grid[0] == 0.01 and grid[-1] == 0.99

    def test_structure(self, separable_records):
        curve = threshold_sweep(separable_records, 10, 100)
        assert isinstance(curve, pd.DataFrame)
        assert list(curve.columns) == SWEEP_COLUMNS
        assert len(curve) == 99

    def test_rows_match_engine(self, separable_records):
        curve = threshold_sweep(separable_records, 10, 80, thresholds=[0.25, 0.5, 0.75])
        for _, row in curve.iterrows():
            expected = compute_metrics(separable_records, EconomicParameters(row["threshold"], 10, 80))
            assert row["tp"] == expected.tp
            assert row["net_benefit"] == pytest.approx(expected.net_benefit)
            assert row["roi"] == pytest.approx(expected.roi)

    def test_recall_zero_guard(self):
        legit_only = [TransactionRecord(amount=5, actual_class=0, fraud_probability=0.9)]
        curve = threshold_sweep(legit_only, 1, 100, thresholds=[0.5])
        assert curve.loc[0, "recall"] == 0

    def test_flagged_non_increasing(self, separable_records):
        curve = threshold_sweep(separable_records, 10, 100)
        flagged = (curve["tp"] + curve["fp"]).to_numpy()
        assert np.all(np.diff(flagged) <= 0)


class TestBestThreshold:
    def test_separable_data(self, separable_records):
        curve = threshold_sweep(separable_records, 10, 100)
        best = best_threshold(curve)
        assert 0.4 < best <= 0.6

    def test_ties_go_low(self):
        curve = pd.DataFrame({"threshold": [0.7, 0.2, 0.5], "net_benefit": [5.0, 5.0, 1.0]})
        assert best_threshold(curve) == 0.2

    def test_empty_curve(self):
        assert best_threshold(pd.DataFrame(columns=SWEEP_COLUMNS)) == 0.5


class TestScoreAuc:
    def test_perfect_separation(self, separable_records):
        assert score_auc(separable_records) == pytest.approx(1.0)

    def test_single_class(self):
        records = [TransactionRecord(actual_class=0, fraud_probability=p) for p in (0.1, 0.5)]
        assert score_auc(records) == 0.5

    def test_empty(self):
        assert score_auc([]) == 0.5


class TestCompareWithSummary:
    def test_deltas(self, separable_records):
        metrics = compute_metrics(separable_records, EconomicParameters(0.5, 10, 100))
        summary = EconomicSummary(tp=3, fn=1, fp=0, tn=4, net_benefit=100.0)
        df = compare_with_summary(metrics, summary)
        assert list(df.columns) == ["metric", "imported", "recomputed", "delta"]
        assert len(df) == 10
        tp_row = df[df["metric"] == "TP"].iloc[0]
        assert tp_row["imported"] == 3
        assert tp_row["recomputed"] == 4
        assert tp_row["delta"] == 1

    def test_summary_is_not_merged(self, separable_records):
        params = EconomicParameters(0.5, 10, 100)
        before = compute_metrics(separable_records, params).as_dict()
        compare_with_summary(compute_metrics(separable_records, params), EconomicSummary(tp=99))
        assert compute_metrics(separable_records, params).as_dict() == before


def test_sweep_uses_fixed_economics(separable_records):
    """Recovery rate and cost flow through unchanged for every threshold"""
    curve = threshold_sweep(separable_records, 0, 50, thresholds=[0.5])
    agg = aggregate(separable_records, 0.5, 50)
    assert curve.loc[0, "detected_amount"] == agg.detected_amount
    assert curve.loc[0, "roi"] == evaluate(agg, 0).roi == 0

if __name__ == "__main__":
    pytest.main([__file__, "-v"])

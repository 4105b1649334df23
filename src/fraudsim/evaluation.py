import numpy as np
import pandas as pd
from sklearn.metrics import roc_auc_score
from typing import Iterable, Optional

from fraudsim.engine import Records, DerivedMetrics, record_arrays, aggregate, evaluate
from fraudsim.params import THRESHOLD_MAX, THRESHOLD_MIN
from fraudsim.records import EconomicSummary

SWEEP_COLUMNS = [
    "threshold", "tp", "fp", "tn", "fn", "detected_amount", "lost_amount",
    "total_investigation_cost", "net_benefit", "roi", "precision", "recall",
]


def default_thresholds(points: int = 99) -> np.ndarray:
    return np.round(np.linspace(THRESHOLD_MIN, THRESHOLD_MAX, points), 4)


def threshold_sweep(records: Records, investigation_cost_per_case: float, recovery_rate_percent: float,
                    thresholds: Optional[Iterable[float]] = None) -> pd.DataFrame:
    """
    Re-runs the engine over a grid of thresholds (the ROI frontier).
    Economic parameters stay fixed; only the cut-off moves.
    """
    grid = default_thresholds() if thresholds is None else np.asarray(list(thresholds), dtype=float)

    rows = []
    for t in grid:
        agg = aggregate(records, float(t), recovery_rate_percent)
        outcome = evaluate(agg, investigation_cost_per_case)
        positives = agg.tp + agg.fn
        rows.append({
            "threshold": float(t),
            "tp": agg.tp, "fp": agg.fp, "tn": agg.tn, "fn": agg.fn,
            "detected_amount": agg.detected_amount,
            "lost_amount": agg.lost_amount,
            "total_investigation_cost": outcome.total_investigation_cost,
            "net_benefit": outcome.net_benefit,
            "roi": outcome.roi,
            "precision": outcome.precision,
            "recall": (agg.tp / positives) * 100 if positives > 0 else 0.0,
        })
    return pd.DataFrame(rows, columns=SWEEP_COLUMNS)


def best_threshold(curve: pd.DataFrame) -> float:
    """Threshold with the highest net benefit. Ties go to the lowest threshold."""
    if curve.empty:
        return 0.5
    ordered = curve.sort_values("threshold", kind="stable").reset_index(drop=True)
    return float(ordered.loc[ordered["net_benefit"].idxmax(), "threshold"])


def score_auc(records: Records) -> float:
    """ROC-AUC of the stored probabilities. Handles edge case where only one class is present."""
    _, actual, probs = record_arrays(records)
    if len(np.unique(actual)) < 2:
        return 0.5
    return float(roc_auc_score(actual, probs))


def compare_with_summary(metrics: DerivedMetrics, summary: EconomicSummary) -> pd.DataFrame:
    """Imported (upstream) vs recomputed values, one row per shared metric."""
    pairs = [
        ("TP", summary.tp, metrics.tp),
        ("FN", summary.fn, metrics.fn),
        ("FP", summary.fp, metrics.fp),
        ("TN", summary.tn, metrics.tn),
        ("Detected Amount", summary.detected_amount, metrics.detected_amount),
        ("Lost Amount", summary.lost_amount, metrics.lost_amount),
        ("Investigation Cost", summary.investigation_cost, metrics.total_investigation_cost),
        ("Net Benefit", summary.net_benefit, metrics.net_benefit),
        ("ROI (%)", summary.roi, metrics.roi),
        ("Precision (%)", summary.precision, metrics.precision),
    ]
    df = pd.DataFrame(pairs, columns=["metric", "imported", "recomputed"])
    df["delta"] = df["recomputed"] - df["imported"]
    return df

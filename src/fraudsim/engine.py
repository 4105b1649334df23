"""
ROLE: Metrics Engine
RESPONSIBILITIES:
1. Threshold classification of fraud probabilities.
2. Confusion aggregation (counts + detected / lost amounts).
3. Economic evaluation (investigation cost, net benefit, ROI, precision).
4. Chart-ready projections of the above.

Everything here is a pure function of (records, threshold, recovery rate,
investigation cost). Nothing is stored between calls except the memoized
`compute_metrics_cached` results, which are keyed on exactly those inputs.
"""
import math
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, List, Sequence, Tuple, Union

import numpy as np

from fraudsim.params import EconomicParameters
from fraudsim.records import TransactionDataset, TransactionRecord

logger = logging.getLogger("Engine")

Records = Union[TransactionDataset, Sequence[TransactionRecord]]

CONFUSION_LABELS: Tuple[str, ...] = ("True Positives", "False Positives", "True Negatives", "False Negatives")
SCENARIO_WITHOUT_MODEL = "Without Model"
SCENARIO_WITH_MODEL = "With Model"

# ==============================================================================
# 1. RESULT TYPES
# ==============================================================================
@dataclass(frozen=True)
class ConfusionAggregate:
    tp: int = 0
    fp: int = 0
    tn: int = 0
    fn: int = 0
    detected_amount: float = 0.0
    lost_amount: float = 0.0

    @property
    def flagged(self) -> int:
        """Cases predicted positive, i.e. sent to investigation."""
        return self.tp + self.fp

    @property
    def total(self) -> int:
        return self.tp + self.fp + self.tn + self.fn


@dataclass(frozen=True)
class EconomicOutcome:
    total_investigation_cost: float = 0.0
    net_benefit: float = 0.0
    roi: float = 0.0
    precision: float = 0.0


@dataclass(frozen=True)
class DerivedMetrics:
    """Everything the dashboard shows for one (records, parameters) pair."""
    tp: int
    fp: int
    tn: int
    fn: int
    detected_amount: float
    lost_amount: float
    total_investigation_cost: float
    net_benefit: float
    roi: float
    precision: float
    confusion_matrix: Tuple[Dict[str, object], ...] = field(default_factory=tuple)
    economic_comparison: Tuple[Dict[str, object], ...] = field(default_factory=tuple)

    def as_dict(self) -> Dict[str, object]:
        return {
            "tp": self.tp, "fp": self.fp, "tn": self.tn, "fn": self.fn,
            "detected_amount": self.detected_amount,
            "lost_amount": self.lost_amount,
            "total_investigation_cost": self.total_investigation_cost,
            "net_benefit": self.net_benefit,
            "roi": self.roi,
            "precision": self.precision,
        }

# ==============================================================================
# 2. THRESHOLD CLASSIFIER
# ==============================================================================
def classify(fraud_probability: float, threshold: float) -> int:
    """1 (predicted fraud) iff probability >= threshold. Equality counts as fraud."""
    return 1 if fraud_probability >= threshold else 0


def predict(probabilities: np.ndarray, threshold: float) -> np.ndarray:
    """Vectorized `classify`."""
    return (np.asarray(probabilities, dtype=float) >= threshold).astype(int)

# ==============================================================================
# 3. CONFUSION AGGREGATOR
# ==============================================================================
def record_arrays(records: Records) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    if isinstance(records, TransactionDataset):
        return records.amounts, records.actual, records.probabilities
    amounts = np.array([r.amount for r in records], dtype=float)
    actual = np.array([r.actual_class for r in records], dtype=int)
    probs = np.array([r.fraud_probability for r in records], dtype=float)
    return amounts, actual, probs


def aggregate(records: Records, threshold: float, recovery_rate_percent: float) -> ConfusionAggregate:
    """
    Buckets every record into exactly one of TP / FP / TN / FN.

    TP amounts count towards `detected_amount` scaled by the recovery rate;
    FN amounts count towards `lost_amount` unscaled. Sums use `math.fsum`,
    which is exactly rounded, so the result does not depend on record order.
    """
    amounts, actual, probs = record_arrays(records)
    if len(amounts) == 0:
        return ConfusionAggregate()

    preds = predict(probs, threshold)

    mask_tp = (preds == 1) & (actual == 1)
    mask_fp = (preds == 1) & (actual == 0)
    mask_tn = (preds == 0) & (actual == 0)
    mask_fn = (preds == 0) & (actual == 1)

    recovery = recovery_rate_percent / 100
    detected = math.fsum((amounts[mask_tp] * recovery).tolist())
    lost = math.fsum(amounts[mask_fn].tolist())

    return ConfusionAggregate(
        tp=int(mask_tp.sum()),
        fp=int(mask_fp.sum()),
        tn=int(mask_tn.sum()),
        fn=int(mask_fn.sum()),
        detected_amount=detected,
        lost_amount=lost,
    )

# ==============================================================================
# 4. ECONOMIC EVALUATOR
# ==============================================================================
def evaluate(agg: ConfusionAggregate, investigation_cost_per_case: float) -> EconomicOutcome:
    """
    Every flagged case (tp + fp) costs one investigation.
    ROI and precision are 0, not NaN, when nothing was flagged.
    """
    total_cost = agg.flagged * investigation_cost_per_case
    net_benefit = agg.detected_amount - total_cost - agg.lost_amount
    roi = (net_benefit / total_cost) * 100 if total_cost > 0 else 0.0
    precision = (agg.tp / agg.flagged) * 100 if agg.flagged > 0 else 0.0
    return EconomicOutcome(
        total_investigation_cost=float(total_cost),
        net_benefit=float(net_benefit),
        roi=float(roi),
        precision=float(precision),
    )

# ==============================================================================
# 5. CHART PROJECTIONS
# ==============================================================================
def confusion_breakdown(agg: ConfusionAggregate) -> List[Dict[str, object]]:
    counts = (agg.tp, agg.fp, agg.tn, agg.fn)
    return [{"name": label, "value": count} for label, count in zip(CONFUSION_LABELS, counts)]


def economic_comparison(agg: ConfusionAggregate, outcome: EconomicOutcome) -> List[Dict[str, object]]:
    """Without a model the detected amount would have been lost as well."""
    return [
        {"scenario": SCENARIO_WITHOUT_MODEL, "benefit": -(agg.lost_amount + agg.detected_amount), "cost": 0.0},
        {"scenario": SCENARIO_WITH_MODEL, "benefit": outcome.net_benefit, "cost": outcome.total_investigation_cost},
    ]

# ==============================================================================
# 6. PIPELINE
# ==============================================================================
def compute_metrics(records: Records, params: EconomicParameters) -> DerivedMetrics:
    agg = aggregate(records, params.threshold, params.recovery_rate_percent)
    outcome = evaluate(agg, params.investigation_cost_per_case)
    logger.debug(
        f"Metrics @ t={params.threshold:.2f}: TP={agg.tp} FP={agg.fp} TN={agg.tn} FN={agg.fn} "
        f"net={outcome.net_benefit:,.2f}"
    )
    return DerivedMetrics(
        tp=agg.tp, fp=agg.fp, tn=agg.tn, fn=agg.fn,
        detected_amount=agg.detected_amount,
        lost_amount=agg.lost_amount,
        total_investigation_cost=outcome.total_investigation_cost,
        net_benefit=outcome.net_benefit,
        roi=outcome.roi,
        precision=outcome.precision,
        confusion_matrix=tuple(confusion_breakdown(agg)),
        economic_comparison=tuple(economic_comparison(agg, outcome)),
    )


@lru_cache(maxsize=128)
def compute_metrics_cached(dataset: TransactionDataset, params: EconomicParameters) -> DerivedMetrics:
    """Memoized `compute_metrics`. The dataset hashes by content fingerprint."""
    return compute_metrics(dataset, params)

import math
import hashlib
from enum import Enum
from functools import cached_property
from typing import Any, Dict, Iterable, List, Sequence, Tuple

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator

#***********************************************************************************#
#************* Field Coercion ******************************************************#
#***********************************************************************************#
def to_float(value: Any, default: float = 0.0) -> float:
    """Parses a numeric field. Anything unparseable, NaN or infinite becomes `default`."""
    if isinstance(value, bool):
        return float(value)
    try:
        parsed = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    if not math.isfinite(parsed):
        return default
    return parsed


def to_int(value: Any, default: int = 0) -> int:
    """Parses an integer field, truncating decimals ("1.0" -> 1)."""
    parsed = to_float(value, default=float('nan'))
    if math.isnan(parsed):
        return default
    return int(parsed)


def to_binary(value: Any) -> int:
    """Class labels are 0/1. Any other value is treated as malformed."""
    parsed = to_int(value, default=0)
    return parsed if parsed in (0, 1) else 0


class RiskLevel(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @classmethod
    def parse(cls, value: Any) -> "RiskLevel":
        if isinstance(value, cls):
            return value
        key = str(value or "").strip().lower()
        return _RISK_ALIASES.get(key, cls.LOW)


class Action(str, Enum):
    BLOCK = "Block"
    REVIEW = "Review"
    ACCEPT = "Accept"

    @classmethod
    def parse(cls, value: Any) -> "Action":
        if isinstance(value, cls):
            return value
        key = str(value or "").strip().lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        return cls.ACCEPT


# Upstream exports label risk in Spanish
_RISK_ALIASES: Dict[str, RiskLevel] = {
    "high": RiskLevel.HIGH, "alto": RiskLevel.HIGH,
    "medium": RiskLevel.MEDIUM, "medio": RiskLevel.MEDIUM,
    "low": RiskLevel.LOW, "bajo": RiskLevel.LOW,
}

#***********************************************************************************#
#************* Transaction Record **************************************************#
#***********************************************************************************#
TRANSACTION_FIELDS: Tuple[str, ...] = (
    "time", "amount", "actual_class", "predicted_class_stored", "fraud_probability",
    "risk_level", "action", "expected_savings", "investigation_cost",
)


class TransactionRecord(BaseModel):
    """
    One scored transaction.

    Construction never fails: every field runs through a lenient validator that
    substitutes a neutral default for malformed input (0 for numbers and class
    labels, Low for risk level, Accept for action). `predicted_class_stored`,
    `expected_savings` and `investigation_cost` are kept for display only; the
    engine derives its own prediction from `fraud_probability`.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    time: str = Field(default="", alias="Time")
    amount: float = Field(default=0.0, alias="Amount")
    actual_class: int = Field(default=0, alias="Real_Class")
    predicted_class_stored: int = Field(default=0, alias="Pred_Class")
    fraud_probability: float = Field(default=0.0, alias="Fraud_Prob")
    risk_level: RiskLevel = Field(default=RiskLevel.LOW, alias="Risk_Level")
    action: Action = Field(default=Action.ACCEPT, alias="Action")
    expected_savings: float = Field(default=0.0, alias="Expected_Savings")
    investigation_cost: float = Field(default=0.0, alias="Investigation_Cost")

    @field_validator("time", mode="before")
    @classmethod
    def _coerce_time(cls, v):
        return "" if v is None else str(v).strip()

    @field_validator("amount", "fraud_probability", "expected_savings", "investigation_cost", mode="before")
    @classmethod
    def _coerce_float(cls, v):
        return to_float(v)

    @field_validator("actual_class", "predicted_class_stored", mode="before")
    @classmethod
    def _coerce_class(cls, v):
        return to_binary(v)

    @field_validator("risk_level", mode="before")
    @classmethod
    def _coerce_risk(cls, v):
        return RiskLevel.parse(v)

    @field_validator("action", mode="before")
    @classmethod
    def _coerce_action(cls, v):
        return Action.parse(v)

    @classmethod
    def from_row(cls, row: Sequence[Any]) -> "TransactionRecord":
        """Builds a record from the 9 positional CSV fields. Missing trailing fields take defaults."""
        values = {name: row[i] for i, name in enumerate(TRANSACTION_FIELDS) if i < len(row)}
        return cls(**values)

    @property
    def is_fraud(self) -> bool:
        return self.actual_class == 1


def count_defaults(row: Sequence[Any]) -> int:
    """
    Counts how many of the 9 positional fields would be replaced by a default.
    Used by ingestion for diagnostics only; construction does not depend on it.
    """
    defaulted = 0
    for i, name in enumerate(TRANSACTION_FIELDS):
        raw = row[i] if i < len(row) else None
        text = "" if raw is None else str(raw).strip()
        if name == "time":
            continue
        if name in ("actual_class", "predicted_class_stored"):
            ok = to_int(text, default=-1) in (0, 1)
        elif name == "risk_level":
            ok = text.lower() in _RISK_ALIASES
        elif name == "action":
            ok = text.lower() in {a.value.lower() for a in Action}
        else:
            ok = math.isfinite(to_float(text, default=float('nan')))
        if not ok:
            defaulted += 1
    return defaulted

#***********************************************************************************#
#************* Dataset *************************************************************#
#***********************************************************************************#
class TransactionDataset:
    """
    Immutable, ordered collection of records.

    Hashing and equality go through a sha256 fingerprint of the record content,
    so the dataset can be used directly as a memoization key.
    """

    def __init__(self, records: Iterable[TransactionRecord] = ()):
        self._records: Tuple[TransactionRecord, ...] = tuple(records)
        self.fingerprint: str = self._fingerprint(self._records)

    @staticmethod
    def _fingerprint(records: Tuple[TransactionRecord, ...]) -> str:
        digest = hashlib.sha256()
        for r in records:
            row = (r.time, r.amount, r.actual_class, r.predicted_class_stored, r.fraud_probability,
                   r.risk_level.value, r.action.value, r.expected_savings, r.investigation_cost)
            digest.update(repr(row).encode("utf-8"))
        return digest.hexdigest()

    @property
    def records(self) -> Tuple[TransactionRecord, ...]:
        return self._records

    @cached_property
    def amounts(self) -> np.ndarray:
        return np.array([r.amount for r in self._records], dtype=float)

    @cached_property
    def actual(self) -> np.ndarray:
        return np.array([r.actual_class for r in self._records], dtype=int)

    @cached_property
    def probabilities(self) -> np.ndarray:
        return np.array([r.fraud_probability for r in self._records], dtype=float)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self):
        return iter(self._records)

    def __getitem__(self, idx):
        return self._records[idx]

    def __hash__(self) -> int:
        return hash(self.fingerprint)

    def __eq__(self, other) -> bool:
        if not isinstance(other, TransactionDataset):
            return NotImplemented
        return self.fingerprint == other.fingerprint

    def __repr__(self) -> str:
        return f"TransactionDataset(n={len(self)}, fingerprint={self.fingerprint[:12]})"

#***********************************************************************************#
#************* Imported Economic Summary *******************************************#
#***********************************************************************************#
SUMMARY_FIELDS: Tuple[str, ...] = (
    "tp", "fn", "fp", "tn", "detected_amount", "lost_amount",
    "investigation_cost", "net_benefit", "roi", "precision",
)


class EconomicSummary(BaseModel):
    """Upstream-computed outcome, kept only for side-by-side display."""
    model_config = ConfigDict(frozen=True)

    tp: int = 0
    fn: int = 0
    fp: int = 0
    tn: int = 0
    detected_amount: float = 0.0
    lost_amount: float = 0.0
    investigation_cost: float = 0.0
    net_benefit: float = 0.0
    roi: float = 0.0
    precision: float = 0.0

    @field_validator("tp", "fn", "fp", "tn", mode="before")
    @classmethod
    def _coerce_count(cls, v):
        return to_int(v)

    @field_validator("detected_amount", "lost_amount", "investigation_cost", "net_benefit", "roi", "precision", mode="before")
    @classmethod
    def _coerce_amount(cls, v):
        return to_float(v)

    @classmethod
    def from_row(cls, row: Sequence[Any]) -> "EconomicSummary":
        values = {name: row[i] for i, name in enumerate(SUMMARY_FIELDS) if i < len(row)}
        return cls(**values)


def records_to_rows(records: Iterable[TransactionRecord]) -> List[Dict[str, Any]]:
    """Flattens records into plain dicts (enum values as strings) for tabular display."""
    return [r.model_dump(mode="json") for r in records]


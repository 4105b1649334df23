import os
import sys
import logging
from typing import Dict, Final, List
from dataclasses import dataclass

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))

from fraudsim.params import (
    DEFAULT_INVESTIGATION_COST, DEFAULT_RECOVERY_RATE, DEFAULT_THRESHOLD,
    RECOVERY_RATE_MAX, RECOVERY_RATE_MIN, THRESHOLD_MAX, THRESHOLD_MIN,
)

logger = logging.getLogger("Config")

# ==============================================================================
# 1. SYSTEM
# ==============================================================================
ENVIRONMENT: Final = os.getenv("ENVIRONMENT", "development").lower()
LOG_LEVEL: Final = os.getenv("LOG_LEVEL", "INFO").upper()
CURRENCY_SYMBOL: Final = os.getenv("CURRENCY_SYMBOL", "$")

# Quick validation
if ENVIRONMENT not in {"development", "staging", "production"}:
    raise ValueError(f"Invalid ENVIRONMENT: {ENVIRONMENT}")

# ==============================================================================
# 2. STANDARDIZED COLUMN NAMES
# ==============================================================================
class TransactionColumns:
    """Positional layout of the transactions CSV and the display names used in tables."""
    TIME = "time"
    AMOUNT = "amount"
    ACTUAL_CLASS = "actual_class"
    PREDICTED_CLASS = "predicted_class_stored"
    FRAUD_PROB = "fraud_probability"
    RISK_LEVEL = "risk_level"
    ACTION = "action"
    EXPECTED_SAVINGS = "expected_savings"
    INVESTIGATION_COST = "investigation_cost"

    ORDER: List[str] = [
        TIME, AMOUNT, ACTUAL_CLASS, PREDICTED_CLASS, FRAUD_PROB,
        RISK_LEVEL, ACTION, EXPECTED_SAVINGS, INVESTIGATION_COST,
    ]

# Mapping: {record field : table header}
DISPLAY_NAMES: Dict[str, str] = {
    TransactionColumns.TIME:               "Time",
    TransactionColumns.AMOUNT:             "Amount",
    TransactionColumns.ACTUAL_CLASS:       "Real Class",
    TransactionColumns.PREDICTED_CLASS:    "Stored Prediction",
    TransactionColumns.FRAUD_PROB:         "Fraud Probability",
    TransactionColumns.RISK_LEVEL:         "Risk Level",
    TransactionColumns.ACTION:             "Action",
    TransactionColumns.EXPECTED_SAVINGS:   "Expected Savings",
    TransactionColumns.INVESTIGATION_COST: "Investigation Cost",
}

# ==============================================================================
# 3. SIMULATOR SETTINGS
# ==============================================================================
@dataclass(frozen=True)
class SimulatorDefaults:
    """Initial widget values and interactive bounds."""
    THRESHOLD: float = float(os.getenv("DEFAULT_THRESHOLD", str(DEFAULT_THRESHOLD)))
    THRESHOLD_MIN: float = THRESHOLD_MIN
    THRESHOLD_MAX: float = THRESHOLD_MAX
    THRESHOLD_STEP: float = 0.01

    INVESTIGATION_COST: float = float(os.getenv("DEFAULT_INVESTIGATION_COST", str(DEFAULT_INVESTIGATION_COST)))
    RECOVERY_RATE: float = float(os.getenv("DEFAULT_RECOVERY_RATE", str(DEFAULT_RECOVERY_RATE)))
    RECOVERY_RATE_MIN: float = RECOVERY_RATE_MIN
    RECOVERY_RATE_MAX: float = RECOVERY_RATE_MAX

    # Risk monitor list
    RISK_LIST_LIMIT: int = int(os.getenv("RISK_LIST_LIMIT", "15"))

    # Strategy sweep resolution
    SWEEP_POINTS: int = int(os.getenv("SWEEP_POINTS", "99"))

    CHART_HEIGHT: int = 320

# ==============================================================================
# 4. DEBUG
# ==============================================================================
def debug_config():
    """Logs config for debugging (development only)."""
    if ENVIRONMENT == "development":
        logger.info("🚀 Simulator Config:")
        logger.info(f"   Environment: {ENVIRONMENT}")
        logger.info(f"   Default Threshold: {SimulatorDefaults.THRESHOLD}")
        logger.info(f"   Investigation Cost: {SimulatorDefaults.INVESTIGATION_COST}")
        logger.info(f"   Recovery Rate: {SimulatorDefaults.RECOVERY_RATE}%")

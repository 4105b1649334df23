from dataclasses import dataclass
from typing import Final

# Interactive bounds. 0 and 1 would degenerate into block-all / accept-all.
THRESHOLD_MIN: Final = 0.01
THRESHOLD_MAX: Final = 0.99
RECOVERY_RATE_MIN: Final = 0.0
RECOVERY_RATE_MAX: Final = 100.0

DEFAULT_THRESHOLD: Final = 0.5
DEFAULT_INVESTIGATION_COST: Final = 18000.0
DEFAULT_RECOVERY_RATE: Final = 100.0


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, float(value)))


@dataclass(frozen=True)
class EconomicParameters:
    """
    Decision threshold plus the two economic knobs of the simulation.

    The plain constructor stores values as given. Session code should build
    instances through `from_inputs`, which clamps raw widget values into the
    documented interactive ranges.
    """
    threshold: float = DEFAULT_THRESHOLD
    investigation_cost_per_case: float = DEFAULT_INVESTIGATION_COST
    recovery_rate_percent: float = DEFAULT_RECOVERY_RATE

    @classmethod
    def from_inputs(cls, threshold: float = DEFAULT_THRESHOLD,
                    investigation_cost_per_case: float = DEFAULT_INVESTIGATION_COST,
                    recovery_rate_percent: float = DEFAULT_RECOVERY_RATE) -> "EconomicParameters":
        return cls(
            threshold=round(_clamp(threshold, THRESHOLD_MIN, THRESHOLD_MAX), 4),
            investigation_cost_per_case=max(0.0, float(investigation_cost_per_case)),
            recovery_rate_percent=_clamp(recovery_rate_percent, RECOVERY_RATE_MIN, RECOVERY_RATE_MAX),
        )


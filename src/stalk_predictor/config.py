from dataclasses import dataclass
from typing import Dict, Optional

# Slot layout: two purchase-day slots followed by twelve sell slots (Mon AM..Sat PM)
SLOT_COUNT = 14
PURCHASE_SLOTS = 2
SELL_SLOTS = SLOT_COUNT - PURCHASE_SLOTS

SLOT_LABELS = (
    "Sun AM",
    "Sun PM",
    "Mon AM",
    "Mon PM",
    "Tue AM",
    "Tue PM",
    "Wed AM",
    "Wed PM",
    "Thu AM",
    "Thu PM",
    "Fri AM",
    "Fri PM",
    "Sat AM",
    "Sat PM",
)

RANDOM = "Random"
BIG_SPIKE = "Big Spike"
DECREASING = "Decreasing"
SMALL_SPIKE = "Small Spike"

TREND_NAMES = (RANDOM, BIG_SPIKE, DECREASING, SMALL_SPIKE)


@dataclass(frozen=True)
class PatternPriors:
    """
    Base probabilities of the four weekly patterns.

    These are the stationary frequencies of the pattern transition chain,
    obtained offline by simulation and consumed here as constants.
    """

    random: float = 0.346
    big_spike: float = 0.248
    decreasing: float = 0.1475
    small_spike: float = 0.2585

    def __post_init__(self):
        for name, value in self.as_dict().items():
            if value < 0:
                raise ValueError(f"Prior for pattern '{name}' must be non-negative; got {value}")
        total = sum(self.as_dict().values())
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"Pattern priors must sum to 1; got {total}")

    def as_dict(self) -> Dict[str, float]:
        return {
            RANDOM: self.random,
            BIG_SPIKE: self.big_spike,
            DECREASING: self.decreasing,
            SMALL_SPIKE: self.small_spike,
        }


@dataclass(frozen=True)
class PredictorConfig:
    """Inference knobs shared by the rate generator, phases and predictor."""

    # Rate chains are discretized to this step (hundredths)
    rate_precision: int = 2
    buy_price_min: int = 90
    buy_price_max: int = 110
    # Tolerance used when checking normalized sums
    tolerance: float = 1e-9
    # Stop enumerating grid cells once this many seconds have elapsed
    deadline_seconds: Optional[float] = None

    def __post_init__(self):
        if self.buy_price_min > self.buy_price_max:
            raise ValueError(
                f"buy_price_min ({self.buy_price_min}) must not exceed "
                f"buy_price_max ({self.buy_price_max})"
            )
        if self.deadline_seconds is not None and self.deadline_seconds <= 0:
            raise ValueError("deadline_seconds must be positive when set.")

    @property
    def rate_scale(self) -> int:
        return 10 ** self.rate_precision


# Global config instances
PRIORS = PatternPriors()
PREDICTOR_CONFIG = PredictorConfig()

from __future__ import annotations

from typing import Iterator

from stalk_predictor.config import BIG_SPIKE, SLOT_COUNT
from stalk_predictor.observations import Observations
from stalk_predictor.patterns.base import PatternEnumerator
from stalk_predictor.phases import RateBound, build_branch, decaying_phase, spike_phase
from stalk_predictor.prediction import Outcome
from stalk_predictor.rates import generate_rates

DEC_RATE_START = (0.85, 0.9)
DEC_RATE_STEP = (0.03, 0.05)

# Independent per-slot multipliers from the peak start onwards
SPIKE_LOW = (0.9, 1.4, 2.0, 1.4, 0.9, 0.4, 0.4, 0.4, 0.4, 0.4, 0.4)
SPIKE_HIGH = (1.4, 2.0, 6.0, 2.0, 1.4, 0.9, 0.9, 0.9, 0.9, 0.9, 0.9)

PEAK_STARTS = range(3, 10)


class BigSpikePattern(PatternEnumerator):
    """
    A decreasing run followed by a sharp spike (up to 6x) and a low tail.

    Grid: the peak starts on one of slots 3..9, each with weight prior / 7.
    Slots before the peak follow a decaying rate chain; from the peak on every
    slot is drawn independently from its own multiplier bound.
    """

    trend = BIG_SPIKE

    def iter_branches(self, observations: Observations) -> Iterator[Outcome]:
        probability = self.prior / len(PEAK_STARTS)
        bounds = [RateBound(low, high) for low, high in zip(SPIKE_LOW, SPIKE_HIGH)]

        for peak_start in PEAK_STARTS:
            rates = generate_rates(
                *DEC_RATE_START, *DEC_RATE_STEP, peak_start - 2, config=self.config
            )
            yield build_branch(
                observations,
                [
                    decaying_phase(rates, observations),
                    spike_phase(bounds[: SLOT_COUNT - peak_start], observations),
                ],
                probability,
                self.trend,
            )

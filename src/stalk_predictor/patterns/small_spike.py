from __future__ import annotations

from typing import Iterator

from stalk_predictor.config import SLOT_COUNT, SMALL_SPIKE
from stalk_predictor.observations import Observations
from stalk_predictor.patterns.base import PatternEnumerator
from stalk_predictor.phases import (
    RateBound,
    build_branch,
    decaying_phase,
    flat_phase,
    spike_phase,
)
from stalk_predictor.prediction import Outcome
from stalk_predictor.rates import generate_rates

DEC_RATE_START = (0.4, 0.9)
DEC_RATE_STEP = (0.03, 0.05)

PEAK_STARTS = range(2, 10)
# 1.40, 1.45, ..., 2.00
SPIKE_RATES = tuple(round(1.4 + 0.05 * k, 2) for k in range(13))
SPIKE_SHOULDER = 1.4

PEAK_FLAT_SLOTS = 2
SPIKE_SLOTS = 3
PEAK_SLOTS = PEAK_FLAT_SLOTS + SPIKE_SLOTS


def spike_bounds(spike_rate: float) -> list[RateBound]:
    """
    The three spike slots: the middle one is floored at the spike rate, its
    neighbours at 1.4, all capped at the spike rate and one unit lower.
    """
    return [
        RateBound(SPIKE_SHOULDER, spike_rate, floor_adjust=1),
        RateBound(spike_rate, spike_rate, floor_adjust=1),
        RateBound(SPIKE_SHOULDER, spike_rate, floor_adjust=1),
    ]


class SmallSpikePattern(PatternEnumerator):
    """
    decreasing | two flat slots | three spike slots | decreasing

    Grid: peak start in 2..9 (8 cells) times spike rate in 1.40..2.00 by
    0.05 (13 cells), each with weight prior / 8 / 13.
    """

    trend = SMALL_SPIKE

    def iter_branches(self, observations: Observations) -> Iterator[Outcome]:
        peak_flat = flat_phase(PEAK_FLAT_SLOTS, observations)

        for peak_start in PEAK_STARTS:
            probability_peak = self.prior / len(PEAK_STARTS)
            dec_1 = decaying_phase(
                generate_rates(
                    *DEC_RATE_START, *DEC_RATE_STEP, peak_start - 2, config=self.config
                ),
                observations,
            )
            dec_2 = decaying_phase(
                generate_rates(
                    *DEC_RATE_START,
                    *DEC_RATE_STEP,
                    SLOT_COUNT - peak_start - PEAK_SLOTS,
                    config=self.config,
                ),
                observations,
            )

            for spike_rate in SPIKE_RATES:
                probability = probability_peak / len(SPIKE_RATES)
                yield build_branch(
                    observations,
                    [
                        dec_1,
                        peak_flat,
                        spike_phase(spike_bounds(spike_rate), observations),
                        dec_2,
                    ],
                    probability,
                    self.trend,
                )

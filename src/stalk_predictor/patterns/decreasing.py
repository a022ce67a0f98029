from __future__ import annotations

from typing import Iterator

from stalk_predictor.config import DECREASING, SELL_SLOTS
from stalk_predictor.observations import Observations
from stalk_predictor.patterns.base import PatternEnumerator
from stalk_predictor.phases import build_branch, decaying_phase
from stalk_predictor.prediction import Outcome
from stalk_predictor.rates import generate_rates

DEC_RATE_START = (0.85, 0.9)
DEC_RATE_STEP = (0.03, 0.05)


class DecreasingPattern(PatternEnumerator):
    """Prices fall all week: a single cell, one rate chain over every sell slot."""

    trend = DECREASING

    def iter_branches(self, observations: Observations) -> Iterator[Outcome]:
        rates = generate_rates(*DEC_RATE_START, *DEC_RATE_STEP, SELL_SLOTS, config=self.config)
        yield build_branch(
            observations,
            [decaying_phase(rates, observations)],
            self.prior,
            self.trend,
        )

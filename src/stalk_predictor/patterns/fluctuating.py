from __future__ import annotations

from typing import Iterator

from stalk_predictor.config import RANDOM
from stalk_predictor.observations import Observations
from stalk_predictor.patterns.base import PatternEnumerator
from stalk_predictor.phases import build_branch, decaying_phase, flat_phase
from stalk_predictor.prediction import Outcome
from stalk_predictor.rates import generate_rates

# Rate chain shared by both decreasing phases
DEC_RATE_START = (0.6, 0.8)
DEC_RATE_STEP = (0.04, 0.1)

# Seven high slots and five decreasing slots in total
HIGH_SLOTS = 7
DEC_SLOTS = 5
DEC_PHASE_1_LENGTHS = (2, 3)


class RandomPattern(PatternEnumerator):
    """
    Alternating high and decreasing phases:

        high 1 | dec 1 | high 2 | dec 2 | high 3

    Grid: dec 1 length in {2, 3} (dec 2 takes the rest of five slots),
    high 1 length in 0..6 and high 3 length in 0..(6 - high 1); high 2 takes
    the rest of seven slots. Weight of a cell is prior / 2 / 7 / (7 - high 1).
    """

    trend = RANDOM

    def iter_branches(self, observations: Observations) -> Iterator[Outcome]:
        flat = flat_phase(HIGH_SLOTS, observations)

        for dec_1_len in DEC_PHASE_1_LENGTHS:
            probability_dec = self.prior / len(DEC_PHASE_1_LENGTHS)
            dec_2_len = DEC_SLOTS - dec_1_len
            dec_1 = decaying_phase(
                generate_rates(*DEC_RATE_START, *DEC_RATE_STEP, dec_1_len, config=self.config),
                observations,
            )
            dec_2 = decaying_phase(
                generate_rates(*DEC_RATE_START, *DEC_RATE_STEP, dec_2_len, config=self.config),
                observations,
            )

            for high_1_len in range(HIGH_SLOTS):
                probability_high = probability_dec / HIGH_SLOTS
                for high_3_len in range(HIGH_SLOTS - high_1_len):
                    probability = probability_high / (HIGH_SLOTS - high_1_len)
                    high_2_len = HIGH_SLOTS - high_1_len - high_3_len

                    yield build_branch(
                        observations,
                        [
                            flat.take(high_1_len),
                            dec_1,
                            flat.take(high_2_len),
                            dec_2,
                            flat.take(high_3_len),
                        ],
                        probability,
                        self.trend,
                    )

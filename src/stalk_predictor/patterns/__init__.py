"""
Pattern enumerators.

Each module covers one of the four weekly price patterns. An enumerator
walks its parameter grid and yields one branch outcome per grid cell; the
branch weights of a pattern sum to that pattern's prior.

Usage example
-------------
    from stalk_predictor.patterns import default_enumerators

    for enumerator in default_enumerators():
        outcome = enumerator.generate(observations)
"""

from typing import List

from stalk_predictor.config import PREDICTOR_CONFIG, PRIORS, PatternPriors, PredictorConfig
from stalk_predictor.patterns.base import PatternEnumerator
from stalk_predictor.patterns.big_spike import BigSpikePattern
from stalk_predictor.patterns.decreasing import DecreasingPattern
from stalk_predictor.patterns.fluctuating import RandomPattern
from stalk_predictor.patterns.small_spike import SmallSpikePattern

__all__ = [
    "PatternEnumerator",
    "RandomPattern",
    "BigSpikePattern",
    "DecreasingPattern",
    "SmallSpikePattern",
    "default_enumerators",
]


def default_enumerators(
    priors: PatternPriors = PRIORS,
    config: PredictorConfig = PREDICTOR_CONFIG,
) -> List[PatternEnumerator]:
    return [
        RandomPattern(priors, config),
        BigSpikePattern(priors, config),
        DecreasingPattern(priors, config),
        SmallSpikePattern(priors, config),
    ]

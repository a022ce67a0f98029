from __future__ import annotations

from typing import Tuple

import numpy as np

from stalk_predictor.config import PREDICTOR_CONFIG, PredictorConfig
from stalk_predictor.estimates import Distribution


def _uniform(low: int, high: int) -> np.ndarray:
    if high < low:
        raise ValueError(f"Rate bounds must satisfy min <= max; got [{low}, {high}] (fixed-point)")
    size = high - low + 1
    return np.full(size, 1.0 / size)


def _to_distribution(probs: np.ndarray, low: int, config: PredictorConfig) -> Distribution[float]:
    scale = config.rate_scale
    return Distribution(
        {
            round((low + offset) / scale, config.rate_precision): float(p)
            for offset, p in enumerate(probs)
            if p > 0
        }
    )


def generate_rates(
    start_min: float,
    start_max: float,
    step_min: float,
    step_max: float,
    length: int,
    config: PredictorConfig = PREDICTOR_CONFIG,
) -> Tuple[Distribution[float], ...]:
    """
    Per-day distributions of a multiplicative rate that decays day to day.

    Day 0 is uniform over [start_min, start_max]. Each following day subtracts
    a step drawn uniformly from [step_min, step_max]. Both ranges are
    discretized at `config.rate_precision` decimals, inclusive of both ends.

    Implementation note
    -------------------
    Rates are held as integer hundredths, so day i+1 is the convolution of
    day i with the (uniform) step distribution, shifted down by step_max.
    Working in fixed point keeps the key space from drifting apart the way
    repeated float subtraction would.

    Returns
    -------
    tuple[Distribution[float], ...]
        `length` distributions, one per day. Empty when length <= 0.
    """
    if length <= 0:
        return ()

    scale = config.rate_scale
    start_low, start_high = round(start_min * scale), round(start_max * scale)
    step_low, step_high = round(step_min * scale), round(step_max * scale)

    probs = _uniform(start_low, start_high)
    # uniform, so subtracting a step is the same as convolving with its mirror
    step_probs = _uniform(step_low, step_high)
    low = start_low

    days = [_to_distribution(probs, low, config)]
    for _ in range(length - 1):
        probs = np.convolve(probs, step_probs)
        low -= step_high
        days.append(_to_distribution(probs, low, config))

    return tuple(days)

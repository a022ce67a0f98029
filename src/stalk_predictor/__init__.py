"""
stalk_predictor

Exact Bayesian prediction of a week of half-day prices from partial
observations.

Structure:
- estimates: weighted-value algebra (price_range, multiply)
- rates: discretized decaying rate chains
- observations: input coercion and buy-price sanitizing
- phases: flat / decaying / spike phase distributions and branch assembly
- patterns: the four pattern enumerators
- prediction: branch outcomes, merge and normalization
- predictor: top-level entry point
- serving: tabular summaries of a prediction
"""

from stalk_predictor.observations import Observations
from stalk_predictor.prediction import PredictionResult
from stalk_predictor.predictor import Predictor, predict, predict_values

__all__ = [
    "Observations",
    "PredictionResult",
    "Predictor",
    "predict",
    "predict_values",
]

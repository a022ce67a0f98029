from __future__ import annotations

from typing import Iterator

from stalk_predictor.config import PREDICTOR_CONFIG, PRIORS, PatternPriors, PredictorConfig
from stalk_predictor.observations import Observations
from stalk_predictor.prediction import Outcome, merge


class PatternEnumerator:
    """
    Base class for the four pattern enumerators.

    Subclasses set `trend` and implement `iter_branches`, yielding one
    outcome per grid cell. Cells are independent of each other, so callers
    may consume the iterator partially and merge what they have.
    """

    trend: str = ""

    def __init__(
        self,
        priors: PatternPriors = PRIORS,
        config: PredictorConfig = PREDICTOR_CONFIG,
    ) -> None:
        if not self.trend:
            raise TypeError(f"{type(self).__name__} must define a trend name.")
        self.priors = priors
        self.config = config

    @property
    def prior(self) -> float:
        return self.priors.as_dict()[self.trend]

    def iter_branches(self, observations: Observations) -> Iterator[Outcome]:
        raise NotImplementedError

    def generate(self, observations: Observations) -> Outcome:
        """Merge every branch of this pattern into one outcome."""
        return merge(self.iter_branches(observations))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(trend={self.trend!r}, prior={self.prior})"

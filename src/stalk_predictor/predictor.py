from __future__ import annotations

import time
from typing import Any, List, Optional, Sequence

from stalk_predictor.config import PREDICTOR_CONFIG, PRIORS, PatternPriors, PredictorConfig
from stalk_predictor.log import get_logger
from stalk_predictor.observations import Observations
from stalk_predictor.patterns import PatternEnumerator, default_enumerators
from stalk_predictor.prediction import (
    Accepted,
    Outcome,
    PredictionResult,
    Rejected,
    merge,
    normalize,
)

logger = get_logger(__name__)


class Predictor:
    """
    Exact posterior over a week of prices given partial observations.

    Typical usage
    -------------
        predictor = Predictor()
        obs = Observations.from_sell_prices(100, [88, 85, None, 79])
        result = predictor.predict(obs)

    This will:
        - Enumerate every grid cell of the four patterns.
        - Drop the cells contradicted by an observation.
        - Merge the survivors and renormalize each slot and the trends.

    When every cell of every pattern is rejected, the observed slots that no
    cell can explain are reported empty and inference is re-run without
    them, so the remaining slots still get a prediction.
    """

    def __init__(
        self,
        priors: PatternPriors = PRIORS,
        config: PredictorConfig = PREDICTOR_CONFIG,
        enumerators: Optional[Sequence[PatternEnumerator]] = None,
    ) -> None:
        self.priors = priors
        self.config = config
        if enumerators is None:
            enumerators = default_enumerators(priors, config)
        self.enumerators: List[PatternEnumerator] = list(enumerators)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def predict(self, observations: Observations) -> PredictionResult:
        outcome = self.infer(observations)

        if isinstance(outcome, Rejected) and outcome.conflicts:
            conflicts = outcome.conflicts
            logger.warning(
                "observations_rejected_by_all_patterns",
                slots=sorted(conflicts),
                values=[observations.value(slot) for slot in sorted(conflicts)],
            )
            outcome = self.infer(observations.masked(conflicts))
            return normalize(outcome, conflicts)

        if isinstance(outcome, Rejected):
            logger.warning("observations_jointly_inconsistent", slots=list(observations.known_slots))
        return normalize(outcome)

    def infer(self, observations: Observations) -> Outcome:
        """
        Merged, unnormalized outcome of all patterns.

        Honours `config.deadline_seconds`: once exceeded, no further grid
        cells are evaluated and whatever has completed is merged.
        """
        deadline = None
        if self.config.deadline_seconds is not None:
            deadline = time.monotonic() + self.config.deadline_seconds

        pattern_outcomes: List[Outcome] = []
        for enumerator in self.enumerators:
            branches: List[Outcome] = []
            expired = False
            for outcome in enumerator.iter_branches(observations):
                branches.append(outcome)
                if deadline is not None and time.monotonic() > deadline:
                    expired = True
                    break

            # a pattern with no evaluated cells says nothing about conflicts
            if branches:
                pattern = merge(branches)
                pattern_outcomes.append(pattern)
                logger.debug(
                    "pattern_evaluated",
                    trend=enumerator.trend,
                    branches=len(branches),
                    survived=sum(isinstance(b, Accepted) for b in branches),
                )

            if expired:
                logger.warning(
                    "prediction_deadline_exceeded",
                    deadline_seconds=self.config.deadline_seconds,
                    trend=enumerator.trend,
                    patterns_completed=len(pattern_outcomes),
                )
                break

        return merge(pattern_outcomes)


def predict(observations: Observations) -> PredictionResult:
    """Run the default predictor on an observation vector."""
    return Predictor().predict(observations)


def predict_values(prices: Sequence[Any], buy_price: Any = None) -> PredictionResult:
    """Coerce a raw 14-slot vector (and optional buy price) and predict."""
    return predict(Observations.from_values(prices, buy_price))

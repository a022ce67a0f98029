import pytest

from stalk_predictor.config import SLOT_COUNT
from stalk_predictor.estimates import Distribution, price_range
from stalk_predictor.observations import Observations
from stalk_predictor.prediction import Accepted

# A week that only the Decreasing pattern explains: starts at 0.88 and
# drops 0.03 per half-day.
DECREASING_WEEK = [88, 85, 82, 79, 76, 73, 70, 67, 64, 61, 58, 55]


@pytest.fixture
def unknown_week() -> Observations:
    """Buy price 100, no sell observations."""
    return Observations.from_sell_prices(100, [])


@pytest.fixture
def unknown_buy_week() -> Observations:
    """Neither buy price nor sell observations."""
    return Observations.from_sell_prices(None, [])


@pytest.fixture
def decreasing_week() -> Observations:
    return Observations.from_sell_prices(100, DECREASING_WEEK)


def make_accepted(trend: str, probability: float, offset: int = 0) -> Accepted:
    """Synthetic accepted branch: a 3-price uniform slot shifted by `offset`."""
    slots = tuple(
        price_range(90 + offset + slot, 92 + offset + slot, probability)
        for slot in range(SLOT_COUNT)
    )
    return Accepted(slots=slots, trends={trend: probability})


def assert_distributions_close(a: Distribution, b: Distribution, tol: float = 1e-12) -> None:
    assert a.prices == b.prices
    for price in a.prices:
        assert a.probability(price) == pytest.approx(b.probability(price), abs=tol)

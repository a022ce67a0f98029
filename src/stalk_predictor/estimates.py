"""
Weighted-value algebra used by every stage of the predictor.

An `Estimate` is a (price, probability) pair. The same structure carries
integer prices for price slots and real-valued decay rates while rate chains
are built; only the numeric domain differs.

A `Distribution` is an immutable set of estimates keyed by price, kept sorted
by price. Keys are unique by construction:

- `Distribution(mapping)` is unique because a mapping is.
- `Distribution(pairs)` raises on a repeated price.
- `Distribution.from_estimates(estimates)` accumulates repeated prices.

No sum invariant holds for raw distributions; `normalized()` rescales the
mass to 1.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import (
    Dict,
    Generic,
    Iterable,
    Iterator,
    Optional,
    Tuple,
    TypeVar,
    Union,
)

Number = TypeVar("Number", int, float)

# Products such as 0.7 * 100 land a hair above the integer in binary floats
_CEIL_DIGITS = 9


@dataclass(frozen=True)
class Estimate(Generic[Number]):
    """A single weighted value: a price (or rate) and its probability."""

    price: Number
    probability: float


class Distribution(Generic[Number]):
    """Immutable price -> probability table with unique, sorted keys."""

    __slots__ = ("_weights",)

    def __init__(
        self,
        weights: Union[Mapping[Number, float], Iterable[Tuple[Number, float]], None] = None,
    ) -> None:
        if weights is None:
            items: Dict[Number, float] = {}
        elif isinstance(weights, Mapping):
            items = dict(weights)
        else:
            items = {}
            for price, probability in weights:
                if price in items:
                    raise ValueError(f"Duplicate price {price!r} in distribution.")
                items[price] = probability

        for price, probability in items.items():
            if math.isnan(probability) or probability < 0:
                raise ValueError(
                    f"Probability for price {price!r} must be a non-negative number; "
                    f"got {probability!r}"
                )
        self._weights: Dict[Number, float] = dict(sorted(items.items()))

    # ------------- Constructors -------------

    @classmethod
    def from_estimates(cls, estimates: Iterable[Estimate[Number]]) -> "Distribution[Number]":
        """Build a distribution, summing the probability of repeated prices."""
        acc: Dict[Number, float] = {}
        for e in estimates:
            acc[e.price] = acc.get(e.price, 0.0) + e.probability
        return cls(acc)

    @classmethod
    def point(cls, price: Number, probability: float = 1.0) -> "Distribution[Number]":
        return cls({price: probability})

    # ------------- Container protocol -------------

    def __iter__(self) -> Iterator[Estimate[Number]]:
        for price, probability in self._weights.items():
            yield Estimate(price, probability)

    def __len__(self) -> int:
        return len(self._weights)

    def __bool__(self) -> bool:
        return bool(self._weights)

    def __contains__(self, price: object) -> bool:
        return price in self._weights

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Distribution):
            return NotImplemented
        return self._weights == other._weights

    def __hash__(self) -> int:
        return hash(tuple(self._weights.items()))

    def __repr__(self) -> str:
        if len(self._weights) > 6:
            return (
                f"Distribution({len(self._weights)} prices in "
                f"[{self.min_price}, {self.max_price}], total={self.total:.6g})"
            )
        return f"Distribution({self._weights!r})"

    # ------------- Accessors -------------

    def items(self) -> Iterable[Tuple[Number, float]]:
        return self._weights.items()

    @property
    def prices(self) -> Tuple[Number, ...]:
        return tuple(self._weights)

    def probability(self, price: Number) -> float:
        return self._weights.get(price, 0.0)

    @property
    def total(self) -> float:
        return math.fsum(self._weights.values())

    @property
    def min_price(self) -> Number:
        if not self._weights:
            raise ValueError("Empty distribution has no minimum price.")
        return next(iter(self._weights))

    @property
    def max_price(self) -> Number:
        if not self._weights:
            raise ValueError("Empty distribution has no maximum price.")
        return next(reversed(self._weights))

    def admits(self, value: float) -> bool:
        """True if `value` lies within [min_price, max_price]."""
        if not self._weights:
            return False
        return self.min_price <= value <= self.max_price

    def mean(self) -> Optional[float]:
        """
        Probability-weighted expectation of the price.

        This is the "most likely price" reported to users. It is the
        expectation, not the mode. Returns None when there is no mass.
        """
        total = self.total
        if total <= 0:
            return None
        return math.fsum(p * w for p, w in self._weights.items()) / total

    # ------------- Transformations -------------

    def scaled(self, factor: float) -> "Distribution[Number]":
        return Distribution({p: w * factor for p, w in self._weights.items()})

    def normalized(self) -> "Distribution[Number]":
        """
        Rescale so probabilities sum to 1.

        A distribution with zero mass normalizes to an empty distribution.
        """
        total = self.total
        if total <= 0:
            return Distribution()
        return Distribution({p: w / total for p, w in self._weights.items()})

    def combined(self, other: "Distribution[Number]") -> "Distribution[Number]":
        """Sum two distributions price by price."""
        acc = dict(self._weights)
        for price, probability in other._weights.items():
            acc[price] = acc.get(price, 0.0) + probability
        return Distribution(acc)


def price_range(min_price: int, max_price: int, probability: float) -> Distribution[int]:
    """
    Uniform distribution over the integer prices in [min_price, max_price].

    Each of the `max_price - min_price + 1` prices carries
    `probability / (max_price - min_price + 1)`.
    """
    min_price = int(min_price)
    max_price = int(max_price)
    if max_price < min_price:
        raise ValueError(f"price_range requires max >= min; got [{min_price}, {max_price}]")

    length = max_price - min_price + 1
    share = probability / length
    return Distribution({price: share for price in range(min_price, max_price + 1)})


def ceil_price(value: float) -> int:
    """Ceiling of a rate * price product, tolerant of binary float noise."""
    return math.ceil(round(value, _CEIL_DIGITS))


def floor_price(value: float) -> int:
    """Floor counterpart of `ceil_price`."""
    return math.floor(round(value, _CEIL_DIGITS))


def multiply(a: Distribution, b: Distribution) -> Distribution[int]:
    """
    Apply every value of `a` to every value of `b`.

    Emits `ceil(x.price * y.price)` with probability
    `x.probability * y.probability`, summing equal resulting prices. Used to
    push the purchase-price prior through one day's rate distribution.
    """
    acc: Dict[int, float] = {}
    b_items = list(b.items())
    for x_price, x_prob in a.items():
        for y_price, y_prob in b_items:
            price = ceil_price(x_price * y_price)
            acc[price] = acc.get(price, 0.0) + x_prob * y_prob
    return Distribution(acc)

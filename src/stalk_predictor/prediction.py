"""
Branch outcomes, merging and normalization.

Every hypothesis branch ends in exactly one of two outcomes:

- `Accepted`: 14 raw (unnormalized) slot distributions plus the trend
  weight(s) they carry.
- `Rejected`: the branch contradicts at least one observation. `conflicts`
  names the observed slots that fell outside the branch's bound.

`merge` folds any number of outcomes into one. Rejected outcomes contribute
no mass; if nothing was accepted the merged outcome is itself Rejected, with
the conflicts shared by every input (the slots no hypothesis could explain).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Mapping, Optional, Tuple, Union

import pandas as pd

from stalk_predictor.config import SLOT_COUNT, SLOT_LABELS, TREND_NAMES
from stalk_predictor.estimates import Distribution


@dataclass(frozen=True)
class Accepted:
    """A surviving hypothesis (or a merge of several)."""

    slots: Tuple[Distribution[int], ...]
    trends: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self):
        if len(self.slots) != SLOT_COUNT:
            raise ValueError(
                f"An accepted outcome must cover {SLOT_COUNT} slots; got {len(self.slots)}"
            )

    @property
    def mass(self) -> float:
        return sum(self.trends.values())


@dataclass(frozen=True)
class Rejected:
    """A hypothesis ruled out by the observations."""

    conflicts: FrozenSet[int] = frozenset()


Outcome = Union[Accepted, Rejected]


def merge(outcomes: Iterable[Outcome]) -> Outcome:
    """
    Sum accepted outcomes slot by slot and trend by trend.

    Rejected outcomes are skipped: their probability mass is dropped, not
    redistributed. The result does not depend on the order or grouping of
    the inputs (up to float rounding).
    """
    slot_acc: list[Dict[int, float]] = [{} for _ in range(SLOT_COUNT)]
    trend_acc: Dict[str, float] = {}
    conflicts: Optional[FrozenSet[int]] = None
    accepted = False

    for outcome in outcomes:
        if isinstance(outcome, Rejected):
            conflicts = outcome.conflicts if conflicts is None else conflicts & outcome.conflicts
            continue
        if not isinstance(outcome, Accepted):
            raise TypeError(f"merge expects Accepted or Rejected outcomes; got {type(outcome)!r}")

        accepted = True
        for acc, dist in zip(slot_acc, outcome.slots):
            for price, probability in dist.items():
                acc[price] = acc.get(price, 0.0) + probability
        for name, weight in outcome.trends.items():
            trend_acc[name] = trend_acc.get(name, 0.0) + weight

    if not accepted:
        return Rejected(conflicts if conflicts is not None else frozenset())

    return Accepted(
        slots=tuple(Distribution(acc) for acc in slot_acc),
        trends=trend_acc,
    )


@dataclass(frozen=True)
class PredictionResult:
    """
    Normalized posterior over the 14 slots and the four patterns.

    Attributes
    ----------
    slots:
        One distribution per slot, each summing to 1. An empty distribution
        means no pattern is consistent with the data at that slot.
    trends:
        Posterior weight of every pattern name, summing to 1 when at least
        one pattern survives (all zero otherwise).
    conflicts:
        Observed slots that every hypothesis rejected. These slots are empty.
    """

    slots: Tuple[Distribution[int], ...]
    trends: Dict[str, float]
    conflicts: FrozenSet[int] = frozenset()

    def __post_init__(self):
        if len(self.slots) != SLOT_COUNT:
            raise ValueError(f"A prediction must cover {SLOT_COUNT} slots; got {len(self.slots)}")

    @property
    def is_consistent(self) -> bool:
        """False when any slot was rejected by every pattern."""
        return all(self.slots)

    def most_likely(self, slot: int) -> Optional[float]:
        """Probability-weighted mean price of a slot, or None when it is empty."""
        return self.slots[slot].mean()

    def bounds(self, slot: int) -> Optional[Tuple[int, int]]:
        dist = self.slots[slot]
        if not dist:
            return None
        return dist.min_price, dist.max_price

    def to_frame(self) -> pd.DataFrame:
        """Long-format view: one row per (slot, price)."""
        rows = [
            {
                "slot": slot,
                "label": SLOT_LABELS[slot],
                "price": price,
                "probability": probability,
            }
            for slot, dist in enumerate(self.slots)
            for price, probability in dist.items()
        ]
        return pd.DataFrame(rows, columns=["slot", "label", "price", "probability"])


def normalize(outcome: Outcome, conflicts: Iterable[int] = ()) -> PredictionResult:
    """
    Turn a merged outcome into a PredictionResult.

    Each slot is rescaled independently to sum to 1, and the trend vector is
    rescaled independently of the slots. Slots listed in `conflicts` are
    reported empty regardless of the outcome.
    """
    conflicts = frozenset(conflicts)

    if isinstance(outcome, Rejected):
        return PredictionResult(
            slots=tuple(Distribution() for _ in range(SLOT_COUNT)),
            trends={name: 0.0 for name in TREND_NAMES},
            conflicts=conflicts | outcome.conflicts,
        )

    slots = tuple(
        Distribution() if slot in conflicts else dist.normalized()
        for slot, dist in enumerate(outcome.slots)
    )

    total = outcome.mass
    trends = {name: 0.0 for name in TREND_NAMES}
    for name, weight in outcome.trends.items():
        trends[name] = weight / total if total > 0 else 0.0

    return PredictionResult(slots=slots, trends=trends, conflicts=conflicts)

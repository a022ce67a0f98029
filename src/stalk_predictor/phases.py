"""
Phase distributions and branch assembly.

A pattern hypothesis is a sequence of phases covering the 12 sell slots that
follow the two purchase-day slots. Each phase holds one unit-mass shape per
slot; a branch scales the shapes by its probability and checks them against
the observations:

- flat:     [floor(0.9 * buy_min), ceil(1.4 * buy_max)] on every slot
- decaying: multiply(rates[i], price_range(buy_min, buy_max, 1))
- spike:    [floor(low * buy_min) - adjust, ceil(high * buy_max)] per slot

An observed value outside a slot's [min, max] rejects the whole branch. An
observed value inside collapses that slot to a point carrying the branch's
full weight.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple, Union

from stalk_predictor.config import PURCHASE_SLOTS, SLOT_COUNT
from stalk_predictor.estimates import (
    Distribution,
    ceil_price,
    floor_price,
    multiply,
    price_range,
)
from stalk_predictor.observations import Observations
from stalk_predictor.prediction import Accepted, Outcome, Rejected

FLAT = "flat"
DECAYING = "decaying"
SPIKE = "spike"


class PhaseLengthError(RuntimeError):
    """Phase lengths of a hypothesis do not cover exactly the sell slots."""


@dataclass(frozen=True)
class RateBound:
    """
    Multipliers bounding one bounded-phase slot.

    The slot ranges over
    [floor(low * buy_min) - floor_adjust, ceil(high * buy_max)].
    """

    low: float
    high: float
    floor_adjust: int = 0

    def price_bounds(self, observations: Observations) -> Tuple[int, int]:
        return (
            floor_price(self.low * observations.buy_min) - self.floor_adjust,
            ceil_price(self.high * observations.buy_max),
        )


FLAT_BOUND = RateBound(0.9, 1.4)


@dataclass(frozen=True)
class Phase:
    """A run of slots sharing one price rule, as unit-mass shapes."""

    kind: str
    shapes: Tuple[Distribution[int], ...]

    def __len__(self) -> int:
        return len(self.shapes)

    def take(self, length: int) -> "Phase":
        """The first `length` slots of this phase."""
        if length < 0 or length > len(self.shapes):
            raise PhaseLengthError(
                f"Cannot take {length} slots from a {self.kind} phase of {len(self.shapes)}"
            )
        return Phase(kind=self.kind, shapes=self.shapes[:length])


@dataclass(frozen=True)
class Fitted:
    """Phase (or slot) distributions that agree with the observations."""

    slots: Tuple[Distribution[int], ...]


PhaseOutcome = Union[Fitted, Rejected]


# ---------------------------------------------------------------------------
# Phase constructors
# ---------------------------------------------------------------------------


def bounded_phase(kind: str, bounds: Sequence[RateBound], observations: Observations) -> Phase:
    shapes = []
    for bound in bounds:
        low, high = bound.price_bounds(observations)
        shapes.append(price_range(low, high, 1.0))
    return Phase(kind=kind, shapes=tuple(shapes))


def flat_phase(length: int, observations: Observations) -> Phase:
    """Slots whose price is independent of any decay chain."""
    if length < 0:
        raise PhaseLengthError(f"Phase length must be non-negative; got {length}")
    return bounded_phase(FLAT, [FLAT_BOUND] * length, observations)


def spike_phase(bounds: Sequence[RateBound], observations: Observations) -> Phase:
    return bounded_phase(SPIKE, bounds, observations)


def decaying_phase(rates: Sequence[Distribution[float]], observations: Observations) -> Phase:
    """
    Slots following a rate chain: the purchase-price prior pushed through
    each day's rate distribution.

    The shapes only depend on the rates and the buy bound, so one phase can
    be reused by every branch that shares the chain.
    """
    purchase = price_range(observations.buy_min, observations.buy_max, 1.0)
    return Phase(kind=DECAYING, shapes=tuple(multiply(day, purchase) for day in rates))


# ---------------------------------------------------------------------------
# Observation checks
# ---------------------------------------------------------------------------


def fit_phase(
    phase: Phase,
    observations: Observations,
    start: int,
    probability: float,
) -> PhaseOutcome:
    """
    Scale a phase to `probability` and constrain it by the observations.

    Every slot is checked, so a rejection lists all conflicting slots of the
    phase rather than just the first.
    """
    slots = []
    conflicts = set()
    for offset, shape in enumerate(phase.shapes):
        slot = start + offset
        observed = observations.value(slot)
        if observed is None:
            slots.append(shape.scaled(probability))
        elif shape.admits(observed):
            slots.append(Distribution.point(observed, probability))
        else:
            conflicts.add(slot)

    if conflicts:
        return Rejected(frozenset(conflicts))
    return Fitted(tuple(slots))


def build_branch(
    observations: Observations,
    phases: Iterable[Phase],
    probability: float,
    trend: str,
) -> Outcome:
    """
    Assemble one hypothesis from its phases.

    The two purchase-day slots always carry the buy-price prior. Raises
    PhaseLengthError when the phases do not cover exactly the remaining
    slots; that is a defect in the parameter grid, not in the input.
    """
    phases = list(phases)
    covered = PURCHASE_SLOTS + sum(len(phase) for phase in phases)
    if covered != SLOT_COUNT:
        raise PhaseLengthError(
            f"Phase lengths don't add up for '{trend}': "
            f"{[len(p) for p in phases]} covers {covered} of {SLOT_COUNT} slots"
        )

    purchase = price_range(observations.buy_min, observations.buy_max, probability)
    slots = [purchase] * PURCHASE_SLOTS
    conflicts = set()

    start = PURCHASE_SLOTS
    for phase in phases:
        fitted = fit_phase(phase, observations, start, probability)
        if isinstance(fitted, Rejected):
            conflicts |= fitted.conflicts
        else:
            slots.extend(fitted.slots)
        start += len(phase)

    if conflicts:
        return Rejected(frozenset(conflicts))
    return Accepted(slots=tuple(slots), trends={trend: probability})

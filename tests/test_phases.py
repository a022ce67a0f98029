import pytest

from stalk_predictor.config import SLOT_COUNT
from stalk_predictor.estimates import Distribution, price_range
from stalk_predictor.observations import Observations
from stalk_predictor.phases import (
    DECAYING,
    FLAT,
    SPIKE,
    Fitted,
    Phase,
    PhaseLengthError,
    RateBound,
    build_branch,
    decaying_phase,
    fit_phase,
    flat_phase,
    spike_phase,
)
from stalk_predictor.prediction import Accepted, Rejected
from stalk_predictor.rates import generate_rates


def test_flat_phase_bounds_with_known_buy_price(unknown_week):
    phase = flat_phase(3, unknown_week)

    assert phase.kind == FLAT
    assert len(phase) == 3
    for shape in phase.shapes:
        assert shape == price_range(90, 140, 1.0)


def test_flat_phase_bounds_with_unknown_buy_price(unknown_buy_week):
    shape = flat_phase(1, unknown_buy_week).shapes[0]

    # floor(0.9 * 90) .. ceil(1.4 * 110)
    assert (shape.min_price, shape.max_price) == (81, 154)


def test_flat_phase_rejects_negative_length(unknown_week):
    with pytest.raises(PhaseLengthError):
        flat_phase(-1, unknown_week)


def test_phase_take(unknown_week):
    phase = flat_phase(7, unknown_week)

    assert len(phase.take(0)) == 0
    assert len(phase.take(4)) == 4
    with pytest.raises(PhaseLengthError):
        phase.take(8)


def test_decaying_phase_applies_rate_to_purchase_prior(unknown_week):
    phase = decaying_phase([Distribution({0.7: 0.5, 0.8: 0.5})], unknown_week)

    assert phase.kind == DECAYING
    assert phase.shapes[0] == Distribution({70: 0.5, 80: 0.5})


def test_decaying_phase_matches_rate_chain_bounds(unknown_week):
    phase = decaying_phase(generate_rates(0.85, 0.9, 0.03, 0.05, 2), unknown_week)

    assert (phase.shapes[0].min_price, phase.shapes[0].max_price) == (85, 90)
    assert (phase.shapes[1].min_price, phase.shapes[1].max_price) == (80, 87)
    for shape in phase.shapes:
        assert shape.total == pytest.approx(1.0)


def test_spike_bound_floor_adjustment(unknown_week):
    bound = RateBound(1.4, 1.5, floor_adjust=1)

    assert bound.price_bounds(unknown_week) == (139, 150)

    phase = spike_phase([bound, RateBound(2.0, 6.0)], unknown_week)
    assert phase.kind == SPIKE
    assert (phase.shapes[1].min_price, phase.shapes[1].max_price) == (200, 600)


# ---------------------------------------------------------------------------
# Observation checks
# ---------------------------------------------------------------------------


def test_fit_phase_scales_unobserved_slots(unknown_week):
    fitted = fit_phase(flat_phase(2, unknown_week), unknown_week, start=2, probability=0.1)

    assert isinstance(fitted, Fitted)
    for dist in fitted.slots:
        assert dist.total == pytest.approx(0.1)


def test_fit_phase_collapses_observed_slot_to_point():
    obs = Observations.from_sell_prices(100, [95])
    fitted = fit_phase(flat_phase(2, obs), obs, start=2, probability=0.1)

    assert fitted.slots[0] == Distribution({95: 0.1})
    assert len(fitted.slots[1]) == 51


def test_fit_phase_rejects_out_of_bound_observations():
    obs = Observations.from_sell_prices(100, [1000, 95, 20])
    fitted = fit_phase(flat_phase(3, obs), obs, start=2, probability=0.1)

    assert fitted == Rejected(frozenset({2, 4}))


def test_build_branch_accepts_and_tags_trend(unknown_week):
    branch = build_branch(unknown_week, [flat_phase(12, unknown_week)], 0.25, "Random")

    assert isinstance(branch, Accepted)
    assert branch.trends == {"Random": 0.25}
    assert len(branch.slots) == SLOT_COUNT
    assert branch.slots[0] == branch.slots[1] == Distribution({100: 0.25})
    for dist in branch.slots:
        assert dist.total == pytest.approx(0.25)


def test_build_branch_collects_conflicts_across_phases():
    obs = Observations.from_sell_prices(100, [1000, None, None, 5])
    phases = [flat_phase(2, obs), flat_phase(10, obs)]

    assert build_branch(obs, phases, 0.25, "Random") == Rejected(frozenset({2, 5}))


@pytest.mark.parametrize("lengths", [(11,), (6, 7), (12, 1)])
def test_build_branch_rejects_bad_phase_lengths(unknown_week, lengths):
    phases = [flat_phase(n, unknown_week) for n in lengths]

    with pytest.raises(PhaseLengthError):
        build_branch(unknown_week, phases, 0.1, "Random")


def test_phase_is_plain_data():
    phase = Phase(kind=FLAT, shapes=())
    assert len(phase) == 0

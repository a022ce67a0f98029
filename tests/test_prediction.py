import itertools

import pytest

from stalk_predictor.config import SLOT_COUNT, TREND_NAMES
from stalk_predictor.estimates import Distribution, price_range
from stalk_predictor.prediction import (
    Accepted,
    PredictionResult,
    Rejected,
    merge,
    normalize,
)

from conftest import assert_distributions_close, make_accepted


def _assert_outcomes_close(a, b):
    assert type(a) is type(b)
    if isinstance(a, Rejected):
        assert a.conflicts == b.conflicts
        return
    for slot_a, slot_b in zip(a.slots, b.slots):
        assert_distributions_close(slot_a, slot_b)
    assert set(a.trends) == set(b.trends)
    for name in a.trends:
        assert a.trends[name] == pytest.approx(b.trends[name], abs=1e-12)


@pytest.fixture
def branches():
    return [
        make_accepted("Random", 0.1, offset=0),
        make_accepted("Random", 0.2, offset=1),
        make_accepted("Decreasing", 0.05, offset=2),
        Rejected(frozenset({4})),
    ]


def test_merge_sums_by_slot_and_price(branches):
    merged = merge(branches[:2])

    # slot 0 holds 90..92 at 0.1/3 and 91..93 at 0.2/3
    slot = merged.slots[0]
    assert slot.prices == (90, 91, 92, 93)
    assert slot.probability(90) == pytest.approx(0.1 / 3)
    assert slot.probability(91) == pytest.approx(0.1 / 3 + 0.2 / 3)
    assert merged.trends == {"Random": pytest.approx(0.3)}


def test_merge_is_commutative(branches):
    reference = merge(branches)
    for permutation in itertools.permutations(branches):
        _assert_outcomes_close(merge(permutation), reference)


def test_merge_is_associative(branches):
    a, b, c, d = branches
    left = merge([merge([a, b]), merge([c, d])])
    right = merge([a, merge([b, merge([c, d])])])
    flat = merge(branches)

    _assert_outcomes_close(left, flat)
    _assert_outcomes_close(right, flat)


def test_merge_drops_rejected_mass(branches):
    with_rejected = merge(branches)
    without = merge([b for b in branches if isinstance(b, Accepted)])

    _assert_outcomes_close(with_rejected, without)


def test_merge_of_only_rejections_keeps_shared_conflicts():
    merged = merge([Rejected(frozenset({3, 5})), Rejected(frozenset({5, 7}))])

    assert merged == Rejected(frozenset({5}))


def test_merge_of_nothing_is_rejected():
    assert merge([]) == Rejected(frozenset())


def test_merge_rejects_unknown_outcomes():
    with pytest.raises(TypeError):
        merge([object()])


def test_accepted_requires_every_slot():
    with pytest.raises(ValueError):
        Accepted(slots=(price_range(90, 110, 1.0),) * (SLOT_COUNT - 1))


def test_normalize_rescales_slots_and_trends_independently(branches):
    result = normalize(merge(branches))

    assert isinstance(result, PredictionResult)
    for dist in result.slots:
        assert dist.total == pytest.approx(1.0, abs=1e-9)
    assert sum(result.trends.values()) == pytest.approx(1.0, abs=1e-9)
    assert result.trends["Random"] == pytest.approx(0.3 / 0.35)
    assert result.trends["Decreasing"] == pytest.approx(0.05 / 0.35)
    assert set(result.trends) == set(TREND_NAMES)
    assert result.trends["Big Spike"] == 0.0


def test_normalize_empties_conflicting_slots(branches):
    result = normalize(merge(branches), conflicts={5})

    assert not result.slots[5]
    assert all(result.slots[i] for i in range(SLOT_COUNT) if i != 5)
    assert result.conflicts == frozenset({5})
    assert not result.is_consistent


def test_normalize_rejected_outcome_is_all_empty():
    result = normalize(Rejected(frozenset()))

    assert all(not dist for dist in result.slots)
    assert all(weight == 0.0 for weight in result.trends.values())


def test_result_accessors():
    slots = tuple(Distribution({100: 0.25, 104: 0.75}) for _ in range(SLOT_COUNT))
    result = PredictionResult(slots=slots, trends={"Random": 1.0})

    assert result.bounds(3) == (100, 104)
    assert result.most_likely(3) == pytest.approx(103.0)

    frame = result.to_frame()
    assert list(frame.columns) == ["slot", "label", "price", "probability"]
    assert len(frame) == 2 * SLOT_COUNT
    assert frame.groupby("slot")["probability"].sum().tolist() == pytest.approx([1.0] * SLOT_COUNT)

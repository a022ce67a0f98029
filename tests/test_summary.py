import math

import pandas as pd
import pytest

from stalk_predictor.config import SLOT_COUNT, SLOT_LABELS
from stalk_predictor.estimates import Distribution
from stalk_predictor.observations import Observations
from stalk_predictor.prediction import PredictionResult
from stalk_predictor.serving.summary import (
    SUMMARY_COLUMNS,
    chart_series,
    format_display,
    summarize,
    trend_frame,
)


@pytest.fixture
def result() -> PredictionResult:
    slots = [Distribution({90: 0.5, 100: 0.25, 110: 0.25}) for _ in range(SLOT_COUNT)]
    slots[2] = Distribution({95: 1.0})
    slots[6] = Distribution()
    return PredictionResult(
        slots=tuple(slots),
        trends={"Random": 0.1, "Big Spike": 0.6, "Decreasing": 0.0, "Small Spike": 0.3},
        conflicts=frozenset({6}),
    )


def test_format_display():
    assert format_display(90, 112.4, 140) == "90-112-140"
    assert format_display(90, 112.6, 140) == "90-113-140"
    assert format_display(90, 102.5, 110) == "90-103-110"
    assert format_display(90, 103.5, 110) == "90-104-110"
    assert format_display(None, None, None) == ""
    assert format_display(90, 100.0, 110, observed=95) == "95"


def test_summarize_rows(result):
    obs = Observations.from_sell_prices(100, [95])
    df = summarize(result, obs)

    assert isinstance(df, pd.DataFrame)
    assert list(df.columns) == SUMMARY_COLUMNS
    assert len(df) == SLOT_COUNT
    assert df["label"].tolist() == list(SLOT_LABELS)

    row = df.iloc[3]
    assert row["min"] == 90
    assert row["max"] == 110
    assert row["probable"] == pytest.approx(97.5)
    assert row["display"] == "90-98-110"
    assert math.isnan(row["observed"])

    assert df.iloc[2]["display"] == "95"
    assert df.iloc[2]["observed"] == 95


def test_summarize_leaves_empty_slots_blank(result):
    row = summarize(result).iloc[6]

    assert row["display"] == ""
    assert math.isnan(row["min"])
    assert math.isnan(row["probable"])


def test_trend_frame_is_sorted(result):
    df = trend_frame(result)

    assert df["trend"].tolist() == ["Big Spike", "Small Spike", "Random", "Decreasing"]
    assert df["probability"].sum() == pytest.approx(1.0)


def test_chart_series(result):
    df = chart_series(result)

    assert list(df.columns) == ["min", "probable", "max"]
    assert df.index.tolist() == list(SLOT_LABELS)
    assert df.loc["Wed AM"].isna().all()

from __future__ import annotations

import math
from typing import Optional

import numpy as np
import pandas as pd

from stalk_predictor.config import SLOT_LABELS, TREND_NAMES
from stalk_predictor.observations import Observations
from stalk_predictor.prediction import PredictionResult

SUMMARY_COLUMNS = ["slot", "label", "observed", "min", "probable", "max", "display"]


def format_display(
    low: Optional[int],
    probable: Optional[float],
    high: Optional[int],
    observed: Optional[float] = None,
) -> str:
    """
    Render one slot as "<min>-<probable>-<max>".

    Observed slots show the observed value; slots without any surviving
    hypothesis render as an empty string.
    """
    if observed is not None:
        return f"{observed:g}"
    if low is None or high is None or probable is None:
        return ""
    return f"{low}-{math.floor(probable + 0.5)}-{high}"


def summarize(
    result: PredictionResult,
    observations: Optional[Observations] = None,
) -> pd.DataFrame:
    """
    One row per slot with the predicted range and most likely price.

    Returns
    -------
    pd.DataFrame
        Columns: slot, label, observed, min, probable, max, display.
        `probable` is the probability-weighted mean price. min/probable/max
        are NaN for slots with an empty distribution.
    """
    rows = []
    for slot, dist in enumerate(result.slots):
        observed = observations.value(slot) if observations is not None else None
        if dist:
            low, high, probable = dist.min_price, dist.max_price, dist.mean()
        else:
            low = high = probable = None

        rows.append(
            {
                "slot": slot,
                "label": SLOT_LABELS[slot],
                "observed": np.nan if observed is None else observed,
                "min": np.nan if low is None else low,
                "probable": np.nan if probable is None else probable,
                "max": np.nan if high is None else high,
                "display": format_display(low, probable, high, observed),
            }
        )

    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


def trend_frame(result: PredictionResult) -> pd.DataFrame:
    """Posterior pattern weights, most likely first."""
    df = pd.DataFrame(
        {
            "trend": list(TREND_NAMES),
            "probability": [result.trends.get(name, 0.0) for name in TREND_NAMES],
        }
    )
    return df.sort_values("probability", ascending=False, kind="stable").reset_index(drop=True)


def chart_series(result: PredictionResult) -> pd.DataFrame:
    """
    Wide frame of min / probable / max per slot label, ready to plot.

    Empty slots are left as NaN so a chart shows a gap rather than a guess.
    """
    summary = summarize(result)
    return summary.set_index("label")[["min", "probable", "max"]].astype(float)

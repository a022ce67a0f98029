from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from stalk_predictor.config import (
    PREDICTOR_CONFIG,
    PURCHASE_SLOTS,
    SELL_SLOTS,
    SLOT_COUNT,
    PredictorConfig,
)


def _coerce(values: Iterable[Any]) -> list[float]:
    """
    Coerce raw cell values to floats, mapping anything malformed to NaN.

    Blank strings, None, text, infinities and non-positive numbers are all
    "unknown".
    """
    series = pd.to_numeric(pd.Series(list(values), dtype=object), errors="coerce")
    series = series.astype(float)
    series = series.where(np.isfinite(series) & (series > 0))
    return [float(v) for v in series]


def sanitize_buy_price(value: Any, config: PredictorConfig = PREDICTOR_CONFIG) -> Optional[int]:
    """
    Return the buy price as an int, or None if missing or outside the valid range.

    Buy prices are whole numbers; a fractional value is treated as unknown.
    """
    coerced = _coerce([value])[0]
    if math.isnan(coerced) or not coerced.is_integer():
        return None
    if coerced < config.buy_price_min or coerced > config.buy_price_max:
        return None
    return int(coerced)


@dataclass(frozen=True)
class Observations:
    """
    The 14-slot observation vector fed to the predictor.

    Attributes
    ----------
    prices:
        14 floats, NaN where unknown. Slots 0 and 1 are the purchase-day
        slots and are never read as sell observations.
    buy_price:
        Sanitized purchase price, or None when unknown.
    buy_min / buy_max:
        Bound of the purchase-price prior. Both equal `buy_price` when it is
        known, otherwise the full valid range.
    """

    prices: Tuple[float, ...]
    buy_price: Optional[int] = None
    buy_min: int = PREDICTOR_CONFIG.buy_price_min
    buy_max: int = PREDICTOR_CONFIG.buy_price_max

    def __post_init__(self):
        if len(self.prices) != SLOT_COUNT:
            raise ValueError(
                f"Observations must have exactly {SLOT_COUNT} slots; got {len(self.prices)}"
            )
        if self.buy_min > self.buy_max:
            raise ValueError(f"buy_min ({self.buy_min}) must not exceed buy_max ({self.buy_max})")

    # ------------- Constructors -------------

    @classmethod
    def from_values(
        cls,
        prices: Sequence[Any],
        buy_price: Any = None,
        config: PredictorConfig = PREDICTOR_CONFIG,
    ) -> "Observations":
        """
        Build observations from a raw 14-slot vector.

        Shorter vectors are padded with unknowns. When `buy_price` is not
        given, slot 0 is used as the purchase price.
        """
        values = list(prices)
        if len(values) > SLOT_COUNT:
            raise ValueError(
                f"At most {SLOT_COUNT} price slots are supported; got {len(values)}"
            )
        values.extend([np.nan] * (SLOT_COUNT - len(values)))

        if buy_price is None and values:
            buy_price = values[0]
        return cls._build(_coerce(values[PURCHASE_SLOTS:]), buy_price, config)

    @classmethod
    def from_sell_prices(
        cls,
        buy_price: Any,
        sell_prices: Sequence[Any],
        config: PredictorConfig = PREDICTOR_CONFIG,
    ) -> "Observations":
        """Build observations from a buy price and up to 12 Mon AM..Sat PM prices."""
        values = list(sell_prices)
        if len(values) > SELL_SLOTS:
            raise ValueError(f"At most {SELL_SLOTS} sell prices are supported; got {len(values)}")
        values.extend([np.nan] * (SELL_SLOTS - len(values)))
        return cls._build(_coerce(values), buy_price, config)

    @classmethod
    def _build(
        cls,
        sell_prices: list[float],
        buy_price: Any,
        config: PredictorConfig,
    ) -> "Observations":
        buy = sanitize_buy_price(buy_price, config)
        if buy is None:
            buy_min, buy_max = config.buy_price_min, config.buy_price_max
        else:
            buy_min = buy_max = buy
        prices = (float(buy_min), float(buy_max), *sell_prices)
        return cls(prices=prices, buy_price=buy, buy_min=buy_min, buy_max=buy_max)

    # ------------- Accessors -------------

    def known(self, slot: int) -> bool:
        """True when a sell observation exists for `slot`."""
        return slot >= PURCHASE_SLOTS and not math.isnan(self.prices[slot])

    def value(self, slot: int) -> Optional[float]:
        """Observed sell price of `slot` (an int when integral), or None."""
        if not self.known(slot):
            return None
        price = self.prices[slot]
        return int(price) if price.is_integer() else price

    @property
    def known_slots(self) -> Tuple[int, ...]:
        return tuple(i for i in range(PURCHASE_SLOTS, SLOT_COUNT) if self.known(i))

    def masked(self, slots: Iterable[int]) -> "Observations":
        """Copy with the given sell slots treated as unknown."""
        drop = set(slots)
        prices = tuple(
            np.nan if (i in drop and i >= PURCHASE_SLOTS) else p for i, p in enumerate(self.prices)
        )
        return Observations(
            prices=prices,
            buy_price=self.buy_price,
            buy_min=self.buy_min,
            buy_max=self.buy_max,
        )

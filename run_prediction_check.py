"""
Quick Prediction Check

Run this script to verify that the predictor works end to end on a sample
week.

Example:
    python run_prediction_check.py
"""

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from stalk_predictor import Observations, predict
from stalk_predictor.log import setup_logging
from stalk_predictor.serving.summary import summarize, trend_frame


def main():
    print("=== Stalk Predictor: Prediction Check ===")
    setup_logging("INFO")

    buy_price = 100
    sell_prices = [88, 85, None, None, 79]
    print(f"Buy price: {buy_price}")
    print(f"Sell prices: {sell_prices}")

    try:
        obs = Observations.from_sell_prices(buy_price, sell_prices)
        result = predict(obs)

        print("\n--- Slot Summary ---")
        print(summarize(result, obs).to_string(index=False))

        print("\n--- Trends ---")
        print(trend_frame(result).to_string(index=False))

        if not result.is_consistent:
            print(f"\nInconsistent slots: {sorted(result.conflicts)}")

        print("\nSuccess! Prediction computed.")

    except Exception as e:
        print("\nERROR: Something went wrong while predicting.\n")
        print(type(e).__name__, ":", str(e))


if __name__ == "__main__":
    main()

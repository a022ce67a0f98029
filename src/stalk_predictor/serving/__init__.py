"""Formatting of predictions for downstream consumers.

The predictor itself only produces distributions. This package turns a
`PredictionResult` into tabular summaries (one row per slot with the
lowest, most likely and highest price) that a grid or chart layer can
render directly.

It intentionally does not execute any code at import time.
"""

__all__: list[str] = []

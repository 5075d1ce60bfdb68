from __future__ import annotations

import logging
from typing import Tuple

import numpy as np
import pandas as pd

from probmetrics.errors import ShapeError

logger = logging.getLogger(__name__)


def as_truth_array(truth) -> np.ndarray:
    arr = np.asarray(truth, dtype=object)
    if arr.ndim != 1:
        raise ShapeError(f"truth must be one-dimensional, got shape {arr.shape}")
    return arr


def as_estimate_array(estimate) -> np.ndarray:
    arr = np.asarray(estimate, dtype=np.float64)
    if arr.ndim not in (1, 2):
        raise ShapeError(f"estimate must be a vector or a matrix, got {arr.ndim} dimensions")
    return arr


def assert_same_length(truth: np.ndarray, estimate: np.ndarray) -> None:
    if len(truth) != estimate.shape[0]:
        raise ShapeError(
            f"truth has {len(truth)} observations but estimate has {estimate.shape[0]} rows"
        )


def missing_mask(truth: np.ndarray, estimate: np.ndarray) -> np.ndarray:
    """Rows with a missing label or any missing probability."""
    mask = pd.isna(truth)
    est_na = np.isnan(estimate)
    if est_na.ndim == 2:
        est_na = est_na.any(axis=1)
    return mask | est_na


def drop_missing(truth, estimate) -> Tuple[np.ndarray, np.ndarray]:
    truth_arr = as_truth_array(truth)
    estimate_arr = as_estimate_array(estimate)
    assert_same_length(truth_arr, estimate_arr)

    mask = missing_mask(truth_arr, estimate_arr)
    n_missing = int(mask.sum())
    if n_missing:
        logger.warning("Dropping %d of %d observations with missing values", n_missing, len(mask))
    return truth_arr[~mask], estimate_arr[~mask]


__all__ = ["as_truth_array", "as_estimate_array", "assert_same_length", "missing_mask", "drop_missing"]

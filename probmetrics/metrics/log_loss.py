# probmetrics/metrics/log_loss.py
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

import numpy as np

from probmetrics.errors import DomainError, ShapeError
from probmetrics.metrics.base import MetricInterface
from probmetrics.metrics.estimator import is_binary, resolve_estimator
from probmetrics.metrics.indicator import build_indicator, resolve_levels
from probmetrics.validators import (
    as_estimate_array,
    as_truth_array,
    assert_same_length,
    drop_missing,
    missing_mask,
)

logger = logging.getLogger(__name__)

STABILITY_FLOOR = float(np.finfo(np.float64).eps)


def expand_binary(estimate: np.ndarray) -> np.ndarray:
    """Turn a first-level probability vector ``p`` into the matrix ``[p, 1 - p]``.

    Estimates that already carry two or more columns pass through untouched;
    the column count is checked against the level set later.
    """
    if estimate.ndim == 1:
        p = estimate
    elif estimate.shape[1] == 1:
        p = estimate[:, 0]
    else:
        return estimate
    return np.column_stack([p, 1.0 - p])


def log_loss_multiclass(
    indicator: np.ndarray,
    estimate: np.ndarray,
    *,
    sum: bool = False,
    stability_floor: float = STABILITY_FLOOR,
) -> float:
    """Negative log-likelihood of the true classes.

    Args:
        indicator (np.ndarray): N x K one-hot matrix of the true classes.
        estimate (np.ndarray): N x K class probabilities, columns in level order.
        sum (bool): Return the total instead of the mean over observations.
        stability_floor (float): True-class probabilities at or below this value
            are replaced by it before the log.

    Returns:
        float: Mean (or summed) log loss.

    Raises:
        ShapeError: If the two matrices differ in shape.
        DomainError: If an indicator row does not hold exactly one 1.
    """
    indicator = np.asarray(indicator, dtype=np.float64)
    estimate = np.asarray(estimate, dtype=np.float64)
    if indicator.shape != estimate.shape:
        raise ShapeError(
            f"indicator shape {indicator.shape} does not match estimate shape {estimate.shape}"
        )
    if not np.all(indicator.sum(axis=1) == 1.0):
        bad = np.flatnonzero(indicator.sum(axis=1) != 1.0)
        raise DomainError(f"Indicator rows must hold exactly one 1; offending rows: {bad[:10].tolist()}")

    masked = indicator * estimate
    # exactly one surviving entry per row, in row order
    p_true = masked[indicator.astype(bool)]

    clamped = p_true <= stability_floor
    n_clamped = int(clamped.sum())
    if n_clamped:
        logger.debug("Clamped %d true-class probabilities to %g", n_clamped, stability_floor)
    p_true = np.where(clamped, stability_floor, p_true)

    loss = float(-np.sum(np.log(p_true)))
    if sum:
        return loss

    n = indicator.shape[0]
    if n == 0:
        logger.warning("No observations to average; returning NaN")
        return float("nan")
    return loss / n


def compute_loss(
    truth,
    estimate,
    *,
    levels: Optional[Sequence] = None,
    sum: bool = False,
    estimator: Optional[str] = None,
    stability_floor: float = STABILITY_FLOOR,
) -> float:
    """Mean log loss of ``estimate`` against ``truth``.

    ``estimate`` is an N x K probability matrix with columns in level order,
    or, for two levels, a vector with the probability of the first level.
    Input is expected to be free of missing values, see ``mn_log_loss_vec``.
    """
    level_set = resolve_levels(truth, levels)
    kind = resolve_estimator(len(level_set), estimator)

    truth_arr = as_truth_array(truth)
    estimate_arr = as_estimate_array(estimate)
    assert_same_length(truth_arr, estimate_arr)

    if is_binary(kind):
        estimate_arr = expand_binary(estimate_arr)
    elif estimate_arr.ndim == 1:
        raise ShapeError(f"{kind} estimator needs a probability matrix with {len(level_set)} columns")

    if estimate_arr.shape[1] != len(level_set):
        raise ShapeError(
            f"estimate has {estimate_arr.shape[1]} columns but there are {len(level_set)} class levels"
        )

    logger.debug("mn_log_loss: estimator=%s n=%d k=%d", kind, len(truth_arr), len(level_set))
    indicator = build_indicator(truth_arr, level_set)
    return log_loss_multiclass(indicator, estimate_arr, sum=sum, stability_floor=stability_floor)


def mn_log_loss_vec(
    truth,
    estimate,
    *,
    levels: Optional[Sequence] = None,
    na_rm: bool = True,
    sum: bool = False,
    estimator: Optional[str] = None,
    stability_floor: float = STABILITY_FLOOR,
) -> float:
    """``compute_loss`` with missing-value handling.

    With ``na_rm`` rows holding a missing label or probability are dropped;
    without it any missing value makes the result NaN. The level set is taken
    from the full truth vector, before filtering.
    """
    level_set = resolve_levels(truth, levels)
    kind = resolve_estimator(len(level_set), estimator)

    truth_arr = as_truth_array(truth)
    estimate_arr = as_estimate_array(estimate)
    assert_same_length(truth_arr, estimate_arr)

    if na_rm:
        truth_arr, estimate_arr = drop_missing(truth_arr, estimate_arr)
    elif missing_mask(truth_arr, estimate_arr).any():
        return float("nan")

    return compute_loss(
        truth_arr,
        estimate_arr,
        levels=level_set,
        sum=sum,
        estimator=kind,
        stability_floor=stability_floor,
    )


class LogLossMetric(MetricInterface):
    """Mean log loss over class probabilities.

    Binary targets accept either a probability vector for the first level or a
    two-column matrix; multiclass targets need one column per level.
    """
    name = "mn_log_loss"
    greater_is_better = False

    def __init__(
        self,
        sum: bool = False,
        na_rm: bool = True,
        estimator: Optional[str] = None,
        levels: Optional[Sequence] = None,
        stability_floor: float = STABILITY_FLOOR,
    ):
        self.sum = sum
        self.na_rm = na_rm
        self.estimator = estimator
        self.levels = levels
        self.stability_floor = stability_floor

    @classmethod
    def from_config(cls, cfg: Any, levels: Optional[Sequence] = None) -> "LogLossMetric":
        resolved: Mapping[str, Any] = getattr(cfg, "resolved", cfg)
        section = resolved.get("log_loss", {}) or {}
        return cls(
            sum=bool(section.get("sum", False)),
            na_rm=bool(section.get("na_rm", True)),
            estimator=section.get("estimator"),
            levels=levels,
            stability_floor=float(section.get("stability_floor", STABILITY_FLOOR)),
        )

    def __call__(self, y_true: np.ndarray, y_pred: np.ndarray, **kwargs) -> float:
        return mn_log_loss_vec(
            y_true,
            y_pred,
            levels=kwargs.get("levels", self.levels),
            na_rm=self.na_rm,
            sum=self.sum,
            estimator=kwargs.get("estimator", self.estimator),
            stability_floor=self.stability_floor,
        )


__all__ = [
    "STABILITY_FLOOR",
    "expand_binary",
    "log_loss_multiclass",
    "compute_loss",
    "mn_log_loss_vec",
    "LogLossMetric",
]

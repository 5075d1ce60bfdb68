from __future__ import annotations

from typing import Callable, Iterable, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from probmetrics.metrics.estimator import resolve_estimator
from probmetrics.metrics.indicator import resolve_levels
from probmetrics.metrics.log_loss import mn_log_loss_vec
from probmetrics.validators import as_estimate_array, as_truth_array, assert_same_length


def _prepare_preds_for_classification(y_pred):
    y_pred = np.asarray(y_pred, dtype=np.float64)
    if y_pred.ndim == 2 and y_pred.shape[1] == 1:
        return y_pred[:, 0]
    return y_pred


def get_scorer(task: str, metric: str) -> Callable[..., float]:
    """
    Возвращает функцию score(y_true, y_pred/proba, levels=None).
    binary: logloss|logloss_sum (y_pred = P(first level) или матрица N x 2)
    multiclass: logloss|logloss_sum (y_pred = матрица N x K)
    levels задаёт полный набор классов, если в y_true есть не все.
    """
    task_l = task.lower()
    metric_l = metric.lower()

    if task_l not in ("binary", "multiclass"):
        raise ValueError(f"Unknown task type: {task}")

    if metric_l == "logloss":
        return lambda y_true, y_pred, levels=None: mn_log_loss_vec(
            y_true, _prepare_preds_for_classification(y_pred), levels=levels, estimator=task_l
        )
    if metric_l == "logloss_sum":
        return lambda y_true, y_pred, levels=None: mn_log_loss_vec(
            y_true, _prepare_preds_for_classification(y_pred), levels=levels, estimator=task_l, sum=True
        )
    raise ValueError(f"Unknown {task_l} metric: {metric}")


def cv_scores_by_folds(
    y_true,
    y_pred,
    folds: Iterable[Tuple[np.ndarray, np.ndarray]],
    scorer,
    levels: Optional[Sequence] = None,
) -> List[float]:
    """Считает metric на каждом фолде по val-индексам.

    Набор классов берётся один раз по всему y_true, так что фолд с одним
    классом всё равно считается по всем уровням.
    """
    level_set = resolve_levels(y_true, levels)
    y_true = as_truth_array(y_true)
    y_pred = as_estimate_array(y_pred)
    assert_same_length(y_true, y_pred)
    scores = []
    for _, val_idx in folds:
        val_idx = np.asarray(val_idx)
        scores.append(float(scorer(y_true[val_idx], y_pred[val_idx], levels=level_set)))
    return scores


def scores_by_groups(
    truth,
    estimate,
    groups,
    *,
    levels: Optional[Sequence] = None,
    sum: bool = False,
    na_rm: bool = True,
    estimator: Optional[str] = None,
) -> pd.Series:
    """Log loss per group, one value per distinct group (sorted).

    The level set and the estimator are resolved once over the whole truth
    vector and reused for every group, so a group holding a single class is
    still scored against all levels.

    Parameters
    ----------
    truth : sequence
        Class labels, N values.
    estimate : array-like
        N x K probabilities, or an N-vector for two levels.
    groups : sequence
        Group key per observation (e.g. resample id), N values.
    """
    level_set = resolve_levels(truth, levels)
    kind = resolve_estimator(len(level_set), estimator)

    truth_arr = as_truth_array(truth)
    estimate_arr = as_estimate_array(estimate)
    assert_same_length(truth_arr, estimate_arr)
    group_arr = np.asarray(groups, dtype=object)
    if len(group_arr) != len(truth_arr):
        raise ValueError(f"groups has {len(group_arr)} values but truth has {len(truth_arr)}")

    positions = pd.Series(np.arange(len(group_arr)))
    values = {}
    for key, part in positions.groupby(group_arr, sort=True):
        idx = part.to_numpy()
        values[key] = mn_log_loss_vec(
            truth_arr[idx],
            estimate_arr[idx],
            levels=level_set,
            na_rm=na_rm,
            sum=sum,
            estimator=kind,
        )
    result = pd.Series(values, name="mn_log_loss", dtype=np.float64)
    result.index.name = "group"
    return result


__all__ = ["get_scorer", "cv_scores_by_folds", "scores_by_groups"]

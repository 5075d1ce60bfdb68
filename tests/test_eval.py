import numpy as np
import pandas as pd
import pytest

from probmetrics.eval import cv_scores_by_folds, get_scorer, scores_by_groups
from probmetrics.metrics.log_loss import LogLossMetric, compute_loss


def test_binary_scorer():
    truth = np.array(["A", "B", "A"])
    p = np.array([0.8, 0.3, 0.6])
    scorer = get_scorer("binary", "logloss")
    assert scorer(truth, p) == pytest.approx(compute_loss(truth, p))
    assert scorer(truth, p[:, None]) == pytest.approx(compute_loss(truth, p))
    total = get_scorer("Binary", "LogLoss_Sum")(truth, p)
    assert total == pytest.approx(compute_loss(truth, p, sum=True))


def test_multiclass_scorer():
    truth = np.array([0, 1, 2, 1])
    est = np.array([[0.7, 0.2, 0.1], [0.1, 0.8, 0.1], [0.2, 0.2, 0.6], [0.3, 0.4, 0.3]])
    scorer = get_scorer("multiclass", "logloss")
    assert scorer(truth, est) == pytest.approx(compute_loss(truth, est))


def test_unknown_scorer():
    with pytest.raises(ValueError, match="Unknown task"):
        get_scorer("regression", "logloss")
    with pytest.raises(ValueError, match="Unknown binary metric"):
        get_scorer("binary", "roc_auc")


def test_cv_scores_by_folds():
    truth = np.array(["A", "B", "A", "B"])
    p = np.array([0.9, 0.2, 0.6, 0.4])
    folds = [(np.array([2, 3]), np.array([0, 1])), (np.array([0, 1]), np.array([2, 3]))]
    scores = cv_scores_by_folds(truth, p, folds, get_scorer("binary", "logloss"))
    assert len(scores) == 2
    assert scores[0] == pytest.approx(compute_loss(truth[:2], p[:2]))
    assert scores[1] == pytest.approx(compute_loss(truth[2:], p[2:]))


def test_scores_by_groups_uses_global_levels():
    truth = np.array(["a", "b", "c", "a", "a"])
    est = np.array(
        [
            [0.6, 0.3, 0.1],
            [0.2, 0.5, 0.3],
            [0.1, 0.1, 0.8],
            [0.5, 0.25, 0.25],
            [0.4, 0.4, 0.2],
        ]
    )
    groups = ["fold2", "fold1", "fold1", "fold2", "fold2"]
    res = scores_by_groups(truth, est, groups)
    assert res.index.tolist() == ["fold1", "fold2"]
    assert res.name == "mn_log_loss"
    # fold2 holds only "a" yet is scored against all three levels
    expected_fold2 = compute_loss(truth[[0, 3, 4]], est[[0, 3, 4]], levels=["a", "b", "c"])
    assert res["fold2"] == pytest.approx(expected_fold2)
    assert res["fold1"] == pytest.approx(compute_loss(truth[[1, 2]], est[[1, 2]], levels=["a", "b", "c"]))


def test_scores_by_groups_sum_and_length_check():
    truth = ["A", "B", "A", "B"]
    p = [0.9, 0.2, 0.6, 0.4]
    res = scores_by_groups(truth, p, [1, 1, 2, 2], sum=True)
    assert res.sum() == pytest.approx(compute_loss(truth, p, sum=True))
    with pytest.raises(ValueError):
        scores_by_groups(truth, p, [1, 2])


def test_cv_scores_fold_with_one_class_uses_full_levels():
    truth = pd.Categorical(["A", "A", "B", "B"], categories=["A", "B"])
    p = [0.9, 0.8, 0.3, 0.4]
    folds = [([2, 3], [0, 1]), ([0, 1], [2, 3])]
    scores = cv_scores_by_folds(truth, p, folds, get_scorer("binary", "logloss"))
    assert scores[0] == pytest.approx(-(np.log(0.9) + np.log(0.8)) / 2)
    assert scores[1] == pytest.approx(-(np.log(0.7) + np.log(0.6)) / 2)


def test_cv_scores_multiclass_fold_missing_a_class():
    truth = pd.Categorical(["a", "b", "c", "a"], categories=["a", "b", "c"])
    est = np.array(
        [
            [0.6, 0.3, 0.1],
            [0.2, 0.5, 0.3],
            [0.1, 0.1, 0.8],
            [0.5, 0.25, 0.25],
        ]
    )
    folds = [(np.array([2, 3]), np.array([0, 1])), (np.array([0, 1]), np.array([2, 3]))]
    scores = cv_scores_by_folds(truth, est, folds, get_scorer("multiclass", "logloss_sum"))
    assert scores[0] == pytest.approx(-(np.log(0.6) + np.log(0.5)))
    assert scores[1] == pytest.approx(-(np.log(0.8) + np.log(0.5)))


def test_cv_scores_accepts_metric_object():
    truth = np.array(["A", "A", "B", "B"])
    p = np.array([0.9, 0.8, 0.3, 0.4])
    folds = [(np.array([2, 3]), np.array([0, 1]))]
    scores = cv_scores_by_folds(truth, p, folds, LogLossMetric())
    assert scores[0] == pytest.approx(-(np.log(0.9) + np.log(0.8)) / 2)

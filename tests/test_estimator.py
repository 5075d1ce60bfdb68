import pytest

from probmetrics.errors import DomainError
from probmetrics.metrics.estimator import BINARY, MULTICLASS, is_binary, resolve_estimator


def test_estimator_from_level_count():
    assert resolve_estimator(2) == BINARY
    assert resolve_estimator(3) == MULTICLASS
    assert resolve_estimator(10, "auto") == MULTICLASS


@pytest.mark.parametrize("n_levels", [0, 1])
def test_fewer_than_two_levels(n_levels):
    with pytest.raises(DomainError, match="at least two classes required"):
        resolve_estimator(n_levels)
    with pytest.raises(DomainError):
        resolve_estimator(n_levels, MULTICLASS)


def test_explicit_override():
    assert resolve_estimator(2, MULTICLASS) == MULTICLASS
    assert resolve_estimator(2, BINARY) == BINARY
    with pytest.raises(DomainError):
        resolve_estimator(3, BINARY)
    with pytest.raises(ValueError, match="Unknown estimator"):
        resolve_estimator(3, "macro")


def test_domain_error_is_value_error():
    with pytest.raises(ValueError):
        resolve_estimator(1)


def test_is_binary():
    assert is_binary(BINARY)
    assert not is_binary(MULTICLASS)

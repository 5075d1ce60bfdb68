from __future__ import annotations

from typing import Optional

from probmetrics.errors import DomainError

BINARY = "binary"
MULTICLASS = "multiclass"
AUTO = "auto"

ESTIMATORS = (BINARY, MULTICLASS)


def resolve_estimator(n_levels: int, estimator: Optional[str] = None) -> str:
    """Pick ``binary`` or ``multiclass`` from the number of class levels.

    Parameters
    ----------
    n_levels : int
        Size of the level set K.
    estimator : str, optional
        Explicit override, used when K alone is not enough (e.g. a single call
        spanning groups that do not all contain every class). ``None`` and
        ``"auto"`` mean infer from K.
    """
    if n_levels < 2:
        raise DomainError(f"at least two classes required, got {n_levels}")

    if estimator is None or estimator == AUTO:
        return BINARY if n_levels == 2 else MULTICLASS

    if estimator not in ESTIMATORS:
        raise ValueError(f"Unknown estimator: {estimator!r}; expected one of {ESTIMATORS} or 'auto'")
    if estimator == BINARY and n_levels > 2:
        raise DomainError(f"binary estimator requires exactly two classes, got {n_levels}")
    return estimator


def is_binary(estimator: str) -> bool:
    return estimator == BINARY


__all__ = ["BINARY", "MULTICLASS", "AUTO", "ESTIMATORS", "resolve_estimator", "is_binary"]

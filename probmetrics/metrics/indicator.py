from __future__ import annotations

from typing import Optional, Sequence

import numpy as np
import pandas as pd

from probmetrics.errors import DomainError


def resolve_levels(truth, levels: Optional[Sequence] = None) -> pd.Index:
    """Return the ordered level set for ``truth``.

    Explicit ``levels`` win; a categorical truth brings its own categories;
    anything else falls back to the sorted distinct values.
    """
    if levels is not None:
        index = pd.Index(list(levels))
        if index.has_duplicates:
            dupes = index[index.duplicated()].tolist()
            raise DomainError(f"Duplicate class levels: {dupes}")
        return index
    if isinstance(truth, pd.Categorical):
        return pd.Index(truth.categories)
    if isinstance(truth, pd.Series) and isinstance(truth.dtype, pd.CategoricalDtype):
        return pd.Index(truth.cat.categories)
    values = pd.Series(np.asarray(truth, dtype=object)).dropna().unique()
    try:
        return pd.Index(sorted(values))
    except TypeError as e:
        raise DomainError(
            f"Cannot order mixed-type labels {list(values)[:10]}; pass levels= explicitly"
        ) from e


def build_indicator(truth, levels: pd.Index) -> np.ndarray:
    """One-hot encode ``truth`` against ``levels``.

    Row ``i`` holds a single 1.0 in the column of ``truth[i]``. Values outside
    the level set would leave an all-zero row, so they are rejected here.
    """
    codes = pd.Categorical(np.asarray(truth, dtype=object), categories=levels).codes
    n = len(codes)
    indicator = np.zeros((n, len(levels)), dtype=np.float64)
    known = codes >= 0
    indicator[np.arange(n)[known], codes[known]] = 1.0

    if not np.all(indicator.sum(axis=1) == 1.0):
        unknown = pd.unique(np.asarray(truth, dtype=object)[~known])
        raise DomainError(f"Truth values outside the level set {list(levels)}: {list(unknown)}")
    return indicator


__all__ = ["resolve_levels", "build_indicator"]

from .base import MetricInterface
from .estimator import BINARY, MULTICLASS, is_binary, resolve_estimator
from .indicator import build_indicator, resolve_levels
from .log_loss import (
    STABILITY_FLOOR,
    LogLossMetric,
    compute_loss,
    expand_binary,
    log_loss_multiclass,
    mn_log_loss_vec,
)

__all__ = [
    "MetricInterface",
    "BINARY",
    "MULTICLASS",
    "is_binary",
    "resolve_estimator",
    "build_indicator",
    "resolve_levels",
    "STABILITY_FLOOR",
    "LogLossMetric",
    "compute_loss",
    "expand_binary",
    "log_loss_multiclass",
    "mn_log_loss_vec",
]

"""Mean log loss for class-probability models."""
from .errors import DomainError, MetricError, ShapeError
from .metrics import LogLossMetric, compute_loss, mn_log_loss_vec, resolve_estimator

__version__ = "0.1.0"

__all__ = [
    "DomainError",
    "MetricError",
    "ShapeError",
    "LogLossMetric",
    "compute_loss",
    "mn_log_loss_vec",
    "resolve_estimator",
]

from __future__ import annotations


class MetricError(ValueError):
    """Base class for invalid metric inputs."""


class DomainError(MetricError):
    """The metric is undefined for the given level set."""


class ShapeError(MetricError):
    """Truth and estimate dimensions do not line up."""


__all__ = ["MetricError", "DomainError", "ShapeError"]

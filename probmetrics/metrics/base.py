# probmetrics/metrics/base.py
from abc import ABC, abstractmethod
import numpy as np


class MetricInterface(ABC):
    name: str = "metric"
    greater_is_better: bool = True

    @abstractmethod
    def __call__(self, y_true: np.ndarray, y_pred: np.ndarray, **kwargs) -> float:
        # kwargs может содержать 'levels', 'estimator' и т.д.
        pass

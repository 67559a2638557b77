"""Lookup of quality metrics by their default name."""

from typing import Dict, List, Type

from .base import QualityMetric
from .block_svd import QualityBlockSVD
from .gmlog import QualityGMLOG

METRICS: Dict[str, Type[QualityMetric]] = {
    QualityGMLOG.DEFAULT_NAME: QualityGMLOG,
    QualityBlockSVD.DEFAULT_NAME: QualityBlockSVD,
}


def available_metrics() -> List[str]:
    """Names of all registered metrics."""
    return sorted(METRICS)


def get_metric_class(name: str) -> Type[QualityMetric]:
    """Return the metric class registered under `name`.
    
    Raises:
        ValueError: If no metric has that name
    """
    if name not in METRICS:
        raise ValueError(f"Unknown quality metric: {name}. Available: {available_metrics()}")
    return METRICS[name]


def create_metric(name: str, *args, **kwargs) -> QualityMetric:
    """Instantiate the metric registered under `name`."""
    return get_metric_class(name)(*args, **kwargs)

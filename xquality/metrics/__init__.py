"""Quality metrics."""

from .base import QualityMetric, ModelBinding
from .gmlog import QualityGMLOG
from .block_svd import QualityBlockSVD
from .registry import available_metrics, create_metric, get_metric_class

__all__ = [
    'QualityMetric', 'ModelBinding', 'QualityGMLOG', 'QualityBlockSVD',
    'available_metrics', 'create_metric', 'get_metric_class',
]

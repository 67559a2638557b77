"""xquality - GM-LOG and Block-SVD image quality assessment."""

__version__ = "1.0.0"

from .exceptions import (
    XQualityError, UnsupportedChannelCount, ModelLoadError, DimensionMismatch,
    SizeMismatch, EmptyReference, PredictionError,
)
from .metrics import QualityGMLOG, QualityBlockSVD, QualityMetric, create_metric, available_metrics
from .scoring import RangeTable, RangeNormalizer, SvmRegressionModel, load_model, load_range
from .utils import load_config, setup_logging, load_image

__all__ = [
    'QualityGMLOG', 'QualityBlockSVD', 'QualityMetric', 'create_metric', 'available_metrics',
    'RangeTable', 'RangeNormalizer', 'SvmRegressionModel', 'load_model', 'load_range',
    'load_config', 'setup_logging', 'load_image',
    'XQualityError', 'UnsupportedChannelCount', 'ModelLoadError', 'DimensionMismatch',
    'SizeMismatch', 'EmptyReference', 'PredictionError',
]

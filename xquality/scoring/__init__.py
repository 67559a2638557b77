"""Normalization and regression scoring."""

from .normalization import RangeTable, RangeNormalizer
from .regression import RegressionModel, SvmRegressionModel, RegressionScorer
from .loader import load_model, load_range, save_range, load_resources

__all__ = [
    'RangeTable', 'RangeNormalizer',
    'RegressionModel', 'SvmRegressionModel', 'RegressionScorer',
    'load_model', 'load_range', 'save_range', 'load_resources',
]

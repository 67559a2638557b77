"""Shared interface for quality metrics."""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, Optional
import numpy as np

from ..exceptions import DimensionMismatch
from ..scoring import RangeNormalizer, RangeTable, RegressionModel, RegressionScorer
from ..utils import Scalar, to_scalar


class QualityMetric(ABC):
    """Capability shared by all quality algorithms."""
    
    DEFAULT_NAME = "QualityMetric"
    
    @abstractmethod
    def compute(self, image: np.ndarray) -> Scalar:
        """Compute quality of a single image.
        
        Args:
            image: Input image
            
        Returns:
            Four-slot scalar of per-channel values
        """
        pass
    
    def get_default_name(self) -> str:
        """Stable identifier of the algorithm."""
        return self.DEFAULT_NAME


class ModelBinding:
    """A regression model bound to the range table it was trained with."""
    
    def __init__(self, model: RegressionModel, range_table: RangeTable,
                 config: Optional[Dict] = None):
        """Initialize binding.
        
        Args:
            model: Trained regression model
            range_table: Normalization bounds for the model's inputs
            config: Normalization configuration
            
        Raises:
            DimensionMismatch: If the range table and model widths differ
        """
        if len(range_table) != model.input_width:
            raise DimensionMismatch(model.input_width, len(range_table), "range table")
        
        self.model = model
        self.range_table = range_table
        self.normalizer = RangeNormalizer(range_table, config)
        self.scorer = RegressionScorer(model)
    
    @property
    def input_width(self) -> int:
        return self.model.input_width
    
    def score(self, features: np.ndarray) -> float:
        """Normalize then regress one feature vector."""
        return self.scorer.score(self.normalizer.normalize(features))
    
    def score_all(self, feature_vectors: Iterable[np.ndarray]) -> Scalar:
        """Score one feature vector per plane into a four-slot scalar."""
        return to_scalar(self.score(features) for features in feature_vectors)

"""GM-LOG no-reference quality metric.

Scores range from 0 (pristine) to 100 (worst). Scores are not clamped and
may exceed 100 for extreme distortions.
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Union
import numpy as np

from ..core.channels import channel_count, scored_planes, split_channels
from ..exceptions import DimensionMismatch, ModelLoadError
from ..features.gmlog import GMLOGFeatureExtractor
from ..scoring import RangeTable, RegressionModel, load_resources
from ..utils import Scalar, load_config
from .base import ModelBinding, QualityMetric

logger = logging.getLogger(__name__)

# Read-only after construction; shared by all compute_features calls
DEFAULT_EXTRACTOR = GMLOGFeatureExtractor()


class QualityGMLOG(QualityMetric):
    """GM-LOG quality bound to a trained model and range table."""
    
    DEFAULT_NAME = "QualityGMLOG"
    
    def __init__(self, model: RegressionModel, range_table: RangeTable,
                 config: Optional[Dict] = None):
        """Initialize GM-LOG metric.
        
        Args:
            model: Trained regression model
            range_table: Normalization bounds matching the model
            config: Full configuration dictionary, defaults to the packaged config
            
        Raises:
            DimensionMismatch: If range, model and feature widths disagree
        """
        config = config if config is not None else load_config()
        self.extractor = GMLOGFeatureExtractor(config.get('gmlog', {}))
        self.binding = ModelBinding(model, range_table, config.get('normalization', {}))
        
        if self.binding.input_width != self.extractor.feature_length:
            raise DimensionMismatch(self.extractor.feature_length, self.binding.input_width, "model")
    
    @classmethod
    def from_files(cls, model_path: Union[str, Path], range_path: Union[str, Path],
                   config: Optional[Dict] = None) -> 'QualityGMLOG':
        """Create metric from model and range files.
        
        Raises:
            ModelLoadError: If either resource is missing or malformed
        """
        model, range_table = load_resources(model_path, range_path)
        try:
            return cls(model, range_table, config)
        except DimensionMismatch as e:
            raise ModelLoadError(f"Model {model_path} does not fit GM-LOG features: {e}") from e
    
    @staticmethod
    def compute_features(image: np.ndarray, config: Optional[Dict] = None) -> np.ndarray:
        """Compute GM-LOG features of every plane of an image.
        
        Args:
            image: Grayscale, BGR or BGRA image
            config: Full configuration dictionary, or None for the built-in
                defaults (no configuration file is read)
            
        Returns:
            Concatenated feature vector, planes in channel-split order
        """
        if config is None:
            return DEFAULT_EXTRACTOR.extract(image)
        return GMLOGFeatureExtractor(config.get('gmlog', {})).extract(image)
    
    @classmethod
    def score(cls, image: np.ndarray, model_path: Union[str, Path],
              range_path: Union[str, Path], config: Optional[Dict] = None) -> Scalar:
        """One-shot scoring with resources loaded from disk."""
        return cls.from_files(model_path, range_path, config).compute(image)
    
    def compute(self, image: np.ndarray) -> Scalar:
        """Compute GM-LOG quality of an image.
        
        Colour images get one score per colour channel followed by a score for
        the grayscale plane; unused slots are 0.
        
        Args:
            image: Grayscale, BGR or BGRA image
            
        Returns:
            Four-slot scalar of scores
        """
        planes = scored_planes(split_channels(image), channel_count(image))
        features = self.extractor.extract_planes(planes)
        result = self.binding.score_all(features)
        logger.debug(f"GM-LOG scores for {len(planes)} planes: {result}")
        return result

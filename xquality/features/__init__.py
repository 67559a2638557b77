"""Feature extraction for the quality algorithms."""

from .gmlog import GMLOGFeatureExtractor
from .block_svd import block_singular_values, block_similarity, block_distance, block_features

__all__ = [
    'GMLOGFeatureExtractor',
    'block_singular_values', 'block_similarity', 'block_distance', 'block_features',
]

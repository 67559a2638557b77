"""Range-based feature normalization."""

from typing import Dict, Optional
import numpy as np

from ..exceptions import DimensionMismatch, ModelLoadError


class RangeTable:
    """Per-dimension (min, max) normalization bounds.
    
    Stored as a read-only 2xN matrix: row 0 holds minima, row 1 maxima.
    """
    
    def __init__(self, bounds: np.ndarray):
        """Initialize range table.
        
        Args:
            bounds: 2xN matrix of minima and maxima
            
        Raises:
            ModelLoadError: If the matrix is not 2xN with N > 0
        """
        bounds = np.array(bounds, dtype=np.float64)
        if bounds.ndim != 2 or bounds.shape[0] != 2 or bounds.shape[1] == 0:
            raise ModelLoadError(f"Range table must be a 2xN matrix, got shape {bounds.shape}")
        bounds.setflags(write=False)
        self._bounds = bounds
    
    @classmethod
    def from_bounds(cls, minimum, maximum) -> 'RangeTable':
        """Build a table from separate minimum and maximum sequences."""
        return cls(np.vstack([np.asarray(minimum, dtype=np.float64),
                              np.asarray(maximum, dtype=np.float64)]))
    
    @classmethod
    def from_samples(cls, samples: np.ndarray) -> 'RangeTable':
        """Build a table from the column-wise extremes of a sample matrix."""
        samples = np.atleast_2d(np.asarray(samples, dtype=np.float64))
        return cls.from_bounds(samples.min(axis=0), samples.max(axis=0))
    
    @property
    def minimum(self) -> np.ndarray:
        return self._bounds[0]
    
    @property
    def maximum(self) -> np.ndarray:
        return self._bounds[1]
    
    @property
    def matrix(self) -> np.ndarray:
        return self._bounds
    
    def __len__(self) -> int:
        return self._bounds.shape[1]


class RangeNormalizer:
    """Rescales feature vectors into a fixed interval using a range table."""
    
    def __init__(self, range_table: RangeTable, config: Optional[Dict] = None):
        """Initialize normalizer.
        
        Args:
            range_table: Bounds per feature dimension
            config: Normalization configuration with 'lower' and 'upper'
        """
        config = config or {}
        self.range_table = range_table
        self.lower = float(config.get('lower', -1.0))
        self.upper = float(config.get('upper', 1.0))
        
        if self.upper <= self.lower:
            raise ValueError(f"Empty target interval [{self.lower}, {self.upper}]")
    
    @property
    def midpoint(self) -> float:
        return (self.lower + self.upper) / 2.0
    
    def normalize(self, features: np.ndarray) -> np.ndarray:
        """Map each feature from [min_i, max_i] into [lower, upper].
        
        Dimensions whose bounds coincide map to the interval midpoint. Values
        outside the table bounds are clipped to the interval.
        
        Args:
            features: Raw feature vector
            
        Returns:
            Normalized feature vector
            
        Raises:
            DimensionMismatch: If vector and table lengths differ
        """
        features = np.asarray(features, dtype=np.float64).ravel()
        if features.size != len(self.range_table):
            raise DimensionMismatch(len(self.range_table), features.size)
        
        low = self.range_table.minimum
        span = self.range_table.maximum - low
        degenerate = span == 0
        
        unit = np.divide(features - low, span, out=np.zeros_like(features), where=~degenerate)
        normalized = self.lower + (self.upper - self.lower) * unit
        normalized[degenerate] = self.midpoint
        return np.clip(normalized, self.lower, self.upper)

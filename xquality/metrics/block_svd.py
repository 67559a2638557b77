"""Block-SVD quality metric.

Compares singular value spectra of corresponding non-overlapping blocks.
Trailing partial blocks are dropped. Quality maps hold one cell per block.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union
import numpy as np

from ..core.channels import channel_count, scored_planes, split_channels, split_raw_channels
from ..exceptions import DimensionMismatch, EmptyReference, ModelLoadError, SizeMismatch
from ..features.block_svd import (
    BlockSize, block_distance, block_features, block_grid, block_similarity,
    block_singular_values, feature_length, validate_block_size,
)
from ..scoring import RangeTable, RegressionModel, load_resources
from ..utils import Scalar, load_config, to_scalar
from .base import ModelBinding, QualityMetric

logger = logging.getLogger(__name__)

DEFAULT_BLOCK_SIZE = (8, 8)


class QualityBlockSVD(QualityMetric):
    """Block-SVD quality, optionally bound to a reference image or a model."""
    
    DEFAULT_NAME = "QualityBlockSVD"
    
    def __init__(self, reference: Optional[np.ndarray] = None,
                 block_size: Optional[BlockSize] = None,
                 config: Optional[Dict] = None):
        """Initialize Block-SVD metric.
        
        Args:
            reference: Reference image for `compute`, or None
            block_size: (width, height) of blocks, defaults to config or 8x8
            config: Full configuration dictionary
            
        Raises:
            SizeMismatch: If the block size cannot partition the reference
        """
        config = config if config is not None else load_config()
        svd_config = config.get('block_svd', {})
        self.config = config
        self.max_workers = int(svd_config.get('max_workers', 1))
        if block_size is None:
            block_size = tuple(svd_config.get('block_size', DEFAULT_BLOCK_SIZE))
        self._block_size = validate_block_size(block_size)
        
        self._reference = None
        if reference is not None and np.asarray(reference).size > 0:
            reference = np.array(reference)
            channel_count(reference)
            block_grid(reference.shape, self._block_size)
            reference.setflags(write=False)
            self._reference = reference
        
        self._binding: Optional[ModelBinding] = None
        self._lock = threading.Lock()
        self._reference_cache: Optional[Tuple[BlockSize, List[np.ndarray]]] = None
    
    @classmethod
    def from_model(cls, model: RegressionModel, range_table: RangeTable,
                   block_size: Optional[BlockSize] = None,
                   config: Optional[Dict] = None) -> 'QualityBlockSVD':
        """Create a no-reference metric scoring block features with a model.
        
        Raises:
            DimensionMismatch: If range, model and feature widths disagree
        """
        metric = cls(block_size=block_size, config=config)
        binding = ModelBinding(model, range_table, metric.config.get('normalization', {}))
        expected = feature_length(metric.block_size)
        if binding.input_width != expected:
            raise DimensionMismatch(expected, binding.input_width, "model")
        metric._binding = binding
        return metric
    
    @classmethod
    def from_files(cls, model_path: Union[str, Path], range_path: Union[str, Path],
                   block_size: Optional[BlockSize] = None,
                   config: Optional[Dict] = None) -> 'QualityBlockSVD':
        """Create a model-based metric from model and range files.
        
        Raises:
            ModelLoadError: If either resource is missing or malformed, or the
                model does not fit the block features
        """
        model, range_table = load_resources(model_path, range_path)
        try:
            return cls.from_model(model, range_table, block_size, config)
        except DimensionMismatch as e:
            raise ModelLoadError(f"Model {model_path} does not fit block features: {e}") from e
    
    @classmethod
    def score(cls, ref: np.ndarray, cmp: np.ndarray,
              block_size: BlockSize = DEFAULT_BLOCK_SIZE) -> Scalar:
        """One-shot map-mode score of `cmp` against `ref`."""
        return cls(block_size=block_size, config={}).compute_pair(ref, cmp)
    
    @property
    def block_size(self) -> BlockSize:
        return self._block_size
    
    @block_size.setter
    def block_size(self, size: BlockSize) -> None:
        size = validate_block_size(size)
        with self._lock:
            if size != self._block_size:
                self._block_size = size
                self._reference_cache = None
                logger.debug(f"Block size set to {size}, reference decomposition invalidated")
    
    def get_block_size(self) -> BlockSize:
        return self.block_size
    
    def set_block_size(self, size: BlockSize) -> None:
        self.block_size = size
    
    @property
    def has_reference(self) -> bool:
        return self._reference is not None
    
    def _map_channels(self, func: Callable, *plane_lists) -> list:
        """Apply `func` to corresponding planes, preserving channel order."""
        if self.max_workers > 1 and len(plane_lists[0]) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                return list(executor.map(func, *plane_lists))
        return [func(*planes) for planes in zip(*plane_lists)]
    
    def _reference_decomposition(self) -> Tuple[BlockSize, List[np.ndarray]]:
        """Per-channel singular values of the bound reference, computed lazily."""
        with self._lock:
            block_size = self._block_size
            if self._reference_cache is None or self._reference_cache[0] != block_size:
                planes = split_raw_channels(self._reference)
                decomposition = self._map_channels(
                    lambda plane: block_singular_values(plane, block_size), planes
                )
                self._reference_cache = (block_size, decomposition)
                logger.debug(f"Decomposed reference into {len(planes)} channels of blocks")
            return self._reference_cache
    
    @staticmethod
    def _check_pair(ref: np.ndarray, cmp: np.ndarray) -> None:
        """Require equal height, width and channel count; HxWx1 matches HxW."""
        ref_channels, cmp_channels = channel_count(ref), channel_count(cmp)
        if ref.shape[:2] != cmp.shape[:2]:
            raise SizeMismatch(f"Reference size {ref.shape[:2]} differs from comparison size {cmp.shape[:2]}")
        if ref_channels != cmp_channels:
            raise SizeMismatch(f"Reference has {ref_channels} channels, comparison has {cmp_channels}")
    
    def compute_map(self, ref: np.ndarray, cmp: np.ndarray) -> Tuple[Scalar, np.ndarray]:
        """Compare two images block by block.
        
        Args:
            ref: Reference image
            cmp: Comparison image of the same shape
            
        Returns:
            Tuple of (per-channel scores in [0, 1] with 1 best, quality map).
            The map has one cell per block and a trailing channel axis for
            multi-channel input.
            
        Raises:
            SizeMismatch: If shapes differ or the block is larger than the image
        """
        self._check_pair(ref, cmp)
        block_size = self.block_size
        block_grid(ref.shape, block_size)
        
        def similarity(ref_plane, cmp_plane):
            return block_similarity(block_singular_values(ref_plane, block_size),
                                    block_singular_values(cmp_plane, block_size))
        
        maps = self._map_channels(similarity, split_raw_channels(ref), split_raw_channels(cmp))
        scores = to_scalar(m.mean() for m in maps)
        quality_map = maps[0] if len(maps) == 1 else np.stack(maps, axis=-1)
        return scores, quality_map
    
    def compute_pair(self, ref: np.ndarray, cmp: np.ndarray) -> Scalar:
        """Compare two images, discarding the quality map."""
        return self.compute_map(ref, cmp)[0]
    
    def global_distance(self, ref: np.ndarray, cmp: np.ndarray) -> Scalar:
        """M-SVD global distortion measure per channel.
        
        The mean absolute deviation of block spectral distances from their
        median; 0 for identical images, larger for stronger distortion.
        """
        self._check_pair(ref, cmp)
        block_size = self.block_size
        
        def deviation(ref_plane, cmp_plane):
            distance = block_distance(block_singular_values(ref_plane, block_size),
                                      block_singular_values(cmp_plane, block_size))
            return np.mean(np.abs(distance - np.median(distance)))
        
        return to_scalar(self._map_channels(deviation, split_raw_channels(ref),
                                            split_raw_channels(cmp)))
    
    def _compare_to_reference(self, cmp: np.ndarray) -> Scalar:
        self._check_pair(self._reference, cmp)
        block_size, reference_sv = self._reference_decomposition()
        
        def spectral_error(ref_sv, cmp_plane):
            cmp_sv = block_singular_values(cmp_plane, block_size)
            return np.mean(block_distance(ref_sv, cmp_sv) ** 2) / ref_sv.shape[-1]
        
        return to_scalar(self._map_channels(spectral_error, reference_sv, split_raw_channels(cmp)))
    
    def _predict(self, image: np.ndarray) -> Scalar:
        block_size = self.block_size
        planes = scored_planes(split_channels(image), channel_count(image))
        features = self._map_channels(lambda plane: block_features(plane, block_size), planes)
        return self._binding.score_all(features)
    
    def compute(self, images: Union[np.ndarray, Sequence[np.ndarray]]) -> Union[Scalar, List[Scalar]]:
        """Compute quality of one image or a sequence of images.
        
        With a bound model, images are scored no-reference through the model.
        Otherwise they are compared with the bound reference; values are
        spectral mean squared errors, 0 best and unbounded above.
        
        Args:
            images: Image, or list/tuple of images
            
        Returns:
            Scalar for a single image, list of scalars for a sequence
            
        Raises:
            EmptyReference: If neither a model nor a reference is bound
            SizeMismatch: If an image's shape differs from the reference
        """
        if isinstance(images, (list, tuple)):
            return [self.compute(image) for image in images]
        
        if self._binding is not None:
            return self._predict(images)
        if self._reference is None:
            raise EmptyReference("No reference image bound to this QualityBlockSVD instance")
        return self._compare_to_reference(images)

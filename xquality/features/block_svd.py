"""Block-wise singular value decomposition.

Planes are cut into non-overlapping blocks; trailing rows and columns that do
not fill a whole block are dropped. Block sizes are (width, height) pairs.
"""

import logging
from typing import Tuple
import numpy as np

from ..exceptions import SizeMismatch

logger = logging.getLogger(__name__)

BlockSize = Tuple[int, int]


def validate_block_size(block_size) -> BlockSize:
    """Return `block_size` as an int (width, height) pair.
    
    Raises:
        SizeMismatch: If either dimension is not positive
    """
    width, height = (int(v) for v in block_size)
    if width <= 0 or height <= 0:
        raise SizeMismatch(f"Block size must be positive, got {(width, height)}")
    return width, height


def block_grid(shape: tuple, block_size: BlockSize) -> Tuple[int, int]:
    """Number of whole block rows and columns fitting in a plane.
    
    Args:
        shape: (height, width) of the plane
        block_size: (width, height) of a block
        
    Returns:
        Tuple of (rows, cols)
        
    Raises:
        SizeMismatch: If the block is larger than the plane
    """
    block_w, block_h = validate_block_size(block_size)
    height, width = shape[:2]
    rows, cols = height // block_h, width // block_w
    if rows == 0 or cols == 0:
        raise SizeMismatch(
            f"Block size {(block_w, block_h)} is larger than image size {(width, height)}"
        )
    return rows, cols


def extract_blocks(plane: np.ndarray, block_size: BlockSize) -> np.ndarray:
    """Cut a plane into blocks.
    
    Returns:
        Array of shape (rows, cols, block_h, block_w)
    """
    block_w, block_h = validate_block_size(block_size)
    rows, cols = block_grid(plane.shape, (block_w, block_h))
    cropped = plane[:rows * block_h, :cols * block_w]
    return cropped.reshape(rows, block_h, cols, block_w).transpose(0, 2, 1, 3)


def block_singular_values(plane: np.ndarray, block_size: BlockSize) -> np.ndarray:
    """Singular values of every block, sorted in descending order.
    
    Returns:
        Array of shape (rows, cols, min(block_w, block_h))
    """
    blocks = extract_blocks(np.asarray(plane, dtype=np.float64), block_size)
    singular = np.linalg.svd(blocks, compute_uv=False)
    logger.debug(f"Decomposed {blocks.shape[0]}x{blocks.shape[1]} blocks of size {block_size}")
    return singular


def block_distance(ref_sv: np.ndarray, cmp_sv: np.ndarray) -> np.ndarray:
    """Euclidean distance between corresponding singular value vectors."""
    return np.linalg.norm(ref_sv - cmp_sv, axis=-1)


def block_similarity(ref_sv: np.ndarray, cmp_sv: np.ndarray) -> np.ndarray:
    """Per-block similarity in [0, 1], 1 for identical spectra.
    
    Similarity is one minus the spectral distance relative to the summed
    spectral norms. Two all-zero blocks are identical.
    """
    distance = block_distance(ref_sv, cmp_sv)
    scale = np.linalg.norm(ref_sv, axis=-1) + np.linalg.norm(cmp_sv, axis=-1)
    ratio = np.divide(distance, scale, out=np.zeros_like(distance), where=scale > 0)
    return 1.0 - ratio


def block_features(plane: np.ndarray, block_size: BlockSize) -> np.ndarray:
    """No-reference feature vector of one plane.
    
    Singular values of each block are divided by their sum; the vector holds
    the mean of these spectra over all blocks followed by their standard
    deviation. Flat blocks contribute all-zero spectra.
    
    Returns:
        1-D vector of length 2 * min(block_w, block_h)
    """
    singular = block_singular_values(plane, block_size)
    spectra = singular.reshape(-1, singular.shape[-1])
    totals = spectra.sum(axis=1, keepdims=True)
    normalized = np.divide(spectra, totals, out=np.zeros_like(spectra), where=totals > 0)
    return np.concatenate([normalized.mean(axis=0), normalized.std(axis=0)])


def feature_length(block_size: BlockSize) -> int:
    """Length of the vector returned by `block_features`."""
    return 2 * min(validate_block_size(block_size))

"""Splitting images into independent single-channel planes."""

from typing import List
import numpy as np

from ..exceptions import UnsupportedChannelCount
from ..utils import get_image_dimensions, to_float_plane

SUPPORTED_CHANNELS = (1, 3, 4)

# BT.601 luma weights in B, G, R order
LUMA_WEIGHTS = (0.114, 0.587, 0.299)


def channel_count(image: np.ndarray) -> int:
    """Return the channel count of an image, validating its shape.
    
    Raises:
        UnsupportedChannelCount: If the image is not 2-D or 3-D, or has a
            channel count other than 1, 3 or 4
    """
    if image.ndim not in (2, 3):
        raise UnsupportedChannelCount(image.shape)
    channels = get_image_dimensions(image)[2]
    if channels not in SUPPORTED_CHANNELS:
        raise UnsupportedChannelCount(channels)
    return channels


def grayscale(planes: List[np.ndarray]) -> np.ndarray:
    """Luma plane from the first three (B, G, R) float planes."""
    b, g, r = planes[:3]
    return LUMA_WEIGHTS[0] * b + LUMA_WEIGHTS[1] * g + LUMA_WEIGHTS[2] * r


def split_channels(image: np.ndarray) -> List[np.ndarray]:
    """Split an image into float planes.
    
    Single-channel images give one plane. Colour images (BGR or BGRA) give
    one plane per channel followed by a grayscale plane, which is always last.
    
    Args:
        image: Input image, never modified
        
    Returns:
        List of float64 planes
        
    Raises:
        UnsupportedChannelCount: For channel counts outside {1, 3, 4}
    """
    channels = channel_count(image)
    if channels == 1:
        return [to_float_plane(image.reshape(image.shape[:2]))]
    
    planes = [to_float_plane(image[:, :, c]) for c in range(channels)]
    planes.append(grayscale(planes))
    return planes


def split_raw_channels(image: np.ndarray) -> List[np.ndarray]:
    """Split an image into float planes without the derived grayscale plane."""
    channels = channel_count(image)
    if channels == 1:
        return [to_float_plane(image.reshape(image.shape[:2]))]
    return [to_float_plane(image[:, :, c]) for c in range(channels)]


def scored_planes(planes: List[np.ndarray], channels: int) -> List[np.ndarray]:
    """Select the planes that receive a score slot.
    
    The alpha plane of a BGRA image carries no quality signal and is skipped,
    so at most four planes (B, G, R, gray) are returned.
    """
    if channels == 4:
        return planes[:3] + planes[4:]
    return planes

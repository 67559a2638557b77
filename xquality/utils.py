"""Utility functions for xquality."""

import logging
import logging.handlers
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple, Union
import yaml
import cv2
import numpy as np

from .exceptions import XQualityError

Scalar = Tuple[float, float, float, float]

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"


def load_config(config_path: Union[str, Path, None] = None) -> Dict[str, Any]:
    """Load configuration from YAML file.
    
    Args:
        config_path: Path to configuration file, defaults to the packaged config.yaml
        
    Returns:
        Configuration dictionary
        
    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is invalid
    """
    config_path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")
    
    with open(config_path, 'r') as f:
        config = yaml.safe_load(f)
    
    return config or {}


def setup_logging(config: Optional[Dict[str, Any]] = None) -> logging.Logger:
    """Setup logging configuration.
    
    Args:
        config: Logging configuration dictionary
        
    Returns:
        Configured logger instance
    """
    if config is None:
        config = {
            'level': 'INFO',
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        }
    
    logger = logging.getLogger('xquality')
    logger.setLevel(getattr(logging, config.get('level', 'INFO')))
    
    # Repeated calls must not stack handlers
    if logger.handlers:
        return logger
    
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(config.get('format')))
    logger.addHandler(console_handler)
    
    # File handler with rotation
    if 'file' in config:
        file_handler = logging.handlers.RotatingFileHandler(
            config['file'],
            maxBytes=config.get('max_bytes', 10485760),
            backupCount=config.get('backup_count', 5)
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(config.get('format')))
        logger.addHandler(file_handler)
    
    return logger


def load_image(image_path: Union[str, Path]) -> np.ndarray:
    """Load image from file path, keeping its channels and bit depth.
    
    Args:
        image_path: Path to image file
        
    Returns:
        Image as numpy array in BGR(A) or grayscale format
        
    Raises:
        FileNotFoundError: If image file doesn't exist
        XQualityError: If image cannot be decoded
    """
    image_path = Path(image_path)
    if not image_path.exists():
        raise FileNotFoundError(f"Image file not found: {image_path}")
    
    image = cv2.imread(str(image_path), cv2.IMREAD_UNCHANGED)
    if image is None:
        raise XQualityError(f"Failed to load image: {image_path}")
    
    return image


def get_image_dimensions(image: np.ndarray) -> tuple:
    """Get image dimensions.
    
    Args:
        image: Image as numpy array
        
    Returns:
        Tuple of (height, width, channels)
    """
    if image.ndim == 2:
        return (*image.shape, 1)
    return image.shape


def to_float_plane(plane: np.ndarray) -> np.ndarray:
    """Convert a single-channel array to float64, scaling integers to [0, 1]."""
    if np.issubdtype(plane.dtype, np.integer):
        return plane.astype(np.float64) / float(np.iinfo(plane.dtype).max)
    return plane.astype(np.float64)


def to_scalar(values: Iterable[float]) -> Scalar:
    """Pack up to four values into a 4-slot scalar, padding with zeros."""
    values = [float(v) for v in values]
    if len(values) > 4:
        raise ValueError(f"A scalar holds at most 4 values, got {len(values)}")
    return tuple(values + [0.0] * (4 - len(values)))

"""Loading model and range resources from disk.

Models are OpenCV SVM documents readable by `cv2.ml.SVM_load`. Range files
are OpenCV FileStorage documents holding a 2xN matrix under the `range` node.
"""

import logging
from pathlib import Path
from typing import Tuple, Union
import cv2
import numpy as np

from ..exceptions import ModelLoadError
from .normalization import RangeTable
from .regression import SvmRegressionModel

logger = logging.getLogger(__name__)

RANGE_NODE = "range"


def _existing(path: Union[str, Path], what: str) -> Path:
    path = Path(path)
    if not path.is_file():
        raise ModelLoadError(f"{what} file not found: {path}")
    return path


def load_model(model_path: Union[str, Path]) -> SvmRegressionModel:
    """Load a trained SVM regression model.
    
    Args:
        model_path: Path to OpenCV SVM YAML/XML file
        
    Returns:
        SvmRegressionModel wrapping the loaded SVM
        
    Raises:
        ModelLoadError: If the file is missing, unreadable or untrained
    """
    model_path = _existing(model_path, "Model")
    try:
        svm = cv2.ml.SVM_load(str(model_path))
    except cv2.error as e:
        raise ModelLoadError(f"Failed to read model {model_path}: {e}") from e
    
    if svm is None or not svm.isTrained() or svm.getVarCount() <= 0:
        raise ModelLoadError(f"Model {model_path} does not contain a trained SVM")
    
    logger.info(f"Loaded model {model_path} ({svm.getVarCount()} inputs)")
    return SvmRegressionModel(svm)


def load_range(range_path: Union[str, Path]) -> RangeTable:
    """Load a range table.
    
    Args:
        range_path: Path to OpenCV FileStorage file with a `range` matrix
        
    Returns:
        RangeTable
        
    Raises:
        ModelLoadError: If the file is missing, unreadable or mis-shaped
    """
    range_path = _existing(range_path, "Range")
    try:
        storage = cv2.FileStorage(str(range_path), cv2.FILE_STORAGE_READ)
    except cv2.error as e:
        raise ModelLoadError(f"Failed to read range file {range_path}: {e}") from e
    
    try:
        if not storage.isOpened():
            raise ModelLoadError(f"Failed to open range file {range_path}")
        node = storage.getNode(RANGE_NODE)
        matrix = None if node.empty() else node.mat()
    finally:
        storage.release()
    
    if matrix is None:
        raise ModelLoadError(f"Range file {range_path} has no '{RANGE_NODE}' matrix")
    
    table = RangeTable(matrix)
    logger.info(f"Loaded range table {range_path} ({len(table)} dimensions)")
    return table


def save_range(range_path: Union[str, Path], table: RangeTable) -> None:
    """Write a range table in the format read by `load_range`."""
    range_path = Path(range_path)
    range_path.parent.mkdir(parents=True, exist_ok=True)
    storage = cv2.FileStorage(str(range_path), cv2.FILE_STORAGE_WRITE)
    try:
        storage.write(RANGE_NODE, np.asarray(table.matrix, dtype=np.float64))
    finally:
        storage.release()


def load_resources(model_path: Union[str, Path],
                   range_path: Union[str, Path]) -> Tuple[SvmRegressionModel, RangeTable]:
    """Load a (model, range table) pair.
    
    Raises:
        ModelLoadError: If either resource is bad, or the range table width
            differs from the model input width
    """
    model = load_model(model_path)
    range_table = load_range(range_path)
    if len(range_table) != model.input_width:
        raise ModelLoadError(
            f"Range file {range_path} has {len(range_table)} dimensions, "
            f"model {model_path} expects {model.input_width}"
        )
    return model, range_table

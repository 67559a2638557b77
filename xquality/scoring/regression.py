"""Regression models and the scorer that applies them."""

from abc import ABC, abstractmethod
import numpy as np

from ..exceptions import PredictionError


class RegressionModel(ABC):
    """Pre-trained predictor over a normalized feature vector."""
    
    @property
    @abstractmethod
    def input_width(self) -> int:
        """Number of features the model expects."""
        pass
    
    @abstractmethod
    def predict(self, features: np.ndarray) -> float:
        """Predict a scalar from a normalized feature vector."""
        pass


class SvmRegressionModel(RegressionModel):
    """Adapter around a trained OpenCV `cv2.ml.SVM` regressor."""
    
    def __init__(self, svm):
        """Initialize adapter.
        
        Args:
            svm: Trained cv2.ml.SVM instance
        """
        self.svm = svm
    
    @property
    def input_width(self) -> int:
        return int(self.svm.getVarCount())
    
    def predict(self, features: np.ndarray) -> float:
        sample = np.asarray(features, dtype=np.float32).reshape(1, -1)
        _, result = self.svm.predict(sample)
        return float(result[0, 0])


class RegressionScorer:
    """Maps normalized feature vectors to quality scores."""
    
    def __init__(self, model: RegressionModel):
        self.model = model
    
    def score(self, features: np.ndarray) -> float:
        """Score a normalized feature vector.
        
        Raises:
            PredictionError: If the underlying model fails
        """
        try:
            return float(self.model.predict(features))
        except Exception as e:
            raise PredictionError(f"Regression model failed: {e}") from e

"""Tests for regression scoring and resource loading."""

import pytest
import numpy as np
from xquality.scoring import (
    RegressionModel, RegressionScorer, RangeTable, load_model, load_range, load_resources,
    save_range,
)
from xquality.exceptions import ModelLoadError, PredictionError


class FailingModel(RegressionModel):
    """Model whose inference always fails."""
    
    @property
    def input_width(self) -> int:
        return 3
    
    def predict(self, features):
        raise RuntimeError("inference failed")


class SumModel(RegressionModel):
    @property
    def input_width(self) -> int:
        return 3
    
    def predict(self, features):
        return float(np.sum(features))


def test_scorer_delegates_to_model():
    scorer = RegressionScorer(SumModel())
    
    assert scorer.score(np.array([1.0, 2.0, 3.0])) == 6.0


def test_model_failure_becomes_prediction_error():
    scorer = RegressionScorer(FailingModel())
    
    with pytest.raises(PredictionError) as excinfo:
        scorer.score(np.zeros(3))
    
    assert isinstance(excinfo.value.__cause__, RuntimeError)


def test_svm_model_round_trip(tmp_path, gmlog_model):
    """A saved SVM loads back with the same width and predictions."""
    model, _ = gmlog_model
    path = tmp_path / 'model.yml'
    model.svm.save(str(path))
    
    loaded = load_model(path)
    sample = np.linspace(-1, 1, model.input_width)
    
    assert loaded.input_width == model.input_width
    assert loaded.predict(sample) == pytest.approx(model.predict(sample), rel=1e-4)


def test_range_round_trip(tmp_path):
    table = RangeTable.from_bounds([0.0, 1.5], [2.0, 4.0])
    path = tmp_path / 'range.yml'
    
    save_range(path, table)
    loaded = load_range(path)
    
    np.testing.assert_allclose(loaded.matrix, table.matrix)


def test_missing_model_file(tmp_path):
    with pytest.raises(ModelLoadError):
        load_model(tmp_path / 'missing.yml')


def test_missing_range_file(tmp_path):
    with pytest.raises(ModelLoadError):
        load_range(tmp_path / 'missing.yml')


def test_model_file_without_svm(tmp_path):
    """A readable document that holds no trained SVM is rejected."""
    path = tmp_path / 'not_a_model.yml'
    save_range(path, RangeTable.from_bounds([0.0], [1.0]))
    
    with pytest.raises(ModelLoadError):
        load_model(path)


def test_range_file_without_range_node(tmp_path):
    import cv2
    path = tmp_path / 'other.yml'
    storage = cv2.FileStorage(str(path), cv2.FILE_STORAGE_WRITE)
    storage.write('other', np.zeros((2, 3), dtype=np.float32))
    storage.release()
    
    with pytest.raises(ModelLoadError):
        load_range(path)


def test_range_file_with_wrong_shape(tmp_path):
    import cv2
    path = tmp_path / 'bad_range.yml'
    storage = cv2.FileStorage(str(path), cv2.FILE_STORAGE_WRITE)
    storage.write('range', np.zeros((3, 3), dtype=np.float32))
    storage.release()
    
    with pytest.raises(ModelLoadError):
        load_range(path)


def test_resource_pair_width_mismatch(tmp_path, gmlog_model):
    """Model and range files of different widths do not load as a pair."""
    model, _ = gmlog_model
    model.svm.save(str(tmp_path / 'model.yml'))
    save_range(tmp_path / 'range.yml', RangeTable.from_bounds(np.zeros(10), np.ones(10)))
    
    with pytest.raises(ModelLoadError):
        load_resources(tmp_path / 'model.yml', tmp_path / 'range.yml')

"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

import cv2
import numpy as np
import pytest

# Make the package importable without installation
sys.path.insert(0, str(Path(__file__).parent))

from xquality.features.gmlog import GMLOGFeatureExtractor
from xquality.features.block_svd import block_features
from xquality.scoring import RangeNormalizer, RangeTable, SvmRegressionModel


def make_textured_image(seed: int, size=(96, 96), channels: int = 1) -> np.ndarray:
    """Smooth random texture with a few sharp edges, as uint8."""
    rng = np.random.default_rng(seed)
    height, width = size
    planes = []
    for c in range(channels):
        base = cv2.GaussianBlur(rng.random((height, width)), (0, 0), 3)
        base = (base - base.min()) / (base.max() - base.min() + 1e-12)
        plane = (base * 200 + 20).astype(np.uint8)
        cv2.rectangle(plane, (10 + 5 * c, 15), (50, 60), 240, -1)
        cv2.circle(plane, (70, 40 + 3 * seed % 20), 12, 10, -1)
        planes.append(plane)
    if channels == 1:
        return planes[0]
    return np.dstack(planes)


def add_noise(image: np.ndarray, sigma: float, seed: int = 123) -> np.ndarray:
    """Add Gaussian noise, clipped to the uint8 range."""
    rng = np.random.default_rng(seed)
    noisy = image.astype(np.float64) + rng.normal(0, sigma, image.shape)
    return np.clip(noisy, 0, 255).astype(np.uint8)


def train_svr(samples: np.ndarray, targets: np.ndarray):
    """Train a linear EPS-SVR on normalized samples."""
    svm = cv2.ml.SVM_create()
    svm.setType(cv2.ml.SVM_EPS_SVR)
    svm.setKernel(cv2.ml.SVM_LINEAR)
    svm.setC(10.0)
    svm.setP(0.5)
    svm.setTermCriteria((cv2.TERM_CRITERIA_MAX_ITER + cv2.TERM_CRITERIA_EPS, 20000, 1e-6))
    svm.train(samples.astype(np.float32), cv2.ml.ROW_SAMPLE,
              targets.astype(np.float32).reshape(-1, 1))
    return svm


def build_training_set(feature_fn):
    """Features of clean (target 0) and noisy (target 100) images."""
    features, targets = [], []
    for seed in range(8):
        clean = make_textured_image(seed)
        features.append(feature_fn(clean))
        targets.append(0.0)
        features.append(feature_fn(add_noise(clean, 40.0, seed)))
        targets.append(100.0)
    return np.array(features), np.array(targets)


def fit_model(feature_fn):
    features, targets = build_training_set(feature_fn)
    range_table = RangeTable.from_samples(features)
    normalizer = RangeNormalizer(range_table)
    normalized = np.array([normalizer.normalize(f) for f in features])
    return SvmRegressionModel(train_svr(normalized, targets)), range_table


@pytest.fixture(scope='session')
def gmlog_model():
    """GM-LOG model and range table trained on synthetic clean/noisy images."""
    extractor = GMLOGFeatureExtractor()
    return fit_model(lambda image: extractor.plane_features(image.astype(np.float64) / 255.0))


@pytest.fixture(scope='session')
def block_svd_model():
    """Block-SVD feature model and range table for 8x8 blocks."""
    return fit_model(lambda image: block_features(image.astype(np.float64) / 255.0, (8, 8)))


@pytest.fixture
def gray_image():
    return make_textured_image(0)


@pytest.fixture
def color_image():
    return make_textured_image(1, channels=3)


@pytest.fixture
def bgra_image():
    return make_textured_image(2, channels=4)


@pytest.fixture
def make_image():
    """Factory for synthetic textured images."""
    return make_textured_image


@pytest.fixture
def noisy():
    """Factory adding Gaussian noise to an image."""
    return add_noise

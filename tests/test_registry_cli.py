"""Tests for the metric registry and command line interface."""

import json

import cv2
import pytest
import numpy as np
from xquality import QualityBlockSVD, QualityGMLOG, available_metrics, create_metric
from xquality.cli import main
from xquality.metrics.base import QualityMetric
from xquality.scoring import save_range


def test_available_metrics():
    assert available_metrics() == ["QualityBlockSVD", "QualityGMLOG"]


def test_create_metric_by_name(gray_image):
    metric = create_metric("QualityBlockSVD", gray_image, block_size=(4, 4))
    
    assert isinstance(metric, QualityBlockSVD)
    assert isinstance(metric, QualityMetric)
    assert metric.block_size == (4, 4)


def test_unknown_metric():
    with pytest.raises(ValueError):
        create_metric("QualityPSNR")


def test_metrics_share_interface(gmlog_model, gray_image):
    """Both metrics can be driven uniformly through compute and their name."""
    model, range_table = gmlog_model
    metrics = [QualityGMLOG(model, range_table), QualityBlockSVD(gray_image)]
    
    for metric in metrics:
        assert len(metric.compute(gray_image)) == 4
        assert metric.get_default_name() in available_metrics()


@pytest.fixture
def image_files(tmp_path, gray_image, noisy):
    ref_path = tmp_path / 'ref.png'
    cmp_path = tmp_path / 'cmp.png'
    cv2.imwrite(str(ref_path), gray_image)
    cv2.imwrite(str(cmp_path), noisy(gray_image, 20.0))
    return ref_path, cmp_path


def test_cli_blocksvd(image_files, tmp_path, capsys):
    ref_path, cmp_path = image_files
    map_path = tmp_path / 'map.npy'
    
    exit_code = main(['blocksvd', str(ref_path), str(cmp_path),
                      '--block-size', '4', '4', '--map', str(map_path)])
    output = json.loads(capsys.readouterr().out)
    
    assert exit_code == 0
    assert output['block_size'] == [4, 4]
    assert 0.0 < output['score'][0] < 1.0
    assert np.load(map_path).shape == (24, 24)


def test_cli_features(image_files, capsys):
    ref_path, _ = image_files
    
    assert main(['features', str(ref_path)]) == 0
    assert len(json.loads(capsys.readouterr().out)['features']) == 16


def test_cli_gmlog(image_files, tmp_path, gmlog_model, capsys):
    ref_path, _ = image_files
    model, range_table = gmlog_model
    model.svm.save(str(tmp_path / 'model.yml'))
    save_range(tmp_path / 'range.yml', range_table)
    
    exit_code = main(['gmlog', str(ref_path), '--model', str(tmp_path / 'model.yml'),
                      '--range', str(tmp_path / 'range.yml')])
    output = json.loads(capsys.readouterr().out)
    
    assert exit_code == 0
    assert output['metric'] == "QualityGMLOG"
    assert len(output['score']) == 4


def test_cli_missing_model(image_files, tmp_path):
    ref_path, _ = image_files
    
    assert main(['gmlog', str(ref_path), '--model', str(tmp_path / 'none.yml'),
                 '--range', str(tmp_path / 'none.yml')]) == 1

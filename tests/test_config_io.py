"""Tests for settings persistence and image I/O."""

import logging

import numpy as np
import pytest

from minicv.core import (
    CV_8UC3,
    CV_32F,
    Matrix,
    UnsupportedOperation,
    VectorizeConfig,
    load_config,
    load_image,
    mat_from_array,
    save_config,
    save_image,
)


def test_config_round_trip(tmp_path):
    """Saved settings load back unchanged."""
    path = tmp_path / "settings.yaml"
    config = VectorizeConfig(threshold=90, kernel_size=5, min_area=4.0, target_size=(64, 32))
    save_config(config, path)
    assert load_config(path) == config


def test_config_defaults_for_missing_keys(tmp_path):
    """Keys absent from the file keep their defaults."""
    path = tmp_path / "partial.yaml"
    path.write_text("epsilon_factor: 0.05\n")
    config = load_config(path)
    assert config.epsilon_factor == 0.05
    assert config.threshold == VectorizeConfig().threshold
    assert config.target_size is None


def test_empty_config_file(tmp_path):
    """An empty file gives the default settings."""
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(path) == VectorizeConfig()


def test_unknown_config_keys_warn(tmp_path, caplog):
    """Unknown keys are ignored with a warning."""
    path = tmp_path / "extra.yaml"
    path.write_text("threshold: 10\ncolour: red\n")
    with caplog.at_level(logging.WARNING):
        config = load_config(path)
    assert config.threshold == 10
    assert "colour" in caplog.text


def test_non_mapping_config_rejected(tmp_path):
    """A YAML document that is not a mapping fails with TypeError."""
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n")
    with pytest.raises(TypeError):
        load_config(path)


def test_gray_image_round_trip(tmp_path):
    """A single-channel matrix saves and reloads as grayscale."""
    values = np.arange(12, dtype=np.uint8).reshape(3, 4) * 20
    path = tmp_path / "gray.png"
    save_image(Matrix(values), path)
    loaded = load_image(path, grayscale=True)
    assert loaded.dims == (3, 4)
    assert np.array_equal(loaded.as_numpy(), values)


def test_color_image_loads_as_rgb(tmp_path):
    """Color images load as three uint8 channels in RGB order."""
    path = tmp_path / "color.png"
    save_image(mat_from_array(1, 2, CV_8UC3, [255, 0, 0, 0, 0, 255]), path)
    loaded = load_image(path)
    assert loaded.dims == (1, 2, 3)
    assert loaded.as_numpy()[0].tolist() == [[255, 0, 0], [0, 0, 255]]


def test_save_image_rejects_float(tmp_path):
    """Only uint8 matrices can be written."""
    with pytest.raises(UnsupportedOperation):
        save_image(Matrix.zeros(2, 2, CV_32F), tmp_path / "float.png")

"""Shared fixtures: camera frames, fake model handles and tiny exported SavedModels."""

from unittest.mock import MagicMock

import numpy as np
import pytest
import tensorflow as tf

from homesense.config import Settings
from homesense.services.model_loader import ModelHandle

_rng = np.random.default_rng(42)


@pytest.fixture
def bgr_frame():
    return _rng.integers(0, 255, (48, 64, 3), dtype=np.uint8)


@pytest.fixture
def white_frame():
    return np.full((48, 64, 3), 255, dtype=np.uint8)


@pytest.fixture
def black_frame():
    return np.zeros((48, 64, 3), dtype=np.uint8)


@pytest.fixture
def make_settings():
    def _make(**overrides):
        return Settings(**overrides)

    return _make


@pytest.fixture
def make_handle():
    """Build a ModelHandle around a MagicMock signature function."""

    def _make(outputs=None, input_specs=None, side_effect=None):
        fn = MagicMock(name="signature_fn")
        if side_effect is not None:
            fn.side_effect = side_effect
        else:
            fn.return_value = outputs or {}
        return ModelHandle(
            model_path="fake/model",
            signature_key="serving_default",
            fn=fn,
            input_specs=input_specs or {},
            output_specs={name: None for name in (outputs or {})},
        )

    return _make


class _TinyDetector(tf.Module):
    """Reports one 'person' whose score is the mean frame brightness, plus a weak class 3."""

    @tf.function(input_signature=[tf.TensorSpec([1, None, None, 3], tf.uint8, name="input_tensor")])
    def __call__(self, input_tensor):
        mean = tf.reduce_mean(tf.cast(input_tensor, tf.float32)) / 255.0
        classes = tf.constant([[1.0, 3.0]], dtype=tf.float32)
        scores = tf.reshape(tf.stack([mean, tf.constant(0.1)]), [1, 2])
        return {"detection_classes": classes, "detection_scores": scores}


class _TinyActivityModel(tf.Module):
    """Scores CLEANING and CONVERSING with the mean input value, everything else 0."""

    @tf.function(input_signature=[tf.TensorSpec([1, 32, 32, 3], tf.float32, name="inputs")])
    def __call__(self, inputs):
        mean = tf.reduce_mean(inputs)
        probs = tf.concat([tf.fill([1, 2], mean), tf.zeros([1, 25])], axis=1)
        return {"probabilities": probs}


def _export(module, path):
    tf.saved_model.save(module, str(path), signatures={"serving_default": module.__call__.get_concrete_function()})
    return str(path)


@pytest.fixture(scope="session")
def detection_model_dir(tmp_path_factory):
    return _export(_TinyDetector(), tmp_path_factory.mktemp("models") / "detector")


@pytest.fixture(scope="session")
def activity_model_dir(tmp_path_factory):
    return _export(_TinyActivityModel(), tmp_path_factory.mktemp("models") / "activity")

"""Tests for SavedModel loading and signature checks."""

import numpy as np
import pytest
import tensorflow as tf

from homesense.exceptions import ModelLoadError, TensorSignatureError
from homesense.services.model_loader import ModelLoader


class TestModelLoader:
    """Loading real (tiny) SavedModels from disk."""

    def test_load_model_binds_serving_signature(self, detection_model_dir):
        handle = ModelLoader().load_model(detection_model_dir)

        assert handle.signature_key == "serving_default"
        assert "serving_default" in handle.available_signatures
        assert handle.input_names == ("input_tensor",)
        assert set(handle.output_names) == {"detection_classes", "detection_scores"}
        assert handle.input_dtype("input_tensor") == tf.uint8
        assert handle.model is not None

    def test_run_returns_numpy_outputs(self, detection_model_dir):
        handle = ModelLoader().load_model(detection_model_dir)
        frame = tf.fill([1, 8, 8, 3], tf.constant(255, dtype=tf.uint8))

        outputs = handle.run({"input_tensor": frame})

        assert isinstance(outputs["detection_scores"], np.ndarray)
        assert outputs["detection_classes"].tolist() == [[1.0, 3.0]]
        assert outputs["detection_scores"][0, 0] == pytest.approx(1.0)

    def test_model_exists(self, detection_model_dir, tmp_path):
        loader = ModelLoader()
        assert loader.model_exists(detection_model_dir) is True
        assert loader.model_exists(str(tmp_path)) is False
        assert loader.model_exists("") is False

    def test_missing_model_raises_model_load_error(self, tmp_path):
        with pytest.raises(ModelLoadError) as exc_info:
            ModelLoader().load_model(str(tmp_path / "nope"))
        assert exc_info.value.model_path.endswith("nope")

    def test_unknown_signature_raises_model_load_error(self, detection_model_dir):
        with pytest.raises(ModelLoadError, match="not found"):
            ModelLoader(signature_key="classify").load_model(detection_model_dir)


class TestModelHandleSignatureCheck:
    """Input tensors must match the declared TensorSpec."""

    @pytest.fixture
    def handle(self, make_handle):
        return make_handle(
            outputs={"scores": tf.constant([[0.5]])},
            input_specs={"inputs": tf.TensorSpec([1, 32, 32, 3], tf.float32)},
        )

    def test_matching_tensor_is_fed(self, handle):
        tensor = tf.zeros([1, 32, 32, 3], dtype=tf.float32)
        outputs = handle.run({"inputs": tensor})
        handle.fn.assert_called_once()
        assert handle.fn.call_args.kwargs["inputs"] is tensor
        assert outputs["scores"].tolist() == [[0.5]]

    def test_unknown_input_name(self, handle):
        with pytest.raises(TensorSignatureError, match="not declared"):
            handle.run({"images": tf.zeros([1, 32, 32, 3], dtype=tf.float32)})
        handle.fn.assert_not_called()

    def test_dtype_mismatch(self, handle):
        with pytest.raises(TensorSignatureError, match="dtype"):
            handle.check_input("inputs", tf.zeros([1, 32, 32, 3], dtype=tf.uint8))

    def test_shape_mismatch(self, handle):
        with pytest.raises(TensorSignatureError, match="shape"):
            handle.check_input("inputs", tf.zeros([1, 64, 64, 3], dtype=tf.float32))

    def test_handle_without_specs_skips_check(self, make_handle):
        handle = make_handle(outputs={"out": np.ones(3)})
        handle.check_input("anything", tf.zeros([2, 2]))
        assert handle.input_dtype("anything") is None

import os
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

import numpy as np
import tensorflow as tf
from loguru import logger

from homesense.exceptions import ModelLoadError, TensorSignatureError
from homesense.utils.path_utils import resolve_model_dir
from homesense.utils.tf_diagnostics import log_signatures


@dataclass(frozen=True)
class ModelHandle:
    """A loaded SavedModel bound to one of its signatures.

    Read-only after loading; `model` is kept so the graph's resources stay alive.
    """
    model_path: str
    signature_key: str
    fn: Callable[..., Mapping[str, Any]]
    input_specs: Dict[str, tf.TensorSpec] = field(default_factory=dict)
    output_specs: Dict[str, Any] = field(default_factory=dict)
    available_signatures: Tuple[str, ...] = ()
    model: Any = None

    @property
    def input_names(self) -> Tuple[str, ...]:
        return tuple(self.input_specs)

    @property
    def output_names(self) -> Tuple[str, ...]:
        return tuple(self.output_specs)

    def input_dtype(self, name: str) -> Optional[tf.DType]:
        spec = self.input_specs.get(name)
        return spec.dtype if spec is not None else None

    def check_input(self, name: str, tensor: tf.Tensor) -> None:
        """Raise TensorSignatureError unless `tensor` fits the declared input `name`."""
        if not self.input_specs:
            # Signature carries no structured inputs (e.g. wrapped callables); nothing to check.
            return
        spec = self.input_specs.get(name)
        if spec is None:
            raise TensorSignatureError(
                f"input '{name}' is not declared by signature '{self.signature_key}' "
                f"(inputs: {list(self.input_specs)})"
            )
        if tensor.dtype != spec.dtype:
            raise TensorSignatureError(
                f"input '{name}' expects dtype {spec.dtype.name}, got {tensor.dtype.name}"
            )
        if not spec.shape.is_compatible_with(tensor.shape):
            raise TensorSignatureError(
                f"input '{name}' expects shape {spec.shape}, got {tensor.shape}"
            )

    def run(self, inputs: Dict[str, tf.Tensor]) -> Dict[str, np.ndarray]:
        """Feed named tensors to the signature and return every output as numpy."""
        for name, tensor in inputs.items():
            self.check_input(name, tensor)
        outputs = self.fn(**inputs)
        return {key: _to_numpy(value) for key, value in outputs.items()}


def _to_numpy(value: Any) -> np.ndarray:
    if hasattr(value, "numpy"):
        return value.numpy()
    return np.asarray(value)


def _signature_specs(fn: Any) -> Tuple[Dict[str, tf.TensorSpec], Dict[str, Any]]:
    inputs: Dict[str, tf.TensorSpec] = {}
    structured_in = getattr(fn, "structured_input_signature", None)
    if structured_in:
        _, kwargs = structured_in
        inputs = dict(kwargs or {})
    outputs = getattr(fn, "structured_outputs", None)
    if not isinstance(outputs, Mapping):
        outputs = {}
    return inputs, dict(outputs)


class ModelLoader:
    """Loads TensorFlow SavedModel bundles (tag 'serve')."""

    def __init__(self, signature_key: str = "serving_default"):
        self.signature_key = signature_key

    def load_model(self, model_path: str, signature_key: Optional[str] = None) -> ModelHandle:
        """Load the SavedModel at `model_path` and bind `signature_key`.

        Raises ModelLoadError on any failure; callers decide the fallback.
        """
        key = signature_key or self.signature_key
        resolved = resolve_model_dir(model_path)
        logger.info(f"[ModelLoader] loading TensorFlow model from {resolved}")
        logger.info(f"[ModelLoader] TensorFlow version: {tf.__version__}")

        try:
            loaded = tf.saved_model.load(resolved, tags=["serve"])
        except Exception as e:
            logger.error(f"[ModelLoader] failed to load model {resolved}: {e}")
            raise ModelLoadError(model_path, str(e)) from e

        signatures = getattr(loaded, "signatures", {}) or {}
        available = tuple(signatures.keys())
        if key not in signatures:
            logger.error(f"[ModelLoader] signature '{key}' not found in {resolved}; available={list(available)}")
            raise ModelLoadError(model_path, f"signature '{key}' not found (available: {list(available)})")

        fn = signatures[key]
        input_specs, output_specs = _signature_specs(fn)
        handle = ModelHandle(
            model_path=resolved,
            signature_key=key,
            fn=fn,
            input_specs=input_specs,
            output_specs=output_specs,
            available_signatures=available,
            model=loaded,
        )
        log_signatures(signatures)
        logger.info(f"[ModelLoader] model loaded: {resolved} (signature={key})")
        return handle

    def model_exists(self, model_path: str) -> bool:
        if not model_path:
            return False
        return os.path.isfile(os.path.join(resolve_model_dir(model_path), "saved_model.pb"))


# Module import log
logger.debug(f"[{__name__}] module loaded")

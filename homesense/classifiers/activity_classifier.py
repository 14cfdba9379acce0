from typing import Dict, Optional, Sequence, Tuple

import numpy as np
import tensorflow as tf
from loguru import logger

from homesense.config import Settings, settings as default_settings
from homesense.exceptions import TensorSignatureError
from homesense.models.activity_type import ActivityType, MODEL_OUTPUT_ORDER
from homesense.services.model_loader import ModelHandle, ModelLoader
from homesense.utils.tf_diagnostics import list_operations
from homesense.utils.video_utils import debug_tensor, prepare_image_for_model


ActivityScores = Dict[ActivityType, float]


def map_index_to_activity(index: int, order: Sequence[ActivityType] = MODEL_OUTPUT_ORDER) -> Optional[ActivityType]:
    """Map a model output index to its activity; None past the end of the output vector."""
    if 0 <= index < len(order):
        return order[index]
    return None


def top_activity(scores: ActivityScores) -> Optional[Tuple[ActivityType, float]]:
    """Return the highest-confidence (activity, score) pair, or None for an empty map."""
    if not scores:
        return None
    return max(scores.items(), key=lambda item: item[1])


class VisualActivityClassifier:
    """Frame-level activity classification with a MobileNet-style SavedModel.

    The model emits one confidence per slot of MODEL_OUTPUT_ORDER; scores above
    the configured threshold are returned as an ActivityType -> confidence map.
    ABSENT is never produced here (absence is decided by presence detection).
    """

    def __init__(self, config: Optional[Settings] = None, loader: Optional[ModelLoader] = None):
        self.config = config or default_settings
        self.loader = loader or ModelLoader(signature_key=self.config.model_signature_key)
        self.handle: Optional[ModelHandle] = None
        self.threshold = float(self.config.activity_confidence_threshold)
        self.order: Sequence[ActivityType] = MODEL_OUTPUT_ORDER

    @property
    def is_loaded(self) -> bool:
        return self.handle is not None

    def load(self) -> bool:
        model_path = self.config.activity_recognition_model
        if not model_path:
            logger.warning("[VisualActivityClassifier] no activity recognition model configured")
            return False
        try:
            self.handle = self.loader.load_model(model_path)
            if self.config.log_graph_operations:
                list_operations(self.handle)
            logger.info("[VisualActivityClassifier] activity recognition model loaded")
            return True
        except Exception:
            logger.exception(f"[VisualActivityClassifier] failed to load activity model {model_path}")
            self.handle = None
            return False

    def _output_key(self, outputs: Dict[str, np.ndarray]) -> str:
        key = self.config.activity_output_name
        if key:
            if key not in outputs:
                raise TensorSignatureError(f"output '{key}' not produced (outputs: {sorted(outputs)})")
            return key
        if not outputs:
            raise TensorSignatureError("model produced no outputs")
        return sorted(outputs)[0]

    def _decode(self, probabilities: np.ndarray) -> ActivityScores:
        values = np.asarray(probabilities, dtype=np.float32).reshape(-1)
        if values.size != len(self.order):
            logger.warning(
                f"[VisualActivityClassifier] model emits {values.size} scores, expected {len(self.order)}"
            )

        # Only the first len(order) scores carry labels; extra values are ignored
        result: ActivityScores = {}
        for index, probability in enumerate(values[: len(self.order)]):
            activity = map_index_to_activity(index, self.order)
            if activity == ActivityType.ABSENT:
                continue
            if probability > self.threshold:
                result[activity] = float(probability)
        return result

    def classify_activity(self, frame_bgr: np.ndarray) -> ActivityScores:
        """Classify the activity visible in a frame; empty map on any failure."""
        if self.handle is None:
            logger.warning("[VisualActivityClassifier] classification impossible: model not loaded")
            return {}

        try:
            # MobileNetV2-style heads expect float32 in [0, 1] unless the signature says uint8
            as_float32 = self.handle.input_dtype(self.config.activity_input_name) != tf.uint8
            image_tensor = prepare_image_for_model(
                frame_bgr,
                self.config.input_image_width,
                self.config.input_image_height,
                as_float32=as_float32,
            )
            debug_tensor(image_tensor, "activity classification input")

            outputs = self.handle.run({self.config.activity_input_name: image_tensor})
            result = self._decode(outputs[self._output_key(outputs)])
            logger.debug(f"[VisualActivityClassifier] classified activities: {result}")
            return result
        except Exception:
            logger.exception("[VisualActivityClassifier] activity classification failed")
            return {}


# Module import log
logger.debug(f"[{__name__}] module loaded")

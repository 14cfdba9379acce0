from typing import FrozenSet, Iterable, List, Optional

import numpy as np
import tensorflow as tf
from loguru import logger

from homesense.config import Settings, settings as default_settings
from homesense.exceptions import TensorSignatureError
from homesense.models.detection import Detection
from homesense.services.hog_detector import HogPersonDetector
from homesense.services.model_loader import ModelHandle, ModelLoader
from homesense.utils.tf_diagnostics import list_operations
from homesense.utils.video_utils import debug_tensor, prepare_image_for_model


class PresenceDetector:
    """Human presence detection on camera frames.

    Primary path: a TensorFlow object-detection SavedModel (COCO label map,
    class 1 = person). Fallback: OpenCV's HOG people detector.
    Every public check returns False on failure instead of raising.
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        loader: Optional[ModelLoader] = None,
        hog: Optional[HogPersonDetector] = None,
    ):
        self.config = config or default_settings
        self.loader = loader or ModelLoader(signature_key=self.config.model_signature_key)
        self._hog = hog
        self.handle: Optional[ModelHandle] = None
        self.threshold = float(self.config.presence_threshold)
        self.person_class_ids: FrozenSet[int] = self.config.person_class_id_set
        self.input_size = int(self.config.presence_input_size)

    @property
    def is_loaded(self) -> bool:
        return self.handle is not None

    def load(self) -> bool:
        """Load the configured detection model. Returns False (and logs) on failure."""
        model_path = self.config.human_detection_model
        if not model_path:
            logger.warning("[PresenceDetector] no human detection model configured")
            return False
        try:
            logger.info(f"[PresenceDetector] loading human detection model: {model_path}")
            self.handle = self.loader.load_model(model_path)
            if self.config.log_graph_operations:
                list_operations(self.handle)
            logger.info("[PresenceDetector] human detection model loaded")
            return True
        except Exception:
            logger.exception(f"[PresenceDetector] failed to load human detection model {model_path}")
            self.handle = None
            return False

    def _input_as_float32(self) -> bool:
        dtype = self.handle.input_dtype(self.config.presence_input_name)
        return dtype == tf.float32

    def decode_detections(self, classes: Iterable[float], scores: Iterable[float]) -> List[Detection]:
        """Pair flattened class ids and scores emitted by a detection graph."""
        class_arr = np.asarray(classes, dtype=np.float32).reshape(-1)
        score_arr = np.asarray(scores, dtype=np.float32).reshape(-1)
        if class_arr.size != score_arr.size:
            raise TensorSignatureError(
                f"detection outputs disagree: {class_arr.size} classes vs {score_arr.size} scores"
            )
        return [Detection(class_id=int(c), score=float(s)) for c, s in zip(class_arr, score_arr)]

    def is_person_present(self, frame_bgr: np.ndarray) -> bool:
        """True when the detection graph reports a person above the presence threshold."""
        if self.handle is None:
            logger.warning("[PresenceDetector] presence check impossible: model not loaded")
            return False

        try:
            image_tensor = prepare_image_for_model(
                frame_bgr, self.input_size, self.input_size, as_float32=self._input_as_float32()
            )
            debug_tensor(image_tensor, "presence detection input")

            outputs = self.handle.run({self.config.presence_input_name: image_tensor})
            detections = self.decode_detections(
                outputs[self.config.presence_classes_output],
                outputs[self.config.presence_scores_output],
            )

            for det in detections:
                logger.debug(f"[PresenceDetector] detection class={det.class_id} score={det.score:.3f}")
                if det.score > self.threshold and det.class_id in self.person_class_ids:
                    logger.debug(f"[PresenceDetector] person detected, score={det.score:.3f}")
                    return True

            logger.debug("[PresenceDetector] no person detected")
            return False
        except Exception:
            logger.exception("[PresenceDetector] presence detection failed")
            return False

    @property
    def hog(self) -> HogPersonDetector:
        if self._hog is None:
            self._hog = HogPersonDetector(
                frame_width=self.config.hog_frame_width,
                frame_height=self.config.hog_frame_height,
                win_stride=self.config.hog_win_stride,
            )
        return self._hog

    def detect_person_with_hog(self, frame_bgr: np.ndarray) -> bool:
        """OpenCV HOG fallback for when the TensorFlow graph is unavailable."""
        try:
            return self.hog.is_person_present(frame_bgr)
        except Exception:
            logger.exception("[PresenceDetector] HOG person detection failed")
            return False

    def detect(self, frame_bgr: np.ndarray) -> bool:
        """Presence check using the graph when loaded, HOG otherwise (if enabled)."""
        if self.handle is not None:
            return self.is_person_present(frame_bgr)
        if self.config.hog_fallback_enabled:
            logger.debug("[PresenceDetector] model not loaded, using HOG fallback")
            return self.detect_person_with_hog(frame_bgr)
        logger.warning("[PresenceDetector] model not loaded and HOG fallback disabled")
        return False


# Module import log
logger.debug(f"[{__name__}] module loaded")

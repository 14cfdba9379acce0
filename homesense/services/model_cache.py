import threading
from typing import Optional

import cv2
import tensorflow as tf
from loguru import logger

from homesense.classifiers.activity_classifier import VisualActivityClassifier
from homesense.config import Settings, settings
from homesense.services.model_loader import ModelLoader
from homesense.services.presence_detector import PresenceDetector

_lock = threading.Lock()
_loader_singleton: Optional[ModelLoader] = None
_presence_singleton: Optional[PresenceDetector] = None
_activity_singleton: Optional[VisualActivityClassifier] = None


def tune_runtime_threads(config: Optional[Settings] = None) -> None:
    """Constrain OpenCV/TensorFlow internal threading; must run before the first graph executes."""
    config = config or settings
    cv2.setNumThreads(int(config.opencv_num_threads))
    try:
        tf.config.threading.set_intra_op_parallelism_threads(int(config.tf_num_threads))
        tf.config.threading.set_inter_op_parallelism_threads(int(config.tf_num_threads))
    except RuntimeError as e:
        # TensorFlow refuses once its runtime is initialized
        logger.warning(f"[model_cache] TensorFlow thread pools already initialized: {e}")


def get_model_loader() -> ModelLoader:
    global _loader_singleton
    with _lock:
        if _loader_singleton is None:
            _loader_singleton = ModelLoader(signature_key=settings.model_signature_key)
            logger.debug("[model_cache] ModelLoader initialized")
        return _loader_singleton


def get_presence_detector() -> PresenceDetector:
    global _presence_singleton
    loader = get_model_loader()
    with _lock:
        if _presence_singleton is None:
            _presence_singleton = PresenceDetector(config=settings, loader=loader)
            _presence_singleton.load()
            logger.debug(f"[model_cache] PresenceDetector ready (loaded={_presence_singleton.is_loaded})")
        return _presence_singleton


def get_activity_classifier() -> VisualActivityClassifier:
    global _activity_singleton
    loader = get_model_loader()
    with _lock:
        if _activity_singleton is None:
            _activity_singleton = VisualActivityClassifier(config=settings, loader=loader)
            _activity_singleton.load()
            logger.debug(f"[model_cache] VisualActivityClassifier ready (loaded={_activity_singleton.is_loaded})")
        return _activity_singleton


def preload_models() -> None:
    """Load every configured model once at startup. Never raises."""
    try:
        tune_runtime_threads()
    except Exception:
        logger.exception("[model_cache] runtime thread tuning failed")
    presence = get_presence_detector()
    activity = get_activity_classifier()
    logger.info(f"[model_cache] models preloaded (presence={presence.is_loaded}, activity={activity.is_loaded})")


def clear_cache() -> None:
    """Drop cached services so their graphs can be released."""
    global _loader_singleton, _presence_singleton, _activity_singleton
    with _lock:
        _loader_singleton = None
        _presence_singleton = None
        _activity_singleton = None
    logger.debug("[model_cache] cache cleared")

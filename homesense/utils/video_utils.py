from typing import Any

import cv2
import numpy as np
import tensorflow as tf
from loguru import logger

from homesense.exceptions import FrameError


def _check_frame(frame: Any) -> np.ndarray:
    if frame is None:
        raise FrameError("frame is None")
    if not isinstance(frame, np.ndarray):
        raise FrameError(f"frame must be a numpy array, got {type(frame).__name__}")
    if frame.size == 0:
        raise FrameError("frame is empty")
    if frame.ndim not in (2, 3):
        raise FrameError(f"frame must be HxW or HxWxC, got shape {frame.shape}")
    return frame


def resize_frame(frame: np.ndarray, width: int, height: int) -> np.ndarray:
    """Resize a frame to (width, height) with bilinear interpolation."""
    frame = _check_frame(frame)
    return cv2.resize(frame, (int(width), int(height)), interpolation=cv2.INTER_LINEAR)


def bgr_to_rgb(frame: np.ndarray) -> np.ndarray:
    """Convert a camera frame to 3-channel RGB.

    BGR is the normal case; grayscale and BGRA frames are accepted too.
    """
    frame = _check_frame(frame)
    if frame.ndim == 2 or frame.shape[2] == 1:
        return cv2.cvtColor(frame, cv2.COLOR_GRAY2RGB)
    if frame.shape[2] == 4:
        return cv2.cvtColor(frame, cv2.COLOR_BGRA2RGB)
    if frame.shape[2] != 3:
        raise FrameError(f"unsupported channel count: {frame.shape[2]}")
    return cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)


def normalize_frame(frame: np.ndarray) -> np.ndarray:
    """Scale 0-255 pixel values to float32 in [0, 1]."""
    frame = _check_frame(frame)
    return frame.astype(np.float32) / 255.0


def _batched(frame: np.ndarray) -> np.ndarray:
    # HxW single-channel frames get an explicit channel axis: [1, H, W, 1]
    if frame.ndim == 2:
        frame = frame[..., np.newaxis]
    return frame[np.newaxis, ...]


def frame_to_tensor_uint8(frame_rgb: np.ndarray) -> tf.Tensor:
    """Pack an HxWxC RGB frame into a [1, H, W, C] uint8 tensor (0-255)."""
    frame_rgb = _check_frame(frame_rgb)
    if frame_rgb.dtype != np.uint8:
        frame_rgb = np.clip(frame_rgb, 0, 255).astype(np.uint8)
    tensor = tf.convert_to_tensor(_batched(frame_rgb), dtype=tf.uint8)
    logger.debug(f"[video_utils] uint8 tensor created, shape={tensor.shape.as_list()}")
    return tensor


def frame_to_tensor_float32(frame_rgb: np.ndarray) -> tf.Tensor:
    """Pack an HxWxC RGB frame into a [1, H, W, C] float32 tensor (0-1)."""
    normalized = normalize_frame(frame_rgb)
    tensor = tf.convert_to_tensor(_batched(normalized), dtype=tf.float32)
    logger.debug(f"[video_utils] float32 tensor created, shape={tensor.shape.as_list()}")
    return tensor


def prepare_image_for_model(frame: np.ndarray, target_width: int, target_height: int, as_float32: bool) -> tf.Tensor:
    """Resize, convert to RGB and pack a camera frame for a TensorFlow graph.

    as_float32=True yields float32 values in [0, 1]; otherwise raw uint8 (0-255).
    """
    resized = resize_frame(frame, target_width, target_height)
    rgb = bgr_to_rgb(resized)
    if as_float32:
        return frame_to_tensor_float32(rgb)
    return frame_to_tensor_uint8(rgb)


def debug_tensor(tensor: tf.Tensor, name: str) -> None:
    logger.debug(f"[video_utils] {name} - dtype={tensor.dtype.name}, shape={tensor.shape.as_list()}")


# Module import log
logger.debug(f"[{__name__}] module loaded")

import numpy as np
import tensorflow as tf
from loguru import logger


def uint8_to_float32(tensor: tf.Tensor) -> tf.Tensor:
    """Convert a uint8 tensor to float32 normalized to [0, 1], keeping its shape.

    Useful when a graph expects normalized inputs but the frame was packed raw.
    """
    tensor = tf.convert_to_tensor(tensor)
    if tensor.dtype != tf.uint8:
        raise ValueError(f"expected a uint8 tensor, got {tensor.dtype.name}")
    if tensor.shape.rank != 4:
        logger.warning(f"[tensor_utils] converting non-4D tensor of shape {tensor.shape.as_list()}")
    return tf.cast(tensor, tf.float32) / 255.0


def tensor_to_image(tensor: tf.Tensor) -> np.ndarray:
    """Unpack a [1, H, W, C] tensor into an HxWxC uint8 image.

    float32 tensors are assumed to hold 0-1 values and are rescaled to 0-255.
    """
    tensor = tf.convert_to_tensor(tensor)
    if tensor.dtype not in (tf.float32, tf.uint8):
        raise ValueError(f"tensor must be float32 or uint8, got {tensor.dtype.name}")
    shape = tensor.shape.as_list()
    if len(shape) != 4 or shape[0] != 1:
        raise ValueError(f"tensor must have shape [1, height, width, channels], got {shape}")

    data = tensor.numpy()[0]
    if tensor.dtype == tf.float32:
        return np.clip(data * 255.0, 0, 255).astype(np.uint8)
    return data.copy()

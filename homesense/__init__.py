"""Perception adapter: TensorFlow SavedModel and OpenCV HOG inference for home activity monitoring."""

__version__ = "1.0.0"

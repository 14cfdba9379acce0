class PerceptionError(Exception):
    """Base class for perception adapter errors."""


class ModelLoadError(PerceptionError):
    """Raised when a SavedModel cannot be opened or its signature bound."""

    def __init__(self, model_path: str, reason: str):
        self.model_path = model_path
        super().__init__(f"Failed to load model '{model_path}': {reason}")


class TensorSignatureError(PerceptionError):
    """Raised when a tensor does not match the graph's declared input."""


class FrameError(PerceptionError):
    """Raised for frames that cannot be preprocessed (None, empty, bad rank)."""

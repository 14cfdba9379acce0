from .activity_type import ActivityType, MODEL_OUTPUT_ORDER
from .detection import Detection, PersonBox

__all__ = ["ActivityType", "MODEL_OUTPUT_ORDER", "Detection", "PersonBox"]

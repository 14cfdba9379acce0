from __future__ import annotations

from typing import FrozenSet

from dotenv import load_dotenv
from loguru import logger
from pydantic_settings import BaseSettings
from pydantic import Field


# Load .env once at import time
load_dotenv()


class Settings(BaseSettings):
    """Configuration settings for the perception adapter."""

    # app environment + logging
    environment: str = Field(default="production", env="ENVIRONMENT")  # development|staging|production
    log_dir: str = Field(default="output", env="LOG_DIR")
    log_graph_operations: bool = Field(default=False, env="LOG_GRAPH_OPERATIONS")

    # SavedModel locations (empty = not configured)
    human_detection_model: str = Field(default="", env="HUMAN_DETECTION_MODEL")
    activity_recognition_model: str = Field(default="", env="ACTIVITY_RECOGNITION_MODEL")
    model_signature_key: str = Field(default="serving_default", env="MODEL_SIGNATURE_KEY")

    # Presence detection graph
    presence_input_size: int = Field(default=320, env="PRESENCE_INPUT_SIZE")
    presence_threshold: float = Field(default=0.5, env="PRESENCE_THRESHOLD")
    person_class_ids: str = Field(default="1", env="PERSON_CLASS_IDS")  # COCO label map: 1 = person
    presence_input_name: str = Field(default="input_tensor", env="PRESENCE_INPUT_NAME")
    presence_classes_output: str = Field(default="detection_classes", env="PRESENCE_CLASSES_OUTPUT")
    presence_scores_output: str = Field(default="detection_scores", env="PRESENCE_SCORES_OUTPUT")

    # Activity classification graph
    input_image_width: int = Field(default=224, env="INPUT_IMAGE_WIDTH")
    input_image_height: int = Field(default=224, env="INPUT_IMAGE_HEIGHT")
    activity_confidence_threshold: float = Field(default=0.5, env="ACTIVITY_CONFIDENCE_THRESHOLD")
    activity_input_name: str = Field(default="inputs", env="ACTIVITY_INPUT_NAME")
    activity_output_name: str = Field(default="", env="ACTIVITY_OUTPUT_NAME")  # "" = sole/first output

    # HOG fallback
    hog_fallback_enabled: bool = Field(default=True, env="HOG_FALLBACK_ENABLED")
    hog_frame_width: int = Field(default=640, env="HOG_FRAME_WIDTH")
    hog_frame_height: int = Field(default=480, env="HOG_FRAME_HEIGHT")
    hog_win_stride: int = Field(default=8, env="HOG_WIN_STRIDE")

    # performance controls
    opencv_num_threads: int = Field(default=1, env="OPENCV_NUM_THREADS")
    tf_num_threads: int = Field(default=1, env="TF_NUM_THREADS")

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def person_class_id_set(self) -> FrozenSet[int]:
        """Parsed `person_class_ids` ("1" or "1,2")."""
        ids = set()
        for part in self.person_class_ids.split(","):
            part = part.strip()
            if part:
                ids.add(int(part))
        return frozenset(ids)


# Singleton settings instance
settings = Settings()

logger.debug(f"[{__name__}] settings loaded for environment={settings.environment}")

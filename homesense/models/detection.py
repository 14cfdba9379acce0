from typing import Tuple

from pydantic import BaseModel, Field
from loguru import logger


class Detection(BaseModel):
    """One (class id, score) pair decoded from an object-detection graph."""
    class_id: int = Field(default=-1)
    score: float = Field(default=0.0)


class PersonBox(BaseModel):
    """HOG people-detector hit, in the coordinates of the HOG working frame."""
    box: Tuple[int, int, int, int] = Field(default=(0, 0, 0, 0))  # x1, y1, x2, y2
    weight: float = Field(default=0.0)


# Module import log
logger.debug(f"[{__name__}] module loaded")

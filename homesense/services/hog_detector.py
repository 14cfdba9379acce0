from typing import List

import cv2
import numpy as np
from loguru import logger

from homesense.models.detection import PersonBox
from homesense.utils.video_utils import resize_frame


class HogPersonDetector:
    """Classic HOG + linear SVM pedestrian detector (OpenCV default people model).

    Non-learned fallback used when no TensorFlow detection graph is available.
    """

    def __init__(self, frame_width: int = 640, frame_height: int = 480, win_stride: int = 8):
        self.frame_width = frame_width
        self.frame_height = frame_height
        self.win_stride = (win_stride, win_stride)
        self.hog = cv2.HOGDescriptor()
        self.hog.setSVMDetector(cv2.HOGDescriptor_getDefaultPeopleDetector())
        logger.debug(f"[HogPersonDetector] initialized, frame={frame_width}x{frame_height}, stride={win_stride}")

    def detect(self, frame_bgr: np.ndarray) -> List[PersonBox]:
        """Return people boxes in the coordinates of the resized working frame."""
        resized = resize_frame(frame_bgr, self.frame_width, self.frame_height)
        # detectMultiScale only takes CV_8UC1 or CV_8UC3
        if resized.ndim == 3 and resized.shape[2] == 4:
            resized = cv2.cvtColor(resized, cv2.COLOR_BGRA2BGR)
        elif resized.ndim == 3 and resized.shape[2] == 1:
            resized = resized[..., 0]
        rects, weights = self.hog.detectMultiScale(resized, winStride=self.win_stride)
        weights = np.asarray(weights).reshape(-1)
        out: List[PersonBox] = []
        for (x, y, w, h), wgt in zip(rects, weights):
            out.append(PersonBox(box=(int(x), int(y), int(x + w), int(y + h)), weight=float(wgt)))
        return out

    def is_person_present(self, frame_bgr: np.ndarray) -> bool:
        return len(self.detect(frame_bgr)) > 0

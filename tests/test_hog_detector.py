"""Tests for the OpenCV HOG people detector."""

from unittest.mock import MagicMock

import numpy as np
import pytest

from homesense.services.hog_detector import HogPersonDetector
from homesense.services.presence_detector import PresenceDetector


def test_blank_frame_has_no_people(black_frame):
    detector = HogPersonDetector(frame_width=128, frame_height=256)
    assert detector.detect(black_frame) == []
    assert detector.is_person_present(black_frame) is False


def test_detect_converts_rects_to_boxes(bgr_frame):
    detector = HogPersonDetector()
    detector.hog = MagicMock(name="hog")
    detector.hog.detectMultiScale.return_value = (np.array([[10, 20, 30, 60]]), np.array([[0.9]]))

    boxes = detector.detect(bgr_frame)

    assert len(boxes) == 1
    assert boxes[0].box == (10, 20, 40, 80)
    assert boxes[0].weight == 0.9
    assert detector.is_person_present(bgr_frame) is True

    resized = detector.hog.detectMultiScale.call_args.args[0]
    assert resized.shape == (480, 640, 3)
    assert detector.hog.detectMultiScale.call_args.kwargs["winStride"] == (8, 8)


@pytest.mark.parametrize("shape", [(48, 64, 4), (48, 64), (48, 64, 1)])
def test_bgra_and_gray_frames_reach_hog(shape):
    detector = HogPersonDetector(frame_width=128, frame_height=256)
    frame = np.zeros(shape, dtype=np.uint8)

    assert detector.detect(frame) == []

    detector.hog = MagicMock(name="hog")
    detector.hog.detectMultiScale.return_value = ((), ())
    detector.detect(frame)
    fed = detector.hog.detectMultiScale.call_args.args[0]
    assert fed.shape in {(256, 128), (256, 128, 3)}


def test_presence_fallback_accepts_bgra(make_settings):
    presence = PresenceDetector(config=make_settings(hog_frame_width=128, hog_frame_height=256))
    presence.hog.hog = MagicMock(name="hog")
    presence.hog.hog.detectMultiScale.return_value = (np.array([[0, 0, 64, 128]]), np.array([1.2]))

    assert presence.detect(np.zeros((480, 640, 4), dtype=np.uint8)) is True
    assert presence.hog.hog.detectMultiScale.call_args.args[0].shape == (256, 128, 3)

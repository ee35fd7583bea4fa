"""Shared test fixtures for stripbooth tests."""

import cv2
import numpy as np
import pytest

from stripbooth.services.compositor import Compositor
from stripbooth.services.exporter import Exporter
from stripbooth.services.session import BoothSession
from stripbooth.services.slots import Bitmap

RED_BGR = (0, 0, 255)
BLUE_BGR = (255, 0, 0)
GREEN_BGR = (0, 255, 0)


def make_frame(width=1280, height=720, left=RED_BGR, right=BLUE_BGR):
    """A camera-like BGR frame whose left and right halves differ."""
    frame = np.zeros((height, width, 3), dtype=np.uint8)
    frame[:, : width // 2] = left
    frame[:, width // 2:] = right
    return frame


def make_bitmap(color=GREEN_BGR, width=1280, height=720):
    frame = np.zeros((height, width, 3), dtype=np.uint8)
    frame[:] = color
    ok, buffer = cv2.imencode(".png", frame)
    assert ok
    return Bitmap(png=buffer.tobytes(), width=width, height=height)


class FakeCamera:
    """Stands in for CameraService; counts opens, reads and releases."""

    def __init__(self, frame=None, available=True):
        self.frame = frame
        self.available = available
        self.is_active = False
        self.opens = 0
        self.reads = 0
        self.releases = 0

    def initialize(self):
        if not self.available:
            return False
        if not self.is_active:
            self.opens += 1
            self.is_active = True
        return True

    def read_frame(self):
        self.reads += 1
        return self.frame

    def cleanup(self):
        if self.is_active:
            self.releases += 1
        self.is_active = False


@pytest.fixture
def frame():
    return make_frame()


@pytest.fixture
def camera(frame):
    return FakeCamera(frame=frame)


@pytest.fixture
def exporter(tmp_path):
    return Exporter(exports_dir=str(tmp_path / "exports"))


@pytest.fixture
def booth(camera, exporter):
    return BoothSession(camera=camera, compositor=Compositor(), exporter=exporter)

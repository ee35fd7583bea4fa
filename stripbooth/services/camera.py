import logging
from typing import Optional

import cv2
import numpy as np

from stripbooth.config import settings

logger = logging.getLogger(__name__)


class CameraService:
    """Owns the one live ``cv2.VideoCapture`` handle of the booth."""

    def __init__(self, index: int = None, width: int = None, height: int = None):
        self.index = settings.camera_index if index is None else index
        self.width = width or settings.camera_width
        self.height = height or settings.camera_height
        self.camera = None
        self.is_active = False

    def initialize(self) -> bool:
        if self.is_active:
            return True
        try:
            self.camera = cv2.VideoCapture(self.index)
            if not self.camera.isOpened():
                raise RuntimeError(f"Could not open camera {self.index}")

            self.camera.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
            self.camera.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)

            self.is_active = True
            logger.info("Camera %s opened", self.index)
            return True
        except (cv2.error, RuntimeError) as e:
            logger.error("Camera initialization failed: %s", e)
            self.cleanup()
            return False

    def read_frame(self) -> Optional[np.ndarray]:
        """Return the current frame at the camera's native resolution, or None."""
        if not self.is_active or self.camera is None:
            return None

        ret, frame = self.camera.read()
        if not ret or frame is None:
            logger.warning("Camera %s returned no frame", self.index)
            return None
        return frame

    def cleanup(self):
        camera, self.camera = self.camera, None
        self.is_active = False
        if camera is not None:
            camera.release()
            logger.info("Camera %s released", self.index)

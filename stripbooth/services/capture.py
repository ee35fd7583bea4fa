import logging
from dataclasses import dataclass
from typing import Optional, Protocol

import cv2
import numpy as np

from stripbooth.exceptions import CaptureSourceUnavailableError
from stripbooth.models.booth import FilterType
from stripbooth.services.filters import apply_filter
from stripbooth.services.slots import Bitmap, SlotStore

logger = logging.getLogger(__name__)


class FrameSource(Protocol):
    def read_frame(self) -> Optional[np.ndarray]:
        ...


@dataclass(frozen=True)
class CaptureResult:
    index: Optional[int]
    bitmap: Optional[Bitmap] = None

    @property
    def captured(self) -> bool:
        return self.index is not None


def render_bitmap(frame: np.ndarray, filter_type: FilterType, flipped: bool) -> Bitmap:
    """Filter and optionally mirror a frame, then encode it as a PNG bitmap.

    The frame is used at its native resolution; the caller's array is left
    untouched.
    """
    image = apply_filter(frame, filter_type)
    if flipped:
        image = cv2.flip(image, 1)

    ok, buffer = cv2.imencode(".png", image)
    if not ok:
        raise CaptureSourceUnavailableError("Captured frame could not be encoded")

    height, width = image.shape[:2]
    return Bitmap(png=buffer.tobytes(), width=width, height=height)


def capture(source: FrameSource, store: SlotStore, filter_type: FilterType,
            flipped: bool) -> CaptureResult:
    index = store.first_empty_index()
    if index is None:
        logger.info("Capture skipped: all %d slots are filled", len(store))
        return CaptureResult(index=None)

    frame = source.read_frame()
    if frame is None:
        raise CaptureSourceUnavailableError("No camera frame available")

    bitmap = render_bitmap(frame, filter_type, flipped)
    store.set(index, bitmap)
    logger.info("Captured %dx%d photo into slot %d (filter=%s, flipped=%s)",
                bitmap.width, bitmap.height, index, FilterType(filter_type).value, flipped)
    return CaptureResult(index=index, bitmap=bitmap)

import asyncio
import logging
from typing import Optional

from stripbooth.config import settings
from stripbooth.exceptions import (
    CameraUnavailableError, CaptureSourceUnavailableError, ExportPreconditionError
)
from stripbooth.models.booth import BoothStage, FilterType, PatternKind, TemplateType
from stripbooth.services import capture as frame_capture
from stripbooth.services.camera import CameraService
from stripbooth.services.capture import CaptureResult
from stripbooth.services.compositor import Compositor
from stripbooth.services.exporter import Exporter, ExportResult
from stripbooth.services.slots import SlotStore

logger = logging.getLogger(__name__)


class BoothSession:
    """In-memory state of the booth plus the operations that change it.

    Every operation either completes or leaves the state as it was. The API
    serializes operations through ``lock``.
    """

    def __init__(self, camera: CameraService = None, compositor: Compositor = None,
                 exporter: Exporter = None):
        self.camera = camera or CameraService()
        self.compositor = compositor or Compositor()
        self.exporter = exporter or Exporter()
        self.lock = asyncio.Lock()

        self.stage = BoothStage.idle
        self.template = TemplateType.classic
        self.filter = FilterType.none
        self.flipped = False
        self.border_color = settings.default_border_color
        self.pattern = PatternKind.dots
        self.slots = SlotStore(self.slot_count)

    @property
    def slot_count(self) -> int:
        return settings.template_slots[TemplateType(self.template).value]

    @property
    def is_active(self) -> bool:
        return self.stage == BoothStage.active

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
        return False

    def start(self):
        if not self.camera.initialize():
            self.stage = BoothStage.idle
            raise CameraUnavailableError("Camera access denied. Please enable camera permissions.")
        self.stage = BoothStage.active
        self.slots.reset(self.slot_count)
        logger.info("Booth session started with template %s", self.template.value)

    def stop(self):
        try:
            self.camera.cleanup()
        finally:
            self.stage = BoothStage.idle
            self.slots.reset(self.slot_count)
            logger.info("Booth session stopped")

    def select_template(self, template: TemplateType):
        self.template = TemplateType(template)
        self.slots.reset(self.slot_count)

    def select_filter(self, filter_type: FilterType):
        self.filter = FilterType(filter_type)

    def set_flip(self, flipped: bool):
        self.flipped = bool(flipped)

    def toggle_flip(self) -> bool:
        self.flipped = not self.flipped
        return self.flipped

    def set_border_color(self, border_color: str):
        self.border_color = border_color

    def select_pattern(self, pattern: PatternKind):
        self.pattern = PatternKind(pattern)

    def capture(self) -> CaptureResult:
        if not self.is_active:
            raise CaptureSourceUnavailableError("Start the booth before capturing")
        return frame_capture.capture(self.camera, self.slots, self.filter, self.flipped)

    def clear(self, index: int):
        self.slots.clear(index)

    def clear_all(self):
        self.slots.clear_all()

    async def export(self, portrait: Optional[bool] = None) -> ExportResult:
        if not self.slots.has_any_content():
            raise ExportPreconditionError("Take at least one photo first!")

        if portrait is None:
            portrait = settings.portrait_layout
        strip = await self.compositor.compose(
            self.slots.snapshot(), self.border_color, self.pattern, portrait
        )
        result = self.exporter.export(strip)
        await asyncio.to_thread(self.exporter.save, result)
        return result


booth_session = BoothSession()

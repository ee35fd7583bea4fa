class StripBoothError(Exception):
    """Base class for every booth failure surfaced to the user."""


class CameraUnavailableError(StripBoothError):
    """The camera could not be opened, or access to it was denied."""


class CaptureSourceUnavailableError(StripBoothError):
    """No live frame was available at capture time."""


class SlotIndexError(StripBoothError, IndexError):
    def __init__(self, index: int, slot_count: int):
        super().__init__(f"Slot {index} is out of range for a {slot_count}-slot strip")
        self.index = index
        self.slot_count = slot_count


class DecodeError(StripBoothError):
    def __init__(self, index: int, reason: str):
        super().__init__(f"Photo in slot {index} could not be decoded: {reason}")
        self.index = index


class ExportPreconditionError(StripBoothError):
    """Export was requested while every slot is still empty."""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from stripbooth.exceptions import SlotIndexError


@dataclass(frozen=True)
class Bitmap:
    """A captured photo, PNG-encoded at the camera's native resolution."""
    png: bytes
    width: int
    height: int


class SlotStore:
    def __init__(self, slot_count: int):
        self._slots: List[Optional[Bitmap]] = []
        self.reset(slot_count)

    def __len__(self) -> int:
        return len(self._slots)

    def __getitem__(self, index: int) -> Optional[Bitmap]:
        self._check(index)
        return self._slots[index]

    def reset(self, slot_count: int):
        if slot_count < 1:
            raise ValueError("A strip needs at least one slot")
        self._slots = [None] * slot_count

    def first_empty_index(self) -> Optional[int]:
        for index, content in enumerate(self._slots):
            if content is None:
                return index
        return None

    def set(self, index: int, bitmap: Bitmap):
        self._check(index)
        self._slots[index] = bitmap

    def clear(self, index: int):
        self._check(index)
        self._slots[index] = None

    def clear_all(self):
        self.reset(len(self._slots))

    def has_any_content(self) -> bool:
        return any(content is not None for content in self._slots)

    def empty_count(self) -> int:
        return sum(1 for content in self._slots if content is None)

    def snapshot(self) -> Tuple[Optional[Bitmap], ...]:
        return tuple(self._slots)

    def _check(self, index: int):
        if not 0 <= index < len(self._slots):
            raise SlotIndexError(index, len(self._slots))

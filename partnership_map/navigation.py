from __future__ import annotations

NONE_SELECTED = -1


class DetailNavigator:
    """Current position in the displayed record list for the detail panel.

    The index is ``NONE_SELECTED`` until a record is chosen. ``next`` and
    ``previous`` wrap around the ends of the list and do nothing when the
    list is empty.
    """

    def __init__(self, size: int = 0) -> None:
        if size < 0:
            raise ValueError("size must be non-negative")
        self.size = size
        self.index = NONE_SELECTED

    @property
    def has_selection(self) -> bool:
        return self.index != NONE_SELECTED

    def select(self, index: int) -> int:
        if not 0 <= index < self.size:
            raise IndexError(f"index {index} out of range for {self.size} records")
        self.index = index
        return self.index

    def next(self) -> int:
        if self.size == 0:
            return self.index
        self.index += 1
        if self.index >= self.size:
            self.index = 0
        return self.index

    def previous(self) -> int:
        if self.size == 0:
            return self.index
        self.index -= 1
        if self.index < 0:
            self.index = self.size - 1
        return self.index

    def reset(self, size: int) -> None:
        if size < 0:
            raise ValueError("size must be non-negative")
        self.size = size
        self.index = NONE_SELECTED

    def clear(self) -> None:
        self.index = NONE_SELECTED

"""Fixed-capacity circular context window over the most recent tokens."""

from typing import List

EMPTY_TOKEN = ""


class ContextWindow:
    """
    Ring buffer of the last ``capacity`` tokens.

    Slots that have not been written yet hold the empty token, which never
    equals a real token but still takes part in projections as an empty key.
    """

    __slots__ = ("capacity", "_buffer", "_index", "_previous")

    def __init__(self, capacity: int = 17):
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._buffer: List[str] = [EMPTY_TOKEN] * capacity
        self._index = 0
        self._previous = 0

    @property
    def center_offset(self) -> int:
        """Offset of the middle slot."""
        return self.capacity // 2

    def push(self, token: str) -> None:
        """Overwrite the oldest slot with ``token``."""
        self._buffer[self._index] = token
        self._index, self._previous = (self._index + 1) % self.capacity, self._index

    def item(self, offset: int) -> str:
        """Token at ``offset`` from the oldest retained slot."""
        return self._buffer[(self._index + offset) % self.capacity]

    def previous(self) -> str:
        """The most recently pushed token, or the empty token before any push."""
        return self._buffer[self._previous]

    def center(self) -> str:
        return self.item(self.center_offset)

    def items(self) -> List[str]:
        """All slots, oldest first."""
        return [self.item(i) for i in range(self.capacity)]

    def __len__(self) -> int:
        return self.capacity

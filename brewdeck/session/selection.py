"""Selection and scroll state for list panels."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Selection:
    """Selected row and first visible row of a list panel.

    Every constructor path goes through ``clamp`` so that, for a non-empty
    list, ``0 <= index < count`` and ``scroll <= index < scroll + visible``.
    An empty list always has ``index == scroll == 0``.
    """

    index: int = 0
    scroll: int = 0

    def clamp(self, count: int, visible: int) -> Selection:
        if count <= 0:
            return Selection()
        visible = max(1, visible)
        index = min(max(self.index, 0), count - 1)
        scroll = min(max(self.scroll, 0), index)
        if index >= scroll + visible:
            scroll = index - visible + 1
        scroll = min(scroll, max(0, count - visible))
        return Selection(index=index, scroll=scroll)

    def move(self, delta: int, count: int, visible: int) -> Selection:
        """Move the selection by ``delta`` rows, stopping at either end."""
        return Selection(index=self.index + delta, scroll=self.scroll).clamp(count, visible)

    def select(self, index: int, count: int, visible: int) -> Selection:
        return Selection(index=index, scroll=self.scroll).clamp(count, visible)


def clamp_scroll(offset: int, count: int, visible: int) -> int:
    """Clamp a free scroll offset to ``[0, max(0, count - visible)]``."""
    return min(max(offset, 0), max(0, count - max(1, visible)))

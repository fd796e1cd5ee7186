from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, List, Optional, Sequence

import numpy as np

from .constants import BOARD_SLOTS, PLAYFIELD_SIZE, Coordinate
from .pieces import RustominoType


class SlotTag(IntEnum):
    EMPTY = 0
    OCCUPIED = 1
    LOCKED = 2
    GHOST = 3


_GLYPHS = ("  ", " #", " @", " %")


@dataclass(frozen=True)
class SlotState:
    tag: SlotTag
    kind: Optional[RustominoType] = None

    def is_empty(self) -> bool:
        return self.tag is SlotTag.EMPTY

    def is_occupied(self) -> bool:
        return self.tag is SlotTag.OCCUPIED

    def is_locked(self) -> bool:
        return self.tag is SlotTag.LOCKED

    def is_ghost(self) -> bool:
        return self.tag is SlotTag.GHOST

    def __str__(self) -> str:
        return _GLYPHS[self.tag]


EMPTY_SLOT = SlotState(SlotTag.EMPTY)


class GameGrid:
    """Discrete 2D grid of slot states.

    Two arrays indexed ``[y, x]`` with row 0 at the bottom: ``tags`` holds a
    ``SlotTag`` per cell and ``kinds`` the rustomino type that put it there
    (0 when empty). Every line and collision rule reads ``tags`` only.
    """

    def __init__(self, width: int = BOARD_SLOTS[0], height: int = BOARD_SLOTS[1],
                 visible_height: int = PLAYFIELD_SIZE[1]) -> None:
        self.width = int(width)
        self.height = int(height)
        self.visible_height = int(visible_height)
        self.tags = np.zeros((self.height, self.width), dtype=np.int8)
        self.kinds = np.zeros((self.height, self.width), dtype=np.int8)

    def reset(self) -> None:
        self.tags.fill(SlotTag.EMPTY)
        self.kinds.fill(0)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def tag_at(self, x: int, y: int) -> SlotTag:
        return SlotTag(int(self.tags[y, x]))

    def slot(self, x: int, y: int) -> SlotState:
        tag = self.tag_at(x, y)
        if tag is SlotTag.EMPTY:
            return EMPTY_SLOT
        return SlotState(tag, RustominoType(int(self.kinds[y, x])))

    def is_locked(self, x: int, y: int) -> bool:
        return self.tags[y, x] == SlotTag.LOCKED

    def is_occupied(self, x: int, y: int) -> bool:
        return self.tags[y, x] == SlotTag.OCCUPIED

    def is_ghost(self, x: int, y: int) -> bool:
        return self.tags[y, x] == SlotTag.GHOST

    def set_slot(self, x: int, y: int, tag: SlotTag, kind: Optional[RustominoType] = None) -> None:
        self.tags[y, x] = tag
        self.kinds[y, x] = 0 if tag is SlotTag.EMPTY or kind is None else int(kind)

    def fill(self, cells: Iterable[Coordinate], tag: SlotTag, kind: Optional[RustominoType] = None) -> None:
        """Write ``tag`` into every cell; cells above the grid top are skipped."""
        for x, y in cells:
            if y >= self.height:
                continue
            self.set_slot(x, y, tag, kind)

    def complete_rows(self) -> List[int]:
        full_rows = np.flatnonzero(np.all(self.tags == SlotTag.LOCKED, axis=1))
        return [int(y) for y in full_rows]

    def remove_rows(self, rows: Sequence[int], compact_buffer: bool = True) -> None:
        """Delete ``rows`` and slide everything above them down.

        With ``compact_buffer`` the whole grid compacts and empty rows enter at
        the top. Otherwise only the visible rows are rewritten, sourced from the
        pre-clear grid (buffer rows included), and the buffer rows keep their
        content apart from any of them that were themselves removed.
        """
        if not rows:
            return
        num = len(rows)
        tags = np.delete(self.tags, rows, axis=0)
        kinds = np.delete(self.kinds, rows, axis=0)
        # y grows upward, so new empty rows go on the end
        tags = np.vstack((tags, np.zeros((num, self.width), dtype=np.int8)))
        kinds = np.vstack((kinds, np.zeros((num, self.width), dtype=np.int8)))
        if compact_buffer:
            self.tags, self.kinds = tags, kinds
            return
        top = self.visible_height
        self.tags[:top] = tags[:top]
        self.kinds[:top] = kinds[:top]
        for y in rows:
            if y >= top:
                self.tags[y].fill(SlotTag.EMPTY)
                self.kinds[y].fill(0)

    def clone_tags(self) -> np.ndarray:
        return self.tags.copy()

    def clone_kinds(self) -> np.ndarray:
        return self.kinds.copy()

    def __str__(self) -> str:
        lines = ["-" * (self.width * 2)]
        for y in range(self.height - 1, -1, -1):
            lines.append("".join(_GLYPHS[int(t)] for t in self.tags[y]))
        lines.append("-" * (self.width * 2))
        return "\n".join(lines)

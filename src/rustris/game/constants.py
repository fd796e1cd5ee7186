from __future__ import annotations

from typing import Tuple

Coordinate = Tuple[int, int]

# Full grid including the two buffer rows above the visible playfield
BOARD_SLOTS: Tuple[int, int] = (10, 22)
PLAYFIELD_SIZE: Tuple[int, int] = (10, 20)

DOWN_TRANSLATION: Coordinate = (0, -1)
LEFT_TRANSLATION: Coordinate = (-1, 0)
RIGHT_TRANSLATION: Coordinate = (1, 0)
ZERO_TRANSLATION: Coordinate = (0, 0)

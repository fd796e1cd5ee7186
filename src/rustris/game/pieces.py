from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List, Tuple

import numpy as np

from .constants import BOARD_SLOTS, PLAYFIELD_SIZE, Coordinate


class RustominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


class RotationDirection(IntEnum):
    CW = 1
    CCW = -1


Shape = np.ndarray
Blocks = Tuple[Coordinate, Coordinate, Coordinate, Coordinate]


def _rot90(shape: Shape, k: int) -> Shape:
    k = k % 4
    if k == 0:
        return shape
    return np.rot90(shape, k, axes=(1, 0))  # rotate clockwise when k>0


# Spawn orientation drawn top row first, inside the piece's rotation box
BASE_SHAPES = {
    RustominoType.I: np.array([[0, 0, 0, 0], [1, 1, 1, 1], [0, 0, 0, 0], [0, 0, 0, 0]], dtype=np.int8),
    RustominoType.O: np.array([[1, 1], [1, 1]], dtype=np.int8),
    RustominoType.T: np.array([[0, 1, 0], [1, 1, 1], [0, 0, 0]], dtype=np.int8),
    RustominoType.S: np.array([[0, 1, 1], [1, 1, 0], [0, 0, 0]], dtype=np.int8),
    RustominoType.Z: np.array([[1, 1, 0], [0, 1, 1], [0, 0, 0]], dtype=np.int8),
    RustominoType.J: np.array([[1, 0, 0], [1, 1, 1], [0, 0, 0]], dtype=np.int8),
    RustominoType.L: np.array([[0, 0, 1], [1, 1, 1], [0, 0, 0]], dtype=np.int8),
}


def _shape_offsets(shape: Shape) -> Blocks:
    """Convert a top-down shape matrix into y-up block offsets."""
    n = shape.shape[0]
    offsets = [(int(c), int(n - 1 - r)) for r, c in np.argwhere(shape)]
    assert len(offsets) == 4
    return tuple(offsets)  # type: ignore[return-value]


ORIENTATIONS: Dict[RustominoType, Tuple[Blocks, ...]] = {
    kind: tuple(_shape_offsets(_rot90(shape, k)) for k in range(4))
    for kind, shape in BASE_SHAPES.items()
}


def _spawn_translation(kind: RustominoType) -> Coordinate:
    # Centered horizontally, lowest block on the first buffer row
    n = BASE_SHAPES[kind].shape[1]
    lowest = min(y for _, y in ORIENTATIONS[kind][0])
    return ((BOARD_SLOTS[0] - n) // 2, PLAYFIELD_SIZE[1] - lowest)


SPAWN_TRANSLATIONS: Dict[RustominoType, Coordinate] = {
    kind: _spawn_translation(kind) for kind in RustominoType
}


@dataclass
class Rustomino:
    kind: RustominoType
    rotation: int = 0  # 0..3
    translation: Coordinate = (0, 0)
    blocks: Blocks = field(default=None)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.blocks is None:
            self.blocks = ORIENTATIONS[self.kind][self.rotation % 4]

    @classmethod
    def spawn(cls, kind: RustominoType) -> "Rustomino":
        return cls(kind=kind, rotation=0, translation=SPAWN_TRANSLATIONS[kind])

    def reset(self) -> "Rustomino":
        return Rustomino.spawn(self.kind)

    def copy(self) -> "Rustomino":
        return Rustomino(self.kind, self.rotation, self.translation, self.blocks)

    def board_slots(self) -> List[Coordinate]:
        tx, ty = self.translation
        return [(x + tx, y + ty) for x, y in self.blocks]

    def translated(self, delta: Coordinate) -> List[Coordinate]:
        tx, ty = self.translation[0] + delta[0], self.translation[1] + delta[1]
        return [(x + tx, y + ty) for x, y in self.blocks]

    def rotated(self, direction: RotationDirection) -> List[Coordinate]:
        tx, ty = self.translation
        blocks = ORIENTATIONS[self.kind][(self.rotation + int(direction)) % 4]
        return [(x + tx, y + ty) for x, y in blocks]

    def translate(self, delta: Coordinate) -> None:
        self.translation = (self.translation[0] + delta[0], self.translation[1] + delta[1])

    def rotate(self, direction: RotationDirection) -> None:
        self.rotation = (self.rotation + int(direction)) % 4
        self.blocks = ORIENTATIONS[self.kind][self.rotation]

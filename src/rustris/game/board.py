from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, List, Optional, Sequence

from .constants import (
    BOARD_SLOTS,
    DOWN_TRANSLATION,
    LEFT_TRANSLATION,
    PLAYFIELD_SIZE,
    RIGHT_TRANSLATION,
    ZERO_TRANSLATION,
    Coordinate,
)
from .grid import GameGrid, SlotTag
from .pieces import RotationDirection, Rustomino

logger = logging.getLogger(__name__)


class TranslationDirection(Enum):
    LEFT = LEFT_TRANSLATION
    RIGHT = RIGHT_TRANSLATION
    DOWN = DOWN_TRANSLATION

    @property
    def translation(self) -> Coordinate:
        return self.value


class RustrisBoard:
    """Playfield that owns the grid, the falling rustomino and its ghost.

    The grid is only mutated through these methods. Movement is refused when
    the candidate cells hit a wall, the floor or a locked slot; occupied and
    ghost slots never block, and there is no ceiling.
    """

    def __init__(self, compact_buffer_rows: bool = True) -> None:
        logger.info("Initializing Rustris board")
        self.grid = GameGrid(BOARD_SLOTS[0], BOARD_SLOTS[1], PLAYFIELD_SIZE[1])
        self.compact_buffer_rows = compact_buffer_rows
        self.current_rustomino: Optional[Rustomino] = None
        self.ghost_rustomino: Optional[Rustomino] = None

    def check_collision(self, cells: Sequence[Coordinate]) -> bool:
        for x, y in cells:
            if x < 0 or x >= self.grid.width:
                logger.debug("collided with left/right wall: %s", cells)
                return True
            if y < 0:
                logger.debug("collided with bottom wall: %s", cells)
                return True
            if y >= self.grid.height:
                continue
            if self.grid.is_locked(x, y):
                logger.debug("collided with locked block: %s", cells)
                return True
        return False

    def hard_drop_translation(self, rustomino: Rustomino) -> Coordinate:
        """Largest downward translation that keeps ``rustomino`` clear of collisions."""
        dy = DOWN_TRANSLATION[1]
        if self.check_collision(rustomino.translated((0, dy))):
            return ZERO_TRANSLATION
        while True:
            good = dy
            dy += DOWN_TRANSLATION[1]
            if self.check_collision(rustomino.translated((0, dy))):
                return (0, good)

    def set_current_rustomino(self, rustomino: Rustomino) -> bool:
        """Make ``rustomino`` the falling piece.

        The piece is written to the grid even when it overlaps locked slots so
        the fatal overlap can be drawn; the return value is False in that case
        and the caller ends the game.
        """
        logger.debug("setting current rustomino: %s", rustomino)
        cells = rustomino.board_slots()
        ok = not self.check_collision(cells)
        self.grid.fill(cells, SlotTag.OCCUPIED, rustomino.kind)
        self.current_rustomino = rustomino
        self.update_ghost_rustomino()
        return ok

    def take_current(self) -> Optional[Rustomino]:
        if self.current_rustomino is None:
            return None
        current, self.current_rustomino = self.current_rustomino, None
        logger.debug("taking current rustomino: %s", current)
        self.grid.fill(current.board_slots(), SlotTag.EMPTY)
        self.update_ghost_rustomino()
        return current.reset()

    def ready_for_next(self) -> bool:
        return self.current_rustomino is None

    def can_fall(self) -> bool:
        if self.current_rustomino is None:
            return False
        return not self.check_collision(self.current_rustomino.translated(DOWN_TRANSLATION))

    def apply_gravity(self) -> None:
        """Move the falling piece one row down without checking; gate with ``can_fall``."""
        current = self.current_rustomino
        if current is None:
            return
        logger.debug("applying gravity to %s", current)
        self._move(current, lambda: current.translate(DOWN_TRANSLATION))
        self.update_ghost_rustomino()

    def translate_current(self, direction: TranslationDirection) -> bool:
        current = self.current_rustomino
        if current is None:
            return False
        delta = direction.translation
        if self.check_collision(current.translated(delta)):
            return False
        self._move(current, lambda: current.translate(delta))
        self.update_ghost_rustomino()
        return True

    def rotate_current(self, direction: RotationDirection) -> bool:
        current = self.current_rustomino
        if current is None:
            return False
        rotated = current.rotated(direction)
        if self.check_collision(rotated):
            logger.debug("rotation collision detected: %s", rotated)
            return False
        self._move(current, lambda: current.rotate(direction))
        self.update_ghost_rustomino()
        return True

    def hard_drop(self) -> None:
        """Clear the falling piece and move it to its landing spot.

        The landing cells are written by the lock that must follow.
        """
        current = self.current_rustomino
        if current is None:
            return
        delta = self.hard_drop_translation(current)
        self.grid.fill(current.board_slots(), SlotTag.EMPTY)
        current.translate(delta)

    def lock_rustomino(self) -> None:
        current = self.current_rustomino
        if current is None:
            return
        logger.debug("locking rustomino: %s", current)
        self.grid.fill(current.board_slots(), SlotTag.LOCKED, current.kind)
        self.current_rustomino = None
        self.update_ghost_rustomino()

    def get_complete_lines(self) -> List[int]:
        return self.grid.complete_rows()

    def clear_completed_lines(self) -> List[int]:
        completed_lines = self.get_complete_lines()
        if not completed_lines:
            return completed_lines
        logger.info("clearing completed lines: %s", completed_lines)
        self.grid.remove_rows(completed_lines, compact_buffer=self.compact_buffer_rows)
        self.update_ghost_rustomino()
        return completed_lines

    def update_ghost_rustomino(self) -> None:
        """Re-project the landing silhouette of the falling piece.

        Only slots still tagged as ghost are erased, so locked and occupied
        slots under the previous projection are left alone.
        """
        if self.ghost_rustomino is not None:
            for x, y in self.ghost_rustomino.board_slots():
                if self.grid.is_inside(x, y) and self.grid.is_ghost(x, y):
                    self.grid.set_slot(x, y, SlotTag.EMPTY)
        current = self.current_rustomino
        if current is None:
            self.ghost_rustomino = None
            return
        ghost = current.copy()
        ghost.translate(self.hard_drop_translation(current))
        for x, y in ghost.board_slots():
            if self.grid.is_inside(x, y) and not self.grid.is_occupied(x, y):
                self.grid.set_slot(x, y, SlotTag.GHOST, ghost.kind)
        self.ghost_rustomino = ghost

    def _move(self, rustomino: Rustomino, commit: Callable[[], None]) -> None:
        self.grid.fill(rustomino.board_slots(), SlotTag.EMPTY)
        commit()
        self.grid.fill(rustomino.board_slots(), SlotTag.OCCUPIED, rustomino.kind)

    def __str__(self) -> str:
        return str(self.grid)

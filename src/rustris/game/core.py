from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

import numpy as np

from .bag import BagRandomizer
from .board import RustrisBoard, TranslationDirection
from .constants import BOARD_SLOTS, PLAYFIELD_SIZE, Coordinate
from .controls import (
    DEFAULT_TIMINGS,
    PLAY_ACTIONS,
    Action,
    ControlTiming,
    InputEvent,
    InputState,
    InputTracker,
)
from .grid import EMPTY_SLOT, SlotState, SlotTag
from .pieces import RotationDirection, Rustomino, RustominoType
from .rules import ScoringRules, gravity_delay

logger = logging.getLogger(__name__)


class GamePhase(Enum):
    MENU = "menu"
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "game_over"


@dataclass
class GameConfig:
    width: int = BOARD_SLOTS[0]
    height: int = BOARD_SLOTS[1]
    visible_height: int = PLAYFIELD_SIZE[1]
    random_seed: Optional[int] = None
    lines_per_level: int = 10
    compact_buffer_rows: bool = True
    controls: Dict[Action, ControlTiming] = field(default_factory=lambda: dict(DEFAULT_TIMINGS))

    def __post_init__(self) -> None:
        if (self.width, self.height) != BOARD_SLOTS or self.visible_height != PLAYFIELD_SIZE[1]:
            raise ValueError(
                f"unsupported board size {self.width}x{self.height} "
                f"(visible {self.visible_height}); expected {BOARD_SLOTS} with {PLAYFIELD_SIZE[1]} visible rows"
            )


@dataclass(frozen=True)
class PieceView:
    kind: RustominoType
    cells: Tuple[Coordinate, ...]

    @classmethod
    def of(cls, rustomino: Optional[Rustomino], relative: bool = False) -> Optional["PieceView"]:
        if rustomino is None:
            return None
        cells = rustomino.blocks if relative else rustomino.board_slots()
        return cls(rustomino.kind, tuple(cells))


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only view of a session for rendering."""

    tags: np.ndarray
    kinds: np.ndarray
    current: Optional[PieceView]
    ghost: Optional[PieceView]
    next_piece: Optional[PieceView]
    held_piece: Optional[PieceView]
    score: int
    level: int
    lines: int
    phase: GamePhase

    def slot(self, x: int, y: int) -> SlotState:
        tag = SlotTag(int(self.tags[y, x]))
        if tag is SlotTag.EMPTY:
            return EMPTY_SLOT
        return SlotState(tag, RustominoType(int(self.kinds[y, x])))


class GameSession:
    """Turns elapsed time and action events into board moves, score and phase changes."""

    def __init__(self, config: Optional[GameConfig] = None, rules: Optional[ScoringRules] = None) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules(lines_per_level=self.config.lines_per_level)
        self.rng = random.Random(self.config.random_seed)
        self.inputs = InputTracker(self.config.controls)
        self.board = RustrisBoard(self.config.compact_buffer_rows)
        self.bag = BagRandomizer(self.rng)
        self.phase = GamePhase.MENU
        self.score = 0
        self.level = 1
        self.completed_lines = 0
        self.next_piece: Optional[Rustomino] = None
        self.held_piece: Optional[Rustomino] = None
        self.hold_used = False
        self.gravity_time_accum = 0.0
        self.gravity_delay = gravity_delay(1)
        self.reset()

    def reset(self, seed: Optional[int] = None) -> None:
        """Return every piece of session state to its initial value, back at the menu."""
        logger.info("Initializing Rustris session")
        if seed is not None:
            self.rng.seed(seed)
        self.board = RustrisBoard(self.config.compact_buffer_rows)
        self.bag = BagRandomizer(self.rng)
        self.inputs.clear()
        self.phase = GamePhase.MENU
        self.score = 0
        self.level = 1
        self.completed_lines = 0
        self.next_piece = None
        self.held_piece = None
        self.hold_used = False
        self.gravity_time_accum = 0.0
        self.gravity_delay = gravity_delay(self.level)
        self._fill_next_piece()

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------
    def handle_event(self, event: InputEvent) -> None:
        if event.state is InputState.DOWN:
            self.press(event.action)
        elif event.state is InputState.UP:
            self.release(event.action)
        # HELD needs nothing, the tracker accumulates time on update

    def press(self, action: Action) -> None:
        if action in PLAY_ACTIONS:
            if self.phase is GamePhase.PLAYING:
                self.inputs.press(action)
                self._perform(action)
            return
        self._change_phase(action)

    def release(self, action: Action) -> None:
        self.inputs.release(action)

    def _change_phase(self, action: Action) -> None:
        if self.phase is GamePhase.MENU and action is Action.START:
            self.phase = GamePhase.PLAYING
        elif self.phase is GamePhase.PLAYING and action is Action.PAUSE:
            self.inputs.clear()
            self.phase = GamePhase.PAUSED
        elif self.phase is GamePhase.PAUSED and action in (Action.RESUME, Action.PAUSE):
            self.phase = GamePhase.PLAYING
        elif self.phase is GamePhase.GAME_OVER and action is Action.RESTART:
            self.reset()
            self.phase = GamePhase.PLAYING
        else:
            return
        logger.info("game phase: %s", self.phase.value)

    def _perform(self, action: Action) -> None:
        if action is Action.MOVE_LEFT:
            self.board.translate_current(TranslationDirection.LEFT)
        elif action is Action.MOVE_RIGHT:
            self.board.translate_current(TranslationDirection.RIGHT)
        elif action is Action.ROTATE_CW:
            self.board.rotate_current(RotationDirection.CW)
        elif action is Action.ROTATE_CCW:
            self.board.rotate_current(RotationDirection.CCW)
        elif action is Action.SOFT_DROP:
            self.soft_drop()
        elif action is Action.HARD_DROP:
            self.hard_drop()
        elif action is Action.HOLD:
            self.hold()

    # ------------------------------------------------------------------
    # Turn logic
    # ------------------------------------------------------------------
    def update(self, delta_time: float) -> None:
        """Advance the session by ``delta_time`` seconds."""
        if self.phase is not GamePhase.PLAYING:
            return
        if self.board.ready_for_next():
            self._spawn_next()
            if self.phase is GamePhase.GAME_OVER:
                return
        for action in self.inputs.update(delta_time):
            self._perform(action)
        self.gravity_time_accum += delta_time
        if self.gravity_time_accum >= self.gravity_delay:
            self.gravity_time_accum = 0.0
            self.gravity_tick()

    def gravity_tick(self) -> None:
        if self.board.ready_for_next():
            return
        movable = self.board.can_fall()
        logger.debug("board:\n%s", self.board)
        logger.debug("gravity tick, rustomino movable: %s", movable)
        if movable:
            self.board.apply_gravity()
        else:
            self.lock("gravity tick")

    def soft_drop(self) -> None:
        if self.board.ready_for_next():
            return
        if not self.board.translate_current(TranslationDirection.DOWN):
            self.lock("soft drop")
        self.gravity_time_accum = 0.0

    def hard_drop(self) -> None:
        if self.board.ready_for_next():
            return
        self.board.hard_drop()
        self.lock("hard drop")
        self.gravity_time_accum = 0.0

    def hold(self) -> None:
        """Swap the falling piece into the hold slot, once per lock.

        With nothing held yet the next piece comes in instead and the next
        slot is refilled from the bag.
        """
        if self.hold_used or self.board.ready_for_next():
            return
        if self.held_piece is not None:
            incoming, self.held_piece = self.held_piece, None
        else:
            incoming, self.next_piece = self.next_piece, None
            self._fill_next_piece()
        self.held_piece = self.board.take_current()
        logger.debug("holding %s", self.held_piece)
        if not self.board.set_current_rustomino(incoming.reset()):
            self.game_over()
        self.hold_used = True

    def lock(self, reason: str) -> None:
        current = self.board.current_rustomino
        if current is not None:
            logger.info("locking rustomino for %s; type: %s blocks: %s",
                        reason, current.kind.name, current.board_slots())
        self.hold_used = False
        self.board.lock_rustomino()
        self.handle_completed_lines()

    def handle_completed_lines(self) -> List[int]:
        completed_lines = self.board.clear_completed_lines()
        if not completed_lines:
            return completed_lines
        self.completed_lines += len(completed_lines)
        self.score_completed_lines(completed_lines)
        if self.rules.should_level_up(self.completed_lines, self.level):
            self.increase_game_level()
        return completed_lines

    def score_completed_lines(self, completed_lines: List[int]) -> None:
        score = self.rules.score_for_lines(len(completed_lines), self.level)
        self.score += score
        logger.info("scored! game_level: %d score: %d total score: %d", self.level, score, self.score)

    def increase_game_level(self) -> None:
        self.level += 1
        logger.info("increasing game level to %d", self.level)
        self.gravity_delay = gravity_delay(self.level)

    def game_over(self) -> None:
        logger.info("Game Over! Score: %d", self.score)
        self.phase = GamePhase.GAME_OVER

    def _fill_next_piece(self) -> None:
        if self.next_piece is not None:
            return
        kind = self.bag.next()
        logger.debug("next rustomino: %s", kind.name)
        self.next_piece = Rustomino.spawn(kind)

    def _spawn_next(self) -> None:
        current, self.next_piece = self.next_piece, None
        self._fill_next_piece()
        if not self.board.set_current_rustomino(current):
            self.game_over()

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------
    def get_state(self) -> np.ndarray:
        return self.board.grid.clone_tags()

    def snapshot(self) -> GameSnapshot:
        tags = self.board.grid.clone_tags()
        kinds = self.board.grid.clone_kinds()
        tags.setflags(write=False)
        kinds.setflags(write=False)
        return GameSnapshot(
            tags=tags,
            kinds=kinds,
            current=PieceView.of(self.board.current_rustomino),
            ghost=PieceView.of(self.board.ghost_rustomino),
            next_piece=PieceView.of(self.next_piece, relative=True),
            held_piece=PieceView.of(self.held_piece, relative=True),
            score=self.score,
            level=self.level,
            lines=self.completed_lines,
            phase=self.phase,
        )

"""Game module for Rustris.

Exports the core engine and supporting classes:
- Rustomino / RustominoType: piece geometry and rotation lookup
- BagRandomizer: 7-bag piece supply
- GameGrid / SlotState / SlotTag: slot storage, line detection and compaction
- RustrisBoard: collision, movement, locking, ghost projection
- ScoringRules / gravity_delay: scoring and level timing
- InputTracker / Action: action vocabulary and key repeat timers
- GameSession: timing, hold/next supply and the phase state machine
"""

from .bag import BagRandomizer
from .board import RustrisBoard, TranslationDirection
from .controls import Action, ControlTiming, InputEvent, InputState, InputTracker
from .core import GameConfig, GamePhase, GameSession, GameSnapshot, PieceView
from .grid import GameGrid, SlotState, SlotTag
from .pieces import RotationDirection, Rustomino, RustominoType
from .rules import InvariantViolation, ScoringRules, gravity_delay

__all__ = [
    "Action",
    "BagRandomizer",
    "ControlTiming",
    "GameConfig",
    "GameGrid",
    "GamePhase",
    "GameSession",
    "GameSnapshot",
    "InputEvent",
    "InputState",
    "InputTracker",
    "InvariantViolation",
    "PieceView",
    "RotationDirection",
    "Rustomino",
    "RustominoType",
    "RustrisBoard",
    "ScoringRules",
    "SlotState",
    "SlotTag",
    "TranslationDirection",
    "gravity_delay",
]

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Dict, List, NamedTuple, Optional, Tuple


class Action(IntEnum):
    MOVE_LEFT = 0
    MOVE_RIGHT = 1
    ROTATE_CW = 2
    ROTATE_CCW = 3
    SOFT_DROP = 4
    HARD_DROP = 5
    HOLD = 6
    START = 7
    PAUSE = 8
    RESUME = 9
    RESTART = 10


PLAY_ACTIONS = (
    Action.MOVE_LEFT,
    Action.MOVE_RIGHT,
    Action.ROTATE_CW,
    Action.ROTATE_CCW,
    Action.SOFT_DROP,
    Action.HARD_DROP,
    Action.HOLD,
)
PHASE_ACTIONS = (Action.START, Action.PAUSE, Action.RESUME, Action.RESTART)


class InputState(Enum):
    UP = "up"
    DOWN = "down"
    HELD = "held"


class InputEvent(NamedTuple):
    action: Action
    state: InputState = InputState.DOWN


@dataclass(frozen=True)
class ControlTiming:
    """Seconds before a held key starts repeating, then between repeats."""

    initial_delay: float
    repeat_delay: float


DEFAULT_TIMINGS: Dict[Action, ControlTiming] = {
    Action.MOVE_LEFT: ControlTiming(0.15, 0.05),
    Action.MOVE_RIGHT: ControlTiming(0.15, 0.05),
    Action.ROTATE_CW: ControlTiming(0.3, 0.15),
    Action.ROTATE_CCW: ControlTiming(0.3, 0.15),
    Action.SOFT_DROP: ControlTiming(0.1, 0.05),
}


class InputTracker:
    """Per-action key timers for auto-repeat.

    A press puts a repeatable action in ``DOWN``; after ``initial_delay`` it
    moves to ``HELD`` and from then on fires once every ``repeat_delay``.
    Actions without a timing (hard drop, hold, phase actions) only fire on the
    press itself.
    """

    def __init__(self, timings: Optional[Dict[Action, ControlTiming]] = None) -> None:
        self.timings = dict(DEFAULT_TIMINGS if timings is None else timings)
        self._states: Dict[Action, Tuple[InputState, float]] = {}
        self.clear()

    def clear(self) -> None:
        self._states = {action: (InputState.UP, 0.0) for action in self.timings}

    def state(self, action: Action) -> Tuple[InputState, float]:
        return self._states.get(action, (InputState.UP, 0.0))

    def press(self, action: Action) -> None:
        if action in self.timings:
            self._states[action] = (InputState.DOWN, 0.0)

    def release(self, action: Action) -> None:
        if action in self.timings:
            self._states[action] = (InputState.UP, 0.0)

    def update(self, delta_time: float) -> List[Action]:
        """Advance every timer by ``delta_time`` and return the actions that re-fire."""
        fired: List[Action] = []
        for action, (state, elapsed) in self._states.items():
            timing = self.timings[action]
            if state is InputState.DOWN:
                elapsed += delta_time
                if elapsed >= timing.initial_delay:
                    state, elapsed = InputState.HELD, 0.0
            elif state is InputState.HELD:
                elapsed += delta_time
                if elapsed >= timing.repeat_delay:
                    elapsed = 0.0
                    fired.append(action)
            self._states[action] = (state, elapsed)
        return fired

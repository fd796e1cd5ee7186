from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from rustris.game import Action, GameConfig, GamePhase, GameSession, SlotTag
from rustris.game.controls import PLAY_ACTIONS

_TAG_COLORS = {
    SlotTag.EMPTY: (30, 30, 36),
    SlotTag.OCCUPIED: (240, 240, 240),
    SlotTag.LOCKED: (70, 200, 120),
    SlotTag.GHOST: (90, 90, 110),
}


class RustrisEnv(gym.Env):
    """Single-player Rustris as a gymnasium environment.

    Actions 0..6 are the play actions in ``Action`` order and 7 is a no-op.
    Each step presses and releases the action, then advances the session
    clock by ``frame_time`` seconds. The reward is the score gained.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    ACT_NONE = len(PLAY_ACTIONS)

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 frame_time: float = 1.0 / 30.0, max_episode_steps: int = 10_000) -> None:
        super().__init__()
        self.session = GameSession(config)
        self.render_mode = render_mode
        self.frame_time = float(frame_time)
        self.max_episode_steps = int(max_episode_steps)

        height, width = self.session.get_state().shape
        self.observation_space = spaces.Box(
            low=0, high=int(max(SlotTag)), shape=(height, width), dtype=np.int8
        )
        self.action_space = spaces.Discrete(len(PLAY_ACTIONS) + 1)
        self._steps = 0

    def _get_info(self) -> Dict[str, Any]:
        return {
            "score": self.session.score,
            "level": self.session.level,
            "lines": self.session.completed_lines,
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None,
              options: Optional[dict] = None) -> Tuple[np.ndarray, Dict[str, Any]]:
        super().reset(seed=seed)
        self.session.reset(seed)
        self.session.press(Action.START)
        # Put the first piece on the board
        self.session.update(0.0)
        self._steps = 0
        return self.session.get_state(), self._get_info()

    def step(self, action: int):
        action = int(action)
        if not 0 <= action <= self.ACT_NONE:
            raise ValueError(f"invalid action {action}")
        score_before = self.session.score
        if action != self.ACT_NONE:
            play_action = PLAY_ACTIONS[action]
            self.session.press(play_action)
            self.session.release(play_action)
        self.session.update(self.frame_time)
        self._steps += 1

        reward = float(self.session.score - score_before)
        terminated = self.session.phase is GamePhase.GAME_OVER
        truncated = self._steps >= self.max_episode_steps
        return self.session.get_state(), reward, terminated, truncated, self._get_info()

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        tags = self.session.get_state()
        cell = 12
        h, w = tags.shape
        img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
        for y in range(h):
            for x in range(w):
                color = _TAG_COLORS[SlotTag(int(tags[y, x]))]
                # image rows run top-down
                row = h - 1 - y
                img[row * cell : (row + 1) * cell, x * cell : (x + 1) * cell, :] = color
        return img

    def close(self) -> None:
        pass

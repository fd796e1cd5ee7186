from __future__ import annotations

import logging
import math
from dataclasses import dataclass

logger = logging.getLogger(__name__)

GRAVITY_NUMERATOR = 1.0
GRAVITY_FACTOR = 2.0
MIN_GRAVITY_DELAY = 0.001

LINE_CLEAR_NAMES = {1: "single", 2: "double", 3: "triple", 4: "rustris"}


class InvariantViolation(RuntimeError):
    """Raised when the grid reaches a state the rules cannot produce."""


def gravity_delay(level: int) -> float:
    """Seconds between gravity steps at ``level`` (1-based)."""
    if level < 1:
        raise ValueError(f"level must be >= 1, got {level}")
    delay = max(GRAVITY_NUMERATOR / (math.log(level + 1) * GRAVITY_FACTOR), MIN_GRAVITY_DELAY)
    logger.info("new gravity delay %s", delay)
    return delay


@dataclass
class ScoringRules:
    line_clear_scores: tuple[int, int, int, int] = (100, 300, 500, 800)
    lines_per_level: int = 10

    def score_for_lines(self, lines: int, level: int = 1) -> int:
        if lines == 0:
            return 0
        if not 1 <= lines <= 4:
            raise InvariantViolation(f"cannot score {lines} lines in a single clear")
        logger.info("scored! %s line", LINE_CLEAR_NAMES[lines])
        return self.line_clear_scores[lines - 1] * level

    def should_level_up(self, completed_lines: int, level: int) -> bool:
        return completed_lines > level * self.lines_per_level

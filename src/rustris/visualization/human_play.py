from __future__ import annotations

import logging
import os
from typing import Dict, Optional

import pygame

from rustris.game import Action, GameConfig, GamePhase, GameSession
from .renderer import Renderer

logger = logging.getLogger(__name__)

KEY_TO_ACTION: Dict[int, Action] = {
    pygame.K_LEFT: Action.MOVE_LEFT,
    pygame.K_RIGHT: Action.MOVE_RIGHT,
    pygame.K_UP: Action.ROTATE_CW,
    pygame.K_z: Action.ROTATE_CCW,
    pygame.K_DOWN: Action.SOFT_DROP,
    pygame.K_SPACE: Action.HARD_DROP,
    pygame.K_c: Action.HOLD,
}


def setup_logger(level: Optional[str] = None) -> None:
    level = level or os.environ.get("RUSTRIS_LOG_LEVEL", "WARNING")
    log_format = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    logging.basicConfig(level=level.upper(), format=log_format)


def phase_action(session: GameSession, key: int) -> Optional[Action]:
    if key in (pygame.K_RETURN, pygame.K_KP_ENTER):
        if session.phase is GamePhase.MENU:
            return Action.START
        if session.phase is GamePhase.GAME_OVER:
            return Action.RESTART
    elif key == pygame.K_ESCAPE:
        if session.phase is GamePhase.PLAYING:
            return Action.PAUSE
        if session.phase is GamePhase.PAUSED:
            return Action.RESUME
    return None


def run(config: Optional[GameConfig] = None) -> None:
    setup_logger()
    logger.info("Startup: initializing Rustris")
    pygame.init()
    try:
        clock = pygame.time.Clock()
        session = GameSession(config)
        renderer = Renderer(cell_size=28)

        screen = pygame.display.set_mode(renderer.window_size())
        pygame.display.set_caption("Rustris")

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_q:
                        running = False
                        continue
                    action = KEY_TO_ACTION.get(event.key)
                    if action is None:
                        action = phase_action(session, event.key)
                    if action is not None:
                        session.press(action)
                elif event.type == pygame.KEYUP:
                    action = KEY_TO_ACTION.get(event.key)
                    if action is not None:
                        session.release(action)

            # elapsed seconds since the previous frame
            session.update(clock.tick(60) / 1000.0)
            renderer.draw(screen, session.snapshot())
    finally:
        pygame.quit()


if __name__ == "__main__":  # pragma: no cover
    run()

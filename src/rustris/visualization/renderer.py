from __future__ import annotations

from typing import Optional, Tuple

import pygame

from rustris.game import GamePhase, GameSnapshot, PieceView, SlotTag

BACKGROUND_COLOR = (10, 10, 14)
BOARD_BACKGROUND_COLOR = (30, 30, 36)
PREVIEW_BACKGROUND_COLOR = (24, 24, 30)
GHOST_COLOR = (200, 200, 200)
TEXT_COLOR = (235, 235, 235)
OVERLAY_COLOR = (0, 0, 0, 160)

PHASE_MESSAGES = {
    GamePhase.MENU: ("Welcome to Rustris!", "Press Enter To Start"),
    GamePhase.PAUSED: ("Paused", "Press Escape To Resume"),
    GamePhase.GAME_OVER: ("Game Over!", "Press Enter To Play Again"),
}


def _color_for_value(v: int) -> Tuple[int, int, int]:
    palette = {
        0: (20, 20, 26),
        1: (0, 240, 240),  # I
        2: (240, 240, 0),  # O
        3: (160, 0, 240),  # T
        4: (0, 240, 0),    # S
        5: (240, 0, 0),    # Z
        6: (0, 0, 240),    # J
        7: (240, 160, 0),  # L
    }
    return palette.get(abs(v), (200, 200, 200))


class Renderer:
    """Draws a ``GameSnapshot``: the visible rows, ghost, previews and status."""

    def __init__(self, cell_size: int = 30, margin: int = 20, visible_rows: int = 20) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.visible_rows = visible_rows
        self._font: Optional[pygame.font.Font] = None

    def window_size(self, columns: int = 10) -> Tuple[int, int]:
        side = self.cell_size * 6
        return (columns * self.cell_size + side + self.margin * 3,
                self.visible_rows * self.cell_size + self.margin * 2)

    def _cell_rect(self, x: int, y: int, origin: Tuple[int, int], rows: int) -> pygame.Rect:
        # y grows upward on the board, downward on screen
        return pygame.Rect(
            origin[0] + x * self.cell_size,
            origin[1] + (rows - 1 - y) * self.cell_size,
            self.cell_size - 1,
            self.cell_size - 1,
        )

    def _draw_board(self, screen: pygame.Surface, snapshot: GameSnapshot) -> None:
        origin = (self.margin, self.margin)
        width = snapshot.tags.shape[1]
        pygame.draw.rect(screen, BOARD_BACKGROUND_COLOR, pygame.Rect(
            origin[0], origin[1], width * self.cell_size, self.visible_rows * self.cell_size))
        for y in range(self.visible_rows):
            for x in range(width):
                tag = int(snapshot.tags[y, x])
                if tag in (SlotTag.LOCKED, SlotTag.OCCUPIED):
                    color = _color_for_value(int(snapshot.kinds[y, x]))
                else:
                    color = _color_for_value(0)
                pygame.draw.rect(screen, color, self._cell_rect(x, y, origin, self.visible_rows))
        if snapshot.ghost is not None:
            for x, y in snapshot.ghost.cells:
                if y < self.visible_rows:
                    pygame.draw.rect(screen, GHOST_COLOR,
                                     self._cell_rect(x, y, origin, self.visible_rows), 2)

    def _draw_preview(self, screen: pygame.Surface, label: str, piece: Optional[PieceView],
                      top: int) -> None:
        font = self._get_font()
        left = self.margin * 2 + 10 * self.cell_size
        screen.blit(font.render(label, True, TEXT_COLOR), (left, top))
        box_top = top + font.get_linesize()
        pygame.draw.rect(screen, PREVIEW_BACKGROUND_COLOR,
                         pygame.Rect(left, box_top, self.cell_size * 4, self.cell_size * 4))
        if piece is None:
            return
        for x, y in piece.cells:
            rect = self._cell_rect(x, y, (left, box_top), 4)
            pygame.draw.rect(screen, _color_for_value(int(piece.kind)), rect)

    def _get_font(self) -> pygame.font.Font:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 30)
        return self._font

    def draw(self, screen: pygame.Surface, snapshot: GameSnapshot) -> None:
        screen.fill(BACKGROUND_COLOR)
        self._draw_board(screen, snapshot)

        font = self._get_font()
        step = self.cell_size * 6
        self._draw_preview(screen, "Next", snapshot.next_piece, self.margin)
        self._draw_preview(screen, "Hold", snapshot.held_piece, self.margin + step)
        left = self.margin * 2 + 10 * self.cell_size
        top = self.margin + step * 2
        for i, text in enumerate((f"Level: {snapshot.level}", f"Score: {snapshot.score}",
                                  f"Lines: {snapshot.lines}")):
            screen.blit(font.render(text, True, TEXT_COLOR), (left, top + i * font.get_linesize()))

        messages = PHASE_MESSAGES.get(snapshot.phase)
        if messages is not None:
            overlay = pygame.Surface(screen.get_size(), pygame.SRCALPHA)
            overlay.fill(OVERLAY_COLOR)
            screen.blit(overlay, (0, 0))
            for i, text in enumerate(messages):
                surf = font.render(text, True, TEXT_COLOR)
                rect = surf.get_rect(center=(screen.get_width() // 2,
                                             screen.get_height() // 2 + i * 40))
                screen.blit(surf, rect)
        pygame.display.flip()

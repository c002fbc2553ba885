"""
Pygame renderer for game snapshots.
"""

import pygame
from typing import Dict, Tuple

from .snake import Direction
from .placement import AnswerItem
from .session import GameSnapshot


# Tried in order; pygame falls back to its default font if none exist
CJK_FONTS = "notosanscjktc,notosanscjk,microsoftjhenghei,pingfangtc,heitisc,arialunicodems"


def load_font(size: int) -> pygame.font.Font:
    """Font able to show the Chinese prompts where the system has one."""
    return pygame.font.SysFont(CJK_FONTS, size)


class Renderer:
    """Draws the board of a snapshot onto a pygame surface."""

    COLORS = {
        "background": (241, 248, 233),
        "grid": (200, 230, 201),
        "snake_head": (46, 125, 50),
        "snake_body": (76, 175, 80),
        "segment_border": (165, 214, 167),
        # One colour for every answer so the player has to think
        "answer": (102, 187, 106),
        "answer_text": (255, 255, 255),
    }

    def __init__(self, grid_size: int, cell_size: int = 60):
        """
        Args:
            grid_size: side length of the field in cells
            cell_size: cell size in pixels
        """
        self.grid_size = grid_size
        self.cell_size = cell_size
        self.board_size = grid_size * cell_size

        if not pygame.font.get_init():
            pygame.font.init()
        # Answer label fonts by point size
        self._fonts: Dict[int, pygame.font.Font] = {}

    def draw_board(self, surface: pygame.Surface, snapshot: GameSnapshot,
                   origin: Tuple[int, int] = (0, 0)) -> None:
        """Draws grid, answers and snake onto surface at origin."""
        ox, oy = origin
        board = pygame.Rect(ox, oy, self.board_size, self.board_size)
        surface.fill(self.COLORS["background"], board)

        self._draw_grid(surface, origin)

        for item in snapshot.items:
            self._draw_item(surface, item, origin)

        for i, (x, y) in enumerate(snapshot.snake):
            if i == 0:
                color = self.COLORS["snake_head"]
            else:
                color = self._interpolate_color(
                    self.COLORS["snake_body"], (129, 199, 132),
                    i / len(snapshot.snake)
                )
            self._draw_cell(surface, x, y, color, origin)

        if snapshot.snake:
            self._draw_eyes(surface, snapshot.head, snapshot.direction, origin)

    def _draw_grid(self, surface, origin):
        """Draws inner grid lines."""
        ox, oy = origin
        for i in range(1, self.grid_size):
            offset = i * self.cell_size
            pygame.draw.line(surface, self.COLORS["grid"],
                             (ox + offset, oy), (ox + offset, oy + self.board_size))
            pygame.draw.line(surface, self.COLORS["grid"],
                             (ox, oy + offset), (ox + self.board_size, oy + offset))

    def _draw_cell(self, surface, x, y, color, origin, margin: int = 1):
        """Draws a filled cell with a light border."""
        ox, oy = origin
        rect = pygame.Rect(
            ox + x * self.cell_size + margin,
            oy + y * self.cell_size + margin,
            self.cell_size - 2 * margin,
            self.cell_size - 2 * margin
        )
        pygame.draw.rect(surface, color, rect, border_radius=4)
        pygame.draw.rect(surface, self.COLORS["segment_border"], rect, 1,
                         border_radius=4)

    def _draw_eyes(self, surface, head, direction: Direction, origin):
        ox, oy = origin
        cx = ox + head[0] * self.cell_size + self.cell_size // 2
        cy = oy + head[1] * self.cell_size + self.cell_size // 2
        side = self.cell_size // 6

        eye_offsets = {
            Direction.UP: [(-side, -side), (side, -side)],
            Direction.DOWN: [(-side, side), (side, side)],
            Direction.LEFT: [(-side, -side), (-side, side)],
            Direction.RIGHT: [(side, -side), (side, side)],
        }

        for ex, ey in eye_offsets[direction]:
            pygame.draw.circle(surface, (255, 255, 255), (cx + ex, cy + ey), 3)
            pygame.draw.circle(surface, (0, 0, 0), (cx + ex, cy + ey), 1)

    def _draw_item(self, surface, item: AnswerItem, origin):
        """Draws an answer as a circle with its value centred inside."""
        ox, oy = origin
        cx = ox + item.x * self.cell_size + self.cell_size // 2
        cy = oy + item.y * self.cell_size + self.cell_size // 2
        radius = int(self.cell_size * 0.35)

        pygame.draw.circle(surface, self.COLORS["answer"], (cx, cy), radius)

        text = item.display
        font = self.item_font(self.item_font_size(text, radius))
        label = font.render(text, True, self.COLORS["answer_text"])
        surface.blit(label, label.get_rect(center=(cx, cy)))

    def item_font(self, size: int) -> pygame.font.Font:
        """Default pygame font at size, created once per size."""
        font = self._fonts.get(size)
        if font is None:
            font = pygame.font.Font(None, size)
            self._fonts[size] = font
        return font

    def item_font_size(self, text: str, radius: int) -> int:
        """Shrinks long words so they stay inside the circle."""
        base = self.cell_size * 0.6
        max_width = radius * 2 * 0.8
        # Default pygame font: a glyph is roughly 0.45 of the point size wide
        fit = max_width / (max(len(text), 1) * 0.45)
        return max(8, int(min(base, fit)))

    @staticmethod
    def _interpolate_color(
        color1: Tuple[int, int, int],
        color2: Tuple[int, int, int],
        ratio: float
    ) -> Tuple[int, int, int]:
        """Interpolates between two colors."""
        return tuple(
            int(c1 + (c2 - c1) * ratio)
            for c1, c2 in zip(color1, color2)
        )

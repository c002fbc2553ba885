"""
Interactive Pygame front end for Quiz Snake.

Two modes:
- Menu: pick subject and difficulty, see the last result
- Play: steer the snake to the correct answer

Usage:
    python -m visualization.dashboard
    python -m visualization.dashboard --config configs/game.yaml
    python -m visualization.dashboard --subject vocabulary --difficulty hard
"""

import argparse
from typing import List, Optional

import pygame

from quiz_snake.config import load_config
from quiz_snake.snake import Direction
from quiz_snake.questions import Subject, Difficulty
from quiz_snake.engine import GameOverReason
from quiz_snake.session import SessionController, GameSnapshot
from quiz_snake.renderer import Renderer, load_font


COLORS = {
    "background": (241, 248, 233),
    "text": (33, 33, 33),
    "muted": (110, 110, 110),
    "panel_bg": (232, 245, 233),
    "panel_border": (165, 214, 167),
    "selected": (255, 112, 67),
    "mode_menu": (3, 155, 229),
    "mode_play": (46, 125, 50),
    "game_over": (198, 40, 40),
}

REASON_TEXT = {
    GameOverReason.WALL: "Hit the wall",
    GameOverReason.SELF: "Bit itself",
    GameOverReason.WRONG_ANSWER: "Wrong answer",
}

SUBJECTS: List[Subject] = list(Subject)
DIFFICULTIES: List[Difficulty] = list(Difficulty)


class Dashboard:
    """
    Pygame front end. Subscribes to a SessionController and draws its
    snapshots; keyboard input becomes direction requests.

    Args:
        config: loaded config dict (see quiz_snake.config)
    """

    FPS = 60

    # Arrow keys and WASD both steer
    KEY_DIRECTIONS = {
        pygame.K_UP: Direction.UP,
        pygame.K_w: Direction.UP,
        pygame.K_DOWN: Direction.DOWN,
        pygame.K_s: Direction.DOWN,
        pygame.K_LEFT: Direction.LEFT,
        pygame.K_a: Direction.LEFT,
        pygame.K_RIGHT: Direction.RIGHT,
        pygame.K_d: Direction.RIGHT,
    }

    def __init__(self, config: dict):
        self.config = config

        self.grid_size = int(config["game"]["grid_size"])
        self.cell_size = int(config["display"]["cell_size"])
        self.panel_width = int(config["display"]["panel_width"])
        self.grid_px = self.grid_size * self.cell_size

        # Window dimensions
        self.window_w = self.grid_px + self.panel_width
        self.window_h = self.grid_px

        self.mode = "menu"
        self.subject_index = SUBJECTS.index(Subject.parse(config["game"]["subject"]))
        self.difficulty_index = DIFFICULTIES.index(
            Difficulty.parse(config["game"]["difficulty"])
        )

        # Session stats
        self.games_played = 0
        self.best_score = 0
        self.total_score = 0
        self.scores_history: list = []
        self.last_score: Optional[int] = None
        self.last_reason: Optional[GameOverReason] = None

        self.latest: Optional[GameSnapshot] = None
        self.renderer: Optional[Renderer] = None

        self.controller = SessionController.from_config(config)
        self.controller.add_listener(
            on_update=self._on_update,
            on_game_over=self._end_game,
        )

    @property
    def subject(self) -> Subject:
        return SUBJECTS[self.subject_index]

    @property
    def difficulty(self) -> Difficulty:
        return DIFFICULTIES[self.difficulty_index]

    def run(self) -> None:
        """Main loop."""
        pygame.init()
        pygame.display.set_caption("Quiz Snake")
        screen = pygame.display.set_mode((self.window_w, self.window_h))
        clock = pygame.time.Clock()
        font = load_font(20)
        font_large = load_font(28)

        self.renderer = Renderer(self.grid_size, self.cell_size)

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    running = self._handle_keydown(event)

            if self.mode == "play":
                self.controller.advance()

            screen.fill(COLORS["background"])
            if self.latest is not None:
                self.renderer.draw_board(screen, self.latest)
            self._draw_panel(screen, font, font_large)

            pygame.display.flip()
            clock.tick(self.FPS)

        self.controller.stop()
        pygame.quit()

    def _handle_keydown(self, event) -> bool:
        """Handles keyboard input. Returns False to quit."""
        if self.mode == "menu":
            return self._handle_menu_key(event.key)

        if event.key == pygame.K_ESCAPE:
            self.back_to_menu()
        elif event.key in self.KEY_DIRECTIONS:
            self.controller.request_direction(self.KEY_DIRECTIONS[event.key])
        return True

    def _handle_menu_key(self, key) -> bool:
        if key == pygame.K_ESCAPE:
            return False

        if key in (pygame.K_LEFT, pygame.K_a):
            self.subject_index = (self.subject_index - 1) % len(SUBJECTS)
        elif key in (pygame.K_RIGHT, pygame.K_d):
            self.subject_index = (self.subject_index + 1) % len(SUBJECTS)
        elif key in (pygame.K_UP, pygame.K_w):
            self.difficulty_index = (self.difficulty_index - 1) % len(DIFFICULTIES)
        elif key in (pygame.K_DOWN, pygame.K_s):
            self.difficulty_index = (self.difficulty_index + 1) % len(DIFFICULTIES)
        elif key in (pygame.K_RETURN, pygame.K_SPACE):
            self.start_game()
        return True

    def start_game(self) -> None:
        self.mode = "play"
        self.controller.start(self.subject, self.difficulty)

    def back_to_menu(self) -> None:
        """Abandons the current game without counting it."""
        self.controller.stop()
        self.mode = "menu"

    def _on_update(self, snapshot: GameSnapshot) -> None:
        self.latest = snapshot

    def _end_game(self, score: int, reason: GameOverReason) -> None:
        """Updates stats at end of a game and returns to the menu."""
        self.games_played += 1
        self.total_score += score
        self.best_score = max(self.best_score, score)
        self.scores_history.append(score)
        self.last_score = score
        self.last_reason = reason
        self.mode = "menu"
        print(f"Game over ({reason.value}), score: {score}")

    def _draw_panel(self, screen, font, font_large) -> None:
        """Draws the right-side panel."""
        panel_x = self.grid_px
        pad = 12
        pygame.draw.rect(screen, COLORS["panel_bg"],
                         pygame.Rect(panel_x, 0, self.panel_width, self.window_h))
        pygame.draw.line(screen, COLORS["panel_border"],
                         (panel_x, 0), (panel_x, self.window_h), 2)

        y = 15

        def line(text, color=COLORS["text"], f=font, step=24):
            nonlocal y
            surf = f.render(text, True, color)
            screen.blit(surf, (panel_x + pad, y))
            y += step

        def divider():
            nonlocal y
            y += 6
            pygame.draw.line(screen, COLORS["panel_border"],
                             (panel_x + pad, y),
                             (panel_x + self.panel_width - pad, y))
            y += 12

        mode_color = COLORS["mode_play"] if self.mode == "play" else COLORS["mode_menu"]
        line(f"Mode: {self.mode.upper()}", mode_color, font_large, 34)
        divider()

        if self.mode == "menu":
            line("Subject:", COLORS["muted"])
            for subject in SUBJECTS:
                selected = subject == self.subject
                line(("> " if selected else "  ") + subject.value,
                     COLORS["selected"] if selected else COLORS["text"])
            line("Difficulty:", COLORS["muted"])
            for difficulty in DIFFICULTIES:
                selected = difficulty == self.difficulty
                line(("> " if selected else "  ") + difficulty.value,
                     COLORS["selected"] if selected else COLORS["text"])

            if self.last_score is not None:
                divider()
                line("GAME OVER", COLORS["game_over"], font_large, 30)
                line(REASON_TEXT[self.last_reason])
                line(f"Final score: {self.last_score}")
        else:
            snapshot = self.latest
            if snapshot is not None:
                line("Question:", COLORS["muted"])
                line(snapshot.prompt, COLORS["text"], font_large, 34)
                line(f"Score: {snapshot.score}")
                line(f"Length: {snapshot.length}")

        divider()
        avg_score = self.total_score / max(self.games_played, 1)
        line(f"Games: {self.games_played}")
        line(f"Best Score: {self.best_score}")
        line(f"Avg Score: {avg_score:.1f}")

        divider()
        if self.mode == "menu":
            controls = ["Left/Right - Subject", "Up/Down - Difficulty",
                        "Enter - Start", "ESC - Quit"]
        else:
            controls = ["Arrow keys / WASD", "to move snake", "ESC - Menu"]
        for text in controls:
            line(text, COLORS["muted"], font, 20)


def main():
    parser = argparse.ArgumentParser(description="Quiz Snake")
    parser.add_argument(
        "--config", type=str, default=None,
        help="Path to config YAML (default: built-in defaults)"
    )
    parser.add_argument(
        "--subject", type=str, default=None,
        choices=[s.value for s in Subject],
        help="Initially selected subject"
    )
    parser.add_argument(
        "--difficulty", type=str, default=None,
        choices=[d.value for d in Difficulty],
        help="Initially selected difficulty"
    )
    parser.add_argument(
        "--seed", type=int, default=None,
        help="Random seed for questions and placement"
    )
    args = parser.parse_args()

    overrides = {"game": {}}
    if args.subject:
        overrides["game"]["subject"] = args.subject
    if args.difficulty:
        overrides["game"]["difficulty"] = args.difficulty
    if args.seed is not None:
        overrides["game"]["seed"] = args.seed

    config = load_config(args.config, overrides)
    print(f"Grid: {config['game']['grid_size']}x{config['game']['grid_size']}, "
          f"tick: {config['game']['tick_ms']} ms")

    dashboard = Dashboard(config)
    dashboard.run()


if __name__ == "__main__":
    main()

"""
Session controller: game lifecycle, tick scheduling and snapshots.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple, Union
import random
import time

from .snake import Snake, Direction, Position
from .questions import QuestionGenerator, Subject, Difficulty
from .placement import AnswerItem, BoardPlacement
from .engine import (
    Session, SimulationEngine, TickResult, TickOutcome, GameOverReason
)
from .timer import TickTimer


UpdateListener = Callable[["GameSnapshot"], None]
GameOverListener = Callable[[int, GameOverReason], None]


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only view of a session for the presentation layer."""
    snake: Tuple[Position, ...]
    items: Tuple[AnswerItem, ...]
    prompt: str
    score: int
    running: bool
    game_over_reason: Optional[GameOverReason]
    direction: Direction
    subject: Subject
    difficulty: Difficulty
    ticks: int
    grid_size: int

    @property
    def head(self) -> Position:
        return self.snake[0]

    @property
    def length(self) -> int:
        return len(self.snake)

    @classmethod
    def of(cls, session: Session, grid_size: int) -> "GameSnapshot":
        return cls(
            snake=session.snake.segments(),
            items=tuple(session.items),
            prompt=session.question.prompt if session.question else "",
            score=session.score,
            running=session.running,
            game_over_reason=session.game_over_reason,
            direction=session.direction,
            subject=session.subject,
            difficulty=session.difficulty,
            ticks=session.ticks,
            grid_size=grid_size,
        )


class SessionController:
    """
    Owns the current Session and drives it at a fixed tick period.

    Usage from a frame loop:
        controller.start("math", "easy")
        while ...:
            controller.request_direction(...)   # from input, any time
            controller.advance()                # runs a tick when one is due
    """

    def __init__(
        self,
        grid_size: int = 10,
        tick_ms: int = 150,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
        subject: Union[Subject, str] = Subject.MATH,
        difficulty: Union[Difficulty, str] = Difficulty.EASY,
    ):
        """
        Args:
            grid_size: side length of the square field
            tick_ms: tick period in milliseconds
            rng: random source shared by question generation and placement
            clock: monotonic clock in seconds (injectable for tests)
            subject: default subject for start()
            difficulty: default difficulty for start()
        """
        self.grid_size = grid_size
        self.rng = rng if rng is not None else random.Random()
        self.default_subject = Subject.parse(subject)
        self.default_difficulty = Difficulty.parse(difficulty)

        self.generator = QuestionGenerator(self.rng)
        self.placement = BoardPlacement(grid_size, self.rng)
        self.engine = SimulationEngine(grid_size, self.generator, self.placement)
        self.timer = TickTimer(tick_ms, clock)

        self.session: Optional[Session] = None

        self._update_listeners: List[UpdateListener] = []
        self._game_over_listeners: List[GameOverListener] = []

    @classmethod
    def from_config(cls, config: dict, rng: Optional[random.Random] = None,
                    clock: Callable[[], float] = time.monotonic) -> "SessionController":
        """Creates a controller from a loaded config dict."""
        game = config["game"]
        if rng is None:
            rng = random.Random(game.get("seed"))
        return cls(
            grid_size=int(game["grid_size"]),
            tick_ms=int(game["tick_ms"]),
            rng=rng,
            clock=clock,
            subject=game["subject"],
            difficulty=game["difficulty"],
        )

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_listener(self, on_update: Optional[UpdateListener] = None,
                     on_game_over: Optional[GameOverListener] = None) -> None:
        if on_update is not None:
            self._update_listeners.append(on_update)
        if on_game_over is not None:
            self._game_over_listeners.append(on_game_over)

    def _notify_update(self) -> None:
        snapshot = self.snapshot()
        for listener in self._update_listeners:
            listener(snapshot)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self.session is not None and self.session.running

    @property
    def score(self) -> int:
        return self.session.score if self.session else 0

    def start(self, subject: Union[Subject, str, None] = None,
              difficulty: Union[Difficulty, str, None] = None) -> "GameSnapshot":
        """Starts a fresh game, discarding any previous session."""
        subject = Subject.parse(subject if subject is not None else self.default_subject)
        difficulty = Difficulty.parse(
            difficulty if difficulty is not None else self.default_difficulty
        )

        self.timer.cancel()

        center = self.grid_size // 2
        self.session = Session(
            snake=Snake(start_pos=(center, center), start_length=1,
                        start_direction=Direction.RIGHT),
            subject=subject,
            difficulty=difficulty,
        )
        self.engine.new_round(self.session)

        self.timer.start()
        self._notify_update()
        return self.snapshot()

    def stop(self) -> None:
        """Return to menu: halts ticking and drops the session. Safe to repeat."""
        self.timer.cancel()
        self.session = None

    def request_direction(self, direction: Union[Direction, Tuple[int, int]]) -> bool:
        """
        Buffers a direction for the next tick.

        Returns False (and changes nothing) when no game is running or
        the request reverses the current direction.
        """
        if not self.running:
            return False

        if not isinstance(direction, Direction):
            direction = Direction.from_vector(direction)

        if direction.is_reverse_of(self.session.direction):
            return False

        self.session.pending_direction = direction
        return True

    def tick(self) -> TickResult:
        """Runs exactly one simulation step."""
        if self.session is None:
            raise RuntimeError("No game in progress, call start() first")

        was_running = self.session.running
        result = self.engine.step(self.session)

        if result.outcome == TickOutcome.GAME_OVER:
            if was_running:
                self._finish(result.reason)
        else:
            self._notify_update()

        return result

    def advance(self, now: Optional[float] = None) -> int:
        """
        Runs a tick if one is due. At most one per call, so input and
        drawing happen between any two ticks.

        Returns:
            Number of ticks run (0 or 1)
        """
        if not self.running or not self.timer.due(now):
            return 0

        self.tick()
        return 1

    def _finish(self, reason: GameOverReason) -> None:
        self.timer.cancel()
        self._notify_update()

        score = self.session.score
        for listener in self._game_over_listeners:
            listener(score, reason)

    def snapshot(self) -> Optional[GameSnapshot]:
        """Copy of the current state, or None outside a game."""
        if self.session is None:
            return None
        return GameSnapshot.of(self.session, self.grid_size)

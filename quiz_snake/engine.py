"""
Simulation engine: advances a session by one tick.
"""

from enum import Enum, auto
from dataclasses import dataclass, field
from typing import List, Optional

from .snake import Snake, Direction, Position
from .questions import Question, QuestionGenerator, Subject, Difficulty
from .placement import AnswerItem, BoardPlacement


class GameOverReason(Enum):
    """Why a game ended."""
    WALL = "wall"
    SELF = "self"
    WRONG_ANSWER = "wrong_answer"


class TickOutcome(Enum):
    """Result of a single tick."""
    MOVED = auto()        # plain move, length unchanged
    ATE_CORRECT = auto()  # grew by one, new question on the board
    GAME_OVER = auto()    # terminal


@dataclass(frozen=True)
class TickResult:
    outcome: TickOutcome
    head: Position
    reason: Optional[GameOverReason] = None
    item: Optional[AnswerItem] = None

    @property
    def game_over(self) -> bool:
        return self.outcome == TickOutcome.GAME_OVER


@dataclass
class Session:
    """
    Mutable state of one game. Owned by the SessionController; the
    engine mutates it only inside step() and new_round().
    """
    snake: Snake
    subject: Subject
    difficulty: Difficulty
    direction: Direction = Direction.RIGHT
    pending_direction: Direction = Direction.RIGHT
    question: Optional[Question] = None
    items: List[AnswerItem] = field(default_factory=list)
    score: int = 0
    running: bool = True
    game_over_reason: Optional[GameOverReason] = None
    ticks: int = 0

    def item_at(self, pos: Position) -> Optional[AnswerItem]:
        for item in self.items:
            if item.position == pos:
                return item
        return None


class SimulationEngine:
    """
    Tick rules:
        1. current direction := pending direction
        2. candidate head = head + direction
        3. outside the grid -> game over (wall)
        4. on the snake -> game over (self)
        5. on the correct item -> grow, score + 1, new question
           on a wrong item -> game over (wrong answer)
        6. otherwise move (length unchanged)
    """

    def __init__(self, grid_size: int, generator: QuestionGenerator,
                 placement: BoardPlacement):
        self.grid_size = grid_size
        self.generator = generator
        self.placement = placement

    def is_inside(self, pos: Position) -> bool:
        """Checks if position is within field bounds."""
        x, y = pos
        return 0 <= x < self.grid_size and 0 <= y < self.grid_size

    def new_round(self, session: Session, occupied: Optional[set] = None) -> Question:
        """
        Replaces the session's question and places its answers.

        occupied defaults to the snake's body. If placement fails the
        session is left untouched.
        """
        if occupied is None:
            occupied = session.snake.get_body_set()

        question = self.generator.generate(session.subject, session.difficulty)
        items = self.placement.place(question.answers, occupied)

        session.question = question
        session.items = items
        return question

    def step(self, session: Session) -> TickResult:
        if not session.running:
            return TickResult(TickOutcome.GAME_OVER, session.snake.head,
                              reason=session.game_over_reason)

        session.ticks += 1
        session.direction = session.pending_direction

        new_head = session.snake.next_head(session.direction)

        # No wrap-around
        if not self.is_inside(new_head):
            return self._end(session, new_head, GameOverReason.WALL)

        if session.snake.occupies(new_head):
            return self._end(session, new_head, GameOverReason.SELF)

        item = session.item_at(new_head)
        if item is not None:
            if not item.correct:
                return self._end(session, new_head, GameOverReason.WRONG_ANSWER,
                                 item=item)

            # Place the next round around the grown body before committing
            self.new_round(session, session.snake.get_body_set() | {new_head})
            session.snake.advance(new_head, grow=True)
            session.score += 1
            return TickResult(TickOutcome.ATE_CORRECT, new_head, item=item)

        session.snake.advance(new_head)
        return TickResult(TickOutcome.MOVED, new_head)

    def _end(self, session: Session, head: Position, reason: GameOverReason,
             item: Optional[AnswerItem] = None) -> TickResult:
        session.running = False
        session.game_over_reason = reason
        return TickResult(TickOutcome.GAME_OVER, head, reason=reason, item=item)

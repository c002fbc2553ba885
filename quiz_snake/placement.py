"""
Module with answer item placement on the board.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union
import random

from .questions import AnswerOption


class PlacementError(RuntimeError):
    """No free cell left for an answer item."""


@dataclass(frozen=True)
class AnswerItem:
    """A placed answer on the field."""
    x: int
    y: int
    value: Union[int, str]
    correct: bool

    @property
    def position(self) -> Tuple[int, int]:
        return (self.x, self.y)

    @property
    def display(self) -> str:
        return str(self.value)


class BoardPlacement:
    """Assigns answers to random free cells."""

    def __init__(self, grid_size: int = 10, rng: Optional[random.Random] = None,
                 max_attempts: int = 100):
        """
        Args:
            grid_size: side length of the square field
            rng: random source (default: unseeded random.Random)
            max_attempts: random draws per answer before enumerating free cells
        """
        self.grid_size = grid_size
        self.rng = rng if rng is not None else random.Random()
        self.max_attempts = max_attempts

    def free_cells(self, occupied: set) -> List[Tuple[int, int]]:
        return [
            (x, y)
            for x in range(self.grid_size)
            for y in range(self.grid_size)
            if (x, y) not in occupied
        ]

    def place(self, answers: Iterable[AnswerOption],
              occupied_cells: Iterable[Tuple[int, int]]) -> List[AnswerItem]:
        """
        Places each answer on a cell that is neither occupied nor
        used by an earlier answer of the same call.

        Raises:
            PlacementError: the board has no free cell left
        """
        taken = set(occupied_cells)
        items = []

        for answer in answers:
            pos = self._random_free_cell(taken)
            taken.add(pos)
            items.append(AnswerItem(x=pos[0], y=pos[1],
                                    value=answer.value, correct=answer.correct))

        return items

    def _random_free_cell(self, taken: set) -> Tuple[int, int]:
        for _ in range(self.max_attempts):
            pos = (self.rng.randrange(self.grid_size),
                   self.rng.randrange(self.grid_size))
            if pos not in taken:
                return pos

        # Crowded board: choose among the remaining cells directly
        free = self.free_cells(taken)
        if not free:
            raise PlacementError(
                f"No free cell on {self.grid_size}x{self.grid_size} board "
                f"({len(taken)} cells taken)"
            )
        return self.rng.choice(free)

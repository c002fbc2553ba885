"""
Module with the Snake class.
"""

from enum import Enum
from typing import Iterable, Optional, Tuple
from collections import deque


Position = Tuple[int, int]


class Direction(Enum):
    """Movement directions (unit vectors)."""
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @property
    def opposite(self) -> "Direction":
        return Direction((-self.dx, -self.dy))

    def is_reverse_of(self, other: "Direction") -> bool:
        """True if self points exactly against other."""
        return self.dx + other.dx == 0 and self.dy + other.dy == 0

    @classmethod
    def from_vector(cls, vector: Tuple[int, int]) -> "Direction":
        """Raises ValueError for anything but the four unit vectors."""
        return cls(tuple(vector))


class Snake:
    """Snake class."""

    def __init__(self, start_pos: Position, start_length: int = 1,
                 start_direction: Direction = Direction.RIGHT,
                 segments: Optional[Iterable[Position]] = None):
        """
        Args:
            start_pos: initial head position (x, y)
            start_length: initial length
            start_direction: direction the body trails away from
            segments: explicit body [head, ..., tail], overrides the above
        """
        # Body as deque: [head, ..., tail]
        self.body: deque = deque()

        if segments is not None:
            self.body.extend(tuple(seg) for seg in segments)
        else:
            x, y = start_pos
            dx, dy = start_direction.value
            for i in range(start_length):
                self.body.append((x - i * dx, y - i * dy))

        if not self.body:
            raise ValueError("snake needs at least one segment")

    @classmethod
    def from_segments(cls, segments: Iterable[Position]) -> "Snake":
        # start_pos is ignored when segments are given
        return cls(start_pos=(0, 0), segments=segments)

    @property
    def head(self) -> Position:
        """Head position."""
        return self.body[0]

    @property
    def tail(self) -> Position:
        """Tail position."""
        return self.body[-1]

    @property
    def length(self) -> int:
        """Snake length."""
        return len(self.body)

    def get_body_set(self) -> set:
        """Returns set of body positions (for fast collision checks)."""
        return set(self.body)

    def occupies(self, pos: Position) -> bool:
        return pos in self.body

    def segments(self) -> Tuple[Position, ...]:
        """Copy of the body, head first."""
        return tuple(self.body)

    def next_head(self, direction: Direction) -> Position:
        """Head position after one step in direction."""
        hx, hy = self.head
        return (hx + direction.dx, hy + direction.dy)

    def advance(self, new_head: Position, grow: bool = False) -> None:
        """
        Prepends new_head. The tail is dropped unless growing, so the
        length stays constant on a plain move.
        """
        self.body.appendleft(new_head)
        if not grow:
            self.body.pop()

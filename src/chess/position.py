"""
A square on the board

(placed in its own module as multiple other modules need to import it)

Coordinates follow the grid the board is stored in:
x is the column (a-file = 0 ... h-file = 7), y is the row (row 0 = 8th rank ... row 7 = 1st rank).
"""

from __future__ import annotations

from dataclasses import dataclass
from string import ascii_lowercase
from typing import Optional

# Chess board is always 8x8.
BOARD_SIZE = 8
FILES = ascii_lowercase[:BOARD_SIZE]


@dataclass(frozen=True)
class Position:
    x: int
    y: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Position:
        """Algebraic notation: 'a8' - 'h1' get converted to (0,0) - (7,7)"""
        x = FILES.index(sq[0])
        y = BOARD_SIZE - int(sq[1])
        return cls(x, y)

    def to_algebraic(self) -> str:
        return f"{FILES[self.x]}{BOARD_SIZE - self.y}"

    def is_within_bounds(self) -> bool:
        return (0 <= self.x < BOARD_SIZE) and (0 <= self.y < BOARD_SIZE)

    def apply_delta(self, dx: int, dy: int) -> Optional[Position]:
        """Step away from this square. Returns None if the step leaves the board."""
        target = Position(self.x + dx, self.y + dy)
        if not target.is_within_bounds():
            return None
        return target

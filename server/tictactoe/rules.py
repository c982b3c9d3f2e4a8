"""Win/draw detection and turn order."""
from __future__ import annotations
from dataclasses import dataclass
from typing import ClassVar, Union

from .board import Board, Cell

# Checked in this order; the first complete line wins.
WINNING_LINES: tuple[tuple[int, int, int], ...] = (
    # rows
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    # columns
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
    # diagonals
    (0, 4, 8), (2, 4, 6),
)


class IllegalMove(Exception):
    """Raised when a move targets an occupied cell or a decided game."""

    def __init__(self, index: int, reason: str):
        super().__init__(f"Illegal move at {index}: {reason}")
        self.index = index
        self.reason = reason


@dataclass(frozen=True)
class InProgress:
    is_terminal: ClassVar[bool] = False

    def describe(self) -> str:
        return "In progress"

    def to_dict(self) -> dict:
        return {"status": "in_progress"}


@dataclass(frozen=True)
class Winner:
    symbol: Cell
    line: tuple[int, int, int]
    is_terminal: ClassVar[bool] = True

    def describe(self) -> str:
        return f"Winner: {self.symbol.value}"

    def to_dict(self) -> dict:
        return {"status": "winner", "winner": self.symbol.value, "line": list(self.line)}


@dataclass(frozen=True)
class Draw:
    is_terminal: ClassVar[bool] = True

    def describe(self) -> str:
        return "Draw!"

    def to_dict(self) -> dict:
        return {"status": "draw"}


Outcome = Union[InProgress, Winner, Draw]


def evaluate(board: Board) -> Outcome:
    """Derive the outcome of a board."""
    for line in WINNING_LINES:
        a, b, c = (board[i] for i in line)
        if not a.is_empty and a is b and a is c:
            return Winner(a, line)
    if board.is_full:
        return Draw()
    return InProgress()


def whose_turn(cursor: int) -> Cell:
    """Symbol of the next move from a history position.

    The cursor equals the number of moves already played, so X moves on even
    positions and O on odd ones.
    """
    return Cell.X if cursor % 2 == 0 else Cell.O

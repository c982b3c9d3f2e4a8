"""Immutable board snapshots for time-travel."""
from __future__ import annotations
from dataclasses import dataclass

from ..board import Board, Location


@dataclass(frozen=True)
class HistorySnapshot:
    """Board state plus the location of the move that produced it."""
    board: Board
    location: Location | None = None

    @classmethod
    def initial(cls) -> HistorySnapshot:
        return cls(board=Board.empty(), location=None)

    def to_dict(self) -> dict:
        return {
            "board": self.board.to_list(),
            "location": list(self.location) if self.location else None,
        }

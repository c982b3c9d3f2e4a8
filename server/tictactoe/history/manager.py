"""Branching game history with a cursor."""
from __future__ import annotations
from dataclasses import dataclass, field

from ..board import CELL_COUNT, Cell, location_of
from ..rules import IllegalMove, Outcome, evaluate, whose_turn
from .snapshot import HistorySnapshot


def _initial_snapshots() -> tuple[HistorySnapshot, ...]:
    return (HistorySnapshot.initial(),)


@dataclass(frozen=True)
class GameHistory:
    """Ordered snapshots plus the position currently displayed.

    Every operation returns a new history; an instance is never mutated.
    A new move discards any snapshots after the cursor, jumping only moves
    the cursor.
    """
    snapshots: tuple[HistorySnapshot, ...] = field(default_factory=_initial_snapshots)
    cursor: int = 0

    def __post_init__(self):
        if not self.snapshots:
            raise ValueError("History needs at least the initial snapshot")
        if not 0 <= self.cursor < len(self.snapshots):
            raise IndexError(f"Cursor {self.cursor} outside history of {len(self.snapshots)}")

    def __len__(self) -> int:
        return len(self.snapshots)

    def current(self) -> HistorySnapshot:
        return self.snapshots[self.cursor]

    def outcome_at_cursor(self) -> Outcome:
        return evaluate(self.current().board)

    @property
    def next_symbol(self) -> Cell:
        return whose_turn(self.cursor)

    @property
    def is_latest(self) -> bool:
        return self.cursor == len(self.snapshots) - 1

    def apply_move(self, index: int, symbol: Cell) -> GameHistory:
        """Play symbol at index from the cursor position.

        Raises IllegalMove (leaving this history untouched) if the game is
        already decided at the cursor or the target cell is not free.
        """
        if symbol is Cell.EMPTY:
            raise IllegalMove(index, "cannot play an empty cell")
        if self.outcome_at_cursor().is_terminal:
            raise IllegalMove(index, "game is already decided")
        if not isinstance(index, int) or not 0 <= index < CELL_COUNT:
            raise IllegalMove(index, "outside the board")
        board = self.current().board
        if not board[index].is_empty:
            raise IllegalMove(index, f"cell is taken by {board[index].value}")

        snapshot = HistorySnapshot(board=board.place(index, symbol), location=location_of(index))
        snapshots = self.snapshots[:self.cursor + 1] + (snapshot,)
        return GameHistory(snapshots=snapshots, cursor=len(snapshots) - 1)

    def jump_to(self, move: int) -> GameHistory:
        """Move the cursor to an existing snapshot; nothing is discarded."""
        if not 0 <= move < len(self.snapshots):
            raise IndexError(f"Move {move} not in history (0..{len(self.snapshots) - 1})")
        return GameHistory(snapshots=self.snapshots, cursor=move)

    def reset(self) -> GameHistory:
        return GameHistory()

    def to_dict(self) -> dict:
        return {
            "snapshots": [s.to_dict() for s in self.snapshots],
            "cursor": self.cursor,
        }

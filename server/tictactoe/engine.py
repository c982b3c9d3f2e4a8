"""Game engine that coordinates history, turn order and the result reveal."""
from __future__ import annotations
import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Iterator

from .board import Board, Cell, Location
from .config import GameConfig
from .history import GameHistory, HistorySnapshot
from .reveal import DeferredRevealTimer
from .rules import IllegalMove, Outcome, Winner

logger = logging.getLogger(__name__)

Listener = Callable[[str], None]


@dataclass(frozen=True)
class MoveEntry:
    """One row of the jump-to list."""
    move_number: int
    location: Location | None
    is_current: bool

    @property
    def description(self) -> str:
        if self.is_current:
            return f"You are at move #{self.move_number}"
        if self.move_number == 0:
            return "Go to game start"
        return f"Go to move #{self.move_number} ({self.location[0]}, {self.location[1]})"

    def to_dict(self) -> dict:
        return {
            "move": self.move_number,
            "location": list(self.location) if self.location else None,
            "is_current": self.is_current,
            "description": self.description,
        }


class SnapshotView:
    """Restartable iteration over (index, snapshot) pairs in either order."""

    def __init__(self, snapshots: tuple[HistorySnapshot, ...], ascending: bool = True):
        self._snapshots = snapshots
        self.ascending = ascending

    def __len__(self) -> int:
        return len(self._snapshots)

    def __iter__(self) -> Iterator[tuple[int, HistorySnapshot]]:
        indices = range(len(self._snapshots))
        if not self.ascending:
            indices = reversed(indices)
        for i in indices:
            yield i, self._snapshots[i]


class GameEngine:
    """Single-session game facade used by the presentation layer.

    Commands run synchronously. Illegal moves are ignored; an out-of-range
    jump raises IndexError. The only deferred work is the result reveal,
    scheduled on the asyncio loop once the game is decided. Without an
    explicit loop the engine must be created inside a running one.
    """

    def __init__(self, config: GameConfig | None = None,
                 loop: asyncio.AbstractEventLoop | None = None):
        self.config = config or GameConfig()
        self.history = GameHistory()
        self.ascending = self.config.ascending
        self.reveal_timer = DeferredRevealTimer(
            self.config.reveal_delay, on_fire=self._on_reveal, loop=loop
        )
        self._listeners: list[Listener] = []

    # ==================== Listeners ====================

    def subscribe(self, listener: Listener):
        """Register a callback receiving the event name after each change."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, event: str):
        for listener in list(self._listeners):
            listener(event)

    def _on_reveal(self):
        self._notify("reveal")

    # ==================== Commands ====================

    def submit_move(self, index: int) -> bool:
        """Play the next symbol at index. Returns False if the move was ignored."""
        symbol = self.history.next_symbol
        try:
            history = self.history.apply_move(index, symbol)
        except IllegalMove as e:
            logger.debug("Ignoring move: %s", e)
            return False

        if not self.history.is_latest:
            logger.debug("New move discards %d later snapshot(s)",
                         len(self.history) - 1 - self.history.cursor)
        self.history = history
        logger.debug("%s played at %s (move #%d)", symbol.value, index, history.cursor)

        outcome = self.current_outcome()
        if outcome.is_terminal:
            logger.info("Game decided: %s\n%s", outcome.describe(), history.current().board.to_ascii())
        self._sync_reveal()
        self._notify("move")
        return True

    def jump_to(self, move: int):
        """Move the cursor to move number `move`. Raises IndexError if out of range."""
        self.history = self.history.jump_to(move)
        logger.debug("Jumped to move #%d", move)
        if not self.current_outcome().is_terminal and not self.config.keep_reveal_on_rewind:
            self.reveal_timer.reset()
        else:
            self._sync_reveal()
        self._notify("jump")

    def reset(self):
        """Start over from an empty board."""
        self.history = self.history.reset()
        self.reveal_timer.reset()
        logger.info("Game reset")
        self._notify("reset")

    def toggle_sort_order(self) -> bool:
        """Flip the move-list order. Returns the new `ascending` value."""
        self.ascending = not self.ascending
        self._notify("sort")
        return self.ascending

    def _sync_reveal(self):
        if self.current_outcome().is_terminal:
            self.reveal_timer.arm()

    # ==================== Queries ====================

    @property
    def cursor(self) -> int:
        return self.history.cursor

    @property
    def current_player(self) -> Cell:
        return self.history.next_symbol

    def current_outcome(self) -> Outcome:
        return self.history.outcome_at_cursor()

    def get_outcome(self) -> Outcome:
        return self.current_outcome()

    def get_board(self) -> tuple[Cell, ...]:
        return self.history.current().board.cells

    def get_reveal_flag(self) -> bool:
        return self.reveal_timer.revealed

    def snapshot_list(self, ascending: bool | None = None) -> SnapshotView:
        if ascending is None:
            ascending = self.ascending
        return SnapshotView(self.history.snapshots, ascending)

    def get_move_list(self, ascending: bool | None = None) -> list[MoveEntry]:
        cursor = self.history.cursor
        return [
            MoveEntry(move_number=i, location=snapshot.location, is_current=(i == cursor))
            for i, snapshot in self.snapshot_list(ascending)
        ]

    def status_text(self) -> str:
        outcome = self.current_outcome()
        if outcome.is_terminal:
            return outcome.describe()
        return f"Next player: {self.current_player.value}"

    def winning_cells(self) -> list[bool]:
        outcome = self.current_outcome()
        line = outcome.line if isinstance(outcome, Winner) else ()
        return [i in line for i in range(len(self.history.current().board))]

    def to_dict(self) -> dict:
        """Serialize everything the presentation layer renders."""
        outcome = self.current_outcome()
        board: Board = self.history.current().board
        return {
            "board": board.to_list(),
            "highlight": self.winning_cells(),
            "outcome": outcome.to_dict(),
            "status": self.status_text(),
            "next_player": None if outcome.is_terminal else self.current_player.value,
            "cursor": self.history.cursor,
            "history_length": len(self.history),
            "ascending": self.ascending,
            "moves": [m.to_dict() for m in self.get_move_list()],
            "reveal": self.get_reveal_flag(),
        }

"""Game history tracking."""
from .snapshot import HistorySnapshot
from .manager import GameHistory

__all__ = [
    "HistorySnapshot",
    "GameHistory",
]

from .board import Board, Cell, Location
from .rules import IllegalMove, InProgress, Winner, Draw, Outcome, evaluate, whose_turn
from .history import GameHistory, HistorySnapshot
from .reveal import DeferredRevealTimer, RevealState
from .config import GameConfig, ServerConfig
from .engine import GameEngine, MoveEntry

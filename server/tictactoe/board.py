from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

BOARD_SIZE = 3
CELL_COUNT = BOARD_SIZE * BOARD_SIZE

# (row, col), each in [0, 2]
Location = tuple[int, int]


class Cell(Enum):
    EMPTY = "."
    X = "X"
    O = "O"

    @property
    def is_empty(self) -> bool:
        return self is Cell.EMPTY

    def to_json(self) -> str | None:
        return None if self is Cell.EMPTY else self.value


def location_of(index: int) -> Location:
    """Row-major (row, col) of a cell index."""
    return index // BOARD_SIZE, index % BOARD_SIZE


def index_of(row: int, col: int) -> int:
    return row * BOARD_SIZE + col


@dataclass(frozen=True)
class Board:
    cells: tuple[Cell, ...] = field(default=(Cell.EMPTY,) * CELL_COUNT)

    def __post_init__(self):
        if len(self.cells) != CELL_COUNT:
            raise ValueError(f"Board needs {CELL_COUNT} cells, got {len(self.cells)}")
        if not all(isinstance(c, Cell) for c in self.cells):
            raise ValueError("Board cells must be Cell values")

    @classmethod
    def empty(cls) -> Board:
        return cls()

    @classmethod
    def from_string(cls, text: str) -> Board:
        """Parse 'XO.......' style text (whitespace and '|' are ignored)."""
        symbols = [ch for ch in text if ch not in " \n|"]
        return cls(tuple(Cell(ch) for ch in symbols))

    def __getitem__(self, index: int) -> Cell:
        return self.cells[index]

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.cells)

    def __len__(self) -> int:
        return CELL_COUNT

    def at(self, row: int, col: int) -> Cell:
        return self.cells[index_of(row, col)]

    def place(self, index: int, symbol: Cell) -> Board:
        """Return a copy with the cell at index set to symbol.

        The caller is responsible for checking that the move is legal.
        """
        cells = list(self.cells)
        cells[index] = symbol
        return Board(tuple(cells))

    @property
    def is_full(self) -> bool:
        return not any(c.is_empty for c in self.cells)

    def to_list(self) -> list[str | None]:
        return [c.to_json() for c in self.cells]

    def to_ascii(self) -> str:
        rows = []
        for r in range(BOARD_SIZE):
            rows.append(" ".join(self.at(r, c).value for c in range(BOARD_SIZE)))
        return "\n".join(rows)

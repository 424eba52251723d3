"""
Board model for tic-tac-toe.

A board is a tuple of nine marks in row-major order:

     0 | 1 | 2
    ---+---+---
     3 | 4 | 5
    ---+---+---
     6 | 7 | 8

Boards are never mutated; apply_move returns a new tuple.
"""

from enum import Enum
from typing import Iterable, List, Optional, Tuple

CELLS = 9

# Winning lines (rows, columns, diagonals)
WIN_LINES = [
    (0, 1, 2), (3, 4, 5), (6, 7, 8),  # rows
    (0, 3, 6), (1, 4, 7), (2, 5, 8),  # columns
    (0, 4, 8), (2, 4, 6),              # diagonals
]


class Mark(str, Enum):
    EMPTY = ""
    PLAYER = "X"
    OPPONENT = "O"


class GameStatus(str, Enum):
    IN_PROGRESS = "playing"
    PLAYER_WINS = "player-wins"
    OPPONENT_WINS = "computer-wins"
    DRAW = "draw"

    @property
    def is_terminal(self) -> bool:
        return self is not GameStatus.IN_PROGRESS


class Turn(str, Enum):
    PLAYER = "player"
    OPPONENT = "opponent"

    @property
    def other(self) -> "Turn":
        return Turn.OPPONENT if self is Turn.PLAYER else Turn.PLAYER

    @property
    def mark(self) -> Mark:
        return Mark.PLAYER if self is Turn.PLAYER else Mark.OPPONENT


Board = Tuple[Mark, ...]

_WINNERS = {
    Mark.PLAYER: GameStatus.PLAYER_WINS,
    Mark.OPPONENT: GameStatus.OPPONENT_WINS,
}


class GameError(Exception):
    """Base class for rule violations raised by the game engine."""


class InvalidMove(GameError):
    """Index out of range, cell occupied, or game already over."""


def new_board() -> Board:
    return (Mark.EMPTY,) * CELLS


def empty_cells(board: Board) -> List[int]:
    return [i for i, cell in enumerate(board) if cell is Mark.EMPTY]


def winning_line(board: Board) -> Optional[Tuple[int, int, int]]:
    """Return the first completed line in scan order, or None."""
    for a, b, c in WIN_LINES:
        if board[a] is not Mark.EMPTY and board[a] == board[b] == board[c]:
            return (a, b, c)
    return None


def evaluate(board: Board) -> GameStatus:
    line = winning_line(board)
    if line is not None:
        return _WINNERS[board[line[0]]]
    if all(cell is not Mark.EMPTY for cell in board):
        return GameStatus.DRAW
    return GameStatus.IN_PROGRESS


def apply_move(board: Board, index: int, mark: Mark) -> Board:
    """
    Place mark at index and return the resulting board.

    Raises:
        InvalidMove: if the index is not 0..8, the cell is taken, the mark
            is empty, or the board is already terminal.
    """
    if isinstance(index, bool) or not isinstance(index, int):
        raise InvalidMove(f"Cell index must be an integer, got {index!r}")
    if not 0 <= index < CELLS:
        raise InvalidMove(f"Cell index {index} is out of range")
    if mark is Mark.EMPTY:
        raise InvalidMove("Cannot place an empty mark")
    if evaluate(board).is_terminal:
        raise InvalidMove("Game is already over")
    if board[index] is not Mark.EMPTY:
        raise InvalidMove(f"Cell {index} is already taken")
    return board[:index] + (mark,) + board[index + 1:]


# --- JSON helpers ---
def board_to_json(board: Board) -> list:
    return [cell.value or None for cell in board]


def board_from_json(cells: Iterable) -> Board:
    cells = list(cells)
    if len(cells) != CELLS:
        raise ValueError(f"Board must have {CELLS} cells, got {len(cells)}")
    return tuple(Mark(cell or "") for cell in cells)

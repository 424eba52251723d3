"""
Computer opponent for tic-tac-toe.

A greedy one-ply heuristic, checked in order:
  1. take a winning cell
  2. block the player's winning cell
  3. take the center
  4. take a random free corner
  5. take any random free cell

It does not look for forks, so a careful player can beat it.
"""

import random

from board import (
    Board,
    GameError,
    GameStatus,
    Mark,
    apply_move,
    empty_cells,
    evaluate,
)

CENTER = 4
CORNERS = (0, 2, 6, 8)


class PreconditionViolated(GameError):
    """Opponent asked to move on a finished or full board."""


def _completing_cell(board: Board, free: list, mark: Mark, status: GameStatus):
    # Lowest index wins ties.
    for i in free:
        if evaluate(apply_move(board, i, mark)) is status:
            return i
    return None


def choose_move(board: Board, rng=None) -> int:
    """
    Pick the opponent's next cell.

    Args:
        board: Current board; must be in progress.
        rng: Random source with a ``choice`` method. Defaults to the
            ``random`` module.

    Returns:
        Index of the chosen empty cell.
    """
    if evaluate(board) is not GameStatus.IN_PROGRESS:
        raise PreconditionViolated("Game is already over")
    free = empty_cells(board)
    if not free:
        raise PreconditionViolated("No empty cells left")
    rng = rng or random

    move = _completing_cell(board, free, Mark.OPPONENT, GameStatus.OPPONENT_WINS)
    if move is not None:
        return move

    move = _completing_cell(board, free, Mark.PLAYER, GameStatus.PLAYER_WINS)
    if move is not None:
        return move

    if board[CENTER] is Mark.EMPTY:
        return CENTER

    corners = [i for i in CORNERS if board[i] is Mark.EMPTY]
    if corners:
        return rng.choice(corners)

    return rng.choice(free)

import random

import pytest

from board import GameStatus, Mark, apply_move, empty_cells, evaluate, new_board
from opponent import CORNERS, PreconditionViolated, choose_move

MARKS = {"X": Mark.PLAYER, "O": Mark.OPPONENT, "_": Mark.EMPTY}


def parse(cells):
    return tuple(MARKS[c] for c in cells.replace(" ", ""))


def opponent_to_move_positions():
    """Every reachable in-progress board where O is about to move."""
    seen = set()
    found = []

    def walk(board, mark):
        if board in seen:
            return
        seen.add(board)
        if evaluate(board) is not GameStatus.IN_PROGRESS:
            return
        if mark is Mark.OPPONENT:
            found.append(board)
        other = Mark.OPPONENT if mark is Mark.PLAYER else Mark.PLAYER
        for i in empty_cells(board):
            walk(apply_move(board, i, mark), other)

    walk(new_board(), Mark.PLAYER)
    return found


POSITIONS = opponent_to_move_positions()


def test_empty_board_takes_center():
    assert choose_move(new_board()) == 4


def test_takes_win_before_blocking():
    assert choose_move(parse("OO_ XX_ X__")) == 2


def test_lowest_winning_cell_on_ties():
    # O can finish the top row at 1 or the diagonal at 8.
    assert choose_move(parse("O_O XOX X__")) == 1


def test_blocks_player_threat():
    assert choose_move(parse("XX_ _O_ ___")) == 2


def test_lowest_blocking_cell_on_ties():
    # X threatens the top row at 2 and the left column at 3.
    assert choose_move(parse("XX_ _O_ X_O")) == 2


def test_takes_center_when_nothing_is_urgent():
    assert choose_move(parse("X__ ___ ___")) == 4


def test_takes_free_corner_when_center_is_gone():
    board = parse("O__ _X_ __X")
    picks = {choose_move(board, random.Random(seed)) for seed in range(50)}
    assert picks == {2, 6}


def test_falls_back_to_any_free_cell():
    board = parse("O_X XXO O_X")
    picks = {choose_move(board, random.Random(seed)) for seed in range(50)}
    assert picks == {1, 7}


def test_seeded_rng_is_repeatable():
    board = parse("___ _X_ ___")
    first = choose_move(board, random.Random(7))
    assert first in CORNERS
    assert choose_move(board, random.Random(7)) == first


@pytest.mark.parametrize("cells", [
    "XXX OO_ ___",    # player already won
    "OOO XX_ X__",    # opponent already won
    "XOX XOO OXX",    # full board
])
def test_refuses_finished_board(cells):
    with pytest.raises(PreconditionViolated):
        choose_move(parse(cells))


def test_always_returns_an_empty_cell():
    rng = random.Random(0)
    for board in POSITIONS:
        assert board[choose_move(board, rng)] is Mark.EMPTY


def test_always_wins_when_it_can():
    rng = random.Random(1)
    checked = 0
    for board in POSITIONS:
        free = empty_cells(board)
        if any(evaluate(apply_move(board, i, Mark.OPPONENT)) is GameStatus.OPPONENT_WINS for i in free):
            move = choose_move(board, rng)
            assert evaluate(apply_move(board, move, Mark.OPPONENT)) is GameStatus.OPPONENT_WINS
            checked += 1
    assert checked > 0


def test_always_blocks_when_it_cannot_win():
    rng = random.Random(2)
    checked = 0
    for board in POSITIONS:
        free = empty_cells(board)
        can_win = any(evaluate(apply_move(board, i, Mark.OPPONENT)) is GameStatus.OPPONENT_WINS for i in free)
        threats = [i for i in free if evaluate(apply_move(board, i, Mark.PLAYER)) is GameStatus.PLAYER_WINS]
        if threats and not can_win:
            assert choose_move(board, rng) == threats[0]
            checked += 1
    assert checked > 0

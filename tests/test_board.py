import pytest

from board import (
    WIN_LINES,
    GameStatus,
    InvalidMove,
    Mark,
    apply_move,
    board_from_json,
    board_to_json,
    empty_cells,
    evaluate,
    new_board,
    winning_line,
)

MARKS = {"X": Mark.PLAYER, "O": Mark.OPPONENT, "_": Mark.EMPTY}


def parse(cells):
    return tuple(MARKS[c] for c in cells.replace(" ", ""))


def test_new_board_is_empty_and_in_progress():
    board = new_board()
    assert len(board) == 9
    assert empty_cells(board) == list(range(9))
    assert evaluate(board) is GameStatus.IN_PROGRESS


@pytest.mark.parametrize("line", WIN_LINES)
@pytest.mark.parametrize("mark, status", [
    (Mark.PLAYER, GameStatus.PLAYER_WINS),
    (Mark.OPPONENT, GameStatus.OPPONENT_WINS),
])
def test_every_line_wins_for_its_mark(line, mark, status):
    board = new_board()
    for i in line:
        board = board[:i] + (mark,) + board[i + 1:]
    assert evaluate(board) is status
    assert winning_line(board) == line


def test_full_board_without_line_is_draw():
    board = parse("XOX XOO OXX")
    assert winning_line(board) is None
    assert evaluate(board) is GameStatus.DRAW


def test_full_board_with_line_is_a_win_not_a_draw():
    assert evaluate(parse("XXX OOX OXO")) is GameStatus.PLAYER_WINS


def test_open_board_without_line_is_in_progress():
    assert evaluate(parse("XO_ _X_ O__")) is GameStatus.IN_PROGRESS


def test_apply_move_sets_exactly_one_cell():
    before = parse("X__ _O_ ___")
    after = apply_move(before, 8, Mark.PLAYER)
    changed = [i for i in range(9) if before[i] != after[i]]
    assert changed == [8]
    assert after[8] is Mark.PLAYER
    # the input board is untouched
    assert before[8] is Mark.EMPTY


def test_apply_move_rejects_occupied_cell():
    board = parse("X__ _O_ ___")
    with pytest.raises(InvalidMove):
        apply_move(board, 4, Mark.PLAYER)
    with pytest.raises(InvalidMove):
        apply_move(board, 0, Mark.OPPONENT)


@pytest.mark.parametrize("index", [-1, 9, 100, "4", None, 4.0, True])
def test_apply_move_rejects_bad_index(index):
    with pytest.raises(InvalidMove):
        apply_move(new_board(), index, Mark.PLAYER)


def test_apply_move_rejects_empty_mark():
    with pytest.raises(InvalidMove):
        apply_move(new_board(), 0, Mark.EMPTY)


def test_apply_move_rejects_finished_game():
    board = parse("XXX OO_ ___")
    with pytest.raises(InvalidMove):
        apply_move(board, 5, Mark.OPPONENT)


def test_player_diagonal_wins_on_third_move():
    board = new_board()
    board = apply_move(board, 0, Mark.PLAYER)
    assert evaluate(board) is GameStatus.IN_PROGRESS
    board = apply_move(board, 4, Mark.PLAYER)
    assert evaluate(board) is GameStatus.IN_PROGRESS
    board = apply_move(board, 8, Mark.PLAYER)
    assert evaluate(board) is GameStatus.PLAYER_WINS


def test_json_form_uses_null_for_empty_cells():
    board = parse("X__ _O_ ___")
    cells = board_to_json(board)
    assert cells == ["X", None, None, None, "O", None, None, None, None]
    assert board_from_json(cells) == board


@pytest.mark.parametrize("cells", [
    [None] * 8,
    [None] * 10,
    ["X", "Y", None, None, None, None, None, None, None],
])
def test_board_from_json_rejects_malformed_input(cells):
    with pytest.raises(ValueError):
        board_from_json(cells)

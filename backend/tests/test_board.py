import random

import pytest

from app.models import Mark
from app.services.games.board import (
    empty_board,
    empty_cells,
    evaluate,
    is_full,
    win_length,
    winning_lines,
)

X, O = Mark.X, Mark.O


def board_from(rows):
    cells = []
    for row in rows:
        for ch in row:
            cells.append({'X': X, 'O': O, '.': None}[ch])
    return cells


def rotate(board):
    return list(reversed(board))


def test_empty_board_has_size_squared_cells():
    for size in (3, 4, 5, 6):
        board = empty_board(size)
        assert len(board) == size * size
        assert empty_cells(board) == list(range(size * size))
        assert not is_full(board)


def test_win_length_by_size():
    assert [win_length(s) for s in (3, 4, 5, 6)] == [3, 3, 5, 5]


def test_no_winner_after_three_moves():
    board = empty_board(3)
    board[4] = X
    board[0] = O
    board[8] = X
    assert evaluate(board, 3) is None


def test_corner_completes_diagonal():
    board = board_from([
        'O.X',
        'OX.',
        'XOX',
    ])
    result = evaluate(board, 3)
    assert result.mark is X
    assert result.line == (2, 4, 6)


def test_rows_are_scanned_before_columns():
    board = board_from([
        'XXX',
        'X..',
        'X..',
    ])
    assert evaluate(board, 3).line == (0, 1, 2)


def test_six_by_six_needs_exactly_five():
    board = empty_board(6)
    for col in range(1, 6):
        board[2 * 6 + col] = O
    result = evaluate(board, 6)
    assert result.mark is O
    assert result.line == (13, 14, 15, 16, 17)


def test_four_in_a_row_does_not_win_on_five_by_five():
    board = empty_board(5)
    for col in range(4):
        board[col] = X
    assert evaluate(board, 5) is None


def test_run_in_middle_of_four_by_four_row():
    board = board_from([
        '....',
        '.XXX',
        'OO..',
        '....',
    ])
    result = evaluate(board, 4)
    assert result.mark is X
    assert result.line == (5, 6, 7)


def test_off_corner_diagonals_on_large_board():
    board = empty_board(6)
    for i in range(5):
        board[(i + 1) * 6 + (5 - i)] = X  # down-left starting at row 1, col 5
    result = evaluate(board, 6)
    assert result.line == (11, 16, 21, 26, 31)


def test_is_full():
    board = board_from([
        'XOX',
        'XOO',
        'OXX',
    ])
    assert is_full(board)
    assert evaluate(board, 3) is None
    assert empty_cells(board) == []


@pytest.mark.parametrize('size', [3, 4, 5, 6])
def test_every_window_is_found_and_rotation_symmetric(size):
    for line in winning_lines(size):
        board = empty_board(size)
        for i in line:
            board[i] = O
        result = evaluate(board, size)
        assert result.mark is O
        assert result.line == line

        rotated = evaluate(rotate(board), size)
        last = size * size - 1
        assert rotated.mark is O
        assert rotated.line == tuple(sorted(last - i for i in line))


@pytest.mark.parametrize('size', [3, 4, 5, 6])
def test_random_boards_rotation_symmetric(size):
    rng = random.Random(size)
    last = size * size - 1
    for _ in range(200):
        board = [rng.choice([X, O, None]) for _ in range(size * size)]
        result = evaluate(board, size)
        rotated = evaluate(rotate(board), size)
        assert (result is None) == (rotated is None)
        if rotated is not None:
            # the rotated winning line maps back onto a run in the original
            assert all(board[last - i] == rotated.mark for i in rotated.line)

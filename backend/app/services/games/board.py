from functools import lru_cache
from typing import List, Optional, Tuple

from app.models import Mark, WinResult

Board = List[Optional[Mark]]


def win_length(size: int) -> int:
    """Marks in a row needed to win: five on 5x5 and larger, else three."""
    return 5 if size >= 5 else 3


def empty_board(size: int) -> Board:
    return [None] * (size * size)


def empty_cells(board: Board) -> List[int]:
    return [i for i, cell in enumerate(board) if cell is None]


def is_full(board: Board) -> bool:
    return all(cell is not None for cell in board)


@lru_cache(maxsize=None)
def winning_lines(size: int) -> Tuple[Tuple[int, ...], ...]:
    """Every window of ``win_length(size)`` cells that can hold a win.

    Ordered rows, columns, down-right diagonals, then down-left diagonals;
    ``evaluate`` reports the first match in this order.
    """
    n = win_length(size)
    starts = range(size - n + 1)
    lines = []
    for row in range(size):
        for col in starts:
            lines.append(tuple(row * size + col + i for i in range(n)))
    for col in range(size):
        for row in starts:
            lines.append(tuple((row + i) * size + col for i in range(n)))
    for row in starts:
        for col in starts:
            lines.append(tuple((row + i) * size + col + i for i in range(n)))
    for row in starts:
        for col in range(n - 1, size):
            lines.append(tuple((row + i) * size + col - i for i in range(n)))
    return tuple(lines)


def evaluate(board: Board, size: int) -> Optional[WinResult]:
    for line in winning_lines(size):
        first = board[line[0]]
        if first is not None and all(board[i] == first for i in line[1:]):
            return WinResult(first, line)
    return None

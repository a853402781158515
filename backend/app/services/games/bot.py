"""Computer opponent.

Hard plays minimax with alpha-beta pruning. Medium flips a coin between a
random cell and the Hard move; Easy is always random.
"""

import math
import random
from typing import Optional

from app.models import Difficulty, Mark
from .board import Board, empty_cells, evaluate, is_full

WIN_SCORE = 10


def search_depth(size: int) -> int:
    """Full-depth search on 3x3, four plies on anything larger."""
    return 9 if size <= 3 else 4


def choose_move(board: Board, size: int, difficulty: Difficulty, rng=random) -> Optional[int]:
    """Pick a cell for the bot (O). Returns None when the board is full.

    The caller's board is never touched; search runs on a scratch copy.
    """
    cells = empty_cells(board)
    if not cells:
        return None
    if difficulty is Difficulty.EASY:
        return rng.choice(cells)
    if difficulty is Difficulty.MEDIUM and rng.random() < 0.5:
        return rng.choice(cells)
    return find_best_move(list(board), size)


def find_best_move(board: Board, size: int, mark: Mark = Mark.O) -> Optional[int]:
    """Best cell for ``mark``; ties resolve to the lowest index.

    ``board`` is used as search scratch space and restored before returning.
    """
    max_depth = search_depth(size)
    best_score = -math.inf
    best_move = None
    alpha = -math.inf
    for cell in empty_cells(board):
        board[cell] = mark
        score = _minimax(board, size, mark, 0, False, alpha, math.inf, max_depth)
        board[cell] = None
        if score > best_score:
            best_score = score
            best_move = cell
        alpha = max(alpha, score)
    return best_move


def _minimax(board, size, mark, depth, maximizing, alpha, beta, max_depth):
    result = evaluate(board, size)
    if result is not None:
        return WIN_SCORE - depth if result.mark == mark else depth - WIN_SCORE
    if depth >= max_depth or is_full(board):
        return 0

    to_play = mark if maximizing else mark.opposite()
    best = -math.inf if maximizing else math.inf
    for cell in empty_cells(board):
        board[cell] = to_play
        score = _minimax(board, size, mark, depth + 1, not maximizing, alpha, beta, max_depth)
        board[cell] = None
        if maximizing:
            best = max(best, score)
            alpha = max(alpha, score)
        else:
            best = min(best, score)
            beta = min(beta, score)
        if beta <= alpha:
            break  # Prune
    return best

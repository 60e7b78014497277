#evaluation.py
import numpy as np

from board_rules_interface import DIRECTIONS, EMPTY, GameState, Move, opponent_of

MOBILITY_WEIGHT = 1
CONTACT_WEIGHT = 2
SUPPORT_WEIGHT = 3
CENTER_CONTROL_WEIGHT = 4
SAFETY_WEIGHT = 1.5
AGGRESSIVENESS_WEIGHT = 1.25


def count_mobility(board: np.ndarray, row: int, col: int) -> int:
    """Number of orthogonally adjacent empty cells."""
    size = board.shape[0]
    mobility = 0
    for d_row, d_col in DIRECTIONS:
        r, c = row + d_row, col + d_col
        if 0 <= r < size and 0 <= c < size and board[r, c] == EMPTY:
            mobility += 1
    return mobility


def _count_in_window(board: np.ndarray, row: int, col: int, radius: int, value: int) -> int:
    # Slices clip at the board edges
    window = board[max(row - radius, 0):row + radius + 1, max(col - radius, 0):col + radius + 1]
    return int(np.count_nonzero(window == value))


def count_opponent_nearby(board: np.ndarray, row: int, col: int) -> int:
    """Opponent pieces among the 8 surrounding cells."""
    opponent = opponent_of(int(board[row, col]))
    return _count_in_window(board, row, col, 1, opponent)


def count_proximity_to_opponent(board: np.ndarray, row: int, col: int) -> int:
    """Opponent pieces in the ring at Chebyshev distance exactly 2."""
    opponent = opponent_of(int(board[row, col]))
    return _count_in_window(board, row, col, 2, opponent) - _count_in_window(board, row, col, 1, opponent)


def evaluate(game_state: GameState) -> int:
    """
    Static score of a position, positive when it favours the player to move.

    Every piece on the board contributes, signed by its owner:
        1) +1 / -1 base value
        2) mobility (adjacent empty cells)
        3) centre affinity, 4 // (row distance + 1) // (col distance + 1)
        4) safety penalty for adjacent opponents, truncated toward zero
        5) aggressiveness bonus for opponents two cells away, truncated toward zero
    """
    board = game_state.board
    center = game_state.size // 2
    score = 0

    for row, col in np.argwhere(board != EMPTY):
        row, col = int(row), int(col)
        piece_value = 1 if board[row, col] == game_state.current_player else -1

        piece_value += MOBILITY_WEIGHT * count_mobility(board, row, col)
        piece_value += CENTER_CONTROL_WEIGHT // (abs(center - row) + 1) // (abs(center - col) + 1)
        piece_value = int(piece_value - SAFETY_WEIGHT * count_opponent_nearby(board, row, col))
        piece_value = int(piece_value + AGGRESSIVENESS_WEIGHT * count_proximity_to_opponent(board, row, col))

        score += piece_value

    return score


def score_move(game_state: GameState, move: Move) -> int:
    """
    One-ply heuristic for a single move, scored on the board before it is played.

    Rewards free space at the destination, contact with opponent pieces,
    support from own pieces and landing on the middle row or column.
    """
    board = game_state.board
    size = game_state.size
    player = game_state.current_player
    opponent = opponent_of(player)
    row, col = move.dst

    value = MOBILITY_WEIGHT * count_mobility(board, row, col)
    for d_row, d_col in DIRECTIONS:
        r, c = row + d_row, col + d_col
        if not (0 <= r < size and 0 <= c < size):
            continue
        if board[r, c] == opponent:
            value += CONTACT_WEIGHT
        elif board[r, c] == player:
            value += SUPPORT_WEIGHT

    if row == size // 2 or col == size // 2:
        value += CENTER_CONTROL_WEIGHT

    return value

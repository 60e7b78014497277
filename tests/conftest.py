import numpy as np
import pytest

from board_rules_interface import EMPTY, PLAYER_A, PLAYER_B, GameState

CHARS = {'.': EMPTY, 'X': PLAYER_A, 'O': PLAYER_B}


def build_state(rows, current_player=PLAYER_A, remaining_turns=10):
    """Build a GameState from rows such as ["X..", "...", "..O"]."""
    board = np.array([[CHARS[ch] for ch in row] for row in rows], dtype=np.int8)
    return GameState(board, current_player, remaining_turns)


@pytest.fixture
def make_state():
    return build_state

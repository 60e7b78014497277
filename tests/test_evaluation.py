"""
Evaluator tests: neighbourhood counts, the per-piece terms and their
truncation, perspective handling and the one-ply move heuristic.
"""

import pytest

from board_rules_interface import PLAYER_A, PLAYER_B, Move, new_game
from evaluation import (
    count_mobility, count_opponent_nearby, count_proximity_to_opponent, evaluate, score_move
)


class TestNeighbourhoodCounts:
    def test_mobility(self, make_state):
        s = make_state(["X..", "...", "..O"])
        assert count_mobility(s.board, 0, 0) == 2
        assert count_mobility(s.board, 1, 1) == 4

    def test_mobility_blocked(self, make_state):
        s = make_state(["XO.", "O..", "..."])
        assert count_mobility(s.board, 0, 0) == 0

    def test_nearby_and_ring(self, make_state):
        s = make_state([
            "O....",
            ".O...",
            "..X.O",
            ".....",
            "...O.",
        ])
        assert count_opponent_nearby(s.board, 2, 2) == 1
        assert count_proximity_to_opponent(s.board, 2, 2) == 3

    def test_counts_are_relative_to_piece_owner(self, make_state):
        s = make_state(["XO.", "...", "..X"])
        # From O's point of view both X pieces are opponents
        assert count_opponent_nearby(s.board, 0, 1) == 1
        assert count_proximity_to_opponent(s.board, 0, 1) == 1
        assert count_opponent_nearby(s.board, 0, 0) == 1
        assert count_proximity_to_opponent(s.board, 0, 0) == 0

    def test_ring_clips_at_edges(self, make_state):
        s = make_state(["X....", ".....", "....O", ".....", "....."])
        assert count_proximity_to_opponent(s.board, 0, 0) == 0
        assert count_proximity_to_opponent(s.board, 2, 4) == 0


class TestEvaluate:
    def test_single_piece_in_centre(self, make_state):
        # base 1 + mobility 4 + centre 4
        assert evaluate(make_state(["...", ".X.", "..."], current_player=PLAYER_A)) == 9
        # base -1 + mobility 4 + centre 4
        assert evaluate(make_state(["...", ".X.", "..."], current_player=PLAYER_B)) == 7

    def test_opposite_corners(self, make_state):
        # Each piece: base +-1, mobility 2, centre 4 // 2 // 2 = 1, one opponent in the ring
        s = make_state(["X..", "...", "..O"])
        assert evaluate(s) == 8
        s.switch_player()
        assert evaluate(s) == 8

    def test_centre_term_compounds_truncation(self, make_state):
        s = make_state([
            "X......",
            ".......",
            ".......",
            ".......",
            ".......",
            ".......",
            ".......",
        ])
        # 4 // 4 // 4 == 0: base 1 + mobility 2
        assert evaluate(s) == 3

    def test_truncates_toward_zero(self, make_state):
        s = make_state(["OOO", "OXO", "OOO"], current_player=PLAYER_A)
        # X: 1 + 0 + 4 - 1.5 * 8 -> -7
        # corner O: -1 + 0 + 1 - 1.5 -> -1.5 -> -1
        # edge O:   -1 + 0 + 2 - 1.5 -> -0.5 -> 0
        assert evaluate(s) == -7 + 4 * -1 + 4 * 0

    def test_aggressiveness_term(self, make_state):
        s = make_state(["X.O", "...", "..."], current_player=PLAYER_A)
        # X: 1 + 2 + 4 // 2 // 2 = 4, + 1.25 -> 5
        # O: -1 + 2 + 1 = 2, + 1.25 -> 3
        assert evaluate(s) == 8

    def test_empty_board_scores_zero(self, make_state):
        assert evaluate(make_state(["...", "...", "..."])) == 0

    def test_returns_int(self):
        s = new_game(6, 5, PLAYER_A, seed=11)
        assert isinstance(evaluate(s), int)

    def test_does_not_mutate(self):
        s = new_game(6, 5, PLAYER_A, seed=11)
        before = s.board.copy()
        evaluate(s)
        assert (s.board == before).all()
        assert s.current_player == PLAYER_A


class TestScoreMove:
    def test_centre_lines_and_support(self, make_state):
        s = make_state(["X..", "...", "..O"])
        # mobility 2, own piece at the source +3, middle column +4
        assert score_move(s, Move((0, 0), (0, 1))) == 9
        # mobility 2, own piece at the source +3, middle row +4
        assert score_move(s, Move((0, 0), (1, 0))) == 9

    def test_contact_with_opponent(self, make_state):
        s = make_state([
            ".....",
            ".....",
            ".....",
            "X..O.",
            ".....",
        ])
        # (3,0)->(4,0): mobility 1, support 3
        assert score_move(s, Move((3, 0), (4, 0))) == 4
        s = make_state([
            ".....",
            ".....",
            ".....",
            ".X.O.",
            ".....",
        ])
        # (3,1)->(3,2): up, down empty; left own, right opponent; middle column
        assert score_move(s, Move((3, 1), (3, 2))) == 2 + 3 + 2 + 4

    @pytest.mark.parametrize("seed", range(3))
    def test_scores_every_legal_move(self, seed):
        s = new_game(5, 5, PLAYER_B, seed=seed)
        for move in s.legal_moves():
            assert score_move(s, move) >= 0
